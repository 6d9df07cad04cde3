# -*- coding: utf-8 -*-
"""
Avatar inlining for the vCard PHOTO field.

The only network-dependent step of encoding. Any failure returns None and
the encoder falls back to ``PHOTO;VALUE=URL``.
"""
from __future__ import annotations
import base64
import binascii
import io
import logging
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

MAX_SIDE = 800
JPEG_QUALITY = 85


def _jpeg_base64(photo_bytes: bytes) -> str:
    """Re-encode any Pillow-readable image as JPEG (RGB, max 800px), return base64 string."""
    img = Image.open(io.BytesIO(photo_bytes)).convert("RGB")
    img.thumbnail((MAX_SIDE, MAX_SIDE))
    out = io.BytesIO()
    img.save(out, format="JPEG", quality=JPEG_QUALITY, optimize=True)
    return base64.b64encode(out.getvalue()).decode("ascii")


def _data_url_bytes(url: str) -> bytes:
    """Payload of a ``data:<mime>;base64,...`` URL, scheme marker stripped."""
    _, _, payload = url.partition(",")
    return base64.b64decode(payload, validate=False)


def fetch_bytes(url: str, session: Optional[requests.Session] = None, timeout: float = 10.0) -> bytes:
    if url.startswith("data:"):
        return _data_url_bytes(url)
    http = session or requests
    resp = http.get(url, timeout=timeout)
    resp.raise_for_status()
    return resp.content


def inline(avatar_url: Optional[str], session: Optional[requests.Session] = None,
           timeout: float = 10.0) -> Optional[str]:
    """Base64 JPEG payload for ``avatar_url`` or None on any failure."""
    if not avatar_url:
        return None
    try:
        raw = fetch_bytes(avatar_url, session=session, timeout=timeout)
        if not raw:
            return None
        return _jpeg_base64(raw)
    except (requests.RequestException, UnidentifiedImageError, Image.DecompressionBombError,
            binascii.Error, OSError, ValueError) as e:
        logger.warning("Photo inlining failed for %s: %r", avatar_url[:80], e)
        return None


class PhotoInliner:
    """Callable wrapper binding an HTTP session and timeout, injected into the dispatcher."""

    def __init__(self, session: Optional[requests.Session] = None, timeout: float = 10.0) -> None:
        self.session = session
        self.timeout = timeout

    def __call__(self, avatar_url: Optional[str]) -> Optional[str]:
        return inline(avatar_url, session=self.session, timeout=self.timeout)
