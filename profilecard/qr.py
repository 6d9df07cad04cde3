# -*- coding: utf-8 -*-
"""
Share QR for a public profile page (scan with a second phone to open it).
"""
from __future__ import annotations
import io
import logging
from typing import Optional
from urllib.parse import quote, urlencode

import qrcode
from qrcode.exceptions import DataOverflowError

logger = logging.getLogger(__name__)


def profile_url(public_base_url: str, handle: str) -> str:
    """Page URL for ``handle``; ``?handle=`` query form when the base has no path slot."""
    base = public_base_url.rstrip("/")
    if "{handle}" in base:
        return base.replace("{handle}", quote(handle.lower(), safe=""))
    return f"{base}/?{urlencode({'handle': handle.lower()})}"


def make_qr_png(url: str) -> Optional[bytes]:
    if not url:
        return None
    try:
        img = qrcode.make(url)
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()
    except (ValueError, OSError, DataOverflowError) as e:
        logger.warning("QR generation failed for %s: %r", url, e)
        return None
