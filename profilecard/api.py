# -*- coding: utf-8 -*-
"""
Profile lookup against the vCard backend.

GET {base}/v1/vcard/handle/{handle} -> {"data": Profile} | {"error": "..."}
"""
from __future__ import annotations
import logging
from typing import NamedTuple, Optional
from urllib.parse import quote

import requests

from profilecard.models import Profile

logger = logging.getLogger(__name__)

FOUND = "found"
NOT_FOUND = "not_found"
DISABLED = "disabled"
ERROR = "error"

MSG_NOT_FOUND = "Profile not found"
MSG_DISABLED = "NFC sharing is not enabled for this profile"
MSG_FAILED = "Failed to load profile. Please try again."


class ProfileLookup(NamedTuple):
    status: str
    profile: Optional[Profile] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.status == FOUND


class ProfileClient:
    def __init__(self, base_url: str, session: Optional[requests.Session] = None,
                 timeout: float = 10.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, handle: str) -> str:
        return f"{self.base_url}/v1/vcard/handle/{quote(handle.strip().lower(), safe='')}"

    def fetch(self, handle: Optional[str]) -> ProfileLookup:
        if not handle or not handle.strip():
            return ProfileLookup(NOT_FOUND, message=MSG_NOT_FOUND)
        try:
            resp = self.session.get(self.url_for(handle), timeout=self.timeout)
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error loading profile %s: %r", handle, e)
            return ProfileLookup(ERROR, message=MSG_FAILED)

        if not resp.ok:
            message = body.get("error") if isinstance(body, dict) else None
            logger.info("Profile lookup miss: handle=%s status=%s", handle, resp.status_code)
            return ProfileLookup(NOT_FOUND, message=message or MSG_NOT_FOUND)

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, dict):
            return ProfileLookup(NOT_FOUND, message=MSG_NOT_FOUND)
        try:
            profile = Profile.from_api(data)
        except ValueError as e:
            logger.error("Malformed profile %s: %r", handle, e)
            return ProfileLookup(ERROR, message=MSG_FAILED)

        if not profile.nfc_enabled:
            return ProfileLookup(DISABLED, profile, MSG_DISABLED)
        return ProfileLookup(FOUND, profile)
