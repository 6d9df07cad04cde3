# -*- coding: utf-8 -*-
"""
Email address checks before a contact card is mailed out.

Local format check first (no network), then the Abstract email-validation
API. A quota-exhausted validator lets the send through; every other
validator error blocks it.
"""
from __future__ import annotations
import logging
import re
from typing import NamedTuple, Optional

import requests

logger = logging.getLogger(__name__)

ABSTRACT_URL = "https://emailvalidation.abstractapi.com/v1/"

MSG_EMPTY = "Please enter an email address"
MSG_INVALID = "Please enter a valid email address"
MSG_UNVERIFIED = "Unable to verify email at this time"

QUOTA_REACHED = "quota_reached"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class Verdict(NamedTuple):
    ok: bool
    message: str = ""


def check_format(email: str) -> Optional[str]:
    """Field-level error message, or None when the address looks usable."""
    email = (email or "").strip()
    if not email:
        return MSG_EMPTY
    if not _EMAIL_RE.match(email):
        return MSG_INVALID
    return None


def interpret(data: dict) -> Verdict:
    """Map an Abstract API response body to a verdict."""
    error = data.get("error")
    if error:
        code = error.get("code") if isinstance(error, dict) else None
        if code == QUOTA_REACHED:
            logger.info("Email validator quota exhausted, allowing send")
            return Verdict(True)
        logger.error("Email validation API error: %s", error)
        return Verdict(False, MSG_UNVERIFIED)
    if data.get("deliverability") == "UNDELIVERABLE":
        return Verdict(False, MSG_INVALID)
    fmt = data.get("is_valid_format")
    if isinstance(fmt, dict) and fmt.get("value") is False:
        return Verdict(False, MSG_INVALID)
    return Verdict(True)


class EmailValidator:
    def __init__(self, api_key: str, session: Optional[requests.Session] = None,
                 base_url: str = ABSTRACT_URL, timeout: float = 10.0) -> None:
        self.api_key = api_key
        self.session = session or requests.Session()
        self.base_url = base_url
        self.timeout = timeout

    def validate(self, email: str) -> Verdict:
        try:
            resp = self.session.get(
                self.base_url,
                params={"api_key": self.api_key, "email": email.strip()},
                timeout=self.timeout,
            )
            data = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error("Error validating email: %r", e)
            return Verdict(False, MSG_UNVERIFIED)
        if not isinstance(data, dict):
            return Verdict(False, MSG_UNVERIFIED)
        return interpret(data)
