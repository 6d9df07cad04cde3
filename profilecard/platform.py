# -*- coding: utf-8 -*-
"""Client platform detection from the User-Agent header."""
from __future__ import annotations
import re
from typing import Optional

from profilecard.contact import PLATFORM_A, PLATFORM_B, Dialect

IOS = "ios"
ANDROID = "android"
OTHER = "other"

_PATTERNS = (
    (re.compile(r"iPhone|iPad|iPod"), IOS),
    (re.compile(r"Android"), ANDROID),
)


def detect_platform(user_agent: Optional[str]) -> str:
    if not user_agent:
        return OTHER
    for pattern, name in _PATTERNS:
        if pattern.search(user_agent):
            return name
    return OTHER


def dialect_for(platform: str) -> Dialect:
    return PLATFORM_A if platform == IOS else PLATFORM_B
