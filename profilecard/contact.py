# -*- coding: utf-8 -*-
"""
vCard 3.0 encoder.

One encoder, three dialects:
- PLATFORM_A ("ios"): social networks also get X-SOCIALPROFILE lines, inline photo.
- PLATFORM_B ("android"): plain URL;TYPE=<Label> lines, inline photo.
- FALLBACK: PLATFORM_B lines, photo only ever referenced by URL.

``build_fields`` is pure; the photo payload is resolved elsewhere (see
``profilecard.photo``) and passed to ``encode`` so output stays deterministic.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from profilecard import links as lk
from profilecard.models import Profile

HEADER = ("BEGIN:VCARD", "VERSION:3.0")
FOOTER = "END:VCARD"
MIME_TYPE = "text/vcard"


@dataclass(frozen=True)
class Dialect:
    name: str
    social_profiles: bool
    inline_photo: bool


PLATFORM_A = Dialect("ios", social_profiles=True, inline_photo=True)
PLATFORM_B = Dialect("android", social_profiles=False, inline_photo=True)
FALLBACK = Dialect("fallback", social_profiles=False, inline_photo=False)

# Networks the iOS contacts app understands as structured social profiles.
_SOCIAL_PROFILE_NETWORKS = (lk.LINKEDIN, lk.INSTAGRAM, lk.TWITTER, lk.FACEBOOK, lk.YOUTUBE)

_URL_TYPES = {
    lk.WHATSAPP: "WhatsApp",
    lk.SMS: "SMS",
    lk.LINKEDIN: "LinkedIn",
    lk.INSTAGRAM: "Instagram",
    lk.TWITTER: "Twitter",
    lk.FACEBOOK: "Facebook",
    lk.YOUTUBE: "YouTube",
    lk.GITHUB: "GitHub",
    lk.WEBSITE: "Website",
    lk.MEETING: "Calendar",
    lk.MESSAGE: "Message",
    lk.OTHER: "Other",
}


def _fold_line(line: str, width: int = 74) -> str:
    """Fold long vCard lines at ``width`` characters with CRLF + space continuation (RFC 2426)."""
    if len(line) <= width:
        return line
    chunks = [line[i:i + width] for i in range(0, len(line), width)]
    return chunks[0] + "\r\n " + "\r\n ".join(chunks[1:])


def _escape_note(value: str) -> str:
    return value.replace("\r", "").replace("\n", "\\n")


class _Seen:
    """Per-document dedup of phones, emails and websites."""

    def __init__(self) -> None:
        self.phones: set = set()
        self.emails: set = set()
        self.websites: set = set()

    @staticmethod
    def _first(bucket: set, key: str) -> bool:
        if key in bucket:
            return False
        bucket.add(key)
        return True

    def phone(self, value: str) -> bool:
        return self._first(self.phones, lk.phone_key(value))

    def email(self, value: str) -> bool:
        return self._first(self.emails, lk.email_key(value))

    def website(self, href: str) -> bool:
        return self._first(self.websites, href)


def link_lines(link: lk.ClassifiedLink, dialect: Dialect, seen: _Seen) -> List[str]:
    """Field lines for one classified link (empty when it has no usable value)."""
    category, href, value = link
    if href is None:
        return []
    out: List[str] = []
    if category == lk.EMAIL:
        if seen.email(value):
            out.append(f"EMAIL;TYPE=INTERNET:{value}")
    elif category in (lk.PHONE, lk.WHATSAPP, lk.SMS):
        if seen.phone(value):
            out.append(f"TEL;TYPE=CELL:{value}")
        if category != lk.PHONE:
            out.append(f"URL;TYPE={_URL_TYPES[category]}:{href}")
    elif category == lk.WEBSITE:
        if seen.website(href):
            out.append(f"URL;TYPE=Website:{href}")
    elif category == lk.ADDRESS:
        out.append(f"ADR;TYPE=WORK:;;{value};;;;")
    else:
        if dialect.social_profiles and category in _SOCIAL_PROFILE_NETWORKS:
            out.append(f"X-SOCIALPROFILE;type={category}:{href}")
        out.append(f"URL;TYPE={_URL_TYPES.get(category, 'Other')}:{href}")
    return out


def build_fields(profile: Profile, dialect: Dialect) -> List[str]:
    """Header, identity, link and note lines. No photo, logo, revision or footer."""
    lines = list(HEADER)
    lines.append(f"FN:{profile.full_name}")
    if profile.title:
        lines.append(f"TITLE:{profile.title}")
    if profile.company:
        lines.append(f"ORG:{profile.company}")

    seen = _Seen()
    for link in profile.visible_links():
        lines.extend(link_lines(lk.classify(link), dialect, seen))

    if profile.note is not None and profile.note.shown:
        lines.append(f"NOTE:{_escape_note(profile.note.value)}")
    return lines


def photo_field(avatar_url: Optional[str], payload: Optional[str] = None) -> Optional[str]:
    if payload:
        return f"PHOTO;ENCODING=b;TYPE=JPEG:{payload}"
    if avatar_url:
        return f"PHOTO;VALUE=URL:{avatar_url}"
    return None


def encode(profile: Profile, dialect: Dialect, photo: Optional[str] = None) -> str:
    """Full document. ``photo`` is a base64 JPEG payload, ignored by FALLBACK."""
    lines = build_fields(profile, dialect)
    photo_line = photo_field(profile.avatar_url, photo if dialect.inline_photo else None)
    if photo_line:
        lines.append(_fold_line(photo_line))
    if profile.company_logo_url:
        lines.append(f"X-COMPANY-LOGO:{profile.company_logo_url}")
    if profile.last_updated_at:
        lines.append(f"REV:{profile.last_updated_at}")
    lines.append(FOOTER)
    return "\r\n".join(lines) + "\r\n"  # CRLF
