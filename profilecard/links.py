# -*- coding: utf-8 -*-
"""
Link classification: raw ``type``/``icon`` -> action category + href.

Shared by the vCard encoder and the page's link list so both agree on
what a link does.
"""
from __future__ import annotations
import html
import re
from typing import NamedTuple, Optional

from profilecard.models import Link

EMAIL = "email"
PHONE = "phone"
WHATSAPP = "whatsapp"
SMS = "sms"
WEBSITE = "website"
LINKEDIN = "linkedin"
INSTAGRAM = "instagram"
TWITTER = "twitter"
FACEBOOK = "facebook"
YOUTUBE = "youtube"
GITHUB = "github"
MEETING = "meeting"
ADDRESS = "address"
MESSAGE = "message"
OTHER = "other"

CATEGORIES = (
    EMAIL, PHONE, WHATSAPP, SMS, WEBSITE, LINKEDIN, INSTAGRAM, TWITTER,
    FACEBOOK, YOUTUBE, GITHUB, MEETING, ADDRESS, MESSAGE, OTHER,
)

_ALIASES = {
    "book-meeting": MEETING,
    "book a meeting": MEETING,
}

SOCIAL_BASE_URLS = {
    LINKEDIN: "https://linkedin.com/in/",
    INSTAGRAM: "https://instagram.com/",
    GITHUB: "https://github.com/",
    FACEBOOK: "https://facebook.com/",
    TWITTER: "https://twitter.com/",
    YOUTUBE: "https://youtube.com/@",
}

_LABELS = {
    LINKEDIN: "LinkedIn",
    INSTAGRAM: "Instagram",
    WHATSAPP: "WhatsApp",
    PHONE: "Phone",
    EMAIL: "Email",
    WEBSITE: "Website",
    GITHUB: "GitHub",
    FACEBOOK: "Facebook",
    YOUTUBE: "YouTube",
    TWITTER: "Twitter",
    MESSAGE: "Message",
    ADDRESS: "Address",
    MEETING: "Book a Meeting",
    SMS: "SMS",
}

_DESCRIPTIONS = {
    LINKEDIN: "Connect professionally",
    INSTAGRAM: "Follow my updates",
    WHATSAPP: "Chat with me",
    PHONE: "Call me",
    SMS: "Text me",
    EMAIL: "Send me an email",
    WEBSITE: "Visit my website",
    GITHUB: "View my code",
    FACEBOOK: "Connect on Facebook",
    YOUTUBE: "Watch my content",
    TWITTER: "Follow my tweets",
    MESSAGE: "Send a direct message",
    ADDRESS: "Meet in person",
    MEETING: "Schedule a meeting",
}


class ClassifiedLink(NamedTuple):
    category: str
    href: Optional[str]
    value: str


def category_of(link: Link) -> str:
    """``icon`` wins over ``type``; unknown keys resolve to ``other``."""
    key = (link.icon or "").strip() or (link.type or "")
    key = key.strip().lower()
    key = _ALIASES.get(key, key)
    return key if key in CATEGORIES else OTHER


def _with_scheme(value: str) -> str:
    return value if value.startswith("http") else f"https://{value}"


def build_href(category: str, value: str) -> str:
    if category == EMAIL:
        return f"mailto:{value}"
    if category == PHONE:
        return f"tel:{value}"
    if category == WHATSAPP:
        return "https://wa.me/" + re.sub(r"[^0-9]", "", value)
    if category == SMS:
        return "sms:" + re.sub(r"[^0-9+]", "", value)
    if category in SOCIAL_BASE_URLS:
        return value if value.startswith("http") else SOCIAL_BASE_URLS[category] + value
    if category == ADDRESS:
        return value
    # website, meeting, message, other
    return _with_scheme(value)


def classify(link: Link) -> ClassifiedLink:
    category = category_of(link)
    value = (link.value or "").strip()
    if not value:
        return ClassifiedLink(category, None, "")
    return ClassifiedLink(category, build_href(category, value), value)


def opens_in_place(category: str) -> bool:
    """Protocol handlers (call / text) replace the page instead of a new tab."""
    return category in (PHONE, SMS)


def link_target(category: str) -> str:
    """HTML anchor target for the page's link list."""
    return "_self" if opens_in_place(category) else "_blank"


def anchor_html(title: str, href: str, category: str) -> str:
    target = link_target(category)
    rel = ' rel="noopener noreferrer"' if target == "_blank" else ""
    return (f'<a href="{html.escape(href, quote=True)}" target="{target}"{rel}>'
            f"{html.escape(title)}</a>")


def label(link: Link) -> str:
    key = (link.type or "").strip().lower()
    key = _ALIASES.get(key, key)
    if key in _LABELS:
        return _LABELS[key]
    raw = (link.type or "").strip()
    return raw[:1].upper() + raw[1:]


def description(link: Link) -> str:
    category = category_of(link)
    if category in _DESCRIPTIONS:
        return _DESCRIPTIONS[category]
    return f"Connect via {link.type}"


# --- dedup keys (scope: one encoding call) ---

def phone_key(value: str) -> str:
    digits = re.sub(r"[^0-9]", "", value)
    return digits or value.strip().lower()


def email_key(value: str) -> str:
    return value.strip().lower()
