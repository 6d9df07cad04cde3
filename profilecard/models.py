# -*- coding: utf-8 -*-
"""
Profile snapshot as returned by the vCard backend.

The backend speaks camelCase JSON; everything here is snake_case and frozen,
the page holds one snapshot per view and never mutates it.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Optional, Tuple


@dataclass(frozen=True)
class Link:
    type: str
    value: str = ""
    is_visible: bool = True
    icon: Optional[str] = None
    id: Optional[str] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Link":
        return cls(
            type=str(raw.get("type") or ""),
            value=str(raw.get("value") or ""),
            is_visible=bool(raw.get("isVisible", True)),
            icon=raw.get("icon") or None,
            id=raw.get("_id") or None,
        )


@dataclass(frozen=True)
class Note:
    value: str
    is_visible: bool = True

    @property
    def shown(self) -> bool:
        return self.is_visible and bool(self.value.strip())


@dataclass(frozen=True)
class Alert:
    text: str
    kind: str = "text"  # "text" | "link"
    link: Optional[str] = None
    icon: Optional[str] = None
    expires_at: Optional[datetime] = None

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Alert":
        return cls(
            text=str(raw.get("text") or ""),
            kind="link" if raw.get("type") == "link" else "text",
            link=raw.get("linkName") or None,
            icon=raw.get("icon") or None,
            expires_at=parse_timestamp(raw.get("expiryDate")),
        )


@dataclass(frozen=True)
class Profile:
    handle: str
    full_name: str
    title: Optional[str] = None
    company: Optional[str] = None
    avatar_url: Optional[str] = None
    company_logo_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    theme: Optional[str] = None
    nfc_enabled: bool = True
    links: Tuple[Link, ...] = field(default_factory=tuple)
    note: Optional[Note] = None
    alert: Optional[Alert] = None
    last_updated_at: Optional[str] = None

    def __post_init__(self) -> None:
        if not (self.full_name or "").strip():
            raise ValueError("profile full name is required")

    def visible_links(self) -> Iterator[Link]:
        return (link for link in self.links if link.is_visible)

    @classmethod
    def from_api(cls, raw: Dict[str, Any]) -> "Profile":
        """Build a snapshot from the backend ``data`` object."""
        note_raw = raw.get("note")
        note = None
        if isinstance(note_raw, dict):
            note = Note(value=str(note_raw.get("value") or ""),
                        is_visible=bool(note_raw.get("isVisible", False)))
        alert_raw = raw.get("alert")
        alert = Alert.from_api(alert_raw) if isinstance(alert_raw, dict) else None
        return cls(
            handle=str(raw.get("handle") or ""),
            full_name=str(raw.get("fullName") or ""),
            title=raw.get("title") or None,
            company=raw.get("company") or None,
            avatar_url=raw.get("avatarUrl") or None,
            company_logo_url=raw.get("companyLogoUrl") or None,
            cover_image_url=raw.get("coverImageUrl") or None,
            theme=raw.get("theme") or None,
            nfc_enabled=raw.get("nfcEnabled") is not False,
            links=tuple(Link.from_api(x) for x in raw.get("links") or [] if isinstance(x, dict)),
            note=note,
            alert=alert,
            last_updated_at=raw.get("lastUpdatedAt") or None,
        )


def parse_timestamp(value: Any) -> Optional[datetime]:
    """ISO-8601 (with or without trailing Z) -> aware UTC datetime."""
    if not value:
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        try:
            dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt
