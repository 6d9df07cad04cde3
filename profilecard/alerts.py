# -*- coding: utf-8 -*-
"""Profile alert banner: expiry, dismissal and link target."""
from __future__ import annotations
from datetime import datetime, timezone
from typing import AbstractSet, Optional

from profilecard.models import Alert

ICON_TOKENS = ("megaphone", "warning", "info", "success", "bell", "zap", "star", "link")


def is_expired(alert: Alert, now: datetime) -> bool:
    if alert.expires_at is None:
        return False
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now > alert.expires_at


def alert_key(alert: Alert) -> str:
    """Identity used for session-scoped dismissal."""
    return f"{alert.kind}:{alert.text}:{alert.link or ''}"


def should_show(alert: Optional[Alert], now: datetime, dismissed: AbstractSet[str] = frozenset()) -> bool:
    if alert is None or not alert.text.strip():
        return False
    if is_expired(alert, now):
        return False
    return alert_key(alert) not in dismissed


def alert_href(alert: Alert) -> Optional[str]:
    if alert.kind != "link" or not alert.link:
        return None
    return alert.link if alert.link.startswith("http") else f"https://{alert.link}"


def icon_token(name: Optional[str]) -> Optional[str]:
    return name if name in ICON_TOKENS else None
