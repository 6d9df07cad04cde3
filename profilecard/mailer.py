# -*- coding: utf-8 -*-
"""
"Email me this contact": message bodies, .vcf attachment and the send call.
"""
from __future__ import annotations
import base64
import html
import logging
import re
from typing import Any, Dict, Optional

import requests

from profilecard.contact import MIME_TYPE
from profilecard.models import Profile

logger = logging.getLogger(__name__)

MSG_SEND_FAILED = "Failed to send email"
MSG_SEND_UNAVAILABLE = "Failed to send contact information. Please try again."


class EmailSendError(Exception):
    """Send collaborator refused or could not be reached. ``str(e)`` is user-facing."""


def vcf_filename(full_name: str) -> str:
    return re.sub(r"\s+", "_", full_name) + ".vcf"


def build_attachment(profile: Profile, document: str) -> Dict[str, str]:
    return {
        "content": base64.b64encode(document.encode("utf-8")).decode("ascii"),
        "filename": vcf_filename(profile.full_name),
        "type": MIME_TYPE,
        "disposition": "attachment",
    }


def build_subject(profile: Profile) -> str:
    return f"{profile.full_name}'s Contact Info"


def build_text(profile: Profile) -> str:
    return (
        f"Contact Information for {profile.full_name}\n\n"
        f"{profile.title or ''}\n"
        f"{profile.company or ''}\n\n"
        "Open the attached contact file to save the contact information.\n\n"
        f"You can also reply to this email to reach out to {profile.full_name}."
    )


def build_html(profile: Profile, brand_logo_url: Optional[str] = None) -> str:
    name = html.escape(profile.full_name)
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f"<title>{name}'s Contact Info</title>",
        "</head>",
        '<body style="margin: 0; padding: 0; background-color: #f5f5f5;">',
        '<div style="max-width: 600px; margin: 0 auto; background-color: white; '
        'padding: 40px 20px; text-align: center; font-family: Arial, sans-serif;">',
    ]
    if brand_logo_url:
        parts.append(
            f'<div style="margin-bottom: 40px;"><img src="{html.escape(brand_logo_url, quote=True)}" '
            'alt="Logo" style="width: 120px; height: auto;" /></div>'
        )
    if profile.avatar_url:
        parts.append(
            f'<div style="margin-bottom: 24px;"><img src="{html.escape(profile.avatar_url, quote=True)}" '
            f'alt="{name}" style="width: 120px; height: 120px; border-radius: 60px; '
            'object-fit: cover; background-color: #f8f8f8;" /></div>'
        )
    parts.append(
        f'<h2 style="margin: 0 0 8px 0; color: #333333; font-size: 24px; font-weight: 600;">{name}</h2>'
    )
    if profile.title:
        parts.append(
            f'<p style="margin: 0 0 4px 0; color: #666666; font-size: 16px;">{html.escape(profile.title)}</p>'
        )
    if profile.company:
        parts.append(
            f'<p style="margin: 0; color: #666666; font-size: 16px;">{html.escape(profile.company)}</p>'
        )
    parts += [
        '<div style="margin: 40px 0 24px 0;">',
        '<p style="margin: 0 0 8px 0; color: #333333; font-size: 16px;">Hi there, open the attached contact</p>',
        f'<p style="margin: 0; color: #333333; font-size: 16px;">to view and save {name}\'s contact info.</p>',
        "</div>",
        "</div>",
        "</body>",
        "</html>",
    ]
    return "\n".join(parts)


def build_payload(to: str, profile: Profile, document: str,
                  brand_logo_url: Optional[str] = None) -> Dict[str, Any]:
    return {
        "to": to.strip(),
        "subject": build_subject(profile),
        "html": build_html(profile, brand_logo_url),
        "text": build_text(profile),
        "attachments": [build_attachment(profile, document)],
    }


def _error_message(resp: requests.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return MSG_SEND_FAILED
    if isinstance(body, dict):
        for key in ("message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value.strip():
                return value
    return MSG_SEND_FAILED


class EmailSender:
    """POSTs the payload to the email-send endpoint."""

    def __init__(self, send_url: str, session: Optional[requests.Session] = None,
                 timeout: float = 15.0) -> None:
        self.send_url = send_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, payload: Dict[str, Any]) -> None:
        try:
            resp = self.session.post(self.send_url, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Email sending error: %r", e)
            raise EmailSendError(MSG_SEND_UNAVAILABLE) from e
        if not resp.ok:
            msg = _error_message(resp)
            logger.error("Email send rejected: status=%s message=%s", resp.status_code, msg)
            raise EmailSendError(msg)
        logger.info("Contact email sent: to=%s subject=%s", payload.get("to"), payload.get("subject"))
