# -*- coding: utf-8 -*-
"""Settings from the environment (.env loaded by python-dotenv)."""
from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from profilecard.validation import ABSTRACT_URL


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    email_send_url: str
    email_validation_key: str
    email_validation_url: str = ABSTRACT_URL
    public_base_url: str = ""
    brand_logo_url: Optional[str] = None
    http_timeout: float = 10.0
    logs_dir: Path = Path("logs")
    show_qr: bool = True

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            api_base_url=os.getenv("API_BASE_URL", "http://localhost:8000"),
            email_send_url=os.getenv("EMAIL_SEND_URL", "http://localhost:3000/api/email/send"),
            email_validation_key=os.getenv("ABSTRACT_EMAIL_VERIFICATION_API_KEY", ""),
            email_validation_url=os.getenv("ABSTRACT_EMAIL_VALIDATION_URL", ABSTRACT_URL),
            public_base_url=os.getenv("PUBLIC_BASE_URL", ""),
            brand_logo_url=os.getenv("BRAND_LOGO_URL") or None,
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
            logs_dir=Path(os.getenv("LOGS_DIR", "logs")),
            show_qr=_flag("SHOW_QR", "true"),
        )
