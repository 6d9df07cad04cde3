# -*- coding: utf-8 -*-
"""
Save / email delivery of a profile's contact card.

Picks the dialect from the User-Agent, resolves the photo once, encodes,
and falls back to the URL-only encoder if anything on the primary path
raises. Browser-side effects (download, timers) come in as collaborators:
a ``FileSaver`` and a ``clock``.
"""
from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Protocol, Tuple

from profilecard import contact
from profilecard.mailer import EmailSendError, EmailSender, build_payload, vcf_filename
from profilecard.models import Profile
from profilecard.platform import detect_platform, dialect_for
from profilecard.validation import EmailValidator, check_format

logger = logging.getLogger(__name__)

ACK_SECONDS = 3.0
AUTO_CLOSE_SECONDS = 3.0

Clock = Callable[[], float]
Inliner = Callable[[Optional[str]], Optional[str]]


@dataclass(frozen=True)
class ContactDocument:
    filename: str
    content: str
    dialect: str
    mime: str = contact.MIME_TYPE

    @property
    def data(self) -> bytes:
        return self.content.encode("utf-8")


class FileSaver(Protocol):
    def save(self, document: ContactDocument) -> None: ...


class DirectorySaver:
    """Writes documents into a local directory (CLI / exports)."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)
        self.last_path: Optional[Path] = None

    def save(self, document: ContactDocument) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / document.filename
        path.write_bytes(document.data)
        self.last_path = path
        logger.info("Contact card written: %s (%s)", path, document.dialect)


class Acknowledgement:
    """Transient "saved" flag that clears itself after ``duration`` seconds."""

    def __init__(self, clock: Clock = time.monotonic, duration: float = ACK_SECONDS) -> None:
        self.clock = clock
        self.duration = duration
        self._since: Optional[float] = None

    def mark(self) -> None:
        self._since = self.clock()

    @property
    def active(self) -> bool:
        if self._since is None:
            return False
        if self.clock() - self._since >= self.duration:
            self._since = None
            return False
        return True


# --- email modal state machine ---

IDLE = "idle"
VALIDATING = "validating_email"
VALIDATION_FAILED = "validation_failed"
SENDING = "sending_email"
SEND_FAILED = "send_failed"
SENT = "sent"


class EmailFlow:
    """
    Idle -> ValidatingEmail -> (ValidationFailed -> Idle) | SendingEmail
         -> (SendFailed -> Idle) | Sent -> (auto) -> Idle

    Failed states keep their message until the user edits the address or
    submits again; ``tick`` moves Sent back to Idle after the auto-close delay.
    """

    def __init__(self, clock: Clock = time.monotonic, auto_close: float = AUTO_CLOSE_SECONDS) -> None:
        self.clock = clock
        self.auto_close = auto_close
        self.reset()

    def reset(self) -> None:
        self.state = IDLE
        self.email = ""
        self.email_error: Optional[str] = None
        self.sending_error: Optional[str] = None
        self._sent_at: Optional[float] = None

    def set_email(self, email: str) -> None:
        self.email = email
        self.email_error = None
        self.sending_error = None
        if self.state in (VALIDATION_FAILED, SEND_FAILED):
            self.state = IDLE

    @property
    def busy(self) -> bool:
        return self.state in (VALIDATING, SENDING)

    @property
    def sent(self) -> bool:
        return self.state == SENT

    def tick(self) -> bool:
        """Auto-close after a successful send. True when the modal should close."""
        if self.state == SENT and self._sent_at is not None:
            if self.clock() - self._sent_at >= self.auto_close:
                self.reset()
                return True
        return False

    def fail(self, state: str, message: str) -> None:
        self.state = state
        if state == VALIDATION_FAILED:
            self.email_error = message
        else:
            self.sending_error = message

    def mark_sent(self) -> None:
        self.state = SENT
        self._sent_at = self.clock()


class ContactDispatcher:
    def __init__(
        self,
        inliner: Inliner,
        validator: EmailValidator,
        sender: EmailSender,
        saver: Optional[FileSaver] = None,
        clock: Clock = time.monotonic,
        brand_logo_url: Optional[str] = None,
    ) -> None:
        self.inliner = inliner
        self.validator = validator
        self.sender = sender
        self.saver = saver
        self.clock = clock
        self.brand_logo_url = brand_logo_url
        self.saved = Acknowledgement(clock)
        self._documents: Dict[Tuple[str, Optional[str], Optional[str]], ContactDocument] = {}

    def _primary(self, profile: Profile, dialect: contact.Dialect) -> str:
        payload = self.inliner(profile.avatar_url) if dialect.inline_photo and profile.avatar_url else None
        return contact.encode(profile, dialect, photo=payload)

    def build_document(self, profile: Profile, user_agent: Optional[str]) -> ContactDocument:
        platform = detect_platform(user_agent)
        dialect = dialect_for(platform)
        try:
            content = self._primary(profile, dialect)
        except Exception as e:
            logger.warning("Primary %s encoder failed for %s, using fallback: %r",
                           dialect.name, profile.handle, e)
            dialect = contact.FALLBACK
            content = contact.encode(profile, dialect)
        return ContactDocument(filename=vcf_filename(profile.full_name), content=content, dialect=dialect.name)

    def document_for(self, profile: Profile, user_agent: Optional[str]) -> ContactDocument:
        """``build_document`` memoized per (handle, last update, User-Agent)."""
        key = (profile.handle, profile.last_updated_at, user_agent)
        if key not in self._documents:
            self._documents[key] = self.build_document(profile, user_agent)
        return self._documents[key]

    def save_contact(self, profile: Profile, user_agent: Optional[str]) -> ContactDocument:
        if self.saver is None:
            raise RuntimeError("no file saver configured")
        document = self.build_document(profile, user_agent)
        self.saver.save(document)
        self.saved.mark()
        return document

    def email_contact(self, flow: EmailFlow, profile: Profile, user_agent: Optional[str]) -> EmailFlow:
        flow.email_error = None
        flow.sending_error = None

        error = check_format(flow.email)
        if error:
            flow.fail(VALIDATION_FAILED, error)
            return flow

        flow.state = VALIDATING
        verdict = self.validator.validate(flow.email)
        if not verdict.ok:
            flow.fail(VALIDATION_FAILED, verdict.message)
            return flow

        flow.state = SENDING
        document = self.build_document(profile, user_agent)
        payload = build_payload(flow.email, profile, document.content, self.brand_logo_url)
        try:
            self.sender.send(payload)
        except EmailSendError as e:
            flow.fail(SEND_FAILED, str(e))
            return flow

        flow.mark_sent()
        self.saved.mark()
        return flow
