#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Streamlit app: public digital business card
- ?handle=<slug> loads the profile from the vCard backend
- "Save Contact" downloads a .vcf tuned for the visitor's phone (iOS / Android)
- "Email me this contact" mails the same .vcf as an attachment
- Alert banner, links, note and a share QR
"""
from __future__ import annotations
import logging
import time
from datetime import datetime, timezone
from typing import Optional

import requests
import streamlit as st

from profilecard import alerts
from profilecard import links as lk
from profilecard.api import DISABLED, FOUND, ProfileClient
from profilecard.config import Settings
from profilecard.dispatch import AUTO_CLOSE_SECONDS, ContactDispatcher, EmailFlow
from profilecard.mailer import EmailSender
from profilecard.models import Profile
from profilecard.photo import PhotoInliner
from profilecard.qr import make_qr_png, profile_url
from profilecard.utils import setup_logging
from profilecard.validation import EmailValidator

APP_NAME = "Digital Business Card"
ACK_REFRESH_SECONDS = 1

# --- Boot ---
settings = Settings.from_env()
setup_logging(settings.logs_dir)
logger = logging.getLogger("app")

st.set_page_config(page_title=APP_NAME, page_icon="📇", layout="centered")


def _query_handle() -> Optional[str]:
    try:
        qp = st.query_params  # type: ignore[attr-defined]
        return qp.get("handle")
    except AttributeError:
        qp = st.experimental_get_query_params()  # type: ignore[attr-defined]
        return (qp.get("handle") or [None])[0]


def _user_agent() -> Optional[str]:
    try:
        return st.context.headers.get("User-Agent")  # type: ignore[attr-defined]
    except AttributeError:
        return None


def _session_objects() -> None:
    """Per-visitor state: HTTP session, dispatcher, email flow, dismissed alerts."""
    if "dispatcher" not in st.session_state:
        http = requests.Session()
        st.session_state.http = http
        st.session_state.dispatcher = ContactDispatcher(
            inliner=PhotoInliner(http, timeout=settings.http_timeout),
            validator=EmailValidator(settings.email_validation_key, http,
                                     base_url=settings.email_validation_url,
                                     timeout=settings.http_timeout),
            sender=EmailSender(settings.email_send_url, http, timeout=settings.http_timeout),
            brand_logo_url=settings.brand_logo_url,
        )
        st.session_state.email_flow = EmailFlow()
        st.session_state.dismissed_alerts = set()
        st.session_state.email_open = False


def render_alert(profile: Profile) -> None:
    alert = profile.alert
    if not alerts.should_show(alert, datetime.now(timezone.utc), st.session_state.dismissed_alerts):
        return
    c1, c2 = st.columns([10, 1])
    with c1:
        href = alerts.alert_href(alert)
        icon = alerts.icon_token(alert.icon)
        prefix = f"[{icon}] " if icon else ""
        if href:
            st.info(f"{prefix}[{alert.text}]({href})")
        else:
            st.info(prefix + alert.text)
    with c2:
        if st.button("✕", key="dismiss_alert", help="Hide"):
            st.session_state.dismissed_alerts.add(alerts.alert_key(alert))
            st.rerun()


def render_header(profile: Profile) -> None:
    if profile.cover_image_url:
        st.image(profile.cover_image_url, use_container_width=True)
    render_alert(profile)
    c1, c2 = st.columns([1, 2])
    with c1:
        if profile.avatar_url:
            st.image(profile.avatar_url, width=160)
    with c2:
        st.title(profile.full_name)
        if profile.title:
            st.subheader(profile.title)
        if profile.company:
            if profile.company_logo_url:
                st.image(profile.company_logo_url, width=80)
            st.caption(profile.company)


@st.fragment(run_every=ACK_REFRESH_SECONDS)
def render_save(profile: Profile, dispatcher: ContactDispatcher) -> None:
    # periodic fragment rerun lets the "saved" label clear itself
    document = dispatcher.document_for(profile, _user_agent())
    saved = dispatcher.saved.active
    st.download_button(
        label="✅ Contact Saved!" if saved else "📇 Save Contact",
        data=document.data,
        file_name=document.filename,
        mime=document.mime,
        on_click=dispatcher.saved.mark,
        use_container_width=True,
        type="primary",
    )


def render_email(profile: Profile, dispatcher: ContactDispatcher) -> None:
    flow: EmailFlow = st.session_state.email_flow
    if flow.tick():
        st.session_state.email_open = False
    if st.session_state.pop("clear_email", False):
        st.session_state.email_input = ""

    with st.expander("📧 Email me this contact", expanded=st.session_state.email_open):
        if flow.sent:
            st.success(f"{profile.full_name}'s contact is on its way. Check your inbox!")
            return
        with st.form("email_contact", clear_on_submit=False):
            email = st.text_input("Email address", key="email_input", max_chars=120,
                                  placeholder="you@company.com")
            submit = st.form_submit_button("Send", disabled=flow.busy)
        if submit:
            st.session_state.email_open = True
            flow.set_email(email)
            with st.spinner("Sending..."):
                dispatcher.email_contact(flow, profile, _user_agent())
            logger.info("Email contact: handle=%s state=%s", profile.handle, flow.state)
            if flow.sent:
                st.success(f"{profile.full_name}'s contact is on its way. Check your inbox!")
                time.sleep(AUTO_CLOSE_SECONDS)
                flow.tick()
                st.session_state.email_open = False
                st.session_state.clear_email = True
                st.rerun()
        if flow.email_error:
            st.error(flow.email_error)
        if flow.sending_error:
            st.error(flow.sending_error)


def render_links(profile: Profile) -> None:
    shown = [(link, lk.classify(link)) for link in profile.visible_links()]
    shown = [(link, c) for link, c in shown if c.href]
    if not shown:
        return
    st.divider()
    for link, c in shown:
        title = f"{lk.label(link)} · {lk.description(link)}"
        if c.category == lk.ADDRESS:
            # addresses are never links
            st.markdown(f"**{title}**  \n{c.value}")
        elif lk.opens_in_place(c.category):
            st.markdown(lk.anchor_html(title, c.href, c.category), unsafe_allow_html=True)
        else:
            st.link_button(title, c.href, use_container_width=True)


def render_note(profile: Profile) -> None:
    if profile.note is not None and profile.note.shown:
        st.divider()
        st.write(profile.note.value)


def render_share(profile: Profile) -> None:
    if not (settings.show_qr and settings.public_base_url):
        return
    png = make_qr_png(profile_url(settings.public_base_url, profile.handle))
    if png:
        st.divider()
        st.image(png, width=200, caption="Scan to open this card")


# --- Page ---
_session_objects()
handle = _query_handle()

with st.spinner("Loading profile..."):
    lookup = ProfileClient(settings.api_base_url, st.session_state.http,
                           timeout=settings.http_timeout).fetch(handle)
logger.info("Profile view: handle=%s status=%s", handle, lookup.status)

if lookup.status == DISABLED:
    st.title(lookup.profile.full_name)
    st.warning(lookup.message)
    st.caption("Ask the owner to enable NFC sharing on their card.")
elif lookup.status != FOUND:
    st.title("Profile not found")
    st.error(lookup.message)
    st.caption("Check the link or scan the card again.")
else:
    profile = lookup.profile
    dispatcher: ContactDispatcher = st.session_state.dispatcher
    render_header(profile)
    render_save(profile, dispatcher)
    render_email(profile, dispatcher)
    render_links(profile)
    render_note(profile)
    render_share(profile)
