import dataclasses

import pytest

from profilecard import links as lk
from profilecard.contact import FALLBACK, PLATFORM_A, PLATFORM_B, build_fields, encode, photo_field
from profilecard.models import Link, Note, Profile

DIALECTS = [PLATFORM_A, PLATFORM_B, FALLBACK]


def _lines(doc):
    return doc.split("\r\n")


def _with_links(profile, *links):
    return dataclasses.replace(profile, links=tuple(links))


@pytest.mark.parametrize("dialect", DIALECTS)
def test_header_footer_single_name(profile, dialect):
    doc = encode(profile, dialect, photo="QUJD")
    lines = _lines(doc)
    assert lines[:2] == ["BEGIN:VCARD", "VERSION:3.0"]
    assert doc.endswith("END:VCARD\r\n")
    assert sum(1 for x in lines if x.startswith("FN:")) == 1
    assert "FN:Jane  Doe" in lines
    assert "TITLE:CTO" in lines and "ORG:Acme" in lines


@pytest.mark.parametrize("dialect", DIALECTS)
def test_hidden_links_never_encoded(profile, dialect):
    doc = encode(profile, dialect)
    assert "secret.jane" not in doc
    assert "instagram" not in doc.lower()


def test_zero_links_boundary():
    doc = encode(Profile(handle="x", full_name="X"), PLATFORM_B)
    assert doc == "BEGIN:VCARD\r\nVERSION:3.0\r\nFN:X\r\nEND:VCARD\r\n"


@pytest.mark.parametrize("dialect", DIALECTS)
def test_repeat_encoding_is_identical(profile, dialect):
    assert encode(profile, dialect, photo="QUJD") == encode(profile, dialect, photo="QUJD")


def test_whatsapp_scenario_platform_b(profile):
    p = _with_links(profile, Link("whatsapp", "+1 (555) 123-4567"))
    lines = _lines(encode(p, PLATFORM_B))
    assert "TEL;TYPE=CELL:+1 (555) 123-4567" in lines
    assert "URL;TYPE=WhatsApp:https://wa.me/15551234567" in lines


@pytest.mark.parametrize("dialect", DIALECTS)
def test_phone_lines_are_deduplicated(profile, dialect):
    p = _with_links(
        profile,
        Link("whatsapp", "+1 (555) 123-4567"),
        Link("sms", "+1 (555) 123-4567"),
        Link("phone", "+1 555 123 4567"),
        Link("whatsapp", "+1 (555) 123-4567"),
    )
    lines = _lines(encode(p, dialect))
    assert sum(1 for x in lines if x.startswith("TEL")) == 1
    assert lines.count("URL;TYPE=SMS:sms:+15551234567") == 1
    assert lines.count("URL;TYPE=WhatsApp:https://wa.me/15551234567") == 2


def test_sms_gets_phone_and_protocol_line(profile):
    p = _with_links(profile, Link("sms", "+44 7700 900123"))
    lines = _lines(encode(p, PLATFORM_A))
    assert [x for x in lines if x.startswith(("TEL", "URL"))] == [
        "TEL;TYPE=CELL:+44 7700 900123",
        "URL;TYPE=SMS:sms:+447700900123",
    ]


def test_emails_and_websites_deduplicated(profile):
    p = _with_links(
        profile,
        Link("email", "Jane@Acme.com"),
        Link("email", "jane@acme.com"),
        Link("website", "acme.com"),
        Link("website", "https://acme.com"),
    )
    lines = _lines(encode(p, PLATFORM_B))
    assert sum(1 for x in lines if x.startswith("EMAIL")) == 1
    assert lines.count("URL;TYPE=Website:https://acme.com") == 1


def test_platform_a_adds_social_profiles(profile):
    lines = _lines(encode(profile, PLATFORM_A))
    assert "X-SOCIALPROFILE;type=linkedin:https://linkedin.com/in/jane" in lines
    assert "URL;TYPE=LinkedIn:https://linkedin.com/in/jane" in lines


@pytest.mark.parametrize("dialect", [PLATFORM_B, FALLBACK])
def test_platform_b_uses_typed_urls_only(profile, dialect):
    doc = encode(profile, dialect)
    assert "X-SOCIALPROFILE" not in doc
    assert "URL;TYPE=LinkedIn:https://linkedin.com/in/jane" in _lines(doc)


def test_github_never_structured(profile):
    p = _with_links(profile, Link("github", "jane"))
    lines = _lines(encode(p, PLATFORM_A))
    assert "URL;TYPE=GitHub:https://github.com/jane" in lines
    assert not any(x.startswith("X-SOCIALPROFILE") for x in lines)


@pytest.mark.parametrize("dialect", DIALECTS)
def test_address_and_meeting(profile, dialect):
    p = _with_links(
        profile,
        Link("address", "1 Main St, Springfield"),
        Link("Book-Meeting", "calendly.com/jane"),
        Link("book a meeting", "https://cal.com/jane"),
    )
    lines = _lines(encode(p, dialect))
    assert "ADR;TYPE=WORK:;;1 Main St, Springfield;;;;" in lines
    assert "URL;TYPE=Calendar:https://calendly.com/jane" in lines
    assert "URL;TYPE=Calendar:https://cal.com/jane" in lines


def test_icon_overrides_type(profile):
    p = _with_links(profile, Link("website", "+1 555 000 2222", icon="phone"))
    lines = _lines(encode(p, PLATFORM_B))
    assert "TEL;TYPE=CELL:+1 555 000 2222" in lines
    assert not any(x.startswith("URL") for x in lines)


def test_custom_and_message_links(profile):
    p = _with_links(profile, Link("tiktok", "tiktok.com/@jane"), Link("message", "m.me/jane"))
    lines = _lines(encode(p, PLATFORM_B))
    assert "URL;TYPE=Other:https://tiktok.com/@jane" in lines
    assert "URL;TYPE=Message:https://m.me/jane" in lines


def test_blank_values_skipped(profile):
    p = _with_links(profile, Link("email", "  "), Link("phone", ""))
    doc = encode(p, PLATFORM_A)
    assert "EMAIL" not in doc and "TEL" not in doc


def test_note_escaped_single_line(profile):
    lines = _lines(encode(profile, PLATFORM_B))
    assert "NOTE:Met at the expo\\nSay hi" in lines


def test_hidden_note_never_emitted(profile):
    p = dataclasses.replace(profile, note=Note("Met at the expo", False))
    assert "NOTE" not in encode(p, PLATFORM_A)
    p = dataclasses.replace(profile, note=Note("   ", True))
    assert "NOTE" not in encode(p, PLATFORM_A)


def test_photo_inline_vs_url(profile):
    assert "PHOTO;ENCODING=b;TYPE=JPEG:QUJD" in _lines(encode(profile, PLATFORM_A, photo="QUJD"))
    assert "PHOTO;VALUE=URL:https://cdn.example.com/jane.png" in _lines(encode(profile, PLATFORM_A))
    # fallback never inlines
    doc = encode(profile, FALLBACK, photo="QUJD")
    assert "ENCODING=b" not in doc
    assert "PHOTO;VALUE=URL:https://cdn.example.com/jane.png" in _lines(doc)


def test_photo_field_without_avatar():
    assert photo_field(None) is None
    assert photo_field(None, "QUJD") == "PHOTO;ENCODING=b;TYPE=JPEG:QUJD"


def test_long_photo_line_folded(profile):
    doc = encode(profile, PLATFORM_B, photo="A" * 500)
    lines = _lines(doc)
    assert all(len(x) <= 75 for x in lines)
    start = next(i for i, x in enumerate(lines) if x.startswith("PHOTO"))
    assert lines[start + 1].startswith(" A")


def test_logo_and_revision_trail(profile):
    lines = _lines(encode(profile, PLATFORM_B))
    assert lines[-4:] == [
        "X-COMPANY-LOGO:https://cdn.example.com/acme.png",
        "REV:2024-05-01T10:00:00Z",
        "END:VCARD",
        "",
    ]


def test_build_fields_is_photo_free(profile):
    fields = build_fields(profile, PLATFORM_A)
    assert not any(x.startswith(("PHOTO", "REV", "END")) for x in fields)
    assert lk.WHATSAPP in " ".join(fields).lower()
