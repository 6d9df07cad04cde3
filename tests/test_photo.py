import base64
import struct
import zlib
from unittest.mock import MagicMock

import requests

from profilecard import contact
from profilecard.dispatch import ContactDispatcher
from profilecard.photo import PhotoInliner, inline

IPHONE_UA = "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) AppleWebKit/605.1.15 Mobile/15E148"


def _png_chunk(kind, data):
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data))


def _oversized_png(width=20000, height=20000):
    """Valid PNG header declaring far more pixels than Pillow will decode."""
    return (b"\x89PNG\r\n\x1a\n"
            + _png_chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0))
            + _png_chunk(b"IDAT", zlib.compress(b"\x00" * 16))
            + _png_chunk(b"IEND", b""))


def _session(content=b"", error=None, status_error=None):
    session = MagicMock()
    if error is not None:
        session.get.side_effect = error
        return session
    resp = MagicMock()
    resp.content = content
    if status_error is not None:
        resp.raise_for_status.side_effect = status_error
    session.get.return_value = resp
    return session


def test_inline_reencodes_as_jpeg(png_bytes):
    session = _session(png_bytes)
    payload = inline("https://cdn.example.com/jane.png", session=session, timeout=3)
    assert payload is not None
    assert not payload.startswith("data:")
    assert base64.b64decode(payload)[:2] == b"\xff\xd8"
    session.get.assert_called_once_with("https://cdn.example.com/jane.png", timeout=3)


def test_network_error_returns_none():
    session = _session(error=requests.ConnectionError("boom"))
    assert inline("https://cdn.example.com/jane.png", session=session) is None


def test_http_error_returns_none(png_bytes):
    session = _session(png_bytes, status_error=requests.HTTPError("404"))
    assert inline("https://cdn.example.com/missing.png", session=session) is None


def test_undecodable_payload_returns_none():
    session = _session(b"<html>not an image</html>")
    assert inline("https://cdn.example.com/jane.png", session=session) is None


def test_data_url_is_decoded_without_fetch(png_bytes):
    session = _session()
    url = "data:image/png;base64," + base64.b64encode(png_bytes).decode("ascii")
    payload = PhotoInliner(session)(url)
    assert payload and not payload.startswith("data:")
    session.get.assert_not_called()


def test_no_avatar():
    session = _session()
    assert inline(None, session=session) is None
    assert inline("", session=session) is None
    session.get.assert_not_called()


def test_oversized_image_returns_none():
    session = _session(_oversized_png())
    assert inline("https://cdn.example.com/huge.png", session=session) is None


def test_oversized_avatar_keeps_primary_dialect(profile):
    dispatcher = ContactDispatcher(PhotoInliner(_session(_oversized_png())), MagicMock(), MagicMock())
    doc = dispatcher.build_document(profile, IPHONE_UA)
    assert doc.dialect == contact.PLATFORM_A.name
    assert "X-SOCIALPROFILE;type=linkedin" in doc.content
    assert "PHOTO;VALUE=URL:https://cdn.example.com/jane.png" in doc.content
