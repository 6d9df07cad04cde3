import io

import pytest
from PIL import Image

from profilecard.models import Link, Note, Profile


class FakeClock:
    def __init__(self, t: float = 100.0) -> None:
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, seconds: float) -> None:
        self.t += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def png_bytes():
    buf = io.BytesIO()
    Image.new("RGBA", (12, 8), (200, 30, 30, 255)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def profile():
    return Profile(
        handle="jane-doe",
        full_name="Jane  Doe",
        title="CTO",
        company="Acme",
        avatar_url="https://cdn.example.com/jane.png",
        company_logo_url="https://cdn.example.com/acme.png",
        links=(
            Link("email", "jane@acme.com"),
            Link("phone", "+1 555 000 1111"),
            Link("linkedin", "jane"),
            Link("whatsapp", "+1 (555) 123-4567"),
            Link("website", "acme.com"),
            Link("address", "1 Main St, Springfield"),
            Link("instagram", "secret.jane", is_visible=False),
        ),
        note=Note("Met at the expo\nSay hi", True),
        last_updated_at="2024-05-01T10:00:00Z",
    )
