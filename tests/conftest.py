import base64
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from google.genai import types

from stylemy.schemas.virtual_tryon import EncodedImage


class FakeUpload:
    """Minimal stand-in for an uploaded file."""

    def __init__(
        self,
        data: bytes = b"\x89PNG fake image bytes",
        content_type: Optional[str] = "image/png",
        size: Optional[int] = -1,
        error: Optional[Exception] = None,
    ):
        self.data = data
        self.content_type = content_type
        self.size = len(data) if size == -1 else size
        self.error = error
        self.reads = 0

    async def read(self) -> bytes:
        self.reads += 1
        if self.error is not None:
            raise self.error
        return self.data


def make_response(*parts: types.Part) -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[types.Candidate(content=types.Content(role="model", parts=list(parts)))]
    )


@pytest.fixture
def person_image():
    return EncodedImage(media_type="image/jpeg", payload=base64.b64encode(b"person").decode())


@pytest.fixture
def outfit_image():
    return EncodedImage(media_type="image/png", payload=base64.b64encode(b"outfit").decode())


@pytest.fixture
def image_response():
    return make_response(
        types.Part(inline_data=types.Blob(mime_type="image/png", data=b"\x00\x00\x00")),
    )


@pytest.fixture
def mock_client(image_response):
    """Mock google-genai client whose async generate_content returns an image."""
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=image_response)
    return client
