import base64
import logging
from typing import Any, Optional, Protocol

from stylemy.core.config import settings
from stylemy.core.errors import (
    MalformedResultError,
    NotAnImageError,
    ReadFailedError,
    TooLargeError,
)
from stylemy.schemas.virtual_tryon import (
    IMAGE_TYPE_PREFIX,
    EncodedImage,
    is_base64,
    to_data_url,
)

logger = logging.getLogger(__name__)


class ImageSource(Protocol):
    """Anything shaped like an uploaded file (FastAPI's ``UploadFile`` fits)."""

    content_type: Optional[str]
    size: Optional[int]

    async def read(self) -> bytes: ...


def _split_payload(data_url: str) -> str:
    """Return everything after the first comma of a data string."""
    _, sep, payload = data_url.partition(",")
    if not sep or not payload:
        raise MalformedResultError("Could not extract image data from file.")
    return payload


def _check_size(size: int, max_bytes: int) -> None:
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise TooLargeError(
            f"Image size exceeds {limit_mb:g}MB. Please upload a smaller file."
        )


async def encode_image(file: ImageSource, max_bytes: Optional[int] = None) -> EncodedImage:
    """
    Convert an uploaded file into an EncodedImage.

    Checks run in order and stop at the first failure: declared type, size,
    read, payload extraction. The media type is taken from the declared
    content type, never from the file contents.

    Args:
        file: Uploaded file exposing content_type, size and an awaitable read()
        max_bytes: Size ceiling, defaults to settings.MAX_IMAGE_SIZE_BYTES

    Returns:
        EncodedImage with the declared media type and base64 payload

    Raises:
        NotAnImageError: Declared type is missing or not image/*
        TooLargeError: File is larger than the ceiling
        ReadFailedError: Reading the file raised
        MalformedResultError: No payload could be extracted
    """
    if max_bytes is None:
        max_bytes = settings.MAX_IMAGE_SIZE_BYTES

    media_type = file.content_type
    if not media_type or not media_type.startswith(IMAGE_TYPE_PREFIX):
        raise NotAnImageError(
            "File is not an image. Please select a JPG, PNG, or other image file."
        )

    if file.size is not None:
        _check_size(file.size, max_bytes)

    try:
        raw = await file.read()
    except Exception as e:
        logger.error(f"[encode_image] Read failed: {e}")
        raise ReadFailedError(f"Failed to read file. {e}") from e

    # Size was unknown before the read
    if file.size is None:
        _check_size(len(raw), max_bytes)

    data_url = to_data_url(media_type, base64.b64encode(raw).decode("ascii"))
    payload = _split_payload(data_url)

    logger.info(f"[encode_image] Encoded {media_type}: {len(raw)} bytes")
    return EncodedImage(media_type=media_type, payload=payload)


def decode_data_url(value: str) -> EncodedImage:
    """
    Parse a client-supplied ``data:<type>;base64,<payload>`` string.

    Raises:
        NotAnImageError: The declared media type is not image/*
        MalformedResultError: The string is not a data URL or has no payload
    """
    if not value.startswith("data:"):
        raise MalformedResultError("Image must be provided as a data: URL.")

    header = value[len("data:"):].partition(",")[0]
    media_type = header.split(";")[0]
    return image_from_fields(media_type, _split_payload(value))


def image_from_fields(media_type: Any, payload: Any) -> EncodedImage:
    """
    Build an EncodedImage from client-supplied fields.

    Raises:
        NotAnImageError: The media type is missing or not image/*
        MalformedResultError: The payload is missing or not base64 text
    """
    if not isinstance(media_type, str) or not media_type.startswith(IMAGE_TYPE_PREFIX):
        raise NotAnImageError(f"Data does not describe an image: '{media_type}'")
    if not isinstance(payload, str) or not payload:
        raise MalformedResultError("Could not extract image data from file.")
    if not is_base64(payload):
        raise MalformedResultError("Image data is not valid base64.")

    return EncodedImage(media_type=media_type, payload=payload)
