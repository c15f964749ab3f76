import base64
import logging
from typing import Any, Optional, Sequence

from google.genai import types

from stylemy.core.errors import ErrorKind
from stylemy.schemas.virtual_tryon import (
    GenerationOutcome,
    InlineImagePart,
    ResponsePart,
    TextPart,
)

logger = logging.getLogger(__name__)

REFUSAL_PREFIX = "Model returned a text response instead of an image: "
NO_IMAGE_MESSAGE = "No image data found in the Gemini API response."


def _convert_part(part: types.Part) -> Optional[ResponsePart]:
    """Map an SDK part onto the image | text union, dropping anything else."""
    if part.inline_data and part.inline_data.data:
        if not part.inline_data.mime_type:
            logger.warning("[response_parts] Skipping inline data without a mime type")
            return None
        data: Any = part.inline_data.data
        payload = data if isinstance(data, str) else base64.b64encode(data).decode("ascii")
        return InlineImagePart(
            media_type=part.inline_data.mime_type,
            payload=payload,
        )
    if part.text:
        return TextPart(text=part.text)
    return None


def response_parts(response: types.GenerateContentResponse) -> list[ResponsePart]:
    """Extract the first candidate's parts; missing content yields an empty list."""
    if not response.candidates:
        return []
    content = response.candidates[0].content
    if content is None or not content.parts:
        return []

    parts = []
    for part in content.parts:
        converted = _convert_part(part)
        if converted is not None:
            parts.append(converted)
    return parts


def interpret_parts(parts: Sequence[ResponsePart]) -> GenerationOutcome:
    """Classify parts as image success, model refusal or missing image data."""
    # The first image wins, any trailing parts are ignored
    for part in parts:
        if isinstance(part, InlineImagePart):
            return GenerationOutcome.succeeded(part.media_type, part.payload)

    diagnostic = " ".join(part.text for part in parts if isinstance(part, TextPart)).strip()
    if diagnostic:
        logger.warning(f"[interpret_parts] Model refused: {diagnostic}")
        return GenerationOutcome.failed(ErrorKind.MODEL_REFUSED, REFUSAL_PREFIX + diagnostic)

    logger.warning("[interpret_parts] Response carried neither image nor text")
    return GenerationOutcome.failed(ErrorKind.NO_IMAGE_DATA, NO_IMAGE_MESSAGE)


def interpret_response(response: types.GenerateContentResponse) -> GenerationOutcome:
    """Turn a raw Gemini response into a GenerationOutcome."""
    return interpret_parts(response_parts(response))
