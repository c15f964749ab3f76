import logging
from typing import Optional

import google.genai as genai
from google.genai import types

from stylemy.core.config import Settings
from stylemy.core.errors import ErrorKind, MissingCredentialError
from stylemy.schemas.virtual_tryon import EncodedImage, GenerationOutcome
from stylemy.utils.image_workflow.encoder import decode_data_url, encode_image, image_from_fields
from stylemy.utils.image_workflow.interpreter import interpret_parts, interpret_response
from stylemy.utils.image_workflow.prompt import build_tryon_prompt

logger = logging.getLogger(__name__)

GENERATION_FAILURE_PREFIX = "Failed to generate image. "

RESPONSE_MODALITIES = ["IMAGE", "TEXT"]

__all__ = [
    "GENERATION_FAILURE_PREFIX",
    "build_genai_client",
    "build_tryon_contents",
    "build_tryon_prompt",
    "decode_data_url",
    "encode_image",
    "generate_tryon_image",
    "image_from_fields",
    "interpret_parts",
    "interpret_response",
]


def build_genai_client(settings: Settings) -> genai.Client:
    """Initialize the Gemini API client, failing fast without a credential."""
    api_key = settings.GOOGLE_API_KEY
    if not api_key:
        raise MissingCredentialError("GOOGLE_API_KEY is not configured in settings")

    return genai.Client(api_key=api_key)


def build_tryon_contents(
    person: EncodedImage,
    outfit: EncodedImage,
    remove_background: bool,
) -> list[types.Content]:
    """
    Build the ordered request parts: person image, outfit image, instruction.

    Args:
        person: Encoded photo of the person
        outfit: Encoded photo of the clothing item
        remove_background: Whether to ask for garment isolation before compositing

    Returns:
        A single user Content holding the three parts
    """
    parts = [
        types.Part.from_bytes(data=person.to_bytes(), mime_type=person.media_type),
        types.Part.from_bytes(data=outfit.to_bytes(), mime_type=outfit.media_type),
        types.Part.from_text(text=build_tryon_prompt(remove_background)),
    ]
    return [types.Content(role="user", parts=parts)]


async def generate_tryon_image(
    client: genai.Client,
    person: EncodedImage,
    outfit: EncodedImage,
    remove_background: bool,
    model: Optional[str] = None,
) -> GenerationOutcome:
    """
    Generate a try-on image with one Gemini call.

    Transport, auth and quota errors are converted into a failed outcome, so
    this coroutine does not raise for anything the call itself throws.

    Args:
        client: Gemini API client
        person: Encoded photo of the person
        outfit: Encoded photo of the clothing item
        remove_background: Whether to ask for garment isolation before compositing
        model: Model name, defaults to settings.GEMINI_IMAGE_MODEL

    Returns:
        GenerationOutcome with either a data: URL or an error
    """
    if model is None:
        from stylemy.core.config import settings

        model = settings.GEMINI_IMAGE_MODEL

    contents = build_tryon_contents(person, outfit, remove_background)
    config = types.GenerateContentConfig(response_modalities=RESPONSE_MODALITIES)

    logger.info(
        f"[generate_tryon_image] Sending to {model}: person={person.media_type}, "
        f"outfit={outfit.media_type}, remove_background={remove_background}"
    )

    try:
        response = await client.aio.models.generate_content(
            model=model,
            contents=contents,
            config=config,
        )
    except Exception as e:
        logger.error(f"[generate_tryon_image] Error generating virtual try-on: {e}")
        return GenerationOutcome.failed(
            ErrorKind.TRANSPORT_FAILURE,
            f"{GENERATION_FAILURE_PREFIX}{e}",
        )

    outcome = interpret_response(response)
    if outcome.ok:
        logger.info("[generate_tryon_image] Success: received image")
    else:
        logger.error(f"[generate_tryon_image] Generation failed: {outcome.message}")
    return outcome
