"""
Virtual Try-On API endpoints for generating try-on visualizations.
"""
import asyncio
import logging
import time
from typing import Any, Union

import google.genai as genai
from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile

from stylemy.core.config import settings
from stylemy.core.errors import STATUS_CODES, TryOnError
from stylemy.schemas.virtual_tryon import (
    EncodedImage,
    EncodedImageSchema,
    ErrorSchema,
    GenerationOutcome,
    TryOnRequestSchema,
    TryOnResponseSchema,
)
from stylemy.utils.image_workflow import (
    decode_data_url,
    encode_image,
    image_from_fields,
    generate_tryon_image,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_V1_STR, tags=["Virtual Try-On"])

ERROR_RESPONSES = {
    400: {"model": ErrorSchema, "description": "Invalid image upload"},
    413: {"model": ErrorSchema, "description": "Image larger than the upload limit"},
    422: {"model": ErrorSchema, "description": "Model refused to produce an image"},
    502: {"model": ErrorSchema, "description": "Gemini call failed or returned no image"},
}


def get_genai_client(request: Request) -> genai.Client:
    """Return the Gemini client built at startup."""
    return request.app.state.genai_client


def _error_detail(error: TryOnError) -> HTTPException:
    return HTTPException(
        status_code=error.status_code,
        detail={"error": error.message, "kind": error.kind.value},
    )


def _coerce_image(value: Union[dict[str, Any], str]) -> EncodedImage:
    if isinstance(value, str):
        return decode_data_url(value)
    return image_from_fields(value.get("media_type"), value.get("payload"))


def _to_response(outcome: GenerationOutcome, start_time: float) -> TryOnResponseSchema:
    if not outcome.ok:
        raise HTTPException(
            status_code=STATUS_CODES[outcome.error_kind],
            detail={"error": outcome.message, "kind": outcome.error_kind.value},
        )

    elapsed = time.time() - start_time
    logger.info(f"[virtual_tryon] Total processing time: {elapsed:.2f} seconds")
    return TryOnResponseSchema(image_url=outcome.image_url, time=f"{elapsed:.2f}")


@router.post(
    "/virtual-tryon/images",
    response_model=EncodedImageSchema,
    responses={k: v for k, v in ERROR_RESPONSES.items() if k in (400, 413)},
    summary="Encode an Image",
    description="Validate an uploaded image and return its transport-ready encoding and preview URL",
)
async def encode_upload(
    image_file: UploadFile = File(..., description="Person or outfit photo (JPEG, PNG, or WebP)"),
) -> EncodedImageSchema:
    """
    Encode a single upload so the client can preview it and send it back later.

    Raises:
        HTTPException: 400 or 413 if the upload is rejected
    """
    logger.info(f"[encode_upload] Received file: {image_file.filename}")
    try:
        encoded = await encode_image(image_file)
    except TryOnError as e:
        logger.warning(f"[encode_upload] Rejected {image_file.filename}: {e.message}")
        raise _error_detail(e)

    return EncodedImageSchema.from_encoded(encoded)


@router.post(
    "/virtual-tryon/try-on",
    response_model=TryOnResponseSchema,
    responses=ERROR_RESPONSES,
    summary="Generate Virtual Try-On Image",
    description="Generate a virtual try-on image from an uploaded person photo and outfit photo",
)
async def create_tryon_request(
    person_image: UploadFile = File(..., description="Photo of the person"),
    outfit_image: UploadFile = File(..., description="Photo of the clothing item"),
    remove_background: bool = Form(True, description="Isolate the garment from its background first"),
    client: genai.Client = Depends(get_genai_client),
) -> TryOnResponseSchema:
    """
    Encode both uploads and generate the try-on image in one request.

    Raises:
        HTTPException: 400/413 if an upload is invalid, 422/502 if generation fails
    """
    start_time = time.time()
    logger.info(
        f"[create_tryon_request] Started: person={person_image.filename}, "
        f"outfit={outfit_image.filename}, remove_background={remove_background}"
    )

    try:
        person, outfit = await asyncio.gather(
            encode_image(person_image),
            encode_image(outfit_image),
        )
    except TryOnError as e:
        logger.warning(f"[create_tryon_request] Validation error: {e.message}")
        raise _error_detail(e)

    outcome = await generate_tryon_image(client, person, outfit, remove_background)
    return _to_response(outcome, start_time)


@router.post(
    "/virtual-tryon/generate",
    response_model=TryOnResponseSchema,
    responses=ERROR_RESPONSES,
    summary="Generate Virtual Try-On Image from Encoded Images",
    description="Generate a virtual try-on image from images previously encoded by /virtual-tryon/images",
)
async def generate_from_encoded(
    request: TryOnRequestSchema,
    client: genai.Client = Depends(get_genai_client),
) -> TryOnResponseSchema:
    start_time = time.time()
    try:
        person = _coerce_image(request.person)
        outfit = _coerce_image(request.outfit)
    except TryOnError as e:
        logger.warning(f"[generate_from_encoded] Validation error: {e.message}")
        raise _error_detail(e)

    outcome = await generate_tryon_image(client, person, outfit, request.remove_background)
    return _to_response(outcome, start_time)
