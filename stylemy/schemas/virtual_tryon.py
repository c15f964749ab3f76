"""
Virtual Try-On value types and request/response schemas for API validation.
"""
import base64
import binascii
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)

from stylemy.core.errors import ErrorKind

IMAGE_TYPE_PREFIX = "image/"


def to_data_url(media_type: str, payload: str) -> str:
    """Render a media type and base64 payload as a renderable ``data:`` URL."""
    return f"data:{media_type};base64,{payload}"


def is_base64(payload: str) -> bool:
    try:
        base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


class EncodedImage(BaseModel):
    """Transport form of an uploaded or generated picture."""
    model_config = ConfigDict(frozen=True)

    media_type: str = Field(..., description="Declared MIME type, e.g. image/png")
    payload: str = Field(..., description="Base64-encoded image bytes")

    @field_validator("media_type")
    @classmethod
    def validate_media_type(cls, v: str) -> str:
        if not v.startswith(IMAGE_TYPE_PREFIX):
            raise ValueError(f"media_type must start with '{IMAGE_TYPE_PREFIX}', got '{v}'")
        return v

    @field_validator("payload")
    @classmethod
    def validate_payload(cls, v: str) -> str:
        if not v:
            raise ValueError("payload cannot be empty")
        if not is_base64(v):
            raise ValueError("payload must be valid base64 text")
        return v

    @computed_field  # type: ignore[prop-decorator]
    @property
    def data_url(self) -> str:
        return to_data_url(self.media_type, self.payload)

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.payload)


class InlineImagePart(BaseModel):
    """Response part carrying embedded image data."""
    kind: Literal["image"] = "image"
    media_type: str
    payload: str


class TextPart(BaseModel):
    """Response part carrying natural-language text."""
    kind: Literal["text"] = "text"
    text: str


ResponsePart = Annotated[Union[InlineImagePart, TextPart], Field(discriminator="kind")]


class GenerationOutcome(BaseModel):
    """Terminal result of one try-on attempt: an image or a failure, never both."""
    model_config = ConfigDict(frozen=True)

    image_url: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @model_validator(mode="after")
    def check_exactly_one_variant(self) -> "GenerationOutcome":
        has_image = self.image_url is not None
        has_error = self.error_kind is not None
        if has_image == has_error:
            raise ValueError("GenerationOutcome must carry either an image or an error")
        if has_error and not self.message:
            raise ValueError("A failed GenerationOutcome requires a message")
        return self

    @classmethod
    def succeeded(cls, media_type: str, payload: str) -> "GenerationOutcome":
        return cls(image_url=to_data_url(media_type, payload))

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> "GenerationOutcome":
        return cls(error_kind=kind, message=message)

    @property
    def ok(self) -> bool:
        return self.image_url is not None


class EncodedImageSchema(BaseModel):
    """Schema for an encoded upload returned to the client."""
    media_type: str = Field(..., description="Declared MIME type of the upload")
    payload: str = Field(..., description="Base64-encoded image bytes")
    preview_url: str = Field(..., description="data: URL suitable for an <img> preview")

    @classmethod
    def from_encoded(cls, image: EncodedImage) -> "EncodedImageSchema":
        return cls(media_type=image.media_type, payload=image.payload, preview_url=image.data_url)


class TryOnRequestSchema(BaseModel):
    """Schema for a JSON try-on request built from previously encoded images."""
    # Validated by the endpoint so bad images map onto the error taxonomy
    person: Union[dict[str, Any], str] = Field(
        ..., description="Person photo as {media_type, payload} or a data: URL"
    )
    outfit: Union[dict[str, Any], str] = Field(
        ..., description="Outfit photo as {media_type, payload} or a data: URL"
    )
    remove_background: bool = Field(
        True, description="Ask the model to isolate the garment from its background first"
    )


class TryOnResponseSchema(BaseModel):
    """Schema for a successful try-on response."""
    image_url: str = Field(..., description="data: URL of the generated try-on image")
    time: str = Field(..., description="Processing time in seconds")

    class Config:
        json_schema_extra = {
            "example": {
                "image_url": "data:image/png;base64,iVBORw0KGgo...",
                "time": "7.42",
            }
        }


class ErrorSchema(BaseModel):
    """Schema for the error detail of a failed request."""
    error: str = Field(..., description="Human-readable failure message")
    kind: ErrorKind = Field(..., description="Failure classification")
