"""
Tests for converting uploads into encoded images.
"""
import base64

import pytest
from pydantic import ValidationError

from conftest import FakeUpload
from stylemy.core.errors import (
    ErrorKind,
    MalformedResultError,
    NotAnImageError,
    ReadFailedError,
    TooLargeError,
)
from stylemy.schemas.virtual_tryon import EncodedImage
from stylemy.utils.image_workflow import decode_data_url, encode_image, image_from_fields

FOUR_MIB = 4 * 1024 * 1024


class TestEncodeImage:

    async def test_encodes_declared_type_and_payload(self):
        upload = FakeUpload(data=b"hello image", content_type="image/webp")

        encoded = await encode_image(upload)

        assert encoded.media_type == "image/webp"
        assert encoded.payload == base64.b64encode(b"hello image").decode()
        assert encoded.data_url.startswith("data:image/webp;base64,")

    async def test_media_type_is_declared_not_sniffed(self):
        # PNG signature declared as JPEG keeps the declared type
        upload = FakeUpload(data=b"\x89PNG\r\n\x1a\n", content_type="image/jpeg")

        encoded = await encode_image(upload)

        assert encoded.media_type == "image/jpeg"

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", "", None, "imagex/png"])
    async def test_rejects_non_images_without_reading(self, content_type):
        upload = FakeUpload(content_type=content_type)

        with pytest.raises(NotAnImageError) as exc_info:
            await encode_image(upload)

        assert exc_info.value.kind is ErrorKind.NOT_AN_IMAGE
        assert upload.reads == 0

    async def test_non_image_is_rejected_before_size(self):
        upload = FakeUpload(data=b"x", content_type="video/mp4", size=FOUR_MIB + 1)

        with pytest.raises(NotAnImageError):
            await encode_image(upload)

    async def test_rejects_files_over_four_mib(self):
        upload = FakeUpload(data=b"x", content_type="image/png", size=FOUR_MIB + 1)

        with pytest.raises(TooLargeError) as exc_info:
            await encode_image(upload)

        assert "4MB" in str(exc_info.value)
        assert exc_info.value.status_code == 413
        assert upload.reads == 0

    async def test_accepts_file_at_exactly_four_mib(self):
        upload = FakeUpload(data=b"x", content_type="image/png", size=FOUR_MIB)

        encoded = await encode_image(upload)

        assert encoded.payload == base64.b64encode(b"x").decode()

    async def test_unknown_size_is_checked_after_read(self):
        upload = FakeUpload(data=b"x" * 11, content_type="image/png", size=None)

        with pytest.raises(TooLargeError):
            await encode_image(upload, max_bytes=10)

    async def test_read_failure_is_wrapped(self):
        cause = OSError("disk went away")
        upload = FakeUpload(error=cause)

        with pytest.raises(ReadFailedError) as exc_info:
            await encode_image(upload)

        assert "disk went away" in str(exc_info.value)
        assert exc_info.value.__cause__ is cause

    async def test_empty_file_is_malformed(self):
        upload = FakeUpload(data=b"", content_type="image/png")

        with pytest.raises(MalformedResultError):
            await encode_image(upload)

    async def test_encoding_twice_is_identical(self):
        upload = FakeUpload(data=bytes(range(256)), content_type="image/gif")

        first = await encode_image(upload)
        second = await encode_image(upload)

        assert first == second


class TestDecodeDataUrl:

    def test_decodes_image_data_url(self):
        encoded = decode_data_url("data:image/png;base64,AAAA")

        assert encoded.media_type == "image/png"
        assert encoded.payload == "AAAA"

    def test_second_comma_stays_in_payload(self):
        # Everything after the first comma is the payload, which is then not base64
        with pytest.raises(MalformedResultError):
            decode_data_url("data:image/png;base64,AA,AA")

    @pytest.mark.parametrize("value", ["data:image/png;base64", "data:image/png;base64,", "AAAA"])
    def test_rejects_missing_payload(self, value):
        with pytest.raises(MalformedResultError):
            decode_data_url(value)

    def test_rejects_non_image_media_type(self):
        with pytest.raises(NotAnImageError):
            decode_data_url("data:text/plain;base64,AAAA")

    def test_rejects_payload_that_is_not_base64(self):
        with pytest.raises(MalformedResultError) as exc_info:
            decode_data_url("data:image/png;base64,A")

        assert exc_info.value.status_code == 400


class TestImageFromFields:

    def test_builds_encoded_image(self):
        encoded = image_from_fields("image/jpeg", "AAAA")

        assert encoded == EncodedImage(media_type="image/jpeg", payload="AAAA")

    @pytest.mark.parametrize("media_type", ["text/plain", None, 7])
    def test_rejects_non_image_media_type(self, media_type):
        with pytest.raises(NotAnImageError):
            image_from_fields(media_type, "AAAA")

    @pytest.mark.parametrize("payload", ["", None, "A", "not base64!"])
    def test_rejects_missing_or_invalid_payload(self, payload):
        with pytest.raises(MalformedResultError):
            image_from_fields("image/png", payload)


class TestEncodedImage:

    def test_payload_must_be_base64(self):
        with pytest.raises(ValidationError):
            EncodedImage(media_type="image/png", payload="A")

    def test_payload_must_not_be_empty(self):
        with pytest.raises(ValidationError):
            EncodedImage(media_type="image/png", payload="")
