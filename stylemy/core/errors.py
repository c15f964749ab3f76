"""
Error taxonomy for the try-on pipeline.

Encoding errors are raised to the caller. Generation errors are carried back
inside a ``GenerationOutcome`` and only share the ``ErrorKind`` values with
the exceptions below.
"""
from enum import Enum


class ErrorKind(str, Enum):
    NOT_AN_IMAGE = "NotAnImage"
    TOO_LARGE = "TooLarge"
    READ_FAILED = "ReadFailed"
    MALFORMED_RESULT = "MalformedResult"
    MISSING_CREDENTIAL = "MissingCredential"
    TRANSPORT_FAILURE = "TransportFailure"
    MODEL_REFUSED = "ModelRefused"
    NO_IMAGE_DATA = "NoImageData"


# HTTP status reported for each failure kind
STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.NOT_AN_IMAGE: 400,
    ErrorKind.TOO_LARGE: 413,
    ErrorKind.READ_FAILED: 400,
    ErrorKind.MALFORMED_RESULT: 400,
    ErrorKind.MISSING_CREDENTIAL: 500,
    ErrorKind.TRANSPORT_FAILURE: 502,
    ErrorKind.MODEL_REFUSED: 422,
    ErrorKind.NO_IMAGE_DATA: 502,
}


class TryOnError(ValueError):
    """Base class for every failure the try-on pipeline reports."""

    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class NotAnImageError(TryOnError):
    kind = ErrorKind.NOT_AN_IMAGE


class TooLargeError(TryOnError):
    kind = ErrorKind.TOO_LARGE


class ReadFailedError(TryOnError):
    kind = ErrorKind.READ_FAILED


class MalformedResultError(TryOnError):
    kind = ErrorKind.MALFORMED_RESULT


class MissingCredentialError(TryOnError):
    kind = ErrorKind.MISSING_CREDENTIAL
