from .client import (
    AmplitudeClientError,
    AmplitudeHTTPError,
    AmplitudeParseError,
    AmplitudeValidationError,
)
from .config import MissingCredentialsError
from .decoding import ExportDecodeError

__all__ = [
    "AmplitudeClientError",
    "AmplitudeHTTPError",
    "AmplitudeParseError",
    "AmplitudeValidationError",
    "ExportDecodeError",
    "MissingCredentialsError",
]
