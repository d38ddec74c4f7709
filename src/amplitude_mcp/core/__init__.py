"""Core domain surface for amplitude-mcp (transport-agnostic)."""

from .client import (
    AmplitudeClient,
    AmplitudeClientError,
    AmplitudeHTTPError,
    AmplitudeParseError,
    AmplitudeValidationError,
    build_auth_headers,
)
from .config import (
    AmplitudeConfig,
    Credentials,
    MissingCredentialsError,
    load_config,
    load_credentials,
)
from .decoding import ExportResult, decode_export, limit_events
from .endpoints import ApiRequest, ResponseFormat
from .operations import (
    OPERATIONS,
    Operation,
    OperationResult,
    get_operation,
    run_operation,
)

__all__ = [
    # Client
    "AmplitudeClient",
    "build_auth_headers",
    # Exceptions
    "AmplitudeClientError",
    "AmplitudeHTTPError",
    "AmplitudeParseError",
    "AmplitudeValidationError",
    "MissingCredentialsError",
    # Config
    "AmplitudeConfig",
    "Credentials",
    "load_config",
    "load_credentials",
    # Requests and decoding
    "ApiRequest",
    "ResponseFormat",
    "ExportResult",
    "decode_export",
    "limit_events",
    # Operations
    "OPERATIONS",
    "Operation",
    "OperationResult",
    "get_operation",
    "run_operation",
]
