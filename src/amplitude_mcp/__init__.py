"""amplitude_mcp package exports."""

from .core.client import (
    AmplitudeClient,
    AmplitudeClientError,
    AmplitudeHTTPError,
    AmplitudeParseError,
    AmplitudeValidationError,
    build_auth_headers,
)
from .core.config import AmplitudeConfig, Credentials, load_config
from .core.decoding import ExportResult, decode_export
from .core.operations import OPERATIONS, run_operation
from .registry import register_operations
from .resources import register_resources
from .server import main as run_server

__all__ = [
    # Client
    "AmplitudeClient",
    "build_auth_headers",
    # Exceptions
    "AmplitudeClientError",
    "AmplitudeHTTPError",
    "AmplitudeParseError",
    "AmplitudeValidationError",
    # Config
    "AmplitudeConfig",
    "Credentials",
    "load_config",
    # Operations
    "OPERATIONS",
    "run_operation",
    "ExportResult",
    "decode_export",
    # Server utilities
    "run_server",
    "register_operations",
    "register_resources",
]
