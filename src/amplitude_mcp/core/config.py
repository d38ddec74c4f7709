from __future__ import annotations

import argparse
import os
from dataclasses import dataclass, field
from typing import Optional, Sequence

from dotenv import load_dotenv

REGION_BASE_URLS = {
    "standard": "https://amplitude.com",
    "eu": "https://analytics.eu.amplitude.com",
}

DEFAULT_TIMEOUT_SECONDS = 30.0
DEFAULT_EXPORT_TIMEOUT_SECONDS = 300.0


class MissingCredentialsError(ValueError):
    """Raised when the API key or secret key cannot be resolved."""


@dataclass(frozen=True)
class Credentials:
    api_key: str = field(repr=False)
    secret_key: str = field(repr=False)


@dataclass(frozen=True)
class AmplitudeConfig:
    credentials: Credentials
    region: str = "standard"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    export_timeout_seconds: float = DEFAULT_EXPORT_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @property
    def base_url(self) -> str:
        return REGION_BASE_URLS[self.region]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="amplitude-mcp",
        description="MCP server for the Amplitude analytics APIs",
    )
    parser.add_argument(
        "--amplitude-api-key",
        help="Amplitude API key (can also use AMPLITUDE_API_KEY env var)",
    )
    parser.add_argument(
        "--amplitude-secret-key",
        help="Amplitude secret key (can also use AMPLITUDE_SECRET_KEY env var)",
    )
    parser.add_argument(
        "--region",
        choices=sorted(REGION_BASE_URLS),
        help="Data residency region (AMPLITUDE_REGION, default: standard)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Per-request timeout in seconds (AMPLITUDE_TIMEOUT_SECONDS)",
    )
    parser.add_argument(
        "--export-timeout",
        type=float,
        help="Export request timeout in seconds (AMPLITUDE_EXPORT_TIMEOUT_SECONDS)",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (AMPLITUDE_LOG_LEVEL, default: INFO)",
    )
    return parser


def _env(name: str) -> str:
    return os.getenv(name, "").strip()


def _float_setting(cli_value: Optional[float], env_name: str, default: float) -> float:
    if cli_value is not None:
        value = cli_value
    else:
        raw = _env(env_name)
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            raise ValueError(f"{env_name} must be a number, got {raw!r}.") from exc
    if value <= 0:
        raise ValueError(f"{env_name} must be greater than zero.")
    return value


def load_credentials(
    api_key: Optional[str] = None, secret_key: Optional[str] = None
) -> Credentials:
    """
    Resolve the credential pair.
    Priority: explicit values (CLI) > environment variables.
    """
    api_key = (api_key or "").strip() or _env("AMPLITUDE_API_KEY")
    secret_key = (secret_key or "").strip() or _env("AMPLITUDE_SECRET_KEY")

    if not api_key:
        raise MissingCredentialsError(
            "Amplitude API key is required. Provide via --amplitude-api-key "
            "argument or AMPLITUDE_API_KEY environment variable."
        )
    if not secret_key:
        raise MissingCredentialsError(
            "Amplitude secret key is required. Provide via --amplitude-secret-key "
            "argument or AMPLITUDE_SECRET_KEY environment variable."
        )
    return Credentials(api_key=api_key, secret_key=secret_key)


def load_config(
    argv: Optional[Sequence[str]] = None, *, use_dotenv: bool = True
) -> AmplitudeConfig:
    """Build the process configuration from CLI arguments, env and optional .env."""
    if use_dotenv:
        load_dotenv()
    args = build_arg_parser().parse_args(argv)

    region = (args.region or _env("AMPLITUDE_REGION") or "standard").lower()
    if region not in REGION_BASE_URLS:
        raise ValueError(
            f"AMPLITUDE_REGION must be one of {sorted(REGION_BASE_URLS)}, "
            f"got {region!r}."
        )

    return AmplitudeConfig(
        credentials=load_credentials(args.amplitude_api_key, args.amplitude_secret_key),
        region=region,
        timeout_seconds=_float_setting(
            args.timeout, "AMPLITUDE_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS
        ),
        export_timeout_seconds=_float_setting(
            args.export_timeout,
            "AMPLITUDE_EXPORT_TIMEOUT_SECONDS",
            DEFAULT_EXPORT_TIMEOUT_SECONDS,
        ),
        log_level=(args.log_level or _env("AMPLITUDE_LOG_LEVEL") or "INFO").upper(),
    )


__all__ = [
    "AmplitudeConfig",
    "Credentials",
    "MissingCredentialsError",
    "REGION_BASE_URLS",
    "build_arg_parser",
    "load_config",
    "load_credentials",
]
