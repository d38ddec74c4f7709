from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from .decoding import ExportDecodeError, ExportResult, decode_export
from .endpoints import ApiRequest, ResponseFormat
from .observability import log_event

if TYPE_CHECKING:
    from .config import AmplitudeConfig, Credentials

DEFAULT_BASE_URL = "https://amplitude.com"

EXPORT_TOO_LARGE_MESSAGE = (
    "The file size of the exported data is too large. "
    "Shorten the time range and try again. The limit is 4GB."
)
EXPORT_TIMEOUT_MESSAGE = (
    "The amount of data is large causing a timeout. "
    "For large amounts of data, use the Amazon S3 destination."
)


class AmplitudeClientError(Exception):
    """Base error for client failures. Every failure path ends up here."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AmplitudeHTTPError(AmplitudeClientError):
    def __init__(
        self,
        *,
        status_code: int,
        method: str,
        url: str,
        message: str,
        response_text: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url
        self.response_text = response_text


class AmplitudeParseError(AmplitudeClientError):
    pass


class AmplitudeValidationError(AmplitudeClientError):
    pass


def basic_auth(credentials: "Credentials") -> httpx.BasicAuth:
    return httpx.BasicAuth(credentials.api_key, credentials.secret_key)


def build_auth_headers(credentials: "Credentials") -> Dict[str, str]:
    """Basic auth over "api_key:secret_key" plus the JSON content type."""
    signed = next(basic_auth(credentials).sync_auth_flow(httpx.Request("GET", "/")))
    return {
        "Authorization": signed.headers["Authorization"],
        "Content-Type": "application/json",
    }


class AmplitudeClient:
    """
    Shared HTTP client for the Amplitude Dashboard REST and Export APIs.
    - Handles auth, base URL and timeouts
    - One attempt per call; failures are raised as AmplitudeClientError
    - No business logic; the operation table owns request shapes
    """

    def __init__(
        self,
        *,
        credentials: "Credentials",
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 30.0,
        export_timeout_seconds: float = 300.0,
        http: Optional[httpx.AsyncClient] = None,
    ):
        base_url = (base_url or "").rstrip("/")
        if not base_url:
            raise ValueError("base_url must be provided.")
        if not credentials.api_key or not credentials.secret_key:
            raise ValueError("api_key and secret_key must be provided.")

        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self.export_timeout_seconds = export_timeout_seconds

        # Prefer httpx basic auth rather than manual base64 encoding
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(
            base_url=self.base_url,
            auth=basic_auth(credentials),
            headers={"Content-Type": "application/json"},
            timeout=timeout_seconds,
        )

    @classmethod
    def from_config(cls, config: "AmplitudeConfig", **kwargs) -> "AmplitudeClient":
        return cls(
            credentials=config.credentials,
            base_url=config.base_url,
            timeout_seconds=config.timeout_seconds,
            export_timeout_seconds=config.export_timeout_seconds,
            **kwargs,
        )

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "AmplitudeClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def execute(
        self,
        request: ApiRequest,
        *,
        action: str,
        tool: Optional[str] = None,
    ) -> Any:
        """
        Core request method.
        - Raises AmplitudeClientError on network/timeout errors (no retries)
        - Raises AmplitudeHTTPError on non-2xx HTTP responses
        - Raises AmplitudeParseError if the body cannot be decoded
        - Returns parsed JSON, or an ExportResult for the export format
        """
        is_export = request.response_format is ResponseFormat.NDJSON_GZIP
        timeout = self.export_timeout_seconds if is_export else self.timeout_seconds
        start = time.perf_counter()

        try:
            resp = await self.http.request(
                request.method,
                request.path,
                params=request.params or None,
                timeout=timeout,
            )
        except httpx.HTTPError as exc:
            log_event(
                "op_call",
                tool=tool,
                method=request.method,
                endpoint=request.path,
                status="exception",
                error_type=type(exc).__name__,
                duration_ms=int((time.perf_counter() - start) * 1000),
            )
            raise AmplitudeClientError(
                f"Failed to {action}: {_describe_transport_error(exc)}"
            ) from exc

        log_event(
            "op_call",
            tool=tool,
            method=request.method,
            endpoint=request.path,
            status=resp.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )

        if is_export:
            return await self._export_result(resp, action=action)

        if not resp.is_success:
            raise self._to_http_error(
                resp, action=action, structured=request.structured_errors
            )

        return self._safe_json(resp, action=action)

    async def _export_result(
        self, resp: httpx.Response, *, action: str
    ) -> ExportResult:
        # 404 means the range holds no data.
        if resp.status_code == 404:
            return ExportResult(events=[], skipped_lines=0)

        if resp.status_code == 400:
            raise self._status_error(
                resp, f"Failed to {action}: {EXPORT_TOO_LARGE_MESSAGE}"
            )
        if resp.status_code == 504:
            raise self._status_error(
                resp, f"Failed to {action}: {EXPORT_TIMEOUT_MESSAGE}"
            )
        if not resp.is_success:
            raise self._to_http_error(resp, action=action, structured=False)

        try:
            # Decompression and parsing run off the event loop.
            return await asyncio.to_thread(decode_export, resp.content)
        except ExportDecodeError as exc:
            raise AmplitudeParseError(f"Failed to {action}: {exc}") from exc

    def _safe_json(self, resp: httpx.Response, *, action: str) -> Any:
        # Handle empty responses (204 No Content, etc.)
        if not resp.content:
            return {}

        try:
            return resp.json()
        except ValueError as exc:
            snippet = (resp.text or "")[:500]
            raise AmplitudeParseError(
                f"Failed to {action}: expected JSON from "
                f"{resp.request.method} {resp.request.url.path}, "
                f"got non-JSON body snippet: {snippet!r}"
            ) from exc

    @staticmethod
    def _status_line(resp: httpx.Response) -> str:
        return f"{resp.status_code} {resp.reason_phrase}".strip()

    def _status_error(self, resp: httpx.Response, message: str) -> AmplitudeHTTPError:
        return AmplitudeHTTPError(
            status_code=resp.status_code,
            method=resp.request.method,
            url=str(resp.request.url.copy_with(query=None)),
            message=message,
            response_text=(resp.text or "")[:500],
        )

    def _to_http_error(
        self, resp: httpx.Response, *, action: str, structured: bool
    ) -> AmplitudeHTTPError:
        text = resp.text or ""
        detail = ""

        # The segmentation endpoint answers errors with {error, code?, message?}.
        if structured and text:
            try:
                parsed = resp.json()
            except ValueError:
                parsed = None
            if isinstance(parsed, dict):
                detail = str(parsed.get("error") or parsed.get("message") or "")

        detail = detail or text.strip() or self._status_line(resp)
        return self._status_error(
            resp, f"Failed to {action}: Amplitude API error: {detail}"
        )


def _describe_transport_error(exc: httpx.HTTPError) -> str:
    cause = str(exc)
    name = type(exc).__name__
    return f"{name}: {cause}" if cause else name
