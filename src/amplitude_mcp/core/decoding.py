"""
Decoding for the Export API payload.

The export endpoint answers with a gzip archive of newline-delimited JSON, one
event per line. Truncated exports can end in a partial line, so lines that do
not parse are skipped and counted rather than failing the whole call.
"""

from __future__ import annotations

import gzip
import json
import logging
import zlib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .observability import log_event

DEFAULT_EXPORT_LIMIT = 1000

GZIP_MAGIC = b"\x1f\x8b"

log = logging.getLogger("amplitude_mcp.decoding")


class ExportDecodeError(ValueError):
    """Raised when the export body cannot be decompressed or decoded as text."""


@dataclass(frozen=True)
class ExportResult:
    events: List[Dict[str, Any]] = field(default_factory=list)
    skipped_lines: int = 0

    @property
    def total(self) -> int:
        return len(self.events)


def decompress(body: bytes) -> bytes:
    # httpx already undoes Content-Encoding: gzip, leaving plain NDJSON.
    if not body.startswith(GZIP_MAGIC):
        return body
    try:
        return gzip.decompress(body)
    except (OSError, EOFError, zlib.error) as exc:
        raise ExportDecodeError(f"could not decompress export archive: {exc}") from exc


def parse_ndjson(text: str) -> ExportResult:
    events: List[Dict[str, Any]] = []
    skipped = 0

    for line in text.splitlines():
        if not line.strip():
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError:
            skipped += 1
            continue
        if not isinstance(event, dict):
            skipped += 1
            continue
        events.append(event)

    return ExportResult(events=events, skipped_lines=skipped)


def decode_export(body: bytes) -> ExportResult:
    """
    Turn a raw export body into an ordered list of event records.
    - Blank lines are ignored
    - Malformed lines are skipped; the count is reported on the result
    - Records are passed through untouched
    """
    raw = decompress(body or b"")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ExportDecodeError(f"export payload is not valid UTF-8: {exc}") from exc

    result = parse_ndjson(text)
    if result.skipped_lines:
        log_event(
            "export_lines_skipped",
            logger=log,
            level=logging.WARNING,
            skipped_lines=result.skipped_lines,
            total=result.total,
        )
    return result


def limit_events(
    events: List[Dict[str, Any]], limit: Optional[int] = None
) -> List[Dict[str, Any]]:
    """Client-side truncation applied after the full decode."""
    return events[: limit or DEFAULT_EXPORT_LIMIT]
