from __future__ import annotations

import json
import logging
from typing import Callable
from urllib.parse import unquote

from amplitude_mcp.core.client import AmplitudeClient
from amplitude_mcp.core.operations import run_operation

log = logging.getLogger("amplitude_mcp.resources")

EVENTS_RESOURCE_URI = "amplitude://events/{event_type}/{start}/{end}"


async def read_events_resource(
    client: AmplitudeClient, event_type: str, start: str, end: str
) -> str:
    """Segmentation data for one event type, as JSON text."""
    result = await run_operation(
        client,
        "query_events",
        {"events": [{"eventType": unquote(event_type)}], "start": start, "end": end},
    )
    return json.dumps(result.payload, indent=2)


def register_resources(app, client_provider: Callable[[], AmplitudeClient]) -> None:
    """Register the event resource template on an app exposing .resource."""

    @app.resource(
        EVENTS_RESOURCE_URI,
        name="amplitude_events",
        description="Event segmentation data for an event type between two "
        "YYYYMMDD dates.",
        mime_type="application/json",
    )
    async def amplitude_events(event_type: str, start: str, end: str) -> str:
        return await read_events_resource(client_provider(), event_type, start, end)

    log.info("Registered resource template: %s", EVENTS_RESOURCE_URI)


__all__ = ["EVENTS_RESOURCE_URI", "read_events_resource", "register_resources"]
