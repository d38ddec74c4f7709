import json

import pytest
import respx
from amplitude_mcp.core.client import AmplitudeHTTPError
from amplitude_mcp.resources import (
    EVENTS_RESOURCE_URI,
    read_events_resource,
    register_resources,
)
from httpx import Response
from mcp.server.fastmcp import FastMCP


@pytest.mark.asyncio
@respx.mock
async def test_read_events_resource_decodes_event_type(client):
    route = respx.get("https://amplitude.com/api/2/events/segmentation").mock(
        return_value=Response(200, json={"data": {"series": [[3]]}})
    )

    async with client:
        text = await read_events_resource(client, "Sign%20Up", "20240101", "20240107")

    assert route.calls[0].request.url.params.get("e") == '{"event_type":"Sign Up"}'
    assert json.loads(text) == {"data": {"series": [[3]]}}


@pytest.mark.asyncio
@respx.mock
async def test_read_events_resource_propagates_api_errors(client):
    respx.get("https://amplitude.com/api/2/events/segmentation").mock(
        return_value=Response(400, json={"error": "Unknown event"})
    )

    async with client:
        with pytest.raises(AmplitudeHTTPError) as exc:
            await read_events_resource(client, "Nope", "20240101", "20240107")

    assert exc.value.message.endswith("Amplitude API error: Unknown event")


@pytest.mark.asyncio
@respx.mock
async def test_resource_template_registered_on_fastmcp(client):
    respx.get("https://amplitude.com/api/2/events/segmentation").mock(
        return_value=Response(200, json={"data": {}})
    )
    app = FastMCP("test")
    register_resources(app, lambda: client)

    templates = await app.list_resource_templates()
    assert [t.uriTemplate for t in templates] == [EVENTS_RESOURCE_URI]
    assert templates[0].name == "amplitude_events"

    async with client:
        contents = list(
            await app.read_resource("amplitude://events/Purchase/20240101/20240131")
        )

    assert json.loads(contents[0].content) == {"data": {}}
