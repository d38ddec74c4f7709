import logging

import httpx
import pytest
import respx
from amplitude_mcp.core.client import AmplitudeClientError
from amplitude_mcp.core.logging import LogfmtFormatter
from amplitude_mcp.core.observability import log_event
from amplitude_mcp.core.operations import run_operation


@pytest.mark.asyncio
@respx.mock
async def test_op_call_logged_success(client, caplog):
    respx.get("https://amplitude.com/api/2/events/list").mock(
        return_value=httpx.Response(200, json={"data": []})
    )

    with caplog.at_level(logging.INFO, logger="amplitude_mcp.observability"):
        async with client:
            await run_operation(client, "get_events_list")

    record = next(r for r in caplog.records if r.getMessage() == "op_call")
    assert record.tool == "get_events_list"
    assert record.method == "GET"
    assert record.endpoint == "/api/2/events/list"
    assert record.status == 200
    assert record.duration_ms >= 0


@pytest.mark.asyncio
@respx.mock
async def test_op_call_logged_on_transport_error(client, caplog):
    respx.get("https://amplitude.com/api/2/events/list").mock(
        side_effect=httpx.ConnectError("boom")
    )

    with caplog.at_level(logging.INFO, logger="amplitude_mcp.observability"):
        async with client:
            with pytest.raises(AmplitudeClientError):
                await run_operation(client, "get_events_list")

    record = next(r for r in caplog.records if r.getMessage() == "op_call")
    assert record.status == "exception"
    assert record.error_type == "ConnectError"


@pytest.mark.asyncio
@respx.mock
async def test_credentials_never_logged(client, caplog):
    respx.get("https://amplitude.com/api/2/annotations").mock(
        return_value=httpx.Response(401, text="Invalid credentials")
    )

    with caplog.at_level(logging.DEBUG):
        async with client:
            with pytest.raises(AmplitudeClientError):
                await run_operation(client, "get_all_annotations")

    formatter = LogfmtFormatter()
    for record in caplog.records:
        line = formatter.format(record)
        assert "mock-key" not in line
        assert "mock-secret" not in line
        assert "Basic " not in line


def test_log_event_drops_secret_and_reserved_keys(caplog):
    logger = logging.getLogger("amplitude_mcp.test")

    with caplog.at_level(logging.INFO, logger="amplitude_mcp.test"):
        log_event(
            "custom",
            logger,
            tool="get_chart",
            api_key="k",
            Authorization="Basic abc",
            msg="clobber",
        )

    record = caplog.records[-1]
    assert record.getMessage() == "custom"
    assert record.tool == "get_chart"
    assert not hasattr(record, "api_key")
    assert not hasattr(record, "Authorization")


def test_logfmt_formatter_quotes_values():
    record = logging.LogRecord(
        "amplitude_mcp.core.client", logging.WARNING, __file__, 1, "op_call", None, None
    )
    record.endpoint = "/api/3/chart/a b/csv"
    record.status = 500

    line = LogfmtFormatter().format(record)

    assert line.startswith("level=warning logger=amplitude_mcp.core.client event=op_call")
    assert 'endpoint="/api/3/chart/a b/csv"' in line
    assert "status=500" in line
