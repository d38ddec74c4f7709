from __future__ import annotations

import asyncio
import logging
from typing import Optional, Sequence, Tuple

from mcp.server.fastmcp import FastMCP

from amplitude_mcp.core.client import AmplitudeClient
from amplitude_mcp.core.config import AmplitudeConfig, load_config
from amplitude_mcp.core.logging import setup_logging
from amplitude_mcp.registry import register_operations
from amplitude_mcp.resources import register_resources

log = logging.getLogger("amplitude_mcp.server")


def build_app(config: AmplitudeConfig) -> Tuple[FastMCP, AmplitudeClient]:
    """Create the FastMCP app with every tool and resource bound to one client."""
    client = AmplitudeClient.from_config(config)

    app = FastMCP("amplitude-mcp")
    register_operations(app, lambda: client)
    register_resources(app, lambda: client)
    return app, client


# --- Entry point ----------------------------------------------------------- #


async def main(argv: Optional[Sequence[str]] = None) -> None:
    setup_logging()
    try:
        config = load_config(argv)
    except ValueError as exc:
        log.error("Failed to load configuration: %s", exc)
        raise SystemExit(1) from exc

    setup_logging(config.log_level)
    app, client = build_app(config)
    log.info("Amplitude MCP server ready on stdio (region=%s)", config.region)

    try:
        await app.run_stdio_async()
    finally:
        await client.aclose()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
