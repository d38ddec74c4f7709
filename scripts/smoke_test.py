from __future__ import annotations

import asyncio
import os
import sys
from datetime import datetime, timedelta, timezone
from typing import Optional

from amplitude_mcp.core.client import AmplitudeClient
from amplitude_mcp.core.config import load_config
from amplitude_mcp.core.errors import AmplitudeClientError, MissingCredentialsError
from amplitude_mcp.core.operations import run_operation


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    return val if val else default


def _print_step(title: str) -> None:
    print(f"\n== {title}")


def _fail(msg: str) -> int:
    print(f"FAILED: {msg}")
    return 1


async def run_smoke_test() -> int:
    # --- Config ---
    try:
        config = load_config([])
    except MissingCredentialsError as exc:
        return _fail(str(exc))

    today = datetime.now(timezone.utc)
    start = (today - timedelta(days=7)).strftime("%Y%m%d")
    end = today.strftime("%Y%m%d")
    export_hour = _env("SMOKE_TEST_EXPORT_HOUR")

    print("Config:")
    print(f"  base_url: {config.base_url}")
    print(f"  range: {start}..{end}")
    print(f"  export_hour: {export_hour}")

    async with AmplitudeClient.from_config(config) as client:
        # --- Events list ---
        _print_step("List events")
        try:
            result = await run_operation(client, "get_events_list")
        except AmplitudeClientError as exc:
            return _fail(exc.message)
        payload = result.payload if isinstance(result.payload, dict) else {}
        events = payload.get("data", [])
        print(f"{len(events)} events visible")

        # --- Active users ---
        _print_step("Active users")
        try:
            result = await run_operation(
                client, "get_active_users", {"start": start, "end": end}
            )
        except AmplitudeClientError as exc:
            return _fail(exc.message)
        print(result.summary)

        # --- Export (optional) ---
        _print_step("Export")
        if export_hour:
            try:
                result = await run_operation(
                    client,
                    "export_events",
                    {"start": export_hour, "end": export_hour, "limit": 5},
                )
            except AmplitudeClientError as exc:
                return _fail(exc.message)
            print(result.summary)
        else:
            print("Export skipped (set SMOKE_TEST_EXPORT_HOUR=YYYYMMDDTHH to run).")

    print("\nPASSED smoke test.")
    return 0


def main() -> None:
    exit_code = asyncio.run(run_smoke_test())
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
