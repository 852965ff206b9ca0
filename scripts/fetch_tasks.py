#!/usr/bin/env python3
"""Run one Todoist fetch cycle and print the outcome.

Usage
-----
Set environment variables and run::

    export TODOIST_ACCESS_TOKEN="0123456789abcdef"
    export TODOIST_API_BASE="https://api.todoist.com"
    export TODOIST_API_VERSION="sync/v9"
    export TODOIST_ENDPOINT="sync"
    export TODOIST_RESOURCE_TYPE='["items"]'
    python scripts/fetch_tasks.py

Options::

    --resource-type SEL  Override TODOIST_RESOURCE_TYPE
    --debug              Log the full API response
    --output FILE        Write the outcome JSON to FILE instead of stdout
    --verbose, -v        Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from todofetch import FetchConfig, TodoistFetchAdapter  # noqa: E402


async def main() -> int:
    parser = argparse.ArgumentParser(description="Fetch the Todoist task list once and print the outcome.")
    parser.add_argument("--resource-type", help="Override TODOIST_RESOURCE_TYPE")
    parser.add_argument("--debug", action="store_true", help="Log the full API response")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    elif args.debug:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.resource_type:
        overrides["todoist_resource_type"] = args.resource_type
    if args.debug:
        overrides["debug"] = True
    config = FetchConfig.from_env(**overrides)

    received: list[tuple[str, dict[str, Any]]] = []

    async with TodoistFetchAdapter(on_notification=lambda name, payload: received.append((name, payload))) as adapter:
        await adapter.fetch(config)

    name, payload = received[0]
    if name == "TASKS":
        payload = {**payload, "accessToken": "<redacted>"}
    text = json.dumps({"notification": name, "payload": payload}, indent=2, default=str, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
        print(f"JSON written to {args.output}", file=sys.stderr)
    else:
        print(text)
    return 0 if name == "TASKS" else 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
