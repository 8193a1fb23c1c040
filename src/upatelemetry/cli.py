"""``upa-dashboard``: run the telemetry client and its JSON API.

Usage
-----
::

    export UPA_STATS_URL="https://example.org/upa-stats.json"   # optional
    upa-dashboard --port 8000

Options::

    --host HOST     Bind address (default: UPA_HOST or 127.0.0.1)
    --port PORT     Bind port (default: UPA_PORT or 8000)
    --no-feed       Skip the Lightstreamer feed, serve side panels only
    --verbose / -v  Enable debug logging
"""

from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Any

from aiohttp import web

from upatelemetry.client import DashboardClient
from upatelemetry.config import DashboardConfig
from upatelemetry.exceptions import UpaConfigError
from upatelemetry.server import create_app

_logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="ISS Urine Processing Assembly telemetry dashboard")
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Bind port")
    parser.add_argument("--no-feed", action="store_true", help="Disable the Lightstreamer push feed")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> DashboardConfig:
    overrides: dict[str, Any] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.no_feed:
        overrides["feed_enabled"] = False
    return DashboardConfig.from_env(**overrides)


async def run(config: DashboardConfig) -> None:
    async with DashboardClient(config) as client:
        app = create_app(
            client.state,
            config,
            position=client.position_source(),
            crew=client.crew_source(),
            news=client.news_source(),
        )
        runner = web.AppRunner(app)
        await runner.setup()
        site = web.TCPSite(runner, config.host, config.port)
        await site.start()
        _logger.info("Serving dashboard API on http://%s:%d/api/telemetry", config.host, config.port)

        await client.start()
        try:
            await asyncio.Event().wait()
        finally:
            await client.stop()
            await runner.cleanup()


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        config = build_config(args)
    except UpaConfigError as exc:
        _logger.error("Invalid configuration: %s", exc)
        return 2
    try:
        asyncio.run(run(config))
    except KeyboardInterrupt:
        _logger.info("Stopped.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
