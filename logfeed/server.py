#!/usr/bin/env python3
"""CLI entrypoint for running the log feed service with Uvicorn."""

from __future__ import annotations

import argparse
import logging
from typing import List, Optional

import uvicorn

from .config import Settings, get_settings
from .logging_config import configure_logging

LOG_LEVELS = ("debug", "info", "warning", "error")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logfeed-server",
        description="Serve the live request log feed for the gateway dashboard",
    )
    parser.add_argument("--host", default=settings.server_host, help=f"Host to bind (default: {settings.server_host})")
    parser.add_argument(
        "--port",
        type=int,
        default=settings.server_port,
        help=f"Port to bind (default: {settings.server_port})",
    )
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default="info", help="Log level (default: info)")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    settings = get_settings()
    args = build_parser(settings).parse_args(argv)

    configure_logging(getattr(logging, args.log_level.upper()))
    # Feed polling would flood the access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("watchfiles.main").setLevel(logging.WARNING)

    # Import string so --reload can re-import the app
    uvicorn.run(
        "logfeed.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
        access_log=False,
    )


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
