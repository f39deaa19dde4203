"""Command line entrypoint for running the FitLockr services locally."""

from __future__ import annotations

import argparse
from typing import List, Optional

import uvicorn

from fitlockr_app.config import AppConfig
from fitlockr_app.logging_config import configure_logging
from server.ticketing_api import create_ticketing_asgi
from server.wardrobe_api import create_wardrobe_app
from storage.seed_events import main as seed_events_main


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fitlockr", description="Run the FitLockr services.")
    subcommands = parser.add_subparsers(dest="command", required=True)

    wardrobe = subcommands.add_parser("serve-wardrobe", help="Run the wardrobe REST service")
    wardrobe.add_argument("--host", default="0.0.0.0")
    wardrobe.add_argument("--port", type=int, default=None)

    ticketing = subcommands.add_parser("serve-ticketing", help="Run the ticketing service and chat relay")
    ticketing.add_argument("--host", default="0.0.0.0")
    ticketing.add_argument("--port", type=int, default=None)

    subcommands.add_parser("seed-events", help="Upsert the sample events into the ticketing store")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging()
    config = AppConfig.from_env()

    if args.command == "serve-wardrobe":
        uvicorn.run(create_wardrobe_app(config), host=args.host, port=args.port or config.wardrobe_port)
    elif args.command == "serve-ticketing":
        uvicorn.run(create_ticketing_asgi(config), host=args.host, port=args.port or config.ticketing_port)
    elif args.command == "seed-events":
        seed_events_main(config)


if __name__ == "__main__":
    main()
