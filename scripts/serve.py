#!/usr/bin/env python3
"""Run the Klondike play service with uvicorn."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from klondike.logging_utils import get_logger, setup_logging
from server.app import create_app
from server.config import ServerSettings

logger = get_logger("klondike.serve")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the Klondike REST API.")
    parser.add_argument("--host", type=str, default=None, help="Bind address (default: KLONDIKE_HOST or 127.0.0.1).")
    parser.add_argument("--port", type=int, default=None, help="Port (default: KLONDIKE_PORT or 3000).")
    parser.add_argument("--storage", choices=["memory", "file"], default=None)
    parser.add_argument("--data-dir", type=str, default=None, help="Directory for --storage file.")
    parser.add_argument("--deck-source", choices=["local", "api"], default=None)
    parser.add_argument("--rules", type=str, default=None, help="Path to a JSON rules file.")
    parser.add_argument("--log-level", type=str, default=None)
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    overrides = {
        "host": args.host,
        "port": args.port,
        "storage": args.storage,
        "data_dir": args.data_dir,
        "deck_source": args.deck_source,
        "rules_path": args.rules,
        "log_level": args.log_level,
    }
    base = ServerSettings.from_env()
    settings = ServerSettings.model_validate(
        {**base.model_dump(), **{key: value for key, value in overrides.items() if value is not None}}
    )
    setup_logging(settings.log_level)
    logger.info("Serving on %s:%d (storage=%s, deck=%s)", settings.host, settings.port, settings.storage, settings.deck_source)
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
