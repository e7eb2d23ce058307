#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
import logging
import sys

from .app import SnoozeApp
from .config import load_config, setup_logging

logger = logging.getLogger("snooze")


# --- Entrypoint ---
def main() -> None:
    parser = argparse.ArgumentParser(description="Hack or Snooze TUI Client")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    parser.add_argument("--base-url", type=str, help="Override the stories API base url")
    parser.add_argument(
        "--no-remember",
        action="store_true",
        help="Don't restore or store the login between runs",
    )
    args = parser.parse_args()

    debug_path = setup_logging(args.debug)
    if debug_path:
        print(f"Debug logging enabled: {debug_path}", file=sys.stderr)

    config = load_config()
    if args.base_url:
        config["base_url"] = args.base_url
    if args.no_remember:
        config["remember_login"] = False

    logger.info("Using API at %s", config.get("base_url"))

    try:
        app = SnoozeApp(config=config)
        app.run()
    except Exception as e:
        logger.exception("Application crashed: %s", e)
        print(f"Application crashed: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
