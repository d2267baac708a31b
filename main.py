#!/usr/bin/env python3
"""Main entry point for the World Explorer application."""

import logging
import sys

from world_explorer.services.config_service import load_config

logger = logging.getLogger(__name__)


def main() -> None:
    """Main application entry point."""
    config = load_config()
    logging.basicConfig(level=getattr(logging, config.log_level, logging.INFO))
    try:
        # Import lazily so a missing Qt install is reported through logging
        from world_explorer.ui.pyside_main_window import run_app
        run_app(config)
    except Exception:
        logger.exception("Error starting application")
        sys.exit(1)


if __name__ == "__main__":
    main()
