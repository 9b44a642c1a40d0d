"""Protean Engine runner for the ordering domain.

Processes events asynchronously when PROTEAN_ENV selects async event
processing (production): order notifications are then sent by the engine
instead of inline after each commit.

Usage:
    PROTEAN_ENV=production python src/server.py
    python src/server.py --test-mode   # drain pending messages and exit
"""

import argparse

from protean.server.engine import Engine

from ordering.domain import logger, ordering


def main():
    parser = argparse.ArgumentParser(description="Ordering engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    ordering.init()
    logger.info("Starting ordering engine", test_mode=args.test_mode)
    Engine(ordering, test_mode=args.test_mode).run()


if __name__ == "__main__":
    main()
