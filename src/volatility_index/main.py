"""Entry point for the volatility index application.

Usage:
    volatility-index replay data/btc_usd.jsonl
    volatility-index replay data/btc_usd.jsonl --config config/volatility.yaml
    volatility-index replay data/btc_usd.jsonl --lookback-days 7 --log-level DEBUG
"""

from __future__ import annotations

import argparse
import csv
import logging
import sys
from typing import TextIO

from pydantic import ValidationError

from volatility_index.core.config import AppConfig, load_config
from volatility_index.domain.errors import ConfigurationError, VolatilityIndexError
from volatility_index.domain.types import SeriesPoint
from volatility_index.feed.handler import VolatilityIndexHandler
from volatility_index.feed.loader import FeedRecordingLoader


def setup_logging(level: str, log_file: str | None = None) -> None:
    """Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to
    """
    # stdout carries the CSV output
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        handlers=handlers,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Rolling volatility index",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    replay = subparsers.add_parser(
        "replay",
        help="Replay a recorded feed and print the price and volatility series",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    replay.add_argument(
        "recording",
        type=str,
        help="Path to a JSON Lines feed recording",
    )

    replay.add_argument(
        "--config",
        "-c",
        type=str,
        help="Path to configuration file",
    )

    replay.add_argument(
        "--lookback-days",
        type=float,
        help="Volatility lookback in days (overrides config)",
    )

    replay.add_argument(
        "--log-level",
        "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (overrides config)",
    )

    replay.add_argument(
        "--log-file",
        type=str,
        help="Log file path",
    )

    replay.add_argument(
        "--dry-run",
        action="store_true",
        help="Load config and validate without replaying",
    )

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> AppConfig:
    """Build configuration from file and command line args.

    Args:
        args: Parsed command line arguments

    Returns:
        Merged configuration

    Raises:
        ConfigurationError: If an override fails validation
    """
    config = load_config(args.config)

    if args.lookback_days is not None:
        config.estimator.lookback_days = args.lookback_days

    if args.log_level:
        config.log_level = args.log_level

    if args.log_file:
        config.log_file = args.log_file

    # Re-validate so overrides get the same checks as the file
    try:
        return AppConfig.model_validate(config.model_dump())
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"])
        raise ConfigurationError(f"{field}: {error['msg']}", field=field) from e


def replay(config: AppConfig, recording: str, out: TextIO) -> int:
    """Replay a recording through the handler.

    Args:
        config: Application configuration
        recording: Path to the JSON Lines recording
        out: Stream receiving time,price,volatility CSV rows

    Returns:
        Number of price points written
    """
    handler = VolatilityIndexHandler(config.estimator, config.feed)
    loader = FeedRecordingLoader()
    writer = csv.writer(out)
    writer.writerow(["time", "price", "volatility"])
    rows = 0

    def write_row(point: SeriesPoint) -> None:
        nonlocal rows
        latest = handler.latest_volatility
        volatility = latest.value if latest and latest.time == point.time else ""
        writer.writerow([point.time, point.value, volatility])
        rows += 1

    handler.on_price(write_row)

    for message in loader.load_messages(recording):
        handler.process_message(message)

    return rows


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    try:
        config = build_config(args)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(config.log_level, config.log_file)

    logger = logging.getLogger(__name__)
    logger.info("Volatility index starting")
    logger.info(f"Lookback: {config.estimator.lookback_days} days")
    logger.info(f"Channel: {config.feed.channel}")

    if args.dry_run:
        logger.info("Dry run - configuration valid")
        return 0

    try:
        rows = replay(config, args.recording, sys.stdout)
    except FileNotFoundError as e:
        logger.error(f"Recording not found: {e.filename}")
        return 1
    except VolatilityIndexError as e:
        logger.error(f"Replay failed: {e}", exc_info=True)
        return 1

    logger.info(f"Replay complete: {rows} points")
    return 0


if __name__ == "__main__":
    sys.exit(main())
