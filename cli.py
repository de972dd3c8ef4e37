#!/usr/bin/env python3
import argparse
import logging
import sys
from typing import Optional

from rich.console import Console
from rich.text import Text

from stock_monitor import ConfigError, QuoteSource, StockMonitor
from stock_monitor.config import DEFAULT_CONFIG_FILE

logger = logging.getLogger(__name__)
console = Console()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="stock-monitor",
        description="Refreshing terminal dashboard for a stock portfolio.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_FILE,
        help=f"holdings/settings file (default: {DEFAULT_CONFIG_FILE})",
    )
    parser.add_argument(
        "-p",
        "--provider",
        choices=[s.value for s in QuoteSource],
        default=QuoteSource.SINA.value,
        help="quote provider used when the config file names none",
    )
    parser.add_argument(
        "--once", action="store_true", help="draw a single frame and exit"
    )
    parser.add_argument("--log-file", help="write log records to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
    )
    return parser.parse_args(argv)


def configure_logging(log_file: Optional[str], level: str) -> None:
    """Send logs to a file, or drop them; the dashboard owns the terminal."""
    if log_file:
        logging.basicConfig(filename=log_file, level=level, format=LOG_FORMAT)
    else:
        logging.basicConfig(handlers=[logging.NullHandler()], level=level)


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for the CLI application."""
    args = parse_args(argv)
    configure_logging(args.log_file, args.log_level)

    try:
        monitor = StockMonitor(
            args.config,
            default_source=QuoteSource(args.provider),
            width=console.width,
        )
        monitor.run(max_cycles=1 if args.once else None)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        console.print(Text(str(e), style="bold red"))
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())
