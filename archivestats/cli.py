"""
archivestats command line - run the page count strategies and compare them
"""
import argparse
import logging
import sys
from typing import List, Optional

from .aggregator import STRATEGIES, PageCountAggregator
from .client import Client
from .config import configure_logging, load_settings
from .errors import ConfigurationError, ConnectionFailure, QueryExecutionError
from .timing import measure, untimed

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG = 1
EXIT_CONNECTION = 2
EXIT_QUERY = 3
EXIT_MISMATCH = 4


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="archivestats",
        description="Compute an archive's total page count locally and in the store.",
    )
    parser.add_argument("--url", help="store URL (env: ARCHIVESTATS_URL)")
    parser.add_argument("--database", help="database name (env: ARCHIVESTATS_DATABASE)")
    parser.add_argument("--collection", help="entry collection (env: ARCHIVESTATS_COLLECTION)")
    parser.add_argument("--timeout", type=float, help="request timeout in seconds")
    parser.add_argument(
        "--strategy",
        action="append",
        choices=STRATEGIES,
        help="strategy to run; repeat for several (default: all)",
    )
    parser.add_argument("--no-timing", action="store_true", help="do not measure durations")
    parser.add_argument("--log-level", help="logging level (env: LOG_LEVEL)")
    return parser


def format_measurement(measurement) -> str:
    line = f"{measurement.label}: {measurement.result}"
    if measurement.elapsed_ms is not None:
        line += f" ({measurement.elapsed_ms:.2f} ms)"
    return line


def run(aggregator: PageCountAggregator, strategies, wrapper=measure, out=None) -> int:
    """
    Run ``strategies`` one after another and print each result.

    Args:
        aggregator: Aggregator bound to the entry collection
        strategies: Strategy names, in run order
        wrapper: ``measure`` or ``untimed``; called as ``wrapper(label, func)``
        out: Output stream (default: stdout)

    Returns:
        Process exit code
    """
    out = out or sys.stdout
    results = []
    for name in strategies:
        measurement = wrapper(name, aggregator.strategy(name))
        print(format_measurement(measurement), file=out)
        results.append(measurement.result)

    if len(results) > 1:
        if len(set(results)) == 1:
            print(f"all strategies agree: {results[0]}", file=out)
        else:
            print("strategies disagree: " + ", ".join(map(str, results)), file=out)
            return EXIT_MISMATCH
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
        configure_logging(args.log_level or settings.log_level)
        client = Client.from_url(
            args.url or settings.url,
            timeout=args.timeout if args.timeout is not None else settings.timeout,
            database=args.database or settings.database,
        )
    except ConfigurationError as e:
        print(f"error: {e}", file=sys.stderr)
        return EXIT_CONFIG

    strategies = args.strategy or list(STRATEGIES)
    wrapper = untimed if args.no_timing else measure

    with client:
        collection = client.collection(args.collection or settings.collection)
        logger.info("Computing total page count of %s via %s", collection.full_name, client.base_url)
        try:
            return run(PageCountAggregator(collection), strategies, wrapper)
        except ConnectionFailure as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_CONNECTION
        except QueryExecutionError as e:
            print(f"error: {e}", file=sys.stderr)
            return EXIT_QUERY


if __name__ == "__main__":
    sys.exit(main())
