"""Command-line entry point.

Usage
-----
Optionally export an API key and run::

    export CC_API_KEY="your-key"
    pyccsync BTC USD 2023-01-01

The dataset is kept in ``<data-dir>/<SYM1>_<SYM2>_cc.json`` and extended on
every run, both backwards toward the start date and forward to the current
hour.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pyccsync._constants import DATE_DISPLAY_FORMAT, HOUR_SECONDS
from pyccsync.client import CcClient, MockFetcher
from pyccsync.config import SyncConfig
from pyccsync.dataset import missing_timestamps
from pyccsync.exceptions import CcConfigError, CcError, SyncAbortedError
from pyccsync.planner import format_timestamp
from pyccsync.storage import JsonFileRepository
from pyccsync.sync import BatchReport, SyncDriver, SyncResult

_logger = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pyccsync",
        description="Fetch hourly history for a currency pair into a local JSON file.",
    )
    parser.add_argument("sym1", help="Base symbol (e.g. BTC)")
    parser.add_argument("sym2", help="Quote symbol (e.g. USD)")
    parser.add_argument("start_date", help="Oldest date to cover, ISO 8601 (e.g. 2023-01-01)")
    parser.add_argument("--data-dir", type=Path, help="Directory of the dataset file (default: CC_DATA_DIR or .)")
    parser.add_argument("--max-units", type=int, help="Hours requested per batch, 1-2000 (default: 2000)")
    parser.add_argument("--mock", action="store_true", help="Use the offline mock fetcher instead of the API")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _build_config(args: argparse.Namespace) -> SyncConfig:
    overrides: dict[str, Any] = {
        "sym1": args.sym1,
        "sym2": args.sym2,
        "start_date": args.start_date,
    }
    if args.data_dir is not None:
        overrides["data_dir"] = args.data_dir
    if args.max_units is not None:
        overrides["max_units_in_batch"] = args.max_units
    return SyncConfig.from_env(**overrides)


def _print_batch(report: BatchReport) -> None:
    print(
        f"  batch until {format_timestamp(report.plan.to_date)}: "
        f"{report.fetched} fetched, {report.added} new, {report.dataset_size} total"
    )


def _print_summary(result: SyncResult) -> None:
    print()
    print(f"Batches    : {result.iterations}")
    print(f"Added      : {result.added}")
    print(f"Total      : {len(result.dataset)}")
    if result.dataset:
        print(f"Coverage   : {format_timestamp(result.dataset[-1].timestamp)} .. {format_timestamp(result.dataset[0].timestamp)}")
    holes = missing_timestamps(result.dataset, result.target.start, result.target.end, HOUR_SECONDS)
    if holes:
        print(f"Missing    : {len(holes)} hours inside the target range (first {format_timestamp(holes[0])})")


async def _run(config: SyncConfig, *, mock: bool) -> SyncResult:
    repository = JsonFileRepository(config.data_path)
    if mock:
        driver = SyncDriver(config, MockFetcher(config), repository, on_batch=_print_batch)
        return await driver.run()
    async with CcClient(config) as client:
        driver = SyncDriver(config, client, repository, on_batch=_print_batch)
        return await driver.run()


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    try:
        config = _build_config(args)
    except CcConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    print(
        f"--- Fetching cryptocompare data for {config.pair} from "
        f"{config.start_date.strftime(DATE_DISPLAY_FORMAT)} until now ---"
    )
    print()

    try:
        result = asyncio.run(_run(config, mock=args.mock))
    except SyncAbortedError as exc:
        _logger.debug("Run aborted", exc_info=True)
        print(f"error: {exc} (to_date={exc.to_date}, unit_count={exc.unit_count})", file=sys.stderr)
        return 1
    except CcError as exc:
        _logger.debug("Run failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _print_summary(result)
    print()
    print("----------- DONE -----------")
    return 0


if __name__ == "__main__":
    sys.exit(main())
