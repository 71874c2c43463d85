from __future__ import annotations

import argparse
import logging
import sys
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from starmap.app import ingest_systems
from starmap.config import ConfigurationError, IngestConfig, configure_logging, get_ingest_config

if TYPE_CHECKING:
    from collections.abc import Sequence

    from starmap.domain.ingestion import IngestionReport

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Ingest star systems from the catalog into the graph store"
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        help="Maximum number of systems processed at once (defaults to config)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every stored system",
    )
    return parser.parse_args(list(argv))


def _log_summary(report: IngestionReport) -> None:
    for system_id in sorted(report.succeeded):
        log.info("ok     %s", system_id)
    for system_id in sorted(report.failed):
        log.info(
            "failed %s [%s] %s",
            system_id,
            report.failed[system_id],
            report.reasons.get(system_id, ""),
        )
    if report.skipped:
        log.info("skipped %s systems after shutdown request", len(report.skipped))
    log.info(
        "Summary: %s succeeded, %s failed, %s skipped",
        len(report.succeeded),
        len(report.failed),
        len(report.skipped),
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        ingest = (
            IngestConfig(max_concurrency=parsed_args.max_concurrency)
            if parsed_args.max_concurrency is not None
            else get_ingest_config()
        )
    except ConfigurationError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        report = ingest_systems(ingest=ingest)
    except Exception:
        log.exception("Fatal error during ingest")
        sys.exit(1)

    _log_summary(report)


if __name__ == "__main__":
    main()
