from __future__ import annotations

"""Command-line host that publishes a saved execution report."""

import argparse
import json
import logging
import os
import sys
from importlib.metadata import PackageNotFoundError, version

from talaiot.adapters.executor_pool import ThreadPoolExecutorAdapter
from talaiot.adapters.store_memory import InMemoryStoreClient
from talaiot.core.config import InfluxDbPublisherConfiguration
from talaiot.core.errors import ConfigurationError
from talaiot.core.logging_setup import parse_log_level, setup_logging
from talaiot.core.publisher import InfluxDbPublisher
from talaiot.core.report_io import load_report
from talaiot.ports.publisher import Publisher


logger = logging.getLogger(__name__)


def _package_version() -> str:
    try:
        return version("talaiot-influxdb")
    except PackageNotFoundError:
        return "0+unknown"


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean from the environment with a safe default."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes"}


def _log_level(value: str) -> int:
    level = parse_log_level(value)
    if level is None:
        raise argparse.ArgumentTypeError(f"Unknown log level: {value}")
    return level


def publish_command(args: argparse.Namespace) -> int:
    """Publish one report, then wait for the pending writes to finish."""
    try:
        configuration = InfluxDbPublisherConfiguration.from_file(args.config)
        configuration.validate()
    except ConfigurationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    logger.debug("Publisher configuration: %s", configuration.snapshot())

    try:
        report = load_report(args.report)
    except (OSError, ValueError) as exc:
        print(f"Unable to load report {args.report}: {exc}", file=sys.stderr)
        return 2

    dry_run_store = InMemoryStoreClient() if args.dry_run else None
    executor = ThreadPoolExecutorAdapter(max_workers=args.workers)

    # The pool drains before the publisher closes the client it built.
    with InfluxDbPublisher(configuration, executor, dry_run_store) as influx_publisher:
        publisher: Publisher = influx_publisher
        with executor:
            publisher.publish(report)

    if dry_run_store is not None:
        for write in dry_run_store.writes:
            for point in write.points:
                print(
                    json.dumps(
                        {
                            "database": write.database,
                            "retention_policy": write.retention_policy,
                            "measurement": point.measurement,
                            "fields": dict(point.fields),
                        }
                    )
                )

    logger.info("Publish complete for %d task(s)", len(report.tasks))
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint and command registration."""
    parser = argparse.ArgumentParser(prog="talaiot")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR); defaults to TALAIOT_LOG_LEVEL",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    publish_parser = subparsers.add_parser("publish", help="Publish an execution report")
    publish_parser.add_argument("--config", required=True, help="Path to publisher YAML/JSON configuration")
    publish_parser.add_argument("--report", required=True, help="Path to execution report JSON")
    publish_parser.add_argument(
        "--dry-run",
        action="store_true",
        default=_env_bool("TALAIOT_DRY_RUN", False),
        help="Print the points instead of writing them",
    )
    publish_parser.add_argument("--workers", type=int, default=2, help="Writer threads")
    publish_parser.set_defaults(func=publish_command)

    args = parser.parse_args(argv)
    setup_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
