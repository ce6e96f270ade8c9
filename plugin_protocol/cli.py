"""Command-line interface to inspect integration payloads.

Decodes a payload file the way the agent would (version check, legacy
promotion, common defaults) and prints one JSON line per metric with its
resolved time and decoded value, or the reason it could not be decoded.

Usage
-----
    plugin-protocol inspect payload.json
    plugin-protocol inspect - < payload.json
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, List, Optional

import orjson

from .adapters.payload import Payload, decode_payload
from .config.models import EnvSettings
from .domain.errors import ProtocolError
from .domain.models import DataV4, Metric
from .domain.utils.timestamps import Clock, to_iso8601
from .domain.values import MetricType
from .observability import setup_logging

logger = logging.getLogger(__name__)

_ACCESSORS: Dict[Optional[MetricType], Callable[[Metric], Any]] = {
    MetricType.GAUGE: Metric.numeric_value,
    MetricType.COUNT: Metric.numeric_value,
    MetricType.RATE: Metric.numeric_value,
    MetricType.CUMULATIVE_COUNT: Metric.numeric_value,
    MetricType.CUMULATIVE_RATE: Metric.numeric_value,
    MetricType.SUMMARY: Metric.summary_value,
    MetricType.PROMETHEUS_SUMMARY: Metric.prometheus_summary_value,
    MetricType.PROMETHEUS_HISTOGRAM: Metric.prometheus_histogram_value,
}


def describe_metric(metric: Metric, clock: Optional[Clock] = None) -> Dict[str, Any]:
    """Render a metric as a JSON-friendly dict with its decoded value."""
    row: Dict[str, Any] = {
        "name": metric.name,
        "type": metric.type,
        "attributes": metric.copy_attributes(),
    }
    try:
        metric.validate_name()
        row["time"] = to_iso8601(metric.time(clock))
        if metric.has_interval():
            row["interval_ms"] = (
                metric.interval_duration().total_seconds() * 1000.0
            )
    except ProtocolError as exc:
        row["error"] = str(exc)
        return row

    accessor = _ACCESSORS.get(metric.kind)
    if accessor is None:
        row["error"] = f"unknown metric type {metric.type}"
        return row
    try:
        value = accessor(metric)
    except ProtocolError as exc:
        row["error"] = str(exc)
        return row
    row["value"] = value.model_dump() if hasattr(value, "model_dump") else value
    return row


def iter_rows(
    payload: Payload, clock: Optional[Clock] = None
) -> Iterator[Dict[str, Any]]:
    """Yield one row per metric (v4) or metric sample (legacy payloads)."""
    if isinstance(payload, DataV4):
        for index, dataset in enumerate(payload.data):
            for metric in dataset.resolved_metrics():
                row = describe_metric(metric, clock)
                row["dataset"] = index
                row["entity"] = dataset.entity.name
                yield row
        return

    for index, legacy in enumerate(payload.data):
        for sample in legacy.metrics or []:
            row = sample.to_dict()
            row["dataset"] = index
            row["entity"] = legacy.entity.name
            yield row


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def inspect(path: str, settings: EnvSettings, out=None) -> int:
    """Decode the payload at ``path`` and print its metrics; return exit code."""
    out = out or sys.stdout
    try:
        payload = decode_payload(
            _read_input(path), supported=settings.supported_protocol_versions
        )
    except ProtocolError as exc:
        logger.error("cli.payload_rejected", extra={"path": path, "error": str(exc)})
        print(f"error: {exc}", file=sys.stderr)
        return 2

    rows: List[Dict[str, Any]] = list(iter_rows(payload))
    for row in rows:
        out.write(orjson.dumps(row, default=str).decode("utf-8") + "\n")
    logger.info("cli.inspected", extra={"path": path, "rows": len(rows)})
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entrypoint."""
    settings = EnvSettings()
    parser = argparse.ArgumentParser(description="Integration payload inspector")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"],
        help="Logging level (overrides environment)",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    inspect_parser = sub.add_parser("inspect", help="Decode a payload file")
    inspect_parser.add_argument("path", help="Payload file, or '-' for stdin")
    args = parser.parse_args(argv)

    setup_logging(args.log_level or settings.log_level)

    if args.command == "inspect":
        return inspect(args.path, settings)
    return 1  # pragma: no cover


if __name__ == "__main__":
    sys.exit(main())
