"""Pytest configuration for test suite.

Ensures the project root is on ``sys.path`` so ``import plugin_protocol``
resolves to the local sources regardless of the working directory pytest
chooses, and provides shared payload fixtures.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def _ensure_project_root_on_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        # Prepend to prefer local sources over site-packages
        sys.path.insert(0, project_root_str)


_ensure_project_root_on_syspath()


@pytest.fixture
def v4_document():
    """A protocol v4 payload with one dataset covering every metric type."""
    return {
        "protocol_version": "4",
        "integration": {"name": "com.example.redis", "version": "1.2.0"},
        "data": [
            {
                "common": {
                    "timestamp": 1697385600,
                    "interval.ms": 15000,
                    "attributes": {"env": "prod", "host": "common-host"},
                },
                "entity": {"name": "redis:6379", "type": "RedisInstance"},
                "metrics": [
                    {
                        "name": "redis.connections",
                        "type": "gauge",
                        "attributes": {"host": "metric-host"},
                        "value": 42,
                    },
                    {
                        "name": "redis.commands",
                        "type": "count",
                        "timestamp": 1697385660000,
                        "value": 1500,
                    },
                    {
                        "name": "redis.latency",
                        "type": "summary",
                        "value": {"count": 10, "min": 0.5, "max": 9.0, "sum": 30.5},
                    },
                    {
                        "name": "redis.request_duration",
                        "type": "prometheus-histogram",
                        "value": {
                            "sample_count": 6,
                            "sample_sum": 1.75,
                            "buckets": [
                                {"cumulative_count": 2, "upper_bound": 0.1},
                                {"cumulative_count": 6, "upper_bound": 1.0},
                            ],
                        },
                    },
                    {
                        "name": "redis.rpc_duration",
                        "type": "prometheus-summary",
                        "value": {
                            "sample_count": 4,
                            "sample_sum": 2.0,
                            "quantiles": [
                                {"quantile": 0.5, "value": 0.4},
                                {"quantile": 0.99, "value": 0.9},
                            ],
                        },
                    },
                ],
                "inventory": {"config/maxmemory": {"value": "1gb", "id": "maxmemory"}},
                "events": [{"summary": "restarted", "category": "redis"}],
            }
        ],
    }


@pytest.fixture
def v1_document():
    """A protocol v1 payload (single inlined dataset)."""
    return {
        "name": "nri-foo",
        "protocol_version": "1",
        "integration_version": "0.9.0",
        "integration_status": "ok",
        "metrics": [{"event_type": "FooSample", "foo.count": 3}],
        "inventory": {"foo": {"version": "1.0"}},
        "events": [{"summary": "foo started"}],
    }
