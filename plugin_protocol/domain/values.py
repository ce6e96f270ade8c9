"""Metric type tags, typed value shapes and the metric value decoder.

A metric carries its value as opaque JSON. The type tag decides which shape
that JSON must have, but nothing is decoded until a caller asks for one
specific shape through an accessor. Asking for the wrong shape is always a
:class:`~plugin_protocol.domain.errors.ShapeMismatchError`; a right-tag value
with the wrong content is a :class:`~plugin_protocol.domain.errors.ValueDecodeError`.
Nothing is ever coerced, so a histogram's bucket list can never be read as a
bare number.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, FrozenSet, List, Optional, Type, TypeVar

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    StrictFloat,
    TypeAdapter,
    ValidationError,
)

from .errors import ShapeMismatchError, ValueDecodeError


class MetricType(str, Enum):
    """Known metric type tags.

    The wire tag is open-ended: metrics keep their raw tag string, and
    :meth:`parse` maps it onto one of these members or ``None``.
    """

    COUNT = "count"
    SUMMARY = "summary"
    GAUGE = "gauge"
    RATE = "rate"
    CUMULATIVE_COUNT = "cumulative-count"
    CUMULATIVE_RATE = "cumulative-rate"
    PROMETHEUS_SUMMARY = "prometheus-summary"
    PROMETHEUS_HISTOGRAM = "prometheus-histogram"

    @classmethod
    def parse(cls, raw: str) -> Optional["MetricType"]:
        try:
            return cls(raw)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value


NUMERIC_TYPES: FrozenSet[str] = frozenset(
    {
        MetricType.GAUGE.value,
        MetricType.COUNT.value,
        MetricType.RATE.value,
        MetricType.CUMULATIVE_RATE.value,
        MetricType.CUMULATIVE_COUNT.value,
    }
)

INTERVAL_TYPES: FrozenSet[str] = frozenset(
    {MetricType.COUNT.value, MetricType.SUMMARY.value}
)


def has_interval(metric_type: str) -> bool:
    """Return True when ``interval.ms`` is meaningful for ``metric_type``.

    Only counts and summaries aggregate over an interval; any interval sent
    with other types is producer noise.
    """
    return str(metric_type) in INTERVAL_TYPES


class _ValueShape(BaseModel):
    # strict: JSON strings and booleans are never read as numbers
    model_config = ConfigDict(frozen=True, strict=True)


class SummaryValue(_ValueShape):
    """Pre-aggregated summary of the samples seen in one interval."""

    count: float
    min: float
    max: float
    sum: float


class Bucket(_ValueShape):
    """One cumulative histogram bucket.

    ``upper_bound`` is the inclusive upper bound of the bucket.
    """

    cumulative_count: Optional[float] = None
    upper_bound: Optional[float] = None


class PrometheusHistogramValue(_ValueShape):
    """Prometheus histogram.

    Buckets are expected in strictly increasing ``upper_bound`` order. That is
    the producer's contract; decoding accepts any order.
    """

    sample_count: Optional[NonNegativeInt] = None
    sample_sum: Optional[float] = None
    buckets: Optional[List[Optional[Bucket]]] = None


class Quantile(_ValueShape):
    quantile: float = 0.0
    value: float = 0.0


class PrometheusSummaryValue(_ValueShape):
    """Prometheus summary.

    Producers omit zero-valued fields, so absent fields decode as zero.
    """

    sample_count: float = 0.0
    sample_sum: float = 0.0
    quantiles: List[Quantile] = Field(default_factory=list)


_ShapeT = TypeVar("_ShapeT", bound=BaseModel)

_numeric_adapter: TypeAdapter[float] = TypeAdapter(StrictFloat)


def _check_type(metric_type: str, accepted: FrozenSet[str]) -> None:
    if str(metric_type) not in accepted:
        raise ShapeMismatchError(str(metric_type), sorted(accepted))


def _validate_shape(shape: Type[_ShapeT], raw: Any, metric_type: str) -> _ShapeT:
    try:
        return shape.model_validate(raw)
    except ValidationError as exc:
        raise ValueDecodeError(
            f"invalid {metric_type} value: {exc.error_count()} validation error(s)"
        ) from exc


def decode_numeric(metric_type: str, raw: Any) -> float:
    """Decode a gauge/count/rate value (including the cumulative variants)."""
    _check_type(metric_type, NUMERIC_TYPES)
    try:
        return float(_numeric_adapter.validate_python(raw))
    except ValidationError as exc:
        raise ValueDecodeError(
            f"invalid {metric_type} value: expected a number, got {type(raw).__name__}"
        ) from exc


def decode_summary(metric_type: str, raw: Any) -> SummaryValue:
    _check_type(metric_type, frozenset({MetricType.SUMMARY.value}))
    return _validate_shape(SummaryValue, raw, metric_type)


def decode_prometheus_summary(metric_type: str, raw: Any) -> PrometheusSummaryValue:
    _check_type(metric_type, frozenset({MetricType.PROMETHEUS_SUMMARY.value}))
    return _validate_shape(PrometheusSummaryValue, raw, metric_type)


def decode_prometheus_histogram(
    metric_type: str, raw: Any
) -> PrometheusHistogramValue:
    _check_type(metric_type, frozenset({MetricType.PROMETHEUS_HISTOGRAM.value}))
    return _validate_shape(PrometheusHistogramValue, raw, metric_type)
