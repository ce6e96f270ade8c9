"""
Partial results handling for decoding many metrics at once.

One malformed metric must not cost the caller the rest of its dataset.
:func:`decode_all` applies an accessor to every metric, collecting decoded
values while recording failures.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Tuple

from ..domain.errors import (
    MissingRequiredFieldError,
    ProtocolError,
    ShapeMismatchError,
)
from ..domain.models import Metric

logger = logging.getLogger(__name__)


@dataclass
class FailureInfo:
    """
    Information about a metric that could not be decoded.

    Attributes
    ----------
    identifier : str
        Metric name
    error : str
        Error message
    error_type : str
        "shape_mismatch", "missing_field" or "decode_error"
    index : int
        Position of the metric in the decoded sequence
    """

    identifier: str
    error: str
    error_type: str
    index: int = -1


@dataclass
class PartialResult:
    """
    Result container for decodes that may partially fail.

    Attributes
    ----------
    successes : List[Tuple[Metric, Any]]
        Decoded metrics paired with their values, in input order. Metrics
        sharing a name (one per attribute set) each keep their own entry
    failures : List[FailureInfo]
        Information about metrics that failed
    """

    successes: List[Tuple[Metric, Any]] = field(default_factory=list)
    failures: List[FailureInfo] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        """Calculate success rate (0.0-1.0)."""
        total = len(self.successes) + len(self.failures)
        if total == 0:
            return 0.0
        return len(self.successes) / total

    @property
    def has_failures(self) -> bool:
        return len(self.failures) > 0

    @property
    def all_succeeded(self) -> bool:
        return len(self.failures) == 0 and len(self.successes) > 0

    def values(self) -> List[Any]:
        """Decoded values without their metrics."""
        return [value for _, value in self.successes]


def _error_type(exc: ProtocolError) -> str:
    if isinstance(exc, ShapeMismatchError):
        return "shape_mismatch"
    if isinstance(exc, MissingRequiredFieldError):
        return "missing_field"
    return "decode_error"


def decode_all(
    metrics: Iterable[Metric],
    accessor: Callable[[Metric], Any],
) -> PartialResult:
    """
    Apply ``accessor`` to every metric, isolating per-metric failures.

    Parameters
    ----------
    metrics : Iterable[Metric]
        Metrics to decode, e.g. ``dataset.resolved_metrics()``.
    accessor : Callable[[Metric], Any]
        Typically an unbound accessor such as ``Metric.numeric_value``.

    Returns
    -------
    PartialResult
        Decoded values and failure details. Only :class:`ProtocolError` is
        caught; anything else propagates.

    Examples
    --------
    >>> m = Metric(name="cpu", type="gauge", value=0.5)
    >>> decode_all([m], Metric.numeric_value).values()
    [0.5]
    """
    result = PartialResult()

    for index, metric in enumerate(metrics):
        try:
            metric.validate_name()
            result.successes.append((metric, accessor(metric)))
        except ProtocolError as exc:
            result.failures.append(
                FailureInfo(
                    identifier=metric.name,
                    error=str(exc),
                    error_type=_error_type(exc),
                    index=index,
                )
            )

    if result.has_failures:
        logger.warning(
            "partial_results.decode_failures",
            extra={
                "failed": len(result.failures),
                "succeeded": len(result.successes),
                "failed_metrics": [f.identifier for f in result.failures],
            },
        )

    return result
