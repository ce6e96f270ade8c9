"""Error taxonomy for payload decoding.

Every failure raised by this package derives from :class:`ProtocolError` so
ingestion code can isolate a bad metric, event or dataset with a single
``except`` clause. Each class also inherits the closest builtin exception so
callers that only know about ``TypeError``/``ValueError``/``KeyError`` still
catch them.
"""

from __future__ import annotations

from typing import Any, Iterable


class ProtocolError(Exception):
    """Base class for all integration protocol errors."""


class ShapeMismatchError(ProtocolError, TypeError):
    """A typed value accessor was called for a metric with another type tag.

    Attributes
    ----------
    metric_type: str
        The metric's actual type tag.
    expected: tuple[str, ...]
        Tags the accessor accepts.
    """

    def __init__(self, metric_type: str, expected: Iterable[str]) -> None:
        self.metric_type = metric_type
        self.expected = tuple(expected)
        super().__init__(
            f"metric type {metric_type} is not {' or '.join(self.expected)}"
        )


class ValueDecodeError(ProtocolError, ValueError):
    """A value has the right type tag but its content is malformed."""


class PayloadDecodeError(ValueDecodeError):
    """The payload itself is not valid JSON or not a valid envelope."""


class MissingRequiredFieldError(ProtocolError, KeyError):
    """A record is missing a field it cannot be built without."""

    def __init__(self, field: str, record: str = "event") -> None:
        self.field = field
        self.record = record
        super().__init__(
            f"invalid {record} format: missing required '{field}' field"
        )

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class UnsupportedProtocolVersionError(ProtocolError, ValueError):
    """The envelope's ``protocol_version`` is missing or not recognized."""

    def __init__(self, raw_version: Any, reason: str = "unsupported") -> None:
        self.raw_version = raw_version
        super().__init__(f"{reason} protocol version: {raw_version!r}")
