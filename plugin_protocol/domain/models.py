"""Integration payload data model.

These Pydantic models mirror the JSON that integrations write to stdout for
the host agent. Field names follow the wire format exactly (``interval.ms``,
``protocol_version``, ``integration_status``...). All models are frozen: a
decoded payload is a read-only view for downstream processing.

Two generations of payload are modelled:

- ``DataV4``: the current envelope, with typed metrics and per-dataset common
  defaults.
- ``PluginDataV1`` / ``PluginDataV3``: legacy payloads. V1 carries a single
  dataset, V2/V3 carry a list (V3 adds ``cluster`` and ``service``).

The ``protocol_version`` field is left untyped here; interpreting it is the
job of :mod:`plugin_protocol.adapters.legacy`.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Annotated, Any, Dict, Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

from .entity import EntityFields
from .errors import MissingRequiredFieldError
from .utils.timestamps import (
    INT64_MAX,
    INT64_MIN,
    Clock,
    interval_duration,
    resolve_timestamp,
)
from .values import (
    MetricType,
    PrometheusHistogramValue,
    PrometheusSummaryValue,
    SummaryValue,
    decode_numeric,
    decode_prometheus_histogram,
    decode_prometheus_summary,
    decode_summary,
    has_interval,
)

# JSON integer that fits a signed 64-bit field; strings are not coerced
Int64 = Annotated[int, Field(strict=True, ge=INT64_MIN, le=INT64_MAX)]


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class _FreeFormRecord(RootModel[Dict[str, Any]]):
    """Free-form ``key -> value`` record with read-only mapping access."""

    model_config = ConfigDict(frozen=True)

    def __getitem__(self, key: str) -> Any:
        return self.root[key]

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def __contains__(self, key: object) -> bool:
        return key in self.root

    def get(self, key: str, default: Any = None) -> Any:
        return self.root.get(key, default)

    def items(self):
        return self.root.items()

    def to_dict(self) -> Dict[str, Any]:
        """Return a shallow copy of the record as a plain dict."""
        return dict(self.root)


class InventoryData(_FreeFormRecord):
    """Inventory item produced by an integration for the inventory store."""

    def sort_key(self) -> str:
        """Return the item's ``id`` when it is a string, else ``""``."""
        value = self.root.get("id")
        if isinstance(value, str):
            return value
        return ""


class MetricData(_FreeFormRecord):
    """Flattened metric sample (legacy payloads)."""


class EventData(_FreeFormRecord):
    """Single-shot event. Build new ones with :func:`~.events.new_event_data`."""


class PluginProtocolVersion(_FrozenModel):
    """Minimum information needed to pick the payload decoder."""

    protocol_version: Any = None


# ---------------------------------------------------------------------------
# Protocol v4
# ---------------------------------------------------------------------------


class IntegrationMetadata(_FrozenModel):
    name: str = ""
    version: str = ""


class Common(_FrozenModel):
    """Defaults shared by every metric of a dataset."""

    timestamp: Optional[Int64] = None
    interval_ms: Optional[Int64] = Field(None, alias="interval.ms")
    attributes: Optional[Dict[str, Any]] = None


class Metric(_FrozenModel):
    """A single typed metric.

    ``value`` is kept as the raw decoded JSON. Use the accessor matching the
    metric's ``type`` to read it:

    - :meth:`numeric_value` for gauge, count, rate and cumulative types
    - :meth:`summary_value` for summary
    - :meth:`prometheus_summary_value` for prometheus-summary
    - :meth:`prometheus_histogram_value` for prometheus-histogram
    """

    name: str = ""
    type: str
    timestamp: Optional[Int64] = None
    interval_ms: Optional[Int64] = Field(None, alias="interval.ms")
    attributes: Optional[Dict[str, Any]] = None
    value: Any = None

    @field_validator("type", mode="before")
    @classmethod
    def _raw_type(cls, value: Any) -> Any:
        # keep the wire string even when a MetricType member is passed in
        if isinstance(value, MetricType):
            return value.value
        return value

    @property
    def kind(self) -> Optional[MetricType]:
        """Known type of the metric, or None for an unrecognized tag."""
        return MetricType.parse(self.type)

    def validate_name(self) -> None:
        """Raise :class:`MissingRequiredFieldError` if the metric has no name.

        Envelope validation accepts nameless metrics; they fail here, one at
        a time.
        """
        if not self.name:
            raise MissingRequiredFieldError("name", record="metric")

    def has_interval(self) -> bool:
        return has_interval(self.type)

    def time(self, clock: Optional[Clock] = None) -> datetime:
        """Observation time; falls back to ``clock`` (now) without a timestamp."""
        return resolve_timestamp(self.timestamp, clock)

    def interval_duration(self) -> timedelta:
        return interval_duration(self.interval_ms)

    def numeric_value(self) -> float:
        return decode_numeric(self.type, self.value)

    def summary_value(self) -> SummaryValue:
        return decode_summary(self.type, self.value)

    def prometheus_summary_value(self) -> PrometheusSummaryValue:
        return decode_prometheus_summary(self.type, self.value)

    def prometheus_histogram_value(self) -> PrometheusHistogramValue:
        return decode_prometheus_histogram(self.type, self.value)

    def copy_attributes(self) -> Dict[str, Any]:
        """Return a shallow copy of the attributes, safe to mutate."""
        return dict(self.attributes or {})

    def with_common(self, common: Optional[Common]) -> "Metric":
        """Return this metric with the dataset's common defaults applied.

        Metric-level timestamp, interval and attributes take precedence over
        the common ones. The metric itself is left untouched.
        """
        if common is None:
            return self

        update: Dict[str, Any] = {}
        if self.timestamp is None and common.timestamp is not None:
            update["timestamp"] = common.timestamp
        if self.interval_ms is None and common.interval_ms is not None:
            update["interval_ms"] = common.interval_ms
        if common.attributes:
            merged = dict(common.attributes)
            merged.update(self.attributes or {})
            update["attributes"] = merged
        if not update:
            return self
        return self.model_copy(update=update)


class Dataset(_FrozenModel):
    """Telemetry for a single entity."""

    common: Common = Field(default_factory=Common)
    metrics: Optional[List[Metric]] = None
    entity: EntityFields = Field(default_factory=EntityFields)
    inventory: Optional[Dict[str, InventoryData]] = None
    events: Optional[List[EventData]] = None

    @field_validator("common", "entity", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def resolved_metrics(self) -> List[Metric]:
        """Metrics with the ``common`` block applied as defaults."""
        return [m.with_common(self.common) for m in self.metrics or []]


class DataV4(PluginProtocolVersion):
    """Protocol v4 envelope."""

    integration: IntegrationMetadata = Field(default_factory=IntegrationMetadata)
    data: List[Dataset] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Legacy protocols v1-v3
# ---------------------------------------------------------------------------


class PluginOutputIdentifier(_FrozenModel):
    """Fields that identify the integration and its output version."""

    name: str = ""
    protocol_version: Any = None
    integration_version: str = ""
    status: str = Field("", alias="integration_status")

    def identifier(self) -> "PluginOutputIdentifier":
        """Return only the identifier fields of this payload."""
        return PluginOutputIdentifier(
            name=self.name,
            protocol_version=self.protocol_version,
            integration_version=self.integration_version,
            status=self.status,
        )


class PluginDataSet(_FrozenModel):
    """Data produced by an integration for one entity."""

    entity: EntityFields = Field(default_factory=EntityFields)
    metrics: Optional[List[MetricData]] = None
    inventory: Optional[Dict[str, InventoryData]] = None
    events: Optional[List[EventData]] = None
    # kept for SDK compatibility, ignored by the agent
    add_hostname: bool = False

    @field_validator("entity", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def dataset_fields(self) -> Dict[str, Any]:
        """The dataset fields of this record, without copying their values."""
        return {name: getattr(self, name) for name in PluginDataSet.model_fields}


class PluginDataV1(PluginOutputIdentifier, PluginDataSet):
    """Protocol v1 payload: one dataset inlined next to the identifier."""


class PluginDataSetV3(PluginDataSet):
    cluster: str = ""
    service: str = ""


class PluginDataV3(PluginOutputIdentifier):
    """Protocol v2/v3 payload: one dataset per entity."""

    data: List[PluginDataSetV3] = Field(default_factory=list)
