"""
Integration payload protocol.

Models and decoders for the JSON payloads monitoring integrations emit to the
host agent: envelope models, typed metric value accessors, timestamp
normalization, legacy payload promotion and the event builder.
"""

from .__version__ import __protocol_version__, __version__
from .adapters.legacy import convert_v1_to_v3, parse_protocol_version
from .adapters.payload import decode_document, decode_payload
from .domain.errors import (
    MissingRequiredFieldError,
    PayloadDecodeError,
    ProtocolError,
    ShapeMismatchError,
    UnsupportedProtocolVersionError,
    ValueDecodeError,
)
from .domain.events import new_event_data
from .domain.models import (
    Common,
    DataV4,
    Dataset,
    EventData,
    IntegrationMetadata,
    InventoryData,
    Metric,
    MetricData,
    PluginDataSet,
    PluginDataSetV3,
    PluginDataV1,
    PluginDataV3,
    PluginOutputIdentifier,
)
from .domain.values import MetricType, has_interval

__all__ = [
    "__version__",
    "__protocol_version__",
    "Common",
    "DataV4",
    "Dataset",
    "EventData",
    "IntegrationMetadata",
    "InventoryData",
    "Metric",
    "MetricData",
    "MetricType",
    "MissingRequiredFieldError",
    "PayloadDecodeError",
    "PluginDataSet",
    "PluginDataSetV3",
    "PluginDataV1",
    "PluginDataV3",
    "PluginOutputIdentifier",
    "ProtocolError",
    "ShapeMismatchError",
    "UnsupportedProtocolVersionError",
    "ValueDecodeError",
    "convert_v1_to_v3",
    "decode_document",
    "decode_payload",
    "has_interval",
    "new_event_data",
    "parse_protocol_version",
]
