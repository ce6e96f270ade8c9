"""Protocol version parsing and legacy payload promotion."""

from __future__ import annotations

import logging
from typing import Any

from ..domain.errors import UnsupportedProtocolVersionError
from ..domain.models import PluginDataSetV3, PluginDataV1, PluginDataV3

logger = logging.getLogger(__name__)


def parse_protocol_version(raw: Any) -> int:
    """Interpret the untyped ``protocol_version`` field.

    Integrations have emitted the version as a JSON number (``3``), as a
    float (``3.0``) and as a string (``"3"``); all three are accepted.

    Raises
    ------
    UnsupportedProtocolVersionError
        If the field is missing, a boolean, or not an integral number.
    """
    if raw is None:
        raise UnsupportedProtocolVersionError(raw, reason="missing")
    if isinstance(raw, bool):
        raise UnsupportedProtocolVersionError(raw, reason="invalid")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float) and raw.is_integer():
        return int(raw)
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    raise UnsupportedProtocolVersionError(raw, reason="invalid")


def convert_v1_to_v3(payload: PluginDataV1) -> PluginDataV3:
    """Promote a v1 payload to the v3 multi-dataset shape.

    V1 and V3 only differ in that V3 carries a list of datasets, each with
    ``cluster`` and ``service`` fields. The single v1 dataset becomes a
    one-element list with both fields left empty. Dataset contents are not
    validated here.
    """
    dataset = PluginDataSetV3.model_construct(**payload.dataset_fields())
    identifier = payload.identifier()
    logger.debug(
        "legacy.converted_v1_to_v3",
        extra={"integration": identifier.name},
    )
    return PluginDataV3.model_construct(
        **{name: getattr(identifier, name) for name in type(identifier).model_fields},
        data=[dataset],
    )
