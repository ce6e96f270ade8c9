"""Raw payload decoding.

Turns the bytes an integration wrote into one of the envelope models:

1. Parse JSON with ``orjson``.
2. Read ``protocol_version`` and reject it unless it is in the recognized set.
   Nothing else in the payload is validated before this check.
3. Decode the envelope for that version. V1 payloads are promoted to the v3
   shape, so callers only ever see :class:`PluginDataV3` or :class:`DataV4`.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Union

import orjson
from pydantic import ValidationError

from ..__version__ import __protocol_version__
from ..domain.errors import PayloadDecodeError, UnsupportedProtocolVersionError
from ..domain.models import DataV4, PluginDataV1, PluginDataV3, PluginProtocolVersion
from .legacy import convert_v1_to_v3, parse_protocol_version

logger = logging.getLogger(__name__)

PROTOCOL_V1 = 1
PROTOCOL_V2 = 2
PROTOCOL_V3 = 3
PROTOCOL_V4 = 4

# every version from the first up to the newest one this package decodes
KNOWN_PROTOCOL_VERSIONS = frozenset(range(PROTOCOL_V1, __protocol_version__ + 1))

Payload = Union[PluginDataV3, DataV4]


def load_json(raw: Union[bytes, bytearray, memoryview, str]) -> Any:
    """Parse raw payload bytes, raising :class:`PayloadDecodeError` on bad JSON."""
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise PayloadDecodeError(f"payload is not valid JSON: {exc}") from exc


def protocol_version_of(document: Any) -> int:
    """Return the parsed protocol version of a JSON document."""
    if not isinstance(document, dict):
        raise PayloadDecodeError(
            f"payload must be a JSON object, got {type(document).__name__}"
        )
    header = PluginProtocolVersion.model_validate(document)
    return parse_protocol_version(header.protocol_version)


def decode_document(
    document: Any, supported: Optional[Iterable[int]] = None
) -> Payload:
    """Decode an already-parsed JSON document into an envelope model.

    Parameters
    ----------
    document: Any
        Parsed JSON payload.
    supported: Optional[Iterable[int]]
        Protocol versions the caller accepts. Defaults to all known versions.

    Raises
    ------
    UnsupportedProtocolVersionError
        If the version is missing, malformed or not in ``supported``.
    PayloadDecodeError
        If the envelope does not match the schema of its version.
    """
    accepted = frozenset(supported) if supported is not None else KNOWN_PROTOCOL_VERSIONS
    version = protocol_version_of(document)
    if version not in accepted or version not in KNOWN_PROTOCOL_VERSIONS:
        logger.warning(
            "payload.unsupported_version",
            extra={"protocol_version": version, "accepted": sorted(accepted)},
        )
        raise UnsupportedProtocolVersionError(version)

    try:
        if version == PROTOCOL_V1:
            return convert_v1_to_v3(PluginDataV1.model_validate(document))
        if version in (PROTOCOL_V2, PROTOCOL_V3):
            return PluginDataV3.model_validate(document)
        return DataV4.model_validate(document)
    except ValidationError as exc:
        logger.warning(
            "payload.invalid_envelope",
            extra={"protocol_version": version, "errors": exc.error_count()},
        )
        raise PayloadDecodeError(
            f"invalid protocol v{version} payload: {exc.error_count()} validation error(s)"
        ) from exc


def decode_payload(
    raw: Union[bytes, bytearray, memoryview, str],
    supported: Optional[Iterable[int]] = None,
) -> Payload:
    """Parse and decode raw payload bytes. See :func:`decode_document`."""
    return decode_document(load_json(raw), supported)
