"""Event record builder.

Events are assembled from a base template plus an ordered list of mutations.
Each mutation is a small frozen descriptor that applies itself to the record
being built; later mutations overwrite earlier ones, except
:class:`WithAttributes`, which renames colliding keys to ``attr.<key>``.

Example
-------
>>> event = new_event_data(
...     with_fields(summary="disk almost full"),
...     with_labels({"env": "prod"}),
... )
>>> event["label.env"]
'prod'
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol

from .entity import Entity
from .errors import MissingRequiredFieldError
from .models import EventData

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPE = "InfrastructureEvent"
DEFAULT_CATEGORY = "notifications"

REQUIRED_FIELD = "summary"
# integrations sometimes add it; the backend attribute limit makes it unsafe
STRIPPED_FIELD = "hostname"


class EventMutation(Protocol):
    """A step applied to an event record under construction."""

    def apply(self, record: Dict[str, Any]) -> None:
        """Mutate ``record`` in place."""
        raise NotImplementedError


@dataclass(frozen=True)
class WithEvent:
    """Copy every field of an existing event."""

    original: Mapping[str, Any]

    def apply(self, record: Dict[str, Any]) -> None:
        record.update(self.original)


@dataclass(frozen=True)
class WithIntegrationUser:
    user: str

    def apply(self, record: Dict[str, Any]) -> None:
        record["integrationUser"] = self.user


@dataclass(frozen=True)
class WithEntity:
    """Tag the event with the resolved entity's key and ID."""

    entity: Entity

    def apply(self, record: Dict[str, Any]) -> None:
        record["entityKey"] = str(self.entity.key)
        record["entityID"] = str(self.entity.id)


@dataclass(frozen=True)
class WithLabels:
    labels: Mapping[str, str]

    def apply(self, record: Dict[str, Any]) -> None:
        for key, value in self.labels.items():
            record[f"label.{key}"] = value


@dataclass(frozen=True)
class WithAttributes:
    """Add attributes; keys already in the record go under ``attr.<key>``."""

    attributes: Mapping[str, Any]

    def apply(self, record: Dict[str, Any]) -> None:
        for key, value in self.attributes.items():
            if key in record:
                record[f"attr.{key}"] = value
            else:
                record[key] = value


@dataclass(frozen=True)
class WithFields:
    """Plain assignment of fields, overwriting existing values."""

    fields: Mapping[str, Any] = field(default_factory=dict)

    def apply(self, record: Dict[str, Any]) -> None:
        record.update(self.fields)


def with_events(original: Mapping[str, Any]) -> WithEvent:
    return WithEvent(dict(original))


def with_integration_user(user: str) -> WithIntegrationUser:
    return WithIntegrationUser(user)


def with_entity(entity: Entity) -> WithEntity:
    return WithEntity(entity)


def with_labels(labels: Mapping[str, str]) -> WithLabels:
    return WithLabels(dict(labels))


def with_attributes(attributes: Mapping[str, Any]) -> WithAttributes:
    return WithAttributes(dict(attributes))


def with_fields(**fields: Any) -> WithFields:
    return WithFields(fields)


def new_event_data(*mutations: EventMutation) -> EventData:
    """Build an event from the default template and ``mutations``.

    Parameters
    ----------
    *mutations: EventMutation
        Applied in order on top of ``eventType``/``category`` defaults.

    Returns
    -------
    EventData
        The finished record, never containing a ``hostname`` key.

    Raises
    ------
    MissingRequiredFieldError
        If no mutation provided a ``summary``. No partial event is returned.
    """
    record: Dict[str, Any] = {
        "eventType": DEFAULT_EVENT_TYPE,
        "category": DEFAULT_CATEGORY,
    }
    for mutation in mutations:
        mutation.apply(record)

    if REQUIRED_FIELD not in record:
        logger.debug(
            "events.missing_required_field",
            extra={"field": REQUIRED_FIELD, "keys": sorted(record)},
        )
        raise MissingRequiredFieldError(REQUIRED_FIELD)

    record.pop(STRIPPED_FIELD, None)
    return EventData(record)
