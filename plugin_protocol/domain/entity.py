"""Entity identity value objects.

Identity resolution belongs to the agent; this package only carries entity
references through the payload untouched, so both models accept and keep any
extra fields the producer sends.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class IDAttribute(BaseModel):
    """Key/value pair that disambiguates entities sharing a name."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    key: str = Field("", alias="Key")
    value: str = Field("", alias="Value")


class EntityFields(BaseModel):
    """Entity reference as sent by the integration in each dataset."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str = ""
    type: str = ""
    id_attributes: Optional[List[IDAttribute]] = None
    display_name: str = Field("", alias="displayName")
    metadata: Optional[Dict[str, Any]] = None

    @property
    def is_agent(self) -> bool:
        """An empty reference means "the host the agent runs on"."""
        return not self.name and not self.type


class Entity(BaseModel):
    """Resolved entity: a unique key plus the backend-assigned ID."""

    model_config = ConfigDict(frozen=True)

    key: str
    id: Union[int, str] = 0
