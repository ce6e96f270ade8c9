"""Environment-based settings.

Settings are read from ``PLUGIN_PROTOCOL_*`` environment variables and an
optional ``.env`` file. List values are given as JSON, e.g.
``PLUGIN_PROTOCOL_SUPPORTED_PROTOCOL_VERSIONS='[3, 4]'``.
"""

from __future__ import annotations

from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvSettings(BaseSettings):
    """Environment-driven settings and .env support.

    Attributes
    ----------
    log_level: str
        Logging level name (e.g., "DEBUG", "INFO"). Defaults to "INFO".
    supported_protocol_versions: List[int]
        Protocol versions accepted by the payload decoder. Payloads declaring
        any other version are rejected before their datasets are read.
    """

    model_config = SettingsConfigDict(env_file=".env", env_prefix="PLUGIN_PROTOCOL_")

    log_level: str = Field("INFO")
    supported_protocol_versions: List[int] = Field(
        default_factory=lambda: [1, 2, 3, 4],
        description="Accepted integration protocol versions",
    )

    @field_validator("supported_protocol_versions")
    @classmethod
    def _non_empty(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("at least one protocol version must be supported")
        return value
