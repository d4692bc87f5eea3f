"""Hourly price observation model."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Observation(BaseModel):
    """A single time-stamped observation of the pair.

    Only ``timestamp`` is interpreted; every other field the remote source
    sends (``open``, ``high``, ``low``, ``close``, ``volumefrom``,
    ``volumeto``, ``conversionType`` ...) is kept as an extra and written
    back unchanged.

    Parameters
    ----------
    timestamp : int
        Start of the hour in epoch seconds.  Read from ``time`` (the remote
        source's key) or ``timestamp``; serialized as ``time``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        populate_by_name=True,
    )

    timestamp: int = Field(
        validation_alias=AliasChoices("time", "timestamp"),
        serialization_alias="time",
    )

    @field_validator("timestamp", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        if isinstance(value, bool):
            raise ValueError("timestamp must be an integer, not a boolean")
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"timestamp must be a whole number of seconds, got {value}")
            return int(value)
        return value

    @property
    def observed_at(self) -> datetime:
        """The timestamp as an aware UTC datetime."""
        return datetime.fromtimestamp(self.timestamp, tz=UTC)

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-ready record, passthrough fields included."""
        return self.model_dump(by_alias=True, mode="json")
