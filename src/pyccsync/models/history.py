"""Envelope model for history endpoint responses."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from pyccsync._constants import SUCCESS_RESPONSE


class HistoryResponse(BaseModel):
    """Top-level body of a ``/data/histohour`` response.

    The v1 endpoint delivers the records directly in ``Data``; the v2
    endpoint nests them one level deeper (``Data.Data``).  Both are
    flattened into ``data``.  Failure payloads carry ``Response: "Error"``
    and an empty ``Data`` object.

    Parameters
    ----------
    response : str
        ``"Success"`` or ``"Error"``.
    message : str
        Human readable failure reason, empty on success.
    data : list of dict
        Raw history records.
    time_from : int or None
        Oldest timestamp covered, when reported.
    time_to : int or None
        Newest timestamp covered, when reported.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    response: str = Field(default="", alias="Response")
    message: str = Field(default="", alias="Message")
    data: list[dict[str, Any]] = Field(default_factory=list, alias="Data")
    time_from: int | None = Field(default=None, alias="TimeFrom")
    time_to: int | None = Field(default=None, alias="TimeTo")

    @model_validator(mode="before")
    @classmethod
    def _unwrap_data(cls, values: Any) -> Any:
        if not isinstance(values, dict):
            return values
        working = dict(values)
        data = working.get("Data")
        if isinstance(data, dict):
            # v2 envelope, or an empty object on failure
            working.setdefault("TimeFrom", data.get("TimeFrom"))
            working.setdefault("TimeTo", data.get("TimeTo"))
            working["Data"] = data.get("Data") or []
        elif data is None:
            working["Data"] = []
        return working

    @property
    def is_success(self) -> bool:
        return self.response == SUCCESS_RESPONSE
