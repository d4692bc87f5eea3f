"""Synchronization configuration for pyccsync."""

from __future__ import annotations

import dataclasses
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pyccsync._constants import BASE_URL, MAX_UNITS_IN_BATCH
from pyccsync.exceptions import CcConfigError


def parse_start_date(value: str | datetime) -> datetime:
    """Parse an ISO date or datetime into an aware UTC datetime.

    Naive values are taken to be UTC.

    Raises
    ------
    CcConfigError
        If *value* is not a valid ISO 8601 date.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise CcConfigError(f"Invalid start date {value!r}: expected ISO 8601 (e.g. 2023-01-01)") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


@dataclasses.dataclass(frozen=True)
class SyncConfig:
    """Configuration of one synchronization run.

    Parameters
    ----------
    sym1 : str
        Base symbol of the pair (e.g. ``"BTC"``).
    sym2 : str
        Quote symbol of the pair (e.g. ``"USD"``).
    start_date : datetime
        Oldest point the local dataset should eventually cover.
    api_key : str or None
        Remote source API key, sent as ``Authorization: Apikey <key>``.
    base_url : str
        Remote source base URL.
    max_units_in_batch : int
        Upper bound of hourly units requested by a single fetch.  Capped at
        the window the remote source serves; a wider batch would skip hours
        the planner never revisits.
    data_dir : Path
        Directory holding the persisted dataset.
    request_timeout : float
        Total timeout of a single HTTP request, in seconds.
    """

    sym1: str
    sym2: str
    start_date: datetime
    api_key: str | None = None
    base_url: str = BASE_URL
    max_units_in_batch: int = MAX_UNITS_IN_BATCH
    data_dir: Path = Path(".")
    request_timeout: float = 30.0

    def __post_init__(self) -> None:
        sym1 = str(self.sym1).strip().upper()
        sym2 = str(self.sym2).strip().upper()
        if not sym1 or not sym2:
            raise CcConfigError("Both pair symbols (sym1, sym2) are required")
        if not 0 < self.max_units_in_batch <= MAX_UNITS_IN_BATCH:
            raise CcConfigError(
                f"max_units_in_batch must be between 1 and {MAX_UNITS_IN_BATCH}, got {self.max_units_in_batch}"
            )
        if self.request_timeout <= 0:
            raise CcConfigError(f"request_timeout must be positive, got {self.request_timeout}")
        object.__setattr__(self, "sym1", sym1)
        object.__setattr__(self, "sym2", sym2)
        object.__setattr__(self, "start_date", parse_start_date(self.start_date))
        object.__setattr__(self, "data_dir", Path(self.data_dir))
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def pair(self) -> str:
        return f"{self.sym1}-{self.sym2}"

    @property
    def filename(self) -> str:
        return f"{self.sym1}_{self.sym2}_cc.json"

    @property
    def data_path(self) -> Path:
        return self.data_dir / self.filename

    @classmethod
    def from_env(cls, **overrides: Any) -> SyncConfig:
        """Create configuration from environment variables.

        Reads ``CC_SYM1``, ``CC_SYM2``, ``CC_START_DATE`` and the optional
        ``CC_*`` variables.  Explicit keyword arguments override environment
        values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        SyncConfig
            Populated configuration.

        Raises
        ------
        CcConfigError
            If a required value is missing or a numeric value is invalid.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CC_SYM1": "sym1",
            "CC_SYM2": "sym2",
            "CC_START_DATE": "start_date",
            "CC_API_KEY": "api_key",
            "CC_API_URL": "base_url",
            "CC_DATA_DIR": "data_dir",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric values, handle separately
        batch_env = env.get("CC_MAX_UNITS_IN_BATCH")
        if batch_env is not None and "max_units_in_batch" not in overrides:
            try:
                config_kwargs["max_units_in_batch"] = int(batch_env)
            except ValueError as exc:
                raise CcConfigError(f"CC_MAX_UNITS_IN_BATCH must be an integer, got {batch_env!r}") from exc

        timeout_env = env.get("CC_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise CcConfigError(f"CC_REQUEST_TIMEOUT must be a number, got {timeout_env!r}") from exc

        config_kwargs.update(overrides)

        missing = [name for name in ("sym1", "sym2", "start_date") if not config_kwargs.get(name)]
        if missing:
            raise CcConfigError(f"Missing required configuration: {', '.join(missing)}")

        return cls(**config_kwargs)
