"""High-level async client for the remote history source."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyccsync._api import histohour as _histohour_api
from pyccsync._constants import HOUR_SECONDS
from pyccsync._transport import HttpTransport, Transport
from pyccsync.config import SyncConfig
from pyccsync.exceptions import CcError
from pyccsync.models.observation import Observation
from pyccsync.planner import format_timestamp

_logger = logging.getLogger(__name__)


class CcClient:
    """Async client for the hourly history API.

    Usage::

        async with CcClient(config) as client:
            observations = await client.get_hourly_history(to_date, 2000)

    The client also satisfies the ``Fetcher`` protocol consumed by
    :class:`pyccsync.sync.SyncDriver` through :meth:`fetch`.
    """

    def __init__(
        self,
        config: SyncConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport
        self._external_transport = transport is not None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> CcClient:
        if self._external_transport:
            return self
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()
        self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_transport:
            self._transport = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise CcError("Client not initialized. Use 'async with CcClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Data retrieval
    # ------------------------------------------------------------------

    async def get_hourly_history(self, to_date: int, limit: int) -> list[Observation]:
        """Fetch *limit* hours of history ending at *to_date* (epoch seconds)."""
        return await _histohour_api.fetch_hourly_history(
            self._config,
            self._require_transport(),
            to_date,
            limit,
        )

    async def fetch(self, to_date: int, unit_count: int) -> list[Observation]:
        """Fetch one planned batch for the configured pair."""
        return await self.get_hourly_history(to_date, unit_count)


class MockFetcher:
    """Offline stand-in for :class:`CcClient`.

    Every batch yields two observations: the newest at *to_date* and the
    oldest *unit_count* units before it, which is enough for the planner
    to walk the whole target range without network access.
    """

    def __init__(self, config: SyncConfig, *, unit_seconds: int = HOUR_SECONDS) -> None:
        self._config = config
        self._unit_seconds = unit_seconds
        self.calls: list[tuple[int, int]] = []

    async def fetch(self, to_date: int, unit_count: int) -> list[Observation]:
        _logger.info(
            "*** MOCK *** Fetching %s data. %d items until %s",
            self._config.pair,
            unit_count,
            format_timestamp(to_date),
        )
        self.calls.append((to_date, unit_count))
        return [
            Observation(timestamp=to_date),
            Observation(timestamp=to_date - unit_count * self._unit_seconds),
        ]
