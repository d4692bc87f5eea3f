"""Hourly history endpoint.

Endpoint:
  - /data/histohour (``limit`` hours of history ending at ``toTs``)
"""

from __future__ import annotations

import logging

from pydantic import ValidationError

from pyccsync._constants import HISTOHOUR_ENDPOINT
from pyccsync._transport import Transport
from pyccsync.config import SyncConfig
from pyccsync.exceptions import CcApiError
from pyccsync.models.history import HistoryResponse
from pyccsync.models.observation import Observation
from pyccsync.planner import format_timestamp

_logger = logging.getLogger(__name__)


def build_histohour_params(config: SyncConfig, to_date: int, limit: int) -> dict[str, str | int]:
    """Build query parameters for a window of *limit* hours ending at *to_date*."""
    return {
        "fsym": config.sym1,
        "tsym": config.sym2,
        "toTs": int(to_date),
        "limit": int(limit),
    }


def parse_histohour_response(body: dict[str, object], *, endpoint: str = HISTOHOUR_ENDPOINT) -> list[Observation]:
    """Validate a history body and return its observations.

    Raises
    ------
    CcApiError
        If the body is flagged as unsuccessful or its records are malformed.
    """
    try:
        envelope = HistoryResponse.model_validate(body)
    except ValidationError as exc:
        raise CcApiError(
            f"{endpoint} returned a malformed envelope: {exc.error_count()} validation errors",
            endpoint=endpoint,
        ) from exc

    if not envelope.is_success:
        raise CcApiError(
            f"{endpoint} failed: response={envelope.response or '<missing>'} message={envelope.message}",
            response=envelope.response,
            endpoint=endpoint,
        )

    try:
        return [Observation.model_validate(record) for record in envelope.data]
    except ValidationError as exc:
        raise CcApiError(
            f"{endpoint} returned malformed records: {exc.errors()[0].get('msg', exc)}",
            response=envelope.response,
            endpoint=endpoint,
        ) from exc


async def fetch_hourly_history(
    config: SyncConfig,
    transport: Transport,
    to_date: int,
    limit: int,
) -> list[Observation]:
    """Fetch *limit* hours of history for the configured pair ending at *to_date*.

    Parameters
    ----------
    config : SyncConfig
        Run configuration (pair symbols).
    transport : Transport
        HTTP transport.
    to_date : int
        Newest timestamp of the window, epoch seconds.
    limit : int
        Number of hours requested.

    Returns
    -------
    list of Observation
        Observations in the order the remote source delivered them.

    Raises
    ------
    CcTransportError
        On HTTP-level failure.
    CcApiError
        If the payload is not a successful history response.
    """
    _logger.info(
        "Fetching %s data. %d items until %s",
        config.pair,
        limit,
        format_timestamp(to_date),
    )
    body = await transport.get_json(HISTOHOUR_ENDPOINT, build_histohour_params(config, to_date, limit))
    observations = parse_histohour_response(body)
    _logger.debug("%s delivered %d observations", HISTOHOUR_ENDPOINT, len(observations))
    return observations
