"""HTTP transport for the remote history source."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pyccsync._constants import USER_AGENT
from pyccsync._redact import redact_for_log
from pyccsync.config import SyncConfig
from pyccsync.exceptions import CcTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`HttpTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> dict[str, Any]:
        ...


class HttpTransport:
    """aiohttp transport that authenticates with the configured API key."""

    def __init__(self, config: SyncConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def _build_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }
        if self._config.api_key:
            headers["authorization"] = f"Apikey {self._config.api_key}"
        return headers

    async def get_json(self, endpoint: str, params: Mapping[str, Any]) -> dict[str, Any]:
        """GET *endpoint* and return the decoded JSON object.

        Raises
        ------
        CcTransportError
            On network failure, timeout, non-200 status or a body that is
            not a JSON object.
        """
        url = f"{self._config.base_url}{endpoint}"
        headers = self._build_headers()

        _logger.debug("GET %s params=%s headers=%s", url, redact_for_log(params), redact_for_log(headers))

        try:
            async with self._http.get(url, params=dict(params), headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise CcTransportError(
                        f"HTTP {resp.status} from {endpoint}: {text[:200]}",
                        status_code=resp.status,
                        endpoint=endpoint,
                    )
        except CcTransportError:
            raise
        except TimeoutError as exc:
            raise CcTransportError(
                f"Request to {endpoint} timed out after {self._config.request_timeout}s",
                endpoint=endpoint,
            ) from exc
        except aiohttp.ClientError as exc:
            raise CcTransportError(
                f"Request to {endpoint} failed: {exc}",
                endpoint=endpoint,
            ) from exc

        try:
            body_json = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CcTransportError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=200,
                endpoint=endpoint,
            ) from exc

        if not isinstance(body_json, dict):
            raise CcTransportError(
                f"Expected a JSON object from {endpoint}, got {type(body_json).__name__}",
                status_code=200,
                endpoint=endpoint,
            )

        _logger.debug("Response from %s: %s", endpoint, redact_for_log(body_json))
        return body_json
