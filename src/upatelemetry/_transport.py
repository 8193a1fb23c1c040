"""HTTP transport for the REST and RSS collaborators."""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

import aiohttp

from upatelemetry._constants import REQUEST_TIMEOUT, USER_AGENT
from upatelemetry.exceptions import UpaTransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by source modules.

    Sources only depend on this protocol so tests can pass simple fakes
    while production code uses :class:`HttpTransport`.
    """

    async def get_json(self, url: str) -> Any: ...

    async def get_text(self, url: str) -> str: ...


class HttpTransport:
    """GET-only transport with a fixed per-request timeout."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        *,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout, connect=min(5.0, timeout))

    async def get_text(self, url: str, *, accept: str = "*/*") -> str:
        headers = {"user-agent": USER_AGENT, "accept": accept}
        _logger.debug("GET %s", url)
        try:
            async with self._http.get(url, headers=headers, timeout=self._timeout) as resp:
                text = await resp.text()
                if resp.status != 200:
                    raise UpaTransportError(
                        f"HTTP {resp.status} from {url}",
                        status_code=resp.status,
                        url=url,
                    )
        except UpaTransportError:
            raise
        except TimeoutError as exc:
            raise UpaTransportError(f"Request to {url} timed out", url=url) from exc
        except UnicodeDecodeError as exc:
            raise UpaTransportError(f"Undecodable body from {url}: {exc.reason}", url=url) from exc
        except aiohttp.ClientError as exc:
            raise UpaTransportError(f"Request to {url} failed: {exc}", url=url) from exc
        return text

    async def get_json(self, url: str) -> Any:
        text = await self.get_text(url, accept="application/json")
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise UpaTransportError(f"Invalid JSON from {url}: {text[:200]}", url=url) from exc
