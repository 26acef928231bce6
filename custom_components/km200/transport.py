"""HTTP transport for the Buderus KM200 gateway."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import aiohttp

from .const import DEFAULT_PORT, DEFAULT_TIMEOUT, USER_AGENT
from .exceptions import KM200TransportError

_LOGGER = logging.getLogger(__name__)


class Transport(Protocol):
    """GET/POST capability the resource client needs."""

    async def get(self, path: str) -> bytes: ...

    async def post(self, path: str, body: bytes) -> bytes: ...

    async def close(self) -> None: ...


class KM200Transport:
    """Plain HTTP transport, one request at a time."""

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        request_timeout: int = DEFAULT_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._host = host
        self._port = port
        self._request_timeout = request_timeout
        self._lock = asyncio.Lock()

        self._session = session
        self._close_session = False

    @property
    def base_url(self) -> str:
        return f"http://{self._host}:{self._port}"

    async def get(self, path: str) -> bytes:
        """GET *path* and return the raw response body."""
        return await self._request("GET", path)

    async def post(self, path: str, body: bytes) -> bytes:
        """POST *body* to *path* and return the raw response body."""
        return await self._request("POST", path, body)

    async def _request(
        self, method: str, path: str, body: bytes | None = None
    ) -> bytes:
        async with self._lock:
            if self._session is None:
                self._session = aiohttp.ClientSession()
                self._close_session = True

            url = f"{self.base_url}{path}"
            _LOGGER.debug("Gateway request: %s %s", method, url)

            try:
                async with asyncio.timeout(self._request_timeout):
                    if method == "GET":
                        request = self._session.get(
                            url, headers={"User-Agent": USER_AGENT}
                        )
                    else:
                        request = self._session.post(
                            url, data=body, headers={"User-Agent": USER_AGENT}
                        )
                    async with request as resp:
                        status = resp.status
                        raw: bytes = await resp.read()

            except TimeoutError as exc:
                _LOGGER.error("Timeout connecting to gateway: %s", exc)
                raise KM200TransportError(
                    f"Timeout communicating with KM200 gateway ({method} {path})"
                ) from exc
            except aiohttp.ClientError as exc:
                _LOGGER.error("Error connecting to gateway: %s", exc)
                raise KM200TransportError(
                    f"Cannot reach KM200 gateway at {self.base_url}"
                ) from exc

            if not 200 <= status < 300:
                raise KM200TransportError(
                    f"Gateway answered {status} to {method} {path}"
                )

            _LOGGER.debug("Gateway response: %s %s -> %s", method, path, status)
            return raw

    async def close(self) -> None:
        """Close the HTTP session if we own it."""
        if self._session and self._close_session:
            await self._session.close()
            self._session = None
            self._close_session = False

    async def __aenter__(self) -> KM200Transport:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
