"""aiohttp wrapper posting HNAP envelopes to a plug."""

from __future__ import annotations

import asyncio
import logging

import aiohttp
from yarl import URL

from .deviceconfig import DeviceConfig
from .exceptions import HnapException, TimeoutError, _ConnectionError

_LOGGER = logging.getLogger(__name__)


def get_cookie_jar() -> aiohttp.CookieJar:
    """Return a cookie jar accepting cookies from bare IP addresses."""
    return aiohttp.CookieJar(unsafe=True, quote_cookie=False)


class HttpClient:
    """Post request bodies to one plug.

    Uses ``config.http_client`` when the caller shares a session, otherwise
    creates one on first use and closes it in :meth:`close`.
    """

    def __init__(self, config: DeviceConfig) -> None:
        self._config = config
        self._timeout = config.timeout or DeviceConfig.DEFAULT_TIMEOUT
        self._owned_session: aiohttp.ClientSession | None = None

    @property
    def client(self) -> aiohttp.ClientSession:
        """Return the session requests are sent with."""
        if isinstance(self._config.http_client, aiohttp.ClientSession):
            return self._config.http_client

        if self._owned_session is None:
            self._owned_session = aiohttp.ClientSession(cookie_jar=get_cookie_jar())
        return self._owned_session

    def _wrap_error(self, ex: Exception) -> HnapException:
        host = self._config.host
        if isinstance(ex, (aiohttp.ServerDisconnectedError, aiohttp.ClientOSError)):
            return _ConnectionError(f"Device connection error: {host}: {ex}", ex)
        if isinstance(ex, (aiohttp.ServerTimeoutError, asyncio.TimeoutError)):
            return TimeoutError(
                f"Unable to query the device, timed out: {host}: {ex}", ex
            )
        return HnapException(f"Unable to query the device: {host}: {ex}", ex)

    async def post(
        self,
        url: URL,
        *,
        data: bytes | None = None,
        headers: dict[str, str] | None = None,
        cookies_dict: dict[str, str] | None = None,
    ) -> tuple[int, bytes | None]:
        """Post *data* to *url* and return the status code and raw body.

        Only ``cookies_dict`` is sent as cookies; anything the plug set on
        earlier responses is dropped first.
        """
        session = self.client
        session.cookie_jar.clear()
        timeout = aiohttp.ClientTimeout(total=self._timeout)

        try:
            resp = await session.post(
                url,
                data=data,
                timeout=timeout,
                cookies=cookies_dict,
                headers=headers,
            )
            async with resp:
                body = await resp.read()
        except Exception as ex:
            raise self._wrap_error(ex) from ex

        if resp.status != 200:
            _LOGGER.debug(
                "Device %s received status code %s with response %r",
                self._config.host,
                resp.status,
                body,
            )
        return resp.status, body

    async def close(self) -> None:
        """Close the session if this client created it."""
        session, self._owned_session = self._owned_session, None
        if session is not None:
            await session.close()
