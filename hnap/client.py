"""Protocol client for HNAP smart plugs.

>>> from hnap import HnapClient
>>> async with HnapClient("192.168.0.60", password="123456") as client:
>>>     await client.login()
True
>>>     await client.set_state(True)
'OK'
>>>     await client.get_state()
True
>>>     await client.get_temperature()
24.0
"""

from __future__ import annotations

import asyncio
import logging
import math
from types import TracebackType
from typing import Self

from .credentials import DEFAULT_USERNAME, Credentials
from .deviceconfig import DeviceConfig
from .exceptions import (
    HnapException,
    MaxLoginAttemptsError,
)
from .responses import ERROR, InternetSettings, mask_mac, read_response_value
from .soap import (
    DEFAULT_RADIO_ID,
    SOCKET_MODULE_ID,
    TEMPERATURE_MODULE_ID,
    HnapMethod,
    control_params,
    module_params,
    radio_params,
)
from .transport import HnapSession, HnapTransport

_LOGGER = logging.getLogger(__name__)

#: Consecutive ``ERROR`` state reads tolerated before giving up
MAX_AUTH_RETRIES = 5
#: Returned by :meth:`HnapClient.get_temperature` when no reading is available
UNKNOWN_TEMPERATURE = -99.0
DEVICE_READY = "OK"


class HnapClient:
    """Client for the HNAP protocol spoken by D-Link smart plugs."""

    BACKOFF_SECONDS_AFTER_ERROR = 1

    def __init__(
        self,
        host: str | None = None,
        *,
        password: str = "",
        username: str = DEFAULT_USERNAME,
        config: DeviceConfig | None = None,
        transport: HnapTransport | None = None,
    ) -> None:
        """Create a client.

        :param str host: host name or IP address of the plug
        :param str password: password (PIN code) of the plug
        :param str username: username, plugs only know ``admin``
        :param DeviceConfig config: connection parameters, replaces the above
        :param HnapTransport transport: transport to use instead of a new one
        """
        if transport is None:
            if config is None:
                if not host:
                    raise HnapException("host or config must be supplied")
                config = DeviceConfig(
                    host=host,
                    credentials=Credentials(username=username, password=password),
                )
            transport = HnapTransport(config=config)
        self._transport = transport
        self._query_lock = asyncio.Lock()

    @property
    def _host(self) -> str:
        return self._transport._host

    @property
    def config(self) -> DeviceConfig:
        """Return the connection parameters the client is using."""
        return self._transport._config

    @property
    def session(self) -> HnapSession:
        """Return the authentication state of the client."""
        return self._transport.session

    @property
    def logged_in(self) -> bool:
        """Return True if the last login succeeded."""
        return self.session.is_authenticated

    async def login(self) -> bool:
        """Log in to the plug, retrying the whole sequence on transport errors.

        Returns False if the plug rejected the credentials. Raises
        :class:`MaxLoginAttemptsError` once ``config.login_retry_count``
        retries failed.
        """
        async with self._query_lock:
            return await self._login(self.config.login_retry_count)

    async def _login(self, retry_count: int) -> bool:
        for retry in range(retry_count + 1):
            try:
                logged_in = await self._transport.perform_login()
            except HnapException as ex:
                if retry >= retry_count:
                    _LOGGER.error("Unable to log in to %s: %s", self._host, ex)
                    _LOGGER.warning(
                        "Giving up logging in to %s after %s retries",
                        self._host,
                        retry,
                    )
                    raise MaxLoginAttemptsError(
                        f"Maximum login attempts exceeded for {self._host}: {ex}"
                    ) from ex

                backoff = self.BACKOFF_SECONDS_AFTER_ERROR * 2**retry
                _LOGGER.debug(
                    "Login to %s failed, retrying in %s seconds: %s",
                    self._host,
                    backoff,
                    ex,
                )
                await asyncio.sleep(backoff)
                continue

            if not logged_in:
                _LOGGER.warning(
                    "Device %s rejected the login: %s",
                    self._host,
                    self.session.login_result,
                )
            return logged_in

        # make mypy happy, this should never be reached..
        raise HnapException("Login reached somehow to unreachable")

    async def _read(self, method: HnapMethod, params: dict | None = None) -> str:
        body = await self._transport.send(method, params)
        return read_response_value(body, method.response_element)

    async def get_state(self) -> bool:
        """Return True if the socket is switched on.

        ``ERROR`` replies mean the plug refused the signature. They are
        re-read without logging in again until :data:`MAX_AUTH_RETRIES`
        consecutive failures, after which :class:`MaxLoginAttemptsError`
        is raised.
        """
        async with self._query_lock:
            params = module_params(SOCKET_MODULE_ID)
            while True:
                result = await self._read(HnapMethod.GetSocketSettings, params)
                if result != ERROR:
                    self.session.auth_failure_count = 0
                    return result == "true"

                if self.session.auth_failure_count >= MAX_AUTH_RETRIES:
                    raise MaxLoginAttemptsError("Maximum login attempts exceeded")
                self.session.auth_failure_count += 1
                _LOGGER.debug(
                    "Device %s rejected the state read, retry %s of %s",
                    self._host,
                    self.session.auth_failure_count,
                    MAX_AUTH_RETRIES,
                )

    async def set_state(self, is_on: bool) -> str:
        """Switch the socket and return the raw SetSocketSettingsResult."""
        async with self._query_lock:
            return await self._read(
                HnapMethod.SetSocketSettings, control_params(SOCKET_MODULE_ID, is_on)
            )

    async def get_temperature(self) -> float:
        """Return the plug temperature or -99 if it could not be read."""
        async with self._query_lock:
            try:
                result = await self._read(
                    HnapMethod.GetCurrentTemperature,
                    module_params(TEMPERATURE_MODULE_ID),
                )
            except HnapException as ex:
                _LOGGER.error("Unable to read temperature of %s: %s", self._host, ex)
                return UNKNOWN_TEMPERATURE
        try:
            temperature = float(result)
        except ValueError:
            temperature = math.nan
        if not math.isfinite(temperature):
            _LOGGER.debug("Device %s returned no temperature: %s", self._host, result)
            return UNKNOWN_TEMPERATURE
        return temperature

    async def get_ap_client_settings(self) -> str:
        """Return the raw response for the 2.4GHz access point client settings."""
        async with self._query_lock:
            return await self._transport.send(
                HnapMethod.GetAPClientSettings, radio_params(DEFAULT_RADIO_ID)
            )

    async def get_internet_settings(self) -> InternetSettings | None:
        """Return the network settings of the plug.

        Returns None if the request failed or the response carries no settings.
        """
        async with self._query_lock:
            try:
                body = await self._transport.send(HnapMethod.GetInternetSettings)
            except HnapException as ex:
                _LOGGER.error(
                    "Unable to read internet settings of %s: %s", self._host, ex
                )
                return None
        settings = InternetSettings.from_xml(body)
        if settings is None:
            _LOGGER.debug("Device %s returned no internet settings", self._host)
        else:
            _LOGGER.debug(
                "Device %s internet settings: %s (%s)",
                self._host,
                settings.hostname,
                mask_mac(settings.mac_address),
            )
        return settings

    async def is_ready(self) -> bool:
        """Return True if the plug reports it is ready."""
        async with self._query_lock:
            result = await self._read(HnapMethod.IsDeviceReady)
        return result == DEVICE_READY

    async def close(self) -> None:
        """Close the underlying transport."""
        await self._transport.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
