"""Module for a D-Link HNAP smart plug.

:class:`HnapPlug` keeps the last known state of a plug so it can be read
without hitting the network::

>>> from hnap import HnapPlug, DeviceConfig, Credentials
>>> plug = await HnapPlug.connect(
>>>     config=DeviceConfig("192.168.0.60", credentials=Credentials(password="123456"))
>>> )
>>> print(plug.alias, plug.is_on, plug.temperature)
DSP-W215 True 24.0
>>> await plug.turn_off()
>>> print(plug.is_on)
False
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from .client import HnapClient
from .deviceconfig import DeviceConfig
from .exceptions import AuthenticationError, HnapException
from .responses import UNKNOWN, InternetSettings

_LOGGER = logging.getLogger(__name__)


def requires_update(f: Callable) -> Any:
    """Indicate that `update` should be called before accessing this method."""

    @wraps(f)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        self = args[0]
        if not self._last_update:
            raise HnapException("You need to await update() to access the data")
        return f(*args, **kwargs)

    wrapped.requires_update = True  # type: ignore[attr-defined]
    return wrapped


class HnapPlug:
    """Representation of a DSP-W215 smart plug."""

    MODEL = "DSP-W215"

    def __init__(
        self,
        host: str | None = None,
        *,
        config: DeviceConfig | None = None,
        client: HnapClient | None = None,
    ) -> None:
        """Create a new plug instance.

        :param str host: host name or IP address of the plug
        :param DeviceConfig config: connection parameters
        :param HnapClient client: client for communicating with the plug
        """
        if client is None:
            if config is None:
                if not host:
                    raise HnapException("host or config must be supplied")
                config = DeviceConfig(host=host)
            client = HnapClient(config=config)
        self.client = client
        self._last_update: dict[str, Any] = {}
        self._internet_settings: InternetSettings | None = None
        _LOGGER.debug("Initializing %s of type %s", self.host, type(self))

    @staticmethod
    async def connect(
        *,
        host: str | None = None,
        config: DeviceConfig | None = None,
    ) -> HnapPlug:
        """Connect to the plug, log in and fetch its state.

        :param host: Hostname of the plug
        :param config: Connection parameters, takes precedence over host
        """
        plug = HnapPlug(host, config=config)
        try:
            await plug.update()
        except Exception:
            await plug.disconnect()
            raise
        return plug

    async def update(self) -> None:
        """Log in if needed and refresh the cached plug state."""
        if not self.client.logged_in:
            _LOGGER.debug("Logging in to %s", self.host)
            if not await self.client.login():
                raise AuthenticationError(
                    f"Device {self.host} rejected the credentials",
                    result=self.client.session.login_result,
                )

        if self._internet_settings is None:
            self._internet_settings = await self.client.get_internet_settings()

        ready = await self.client.is_ready()
        _LOGGER.debug("Device %s %s ready", self.host, "is" if ready else "is NOT")

        self._last_update = {
            "is_ready": ready,
            "is_on": await self.client.get_state(),
            "temperature": await self.client.get_temperature(),
        }

    async def disconnect(self) -> None:
        """Disconnect and close any underlying connection resources."""
        await self.client.close()

    @property
    def host(self) -> str:
        """The plug host."""
        return self.client.config.host

    @property
    def model(self) -> str:
        """Return the plug model."""
        return self.MODEL

    @property
    def internet_settings(self) -> InternetSettings | None:
        """Return the network settings fetched on the first update."""
        return self._internet_settings

    @property
    def alias(self) -> str | None:
        """Return the hostname the plug reports for itself."""
        if self._internet_settings and self._internet_settings.hostname != UNKNOWN:
            return self._internet_settings.hostname
        return None

    @property
    def mac(self) -> str | None:
        """Return the mac address of the plug."""
        if self._internet_settings and self._internet_settings.mac_address != UNKNOWN:
            return self._internet_settings.mac_address
        return None

    @property  # type: ignore
    @requires_update
    def is_on(self) -> bool:
        """Return True if the socket is on."""
        return self._last_update["is_on"]

    @property
    def is_off(self) -> bool:
        """Return True if the socket is off."""
        return not self.is_on

    @property  # type: ignore
    @requires_update
    def is_ready(self) -> bool:
        """Return True if the plug reported ready on the last update."""
        return self._last_update["is_ready"]

    @property  # type: ignore
    @requires_update
    def temperature(self) -> float:
        """Return the last temperature reading, -99 if unknown."""
        return self._last_update["temperature"]

    @property
    def internal_state(self) -> dict[str, Any]:
        """Return the cached state, e.g. for json output."""
        state = dict(self._last_update)
        if self._internet_settings:
            state["internet_settings"] = self._internet_settings.to_dict()
        return state

    async def turn_on(self) -> str:
        """Turn the socket on."""
        return await self.set_state(True)

    async def turn_off(self) -> str:
        """Turn the socket off."""
        return await self.set_state(False)

    async def set_state(self, on: bool) -> str:
        """Set the socket state to *on* and return the raw device result."""
        result = await self.client.set_state(on)
        _LOGGER.debug("Device %s switched %s: %s", self.host, on, result)
        if self._last_update:
            self._last_update["is_on"] = on
        return result

    def __repr__(self) -> str:
        update_needed = " - update() needed" if not self._last_update else ""
        return f"<{self.model} at {self.host} - {self.alias}{update_needed}>"
