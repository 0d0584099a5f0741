"""Configuration for connecting directly to a plug.

A :class:`DeviceConfig` holds everything needed to talk to a plug and can be
stored and restored as a plain dict:

>>> from hnap import Credentials, DeviceConfig
>>> config = DeviceConfig("192.168.0.60", credentials=Credentials(password="123456"))
>>> config_dict = config.to_dict()
>>> print(config_dict)
{'host': '192.168.0.60', 'timeout': 5, 'credentials': {'username': 'admin', \
'password': '123456'}, 'login_retry_count': 3}

>>> later = DeviceConfig.load(config_dict)
>>> later == config
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from aiohttp import ClientSession
from mashumaro import field_options
from mashumaro.config import BaseConfig
from mashumaro.exceptions import ExtraKeysError
from mashumaro.types import SerializationStrategy

from .credentials import Credentials
from .exceptions import HnapException
from .json import DataClassJSONMixin

_LOGGER = logging.getLogger(__name__)


class _DoNotSerialize(SerializationStrategy):
    def serialize(self, value: Any) -> None:
        return None

    def deserialize(self, value: Any) -> None:
        return None


@dataclass
class DeviceConfig(DataClassJSONMixin):
    """Class to represent paramaters that determine how to connect to plugs."""

    class Config(BaseConfig):
        """Serialization config."""

        omit_none = True
        forbid_extra_keys = True

    DEFAULT_TIMEOUT = 5
    DEFAULT_LOGIN_RETRY_COUNT = 3

    #: IP address or hostname
    host: str
    #: Timeout in seconds for each http request
    timeout: int | None = DEFAULT_TIMEOUT
    #: Override the default http port to support port forwarding
    port_override: int | None = None
    #: Credentials for the plug, defaults to ``admin`` with an empty password
    credentials: Credentials = field(default_factory=Credentials)
    #: How many times a failed login sequence is retried before giving up
    login_retry_count: int = DEFAULT_LOGIN_RETRY_COUNT

    # compare=False will be excluded from object comparison.
    #: Set a custom http_client for the device to use.
    http_client: ClientSession | None = field(
        default=None,
        compare=False,
        metadata=field_options(serialization_strategy=_DoNotSerialize()),
    )

    def __post_init__(self) -> None:
        if self.credentials is None:
            self.credentials = Credentials()

    @staticmethod
    def load(config_dict: dict[str, Any]) -> DeviceConfig:
        """Load a device config from a dict, raising HnapException if invalid."""
        if not isinstance(config_dict, dict):
            raise HnapException(f"Invalid device config data: {config_dict}")
        try:
            return DeviceConfig.from_dict(config_dict)
        except (ExtraKeysError, ValueError, TypeError, LookupError) as ex:
            _LOGGER.debug("Unable to load device config %s: %s", config_dict, ex)
            raise HnapException(f"Invalid device config data: {ex}") from ex
