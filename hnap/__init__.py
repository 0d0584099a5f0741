"""Python interface for D-Link smart plugs speaking HNAP.

The protocol client talks to the plug directly::

>>> from hnap import HnapClient
>>> async with HnapClient("192.168.0.60", password="123456") as client:
>>>     await client.login()
>>>     print(await client.get_state())

:class:`HnapPlug` wraps the client and caches the plug state between updates.

Protocol errors are raised as `HnapException` and are expected
to be handled by the user of the library.
"""

from hnap.client import HnapClient
from hnap.credentials import Credentials
from hnap.deviceconfig import DeviceConfig
from hnap.exceptions import (
    AuthenticationError,
    DeviceError,
    HnapException,
    MaxLoginAttemptsError,
    TimeoutError,
)
from hnap.hmacmd5 import sign
from hnap.plug import HnapPlug
from hnap.responses import InternetSettings
from hnap.soap import HnapMethod
from hnap.transport import HnapSession, HnapTransport
from hnap.version import __version__

__all__ = [
    "AuthenticationError",
    "Credentials",
    "DeviceConfig",
    "DeviceError",
    "HnapClient",
    "HnapException",
    "HnapMethod",
    "HnapPlug",
    "HnapSession",
    "HnapTransport",
    "InternetSettings",
    "MaxLoginAttemptsError",
    "TimeoutError",
    "sign",
    "__version__",
]
