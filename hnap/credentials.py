"""Credentials class for username / passwords."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_USERNAME = "admin"


@dataclass
class Credentials:
    """Credentials for authentication."""

    #: Username of the device account, the plugs only know ``admin``
    username: str = field(default=DEFAULT_USERNAME, repr=False)
    #: Password of the device, printed on the plug label as the PIN code
    password: str = field(default="", repr=False)
