"""Decoders for HNAP responses.

The plug answers every call with a SOAP envelope. Values are looked up by the
local name of their element anywhere in the document, a missing value is
reported with a sentinel instead of an exception so callers always receive a
value of the expected shape.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from defusedxml import ElementTree

from .json import DataClassJSONMixin

if TYPE_CHECKING:
    from xml.etree.ElementTree import Element

_LOGGER = logging.getLogger(__name__)

#: Value returned when the requested element is absent or empty
ERROR = "ERROR"
UNKNOWN = "Unknown"
UNKNOWN_MTU = -1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_document(body: str | bytes | None) -> Element | None:
    """Parse *body* into an element tree, returning None if it is not XML."""
    if not body:
        return None
    try:
        return ElementTree.fromstring(body)
    except (ElementTree.ParseError, ValueError) as ex:
        _LOGGER.debug("Failed to parse HNAP XML response: %s", ex)
        return None


def find_element(root: Element | None, name: str) -> Element | None:
    """Return the first element named *name* below and including *root*."""
    if root is None:
        return None
    for element in root.iter():
        if isinstance(element.tag, str) and _local_name(element.tag) == name:
            return element
    return None


def element_text(root: Element | None, name: str) -> str | None:
    """Return the text of the first element named *name* or None if empty."""
    element = find_element(root, name)
    if element is None or not element.text:
        return None
    return element.text


def read_response_value(body: str | bytes | None, element: str) -> str:
    """Return the text of *element* in *body* or :data:`ERROR`."""
    return element_text(parse_document(body), element) or ERROR


@dataclass
class LoginChallenge:
    """Session material handed out by the plug when a login is requested."""

    challenge: str | None
    public_key: str | None
    cookie: str | None
    login_result: str | None = None

    @property
    def is_complete(self) -> bool:
        """Return True if the challenge carries everything to derive a key."""
        return bool(self.challenge and self.public_key and self.cookie)

    @classmethod
    def from_xml(cls, body: str | bytes | None) -> LoginChallenge:
        root = parse_document(body)
        return cls(
            challenge=element_text(root, "Challenge"),
            public_key=element_text(root, "PublicKey"),
            cookie=element_text(root, "Cookie"),
            login_result=element_text(root, "LoginResult"),
        )


@dataclass
class InternetSettings(DataClassJSONMixin):
    """Snapshot of the network configuration reported by the plug."""

    hostname: str = UNKNOWN
    ip_address: str = UNKNOWN
    gateway: str = UNKNOWN
    subnet_mask: str = UNKNOWN
    mac_address: str = UNKNOWN
    mtu: int = UNKNOWN_MTU
    type: str = UNKNOWN

    #: Element names of the string fields in GetInternetSettingsResponse
    _ELEMENTS = {
        "hostname": "HostName",
        "ip_address": "IPAddress",
        "gateway": "Gateway",
        "subnet_mask": "SubnetMask",
        "mac_address": "MacAddress",
        "type": "Type",
    }

    @classmethod
    def from_xml(cls, body: str | bytes | None) -> InternetSettings | None:
        """Decode the settings, returning None if the response root is missing."""
        root = find_element(parse_document(body), "GetInternetSettingsResponse")
        if root is None:
            return None

        settings = cls()
        for attr, name in cls._ELEMENTS.items():
            if (value := element_text(root, name)) is not None:
                setattr(settings, attr, value)

        if (mtu := element_text(root, "MTU")) is not None:
            # leading digits count, like "1500 bytes"
            if match := _LEADING_INT.match(mtu):
                settings.mtu = int(match.group(1))
            else:
                _LOGGER.debug("Ignoring unparsable MTU %r", mtu)

        return settings


def mask_mac(mac: str) -> str:
    """Return mac address with last three octets blanked."""
    if mac == UNKNOWN:
        return mac
    if len(mac) == 12:
        return f"{mac[:6]}000000"
    delim = ":" if ":" in mac else "-"
    return f"{mac[:8]}{delim}00{delim}00{delim}00"
