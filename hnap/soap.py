"""HNAP method catalog and SOAP envelope builder.

Every HNAP call is a SOAP envelope whose body holds a single element named
after the method, in the ``http://purenetworks.com/HNAP1/`` namespace, with
the method parameters as child elements.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any
from xml.sax.saxutils import escape

HNAP1_XMLNS = "http://purenetworks.com/HNAP1/"

#: Module id of the relay on the plug
SOCKET_MODULE_ID = 1
#: Module id of the temperature sensor on the plug
TEMPERATURE_MODULE_ID = 3
#: Radio queried for the access point client settings
DEFAULT_RADIO_ID = "RADIO_2.4GHz"
SOCKET_NICKNAME = "Socket 1"


class HnapMethod(Enum):
    """HNAP methods understood by the plug."""

    Login = "Login"
    GetSocketSettings = "GetSocketSettings"
    SetSocketSettings = "SetSocketSettings"
    GetCurrentTemperature = "GetCurrentTemperature"
    GetAPClientSettings = "GetAPClientSettings"
    GetInternetSettings = "GetInternetSettings"
    IsDeviceReady = "IsDeviceReady"

    @property
    def soap_action(self) -> str:
        """Return the quoted SOAPAction uri for the method."""
        return f'"{HNAP1_XMLNS}{self.value}"'

    @property
    def response_element(self) -> str:
        """Return the name of the element holding the method result."""
        return _RESPONSE_ELEMENTS[self]


_RESPONSE_ELEMENTS = {
    HnapMethod.Login: "LoginResult",
    HnapMethod.GetSocketSettings: "OPStatus",
    HnapMethod.SetSocketSettings: "SetSocketSettingsResult",
    HnapMethod.GetCurrentTemperature: "CurrentTemperature",
    HnapMethod.GetAPClientSettings: "GetAPClientSettingsResult",
    HnapMethod.GetInternetSettings: "GetInternetSettingsResult",
    HnapMethod.IsDeviceReady: "IsDeviceReadyResult",
}


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return escape(str(value))


def build_envelope(
    method: HnapMethod, params: Mapping[str, Any] | None = None
) -> str:
    """Build the SOAP envelope for *method* with *params* as child elements."""
    body = ""
    if params:
        body = "".join(
            f"<{key}>{_format_value(value)}</{key}>" for key, value in params.items()
        )

    return (
        '<?xml version="1.0" encoding="utf-8"?>'
        "<soap:Envelope "
        'xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance" '
        'xmlns:xsd="http://www.w3.org/2001/XMLSchema" '
        'xmlns:soap="http://schemas.xmlsoap.org/soap/envelope/">'
        "<soap:Body>"
        f'<{method.value} xmlns="{HNAP1_XMLNS}">'
        f"{body}"
        f"</{method.value}>"
        "</soap:Body></soap:Envelope>"
    )


def login_request_params(username: str) -> dict[str, str]:
    """Return the parameters asking the plug for a login challenge."""
    return {
        "Action": "request",
        "Username": username,
        "LoginPassword": "",
        "Captcha": "",
    }


def login_params(username: str, login_password: str) -> dict[str, str]:
    """Return the parameters answering the login challenge."""
    return {
        "Action": "login",
        "Username": username,
        "LoginPassword": login_password,
        "Captcha": "",
    }


def module_params(module_id: int) -> dict[str, int]:
    return {"ModuleID": module_id}


def radio_params(radio_id: str) -> dict[str, str]:
    return {"RadioID": radio_id}


def control_params(module_id: int, is_on: bool) -> dict[str, Any]:
    """Return the parameters switching the socket of *module_id*."""
    return {
        **module_params(module_id),
        "NickName": SOCKET_NICKNAME,
        "Description": SOCKET_NICKNAME,
        "OPStatus": is_on,
        "Controller": 1,
    }
