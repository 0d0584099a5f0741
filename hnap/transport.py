"""Implementation of the HNAP transport used by D-Link smart plugs.

The plug authenticates with a two step challenge-response login:

login request: the client posts a ``Login`` call with ``Action=request`` and
receives a ``Challenge``, a ``PublicKey`` and a ``Cookie``. The session
private key is ``HMAC_MD5(PublicKey + password, Challenge)`` in uppercase hex.

login: the client posts a ``Login`` call with ``Action=login`` carrying
``HMAC_MD5(private_key, Challenge)`` as the ``LoginPassword``. The plug answers
with ``LoginResult`` set to ``success`` or ``failed``.

Every following call is signed with an ``HNAP_AUTH`` header holding
``HMAC_MD5(private_key, timestamp + SOAPAction)`` and the timestamp, and
carries the cookie as ``uid``. The signature is computed when the request is
sent so a new login immediately invalidates every earlier signature.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from yarl import URL

from .credentials import Credentials
from .deviceconfig import DeviceConfig
from .exceptions import HnapException, _RetryableError
from .hmacmd5 import sign
from .httpclient import HttpClient
from .responses import LoginChallenge, read_response_value
from .soap import HnapMethod, build_envelope, login_params, login_request_params

_LOGGER = logging.getLogger(__name__)

CONTENT_TYPE = "text/xml; charset=utf-8"
SESSION_COOKIE_NAME = "uid"
LOGIN_SUCCESS = "success"


@dataclass
class HnapSession:
    """Authentication state of one client."""

    challenge: str = ""
    public_key: str = ""
    cookie: str = ""
    private_key: str = ""
    login_result: str = ""
    auth_failure_count: int = 0

    @property
    def is_authenticated(self) -> bool:
        """Return True if the last login succeeded."""
        return bool(self.private_key) and self.login_result == LOGIN_SUCCESS


def derive_private_key(public_key: str, password: str, challenge: str) -> str:
    """Return the session signing key for a login challenge."""
    return sign(public_key + password, challenge).upper()


def hnap_auth(private_key: str, soap_action: str, timestamp: int) -> str:
    """Return the HNAP_AUTH header value for *soap_action* at *timestamp*."""
    return f"{sign(private_key, f'{timestamp}{soap_action}').upper()} {timestamp}"


class HnapTransport:
    """Implementation of the HNAP SOAP transport."""

    DEFAULT_PORT = 80
    ENDPOINT = "/HNAP1"

    def __init__(self, *, config: DeviceConfig) -> None:
        self._config = config
        self._host = config.host
        self._port = config.port_override or self.DEFAULT_PORT
        self._credentials: Credentials = config.credentials or Credentials()
        self._http_client = HttpClient(config)
        self._session = HnapSession()

        if config.port_override:
            self._app_url = URL(f"http://{self._host}:{self._port}{self.ENDPOINT}")
        else:
            self._app_url = URL(f"http://{self._host}{self.ENDPOINT}")
        _LOGGER.debug("Created HNAP transport for %s", self._host)

    @property
    def default_port(self) -> int:
        """Default port for the transport."""
        return self.DEFAULT_PORT

    @property
    def url(self) -> URL:
        """Return the HNAP endpoint of the plug."""
        return self._app_url

    @property
    def session(self) -> HnapSession:
        """Return the current session state."""
        return self._session

    def _headers(self, method: HnapMethod, *, signed: bool) -> dict[str, str]:
        headers = {
            "Content-Type": CONTENT_TYPE,
            "SOAPAction": method.soap_action,
        }
        if signed:
            timestamp = round(time.time())
            headers["HNAP_AUTH"] = hnap_auth(
                self._session.private_key, method.soap_action, timestamp
            )
        return headers

    async def _post(
        self,
        method: HnapMethod,
        params: Mapping[str, Any] | None,
        *,
        signed: bool,
    ) -> str:
        envelope = build_envelope(method, params)
        if method is not HnapMethod.Login:
            _LOGGER.debug("%s >> %s", self._host, envelope)

        status, response = await self._http_client.post(
            self._app_url,
            data=envelope.encode(),
            headers=self._headers(method, signed=signed),
            cookies_dict=(
                {SESSION_COOKIE_NAME: self._session.cookie} if signed else None
            ),
        )
        if status != 200:
            raise HnapException(
                f"Device {self._host} responded with {status} to {method.value}"
            )

        body = response.decode() if response else ""
        _LOGGER.debug("%s << %s", self._host, body)
        return body

    async def perform_login(self) -> bool:
        """Perform the challenge-response login.

        Returns True if the plug accepted the credentials.
        """
        _LOGGER.debug("Starting login with %s", self._host)
        await self.reset()
        username = self._credentials.username

        body = await self._post(
            HnapMethod.Login, login_request_params(username), signed=False
        )
        challenge = LoginChallenge.from_xml(body)
        if not challenge.is_complete:
            raise _RetryableError(
                f"Device {self._host} responded with an incomplete login challenge",
                result=challenge.login_result,
            )

        session = self._session
        session.challenge = challenge.challenge  # type: ignore[assignment]
        session.public_key = challenge.public_key  # type: ignore[assignment]
        session.cookie = challenge.cookie  # type: ignore[assignment]
        session.login_result = challenge.login_result or ""
        session.private_key = derive_private_key(
            session.public_key, self._credentials.password, session.challenge
        )

        login_password = sign(session.private_key, session.challenge).upper()
        body = await self._post(
            HnapMethod.Login, login_params(username, login_password), signed=True
        )
        result = read_response_value(body, HnapMethod.Login.response_element)
        session.login_result = result
        _LOGGER.debug("Login with %s finished with %s", self._host, result)
        return result == LOGIN_SUCCESS

    async def send(
        self, method: HnapMethod, params: Mapping[str, Any] | None = None
    ) -> str:
        """Send a signed call to the plug and return the response body."""
        return await self._post(method, params, signed=True)

    async def close(self) -> None:
        """Close the http client and reset internal state."""
        await self.reset()
        await self._http_client.close()

    async def reset(self) -> None:
        """Forget the current session."""
        self._session = HnapSession()
