import asyncio
import re
from unittest.mock import ANY

import aiohttp
import pytest
from yarl import URL

from hnap.deviceconfig import DeviceConfig
from hnap.exceptions import HnapException, TimeoutError, _ConnectionError
from hnap.httpclient import HttpClient

HOST = "127.0.0.1"
URL_ = URL(f"http://{HOST}/HNAP1")


class _mock_response:
    def __init__(self, status, data):
        self.status = status
        self._data = data

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_t, exc_v, exc_tb):
        pass

    async def read(self):
        return self._data


@pytest.mark.parametrize(
    ("error", "error_raises", "error_message"),
    [
        (
            aiohttp.ServerDisconnectedError(),
            _ConnectionError,
            "Device connection error: ",
        ),
        (
            aiohttp.ClientOSError(),
            _ConnectionError,
            "Device connection error: ",
        ),
        (
            aiohttp.ServerTimeoutError(),
            TimeoutError,
            "Unable to query the device, timed out: ",
        ),
        (
            asyncio.TimeoutError(),
            TimeoutError,
            "Unable to query the device, timed out: ",
        ),
        (Exception(), HnapException, "Unable to query the device: "),
        (
            aiohttp.ServerFingerprintMismatch(b"exp", b"got", "host", 1),
            HnapException,
            "Unable to query the device: ",
        ),
    ],
    ids=(
        "ServerDisconnectedError",
        "ClientOSError",
        "ServerTimeoutError",
        "TimeoutError",
        "Exception",
        "ServerFingerprintMismatch",
    ),
)
async def test_httpclient_errors(mocker, error, error_raises, error_message):
    mocker.patch("aiohttp.ClientSession.post", side_effect=error)
    client = HttpClient(DeviceConfig(HOST))

    # Exceptions with parameters print with double quotes, without use single quotes
    full_msg = (
        re.escape("(")
        + "['\"]"
        + re.escape(f"{error_message}{HOST}: {error}")
        + "['\"]"
        + re.escape(f", {repr(error)})")
    )
    with pytest.raises(error_raises, match=error_message) as exc_info:
        await client.post(URL_, data=b"<x/>")

    assert re.match(full_msg, str(exc_info.value))
    assert exc_info.value.__cause__ is error
    await client.close()


async def test_post(mocker):
    async def _post(url, **kwargs):
        return _mock_response(200, b"<ok/>")

    mock_post = mocker.patch.object(aiohttp.ClientSession, "post", side_effect=_post)
    client = HttpClient(DeviceConfig(HOST, timeout=7))

    status, data = await client.post(
        URL_,
        data=b"<x/>",
        headers={"SOAPAction": "action"},
        cookies_dict={"uid": "COOKIE"},
    )

    assert (status, data) == (200, b"<ok/>")
    mock_post.assert_called_once_with(
        URL_,
        data=b"<x/>",
        timeout=ANY,
        cookies={"uid": "COOKIE"},
        headers={"SOAPAction": "action"},
    )
    assert mock_post.call_args.kwargs["timeout"].total == 7
    await client.close()


async def test_post_returns_error_status(mocker, caplog):
    async def _post(url, **kwargs):
        return _mock_response(500, b"failure")

    mocker.patch.object(aiohttp.ClientSession, "post", side_effect=_post)
    client = HttpClient(DeviceConfig(HOST))

    caplog.set_level("DEBUG")
    assert await client.post(URL_) == (500, b"failure")
    assert "received status code 500" in caplog.text
    await client.close()


async def test_shared_http_client():
    session = aiohttp.ClientSession()
    client = HttpClient(DeviceConfig(HOST, http_client=session))

    assert client.client is session
    await client.close()
    assert not session.closed
    await session.close()


async def test_close_owned_session():
    client = HttpClient(DeviceConfig(HOST))
    session = client.client
    assert client.client is session

    await client.close()
    assert session.closed
    assert client.client is not session
    await client.close()


async def test_default_timeout(mocker):
    async def _post(url, **kwargs):
        return _mock_response(200, b"<ok/>")

    mock_post = mocker.patch.object(aiohttp.ClientSession, "post", side_effect=_post)
    config = DeviceConfig(HOST, timeout=None)
    client = HttpClient(config)

    await client.post(URL_)
    assert mock_post.call_args.kwargs["timeout"].total == DeviceConfig.DEFAULT_TIMEOUT
    assert config.timeout is None
    await client.close()
