from __future__ import annotations

import pytest
from asyncclick.testing import CliRunner

from hnap import Credentials, DeviceConfig, HnapClient, HnapPlug
from hnap.httpclient import HttpClient

from .fakedevice import FakeHnapDevice

HOST = "127.0.0.123"
PASSWORD = "123456"


@pytest.fixture()
def fake_device(mocker):
    """Return a fake plug answering every post made through HttpClient."""
    device = FakeHnapDevice(password=PASSWORD)
    mocker.patch.object(HttpClient, "post", side_effect=device.post)
    return device


@pytest.fixture()
def config():
    return DeviceConfig(host=HOST, credentials=Credentials(password=PASSWORD))


@pytest.fixture()
async def client(fake_device, config, mocker):
    """Return a client talking to the fake plug without login backoff."""
    client = HnapClient(config=config)
    mocker.patch.object(client, "BACKOFF_SECONDS_AFTER_ERROR", 0)
    yield client
    await client.close()


@pytest.fixture()
async def logged_in_client(client):
    assert await client.login()
    return client


@pytest.fixture()
async def plug(fake_device, config):
    plug = HnapPlug(config=config)
    yield plug
    await plug.disconnect()


@pytest.fixture()
def runner(monkeypatch):
    """Return a cli runner without HNAP_ environment leaking in."""
    for var in (
        "HNAP_HOST",
        "HNAP_PORT",
        "HNAP_USERNAME",
        "HNAP_PASSWORD",
        "HNAP_TIMEOUT",
        "HNAP_LOGIN_RETRIES",
        "HNAP_DEBUG",
        "HNAP_JSON",
    ):
        monkeypatch.delenv(var, raising=False)
    return CliRunner()
