"""python-hnap cli tool."""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, NoReturn

import asyncclick as click

from hnap import Credentials, DeviceConfig, HnapPlug
from hnap.json import dumps as json_dumps


def echo(*args: Any, **kwargs: Any) -> None:
    """Print a message unless json output was requested."""
    ctx = click.get_current_context().find_root()
    if "json" not in ctx.params or ctx.params["json"] is False:
        click.echo(*args, **kwargs)


def error(msg: str) -> NoReturn:
    """Print an error and exit."""
    click.echo(msg)
    sys.exit(1)


pass_dev = click.make_pass_decorator(HnapPlug)


def CatchAllExceptions(cls):
    """Capture all exceptions and prints them nicely.

    Idea from https://stackoverflow.com/a/44347763 and
    https://stackoverflow.com/questions/52213375
    """

    def _handle_exception(debug, exc):
        if isinstance(exc, click.ClickException):
            raise
        click.echo(f"Raised error: {exc}")
        if debug:
            raise
        click.echo("Run with --debug enabled to see stacktrace")
        sys.exit(1)

    class _CommandCls(cls):
        async def invoke(self, ctx):
            try:
                return await super().invoke(ctx)
            except Exception as exc:
                _handle_exception(ctx.params.get("debug", False), exc)

    return _CommandCls


def json_formatter_cb(result: Any, **kwargs: Any) -> None:
    """Format and output the result as JSON, if requested."""
    if not kwargs.get("json"):
        return

    if isinstance(result, HnapPlug):
        result = result.internal_state

    print(json_dumps(result, default=str, indent=True))


@click.group(
    invoke_without_command=True,
    cls=CatchAllExceptions(click.Group),
    result_callback=json_formatter_cb,
)
@click.option(
    "--host",
    envvar="HNAP_HOST",
    required=False,
    help="The host name or IP address of the plug to connect to.",
)
@click.option(
    "--port",
    envvar="HNAP_PORT",
    required=False,
    type=int,
    help="The http port of the plug.",
)
@click.option(
    "--username",
    default="admin",
    required=False,
    show_default=True,
    envvar="HNAP_USERNAME",
    help="Username to authenticate to the plug.",
)
@click.option(
    "--password",
    default="",
    required=False,
    envvar="HNAP_PASSWORD",
    help="Password (PIN code) to authenticate to the plug.",
)
@click.option(
    "--timeout",
    envvar="HNAP_TIMEOUT",
    default=DeviceConfig.DEFAULT_TIMEOUT,
    required=False,
    show_default=True,
    type=int,
    help="Timeout for device communications.",
)
@click.option(
    "--login-retries",
    envvar="HNAP_LOGIN_RETRIES",
    default=DeviceConfig.DEFAULT_LOGIN_RETRY_COUNT,
    required=False,
    show_default=True,
    type=int,
    help="How often a failed login is retried.",
)
@click.option(
    "-d",
    "--debug",
    envvar="HNAP_DEBUG",
    default=False,
    is_flag=True,
    help="Print debug output",
)
@click.option(
    "--json/--no-json",
    envvar="HNAP_JSON",
    default=False,
    is_flag=True,
    help="Output the results as JSON.",
)
@click.version_option(package_name="python-hnap")
@click.pass_context
async def cli(ctx, host, port, username, password, timeout, login_retries, debug, json):
    """A tool for controlling D-Link HNAP smart plugs."""
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO)

    if host is None:
        error("No host given, use --host or HNAP_HOST")

    config = DeviceConfig(
        host=host,
        port_override=port,
        timeout=timeout,
        credentials=Credentials(username=username, password=password),
        login_retry_count=login_retries,
    )
    plug = HnapPlug(config=config)

    @asynccontextmanager
    async def async_wrapped_device(device: HnapPlug):
        try:
            yield device
        finally:
            await device.disconnect()

    ctx.obj = await ctx.with_async_resource(async_wrapped_device(plug))
    await plug.update()

    if ctx.invoked_subcommand is None:
        return await ctx.invoke(state)

    return plug


@cli.command()
@pass_dev
async def state(dev: HnapPlug):
    """Print out the plug state."""
    echo(f"== {dev.alias or dev.host} - {dev.model} ==")
    echo(f"Host:         {dev.host}")
    echo(f"Ready:        {dev.is_ready}")
    echo(f"Device state: {'ON' if dev.is_on else 'OFF'}")
    echo(f"Temperature:  {dev.temperature}")
    echo(f"MAC:          {dev.mac}")
    return dev.internal_state


@cli.command()
@pass_dev
async def on(dev: HnapPlug):
    """Turn the plug on."""
    echo(f"Turning on {dev.alias or dev.host}")
    return await dev.turn_on()


@cli.command()
@pass_dev
async def off(dev: HnapPlug):
    """Turn the plug off."""
    echo(f"Turning off {dev.alias or dev.host}")
    return await dev.turn_off()


@cli.command()
@pass_dev
async def temperature(dev: HnapPlug):
    """Print the temperature reported by the plug."""
    temperature = await dev.client.get_temperature()
    echo(f"Temperature: {temperature}")
    return temperature


@cli.command()
@pass_dev
async def ready(dev: HnapPlug):
    """Print whether the plug reports it is ready."""
    is_ready = await dev.client.is_ready()
    echo(f"Ready: {is_ready}")
    return is_ready


@cli.command()
@pass_dev
async def internet(dev: HnapPlug):
    """Print the network settings of the plug."""
    settings = await dev.client.get_internet_settings()
    if settings is None:
        echo("No internet settings returned")
        return None

    for key, value in settings.to_dict().items():
        echo(f"{key}: {value}")
    return settings.to_dict()


@cli.command(name="ap-settings")
@pass_dev
async def ap_settings(dev: HnapPlug):
    """Print the raw 2.4GHz access point client settings."""
    response = await dev.client.get_ap_client_settings()
    echo(response)
    return response


if __name__ == "__main__":
    cli()
