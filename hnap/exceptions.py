"""Exceptions raised by python-hnap.

Everything the library raises derives from :class:`HnapException`, so
callers can catch that alone.
"""

from __future__ import annotations

from asyncio import TimeoutError as _asyncioTimeoutError


class HnapException(Exception):
    """Base class of every error raised by the library."""


class TimeoutError(HnapException, _asyncioTimeoutError):
    """The plug did not answer within the configured timeout."""

    def __repr__(self) -> str:
        return HnapException.__repr__(self)

    def __str__(self) -> str:
        return HnapException.__str__(self)


class _ConnectionError(HnapException):
    """The connection to the plug was refused, reset or dropped."""


class DeviceError(HnapException):
    """The plug answered, but not with what was asked for.

    ``result`` holds the raw result text the plug returned, if any.
    """

    def __init__(self, *args: object, result: str | None = None) -> None:
        super().__init__(*args)
        self.result = result

    def __repr__(self) -> str:
        result = repr(self.result) if self.result else ""
        return f"{type(self).__name__}({result})"

    def __str__(self) -> str:
        message = super().__str__()
        return f"{message} (result={self.result})" if self.result else message


class AuthenticationError(DeviceError):
    """The plug rejected the credentials."""


class _RetryableError(DeviceError):
    """The plug answered with something a fresh login may fix."""


class MaxLoginAttemptsError(HnapException):
    """Logging in, or reading state with the current session, kept failing."""
