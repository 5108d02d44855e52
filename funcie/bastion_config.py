"""Settings for the client and server bastions, read from the environment."""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta
from fractions import Fraction


class ConfigError(ValueError):
    """Raised when the bastion configuration is missing or malformed."""


@dataclass
class ClientBastionConfig:
    """Settings for the bastion running next to the developer's applications."""

    redis_address: str = ""
    listen_address: str = ""
    base_channel_name: str = ""


@dataclass
class ServerBastionConfig:
    """Settings for the bastion running in the cloud."""

    redis_address: str = ""
    listen_address: str = ""
    request_ttl: timedelta = timedelta(0)
    request_channel: str = ""
    response_key_prefix: str = ""


_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "\u00b5s": 1_000,
    "\u03bcs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}
_COMPONENT = re.compile("(\\d+\\.?\\d*|\\.\\d+)(ns|us|\u00b5s|\u03bcs|ms|s|m|h)")
_MAX_NANOSECONDS = 2**63 - 1


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``"15m"``, ``"1h30m"`` or ``"-1.5s"``.

    Accepts a signed sequence of decimal numbers, each followed by one of the
    units ns, us (or µs), ms, s, m and h; a bare ``"0"`` is also accepted.
    Raises ValueError for anything else.
    """
    invalid = ValueError(f'time: invalid duration "{value}"')

    text = value
    negative = False
    if text and text[0] in "+-":
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise invalid

    total = Fraction(0)
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise invalid
        number, unit = match.groups()
        total += Fraction(number) * _NANOSECONDS[unit]
        pos = match.end()

    nanoseconds = int(total)
    limit = _MAX_NANOSECONDS + 1 if negative else _MAX_NANOSECONDS
    if nanoseconds > limit:
        raise invalid

    microseconds = nanoseconds // 1000
    return timedelta(microseconds=-microseconds if negative else microseconds)


def _required(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name, "")
    if not value:
        raise ConfigError(f"required environment variable {name} not set")
    return value


def _optional(environ: Mapping[str, str], name: str, default: str) -> str:
    return environ.get(name, "") or default


def client_config_from_environment(
    environ: Mapping[str, str] | None = None,
) -> ClientBastionConfig:
    """Build the client bastion settings from environment variables.

    FUNCIE_REDIS_ADDRESS is required; FUNCIE_LISTEN_ADDRESS defaults to
    127.0.0.1:24193 and FUNCIE_BASE_CHANNEL_NAME to funcie:requests.
    """
    env = os.environ if environ is None else environ
    return ClientBastionConfig(
        redis_address=_required(env, "FUNCIE_REDIS_ADDRESS"),
        listen_address=_optional(env, "FUNCIE_LISTEN_ADDRESS", "127.0.0.1:24193"),
        base_channel_name=_optional(env, "FUNCIE_BASE_CHANNEL_NAME", "funcie:requests"),
    )


def server_config_from_environment(
    environ: Mapping[str, str] | None = None,
) -> ServerBastionConfig:
    """Build the server bastion settings from environment variables.

    FUNCIE_REDIS_ADDRESS and FUNCIE_LISTEN_ADDRESS are required.
    FUNCIE_REQUEST_TTL defaults to 15m, FUNCIE_REQUEST_CHANNEL to
    funcie:requests and FUNCIE_RESPONSE_KEY_PREFIX to funcie:response.
    """
    env = os.environ if environ is None else environ
    redis_address = _required(env, "FUNCIE_REDIS_ADDRESS")
    listen_address = _required(env, "FUNCIE_LISTEN_ADDRESS")

    ttl_text = _optional(env, "FUNCIE_REQUEST_TTL", "15m")
    try:
        request_ttl = parse_duration(ttl_text)
    except ValueError as err:
        raise ConfigError(f"failed to parse duration {ttl_text}: {err}") from err

    return ServerBastionConfig(
        redis_address=redis_address,
        listen_address=listen_address,
        request_ttl=request_ttl,
        request_channel=_optional(env, "FUNCIE_REQUEST_CHANNEL", "funcie:requests"),
        response_key_prefix=_optional(env, "FUNCIE_RESPONSE_KEY_PREFIX", "funcie:response"),
    )