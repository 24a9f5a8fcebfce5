"""Helpers shared by the display pages and their websockets."""

from __future__ import annotations

import re
from typing import Callable, Mapping
from urllib.parse import quote_plus

_REMOTE_ADDR = re.compile(r"(.*):\d+$")


def enforce_display_configuration(
    path: str,
    query: Mapping[str, str],
    defaults: Mapping[str, str] | None,
    next_display_id: Callable[[], str],
) -> str | None:
    """Returns the URL to redirect to when required parameters are missing, else None.

    The redirect carries a fresh display ID if none was given, the nickname if
    one was given, and every display-specific parameter, filled from defaults.
    """
    all_present = True
    configuration: dict[str, str] = {}

    display_id = query.get("displayId", "")
    if not display_id:
        display_id = next_display_id()
        all_present = False
    nickname = query.get("nickname", "")
    if nickname:
        configuration["nickname"] = nickname

    for key, default in (defaults or {}).items():
        value = query.get(key, "")
        if not value:
            value = default
            all_present = False
        configuration[key] = value

    if all_present:
        return None
    extra = "".join(f"&{quote_plus(key)}={quote_plus(value)}" for key, value in configuration.items())
    return f"{path}?displayId={display_id}{extra}"


def extract_ip_address(headers: Mapping[str, str], remote_addr: str) -> str:
    """Source IP of a request: the X-Real-IP header, else the host part of remote_addr."""
    for name, value in headers.items():
        if name.lower() == "x-real-ip" and value:
            return value
    match = _REMOTE_ADDR.match(remote_addr)
    if match is None:
        raise ValueError(f"cannot extract an IP address from {remote_addr!r}")
    return match.group(1)