"""Validation of the commands sent over the match play websocket."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

_V = TypeVar("_V")


class CommandError(Exception):
    """Raised when a match play command carries invalid data."""


def _parse_error(message_type: str) -> CommandError:
    return CommandError(f"Failed to parse '{message_type}' message.")


def parse_string_argument(message_type: str, data: Any) -> str:
    """The command's data as a string; raises CommandError if it is not one."""
    if not isinstance(data, str):
        raise _parse_error(message_type)
    return data


def parse_timeout_seconds(message_type: str, data: Any) -> int:
    """Whole seconds of a timeout given as a JSON number."""
    if isinstance(data, bool) or not isinstance(data, (int, float)):
        raise _parse_error(message_type)
    return int(data)


def validate_station(station: str, stations: Mapping[str, _V]) -> _V:
    """The alliance station with the given name; raises CommandError if there is none."""
    if station not in stations:
        raise CommandError(f"Invalid alliance station '{station}'.")
    return stations[station]


def field_may_be_cleared(is_pre_match: bool, is_post_match: bool) -> bool:
    """True when volunteers may enter or the field may be reset: only outside a running match."""
    return is_pre_match or is_post_match