"""The list of matches shown beside the match play controls."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from fieldcontrol.records import Match, MatchStatus

_COLOR_CLASSES = {
    MatchStatus.RED_WON: "danger",
    MatchStatus.BLUE_WON: "info",
    MatchStatus.TIE: "warning",
}


@dataclass
class MatchPlayListItem:
    id: int
    display_name: str
    time: str
    status: MatchStatus
    color_class: str = ""


def _format_time(value: datetime | None) -> str:
    if value is None:
        return ""
    if value.tzinfo is not None:
        value = value.astimezone()
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M %p}"


def build_match_play_list(matches: Iterable[Match], current_match_id: int | None) -> list[MatchPlayListItem]:
    """Builds the list with unplayed matches first, keeping the original order otherwise."""
    items = []
    for match in matches:
        color_class = _COLOR_CLASSES.get(match.status, "")
        if current_match_id is not None and match.id == current_match_id:
            color_class = "success"
        items.append(
            MatchPlayListItem(
                id=match.id,
                display_name=match.type_prefix() + match.display_name,
                time=_format_time(match.time),
                status=match.status,
                color_class=color_class,
            )
        )
    items.sort(key=lambda item: item.status is not MatchStatus.NOT_PLAYED)
    return items