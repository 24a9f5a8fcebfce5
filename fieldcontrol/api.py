"""Data shaping for the JSON and SVG endpoints of the event API."""

from __future__ import annotations

import os
from typing import Iterable

from fieldcontrol.records import Match, Team

DEFAULT_AVATAR_ID = 0


def bracket_type(elim_type: str, num_alliances: int) -> str:
    """Template variant of the playoff bracket for the event's elimination format."""
    if elim_type != "single":
        return "double"
    if num_alliances > 8:
        return "16"
    if num_alliances > 4:
        return "8"
    if num_alliances > 2:
        return "4"
    return "2"


def highest_played_match(matches: Iterable[Match]) -> str:
    """Display name of the last completed match in schedule order, or '' if none is complete."""
    highest = ""
    for match in matches:
        if match.is_complete():
            highest = match.display_name
    return highest


def team_nicknames(teams: Iterable[Team]) -> dict[int, str]:
    """Maps each team number to its nickname."""
    return {team.id: team.nickname for team in teams}


def avatar_path(avatars_dir: str | os.PathLike[str], team_id: int) -> str:
    """Path of the team's avatar image, falling back to the default avatar when it has none."""
    directory = os.fspath(avatars_dir)
    path = os.path.join(directory, f"{team_id}.png")
    if not os.path.exists(path):
        path = os.path.join(directory, f"{DEFAULT_AVATAR_ID}.png")
    return path