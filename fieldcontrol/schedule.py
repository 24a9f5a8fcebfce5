"""Random practice and qualification schedules from anonymized templates."""

from __future__ import annotations

import csv
import math
import os
import random
from datetime import datetime, timedelta
from typing import Iterable, Iterator, Sequence

from fieldcontrol.records import Match, ScheduleBlock, Team

TEAMS_PER_MATCH = 6
_POSITIONS = ("red1", "red2", "red3", "blue1", "blue2", "blue3")
_FIELDS_PER_ROW = 2 * TEAMS_PER_MATCH


class ScheduleError(Exception):
    """Raised when a schedule cannot be built."""


def count_matches(schedule_blocks: Iterable[ScheduleBlock]) -> int:
    """Total number of matches the schedule blocks have room for."""
    return sum(block.num_matches for block in schedule_blocks)


def build_random_schedule(
    teams: Sequence[Team],
    schedule_blocks: Sequence[ScheduleBlock],
    match_type: str,
    schedules_dir: str | os.PathLike[str] = "schedules",
    rng: random.Random | None = None,
) -> list[Match]:
    """Fills a pre-randomized template with a random ordering of the teams."""
    num_teams = len(teams)
    if num_teams == 0:
        raise ScheduleError("No teams to schedule")
    matches_per_team = int(count_matches(schedule_blocks) * TEAMS_PER_MATCH / num_teams)
    # Drop any excess slots left over from imperfect block sizing.
    num_matches = math.ceil(num_teams * matches_per_team / TEAMS_PER_MATCH)

    path = os.path.join(os.fspath(schedules_dir), f"{num_teams}_{matches_per_team}.csv")
    try:
        with open(path, newline="") as template:
            rows = [row for row in csv.reader(template) if row]
    except OSError:
        raise ScheduleError(
            f"No schedule template exists for {num_teams} teams and {matches_per_team} matches"
        ) from None
    if len(rows) != num_matches:
        raise ScheduleError(f"Schedule file contains {len(rows)} matches, expected {num_matches}")

    anon_schedule = [_parse_row(row, num_teams) for row in rows]

    if rng is None:
        rng = random.Random()
    shuffle = list(range(num_teams))
    rng.shuffle(shuffle)

    matches = []
    for number, anon_match in enumerate(anon_schedule, start=1):
        assignments: dict[str, object] = {}
        for position, (team_index, surrogate) in zip(_POSITIONS, anon_match):
            assignments[position] = teams[shuffle[team_index - 1]].id
            assignments[f"{position}_is_surrogate"] = surrogate == 1
        matches.append(Match(type=match_type, display_name=str(number), **assignments))

    for match, slot in zip(matches, _time_slots(schedule_blocks)):
        match.time = slot
    return matches


def _parse_row(row: list[str], num_teams: int) -> list[tuple[int, int]]:
    if len(row) < _FIELDS_PER_ROW:
        raise ScheduleError(f"Schedule row has {len(row)} fields, expected {_FIELDS_PER_ROW}")
    try:
        values = [int(value) for value in row[:_FIELDS_PER_ROW]]
    except ValueError as exc:
        raise ScheduleError(f"Invalid schedule entry: {exc}") from exc
    pairs = list(zip(values[0::2], values[1::2]))
    for team_index, _ in pairs:
        if not 1 <= team_index <= num_teams:
            raise ScheduleError(f"Schedule team index {team_index} is out of range")
    return pairs


def _time_slots(schedule_blocks: Iterable[ScheduleBlock]) -> Iterator[datetime]:
    for block in schedule_blocks:
        for i in range(block.num_matches):
            yield block.start_time + timedelta(seconds=i * block.match_spacing_sec)