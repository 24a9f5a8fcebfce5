import os

import pytest

from fieldcontrol.api import avatar_path, bracket_type, highest_played_match, team_nicknames
from fieldcontrol.records import Match, MatchStatus, Team


def test_bracket_type_double_elimination_ignores_alliance_count():
    assert bracket_type("double", 8) == "double"
    assert bracket_type("double", 16) == "double"


@pytest.mark.parametrize(
    "num_alliances, expected",
    [(16, "16"), (9, "16"), (8, "8"), (5, "8"), (4, "4"), (3, "4"), (2, "2"), (1, "2")],
)
def test_bracket_type_single_elimination(num_alliances, expected):
    assert bracket_type("single", num_alliances) == expected


def test_highest_played_match_reports_last_completed():
    matches = [
        Match(type="qualification", display_name="29", status=MatchStatus.RED_WON),
        Match(type="qualification", display_name="30"),
    ]
    assert highest_played_match(matches) == "29"


def test_highest_played_match_empty_when_nothing_played():
    assert highest_played_match([]) == ""
    assert highest_played_match([Match(display_name="1")]) == ""


def test_team_nicknames():
    teams = [Team(id=254, nickname="ChezyPof"), Team(id=1114, nickname="Simbots")]
    assert team_nicknames(teams) == {254: "ChezyPof", 1114: "Simbots"}


def test_avatar_path_uses_team_image_when_present(tmp_path):
    (tmp_path / "254.png").write_bytes(b"png")
    (tmp_path / "0.png").write_bytes(b"png")
    assert avatar_path(tmp_path, 254) == os.path.join(str(tmp_path), "254.png")


def test_avatar_path_falls_back_to_default(tmp_path):
    (tmp_path / "0.png").write_bytes(b"png")
    assert avatar_path(tmp_path, 1114) == os.path.join(str(tmp_path), "0.png")