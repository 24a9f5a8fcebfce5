import pytest

from fieldcontrol.records import (
    Alliance,
    Award,
    AwardType,
    EventStore,
    LowerThird,
    Match,
    MatchResult,
    MatchStatus,
    Team,
)


def test_team_round_trip_returns_copies():
    store = EventStore()
    store.create_team(Team(id=254, nickname="Teh Chezy Pofs"))
    team = store.get_team_by_id(254)
    assert team == Team(id=254, nickname="Teh Chezy Pofs")
    team.nickname = "changed"
    assert store.get_team_by_id(254).nickname == "Teh Chezy Pofs"


def test_missing_team_is_none():
    assert EventStore().get_team_by_id(1114) is None


def test_duplicate_team_rejected():
    store = EventStore()
    store.create_team(Team(id=254))
    with pytest.raises(ValueError):
        store.create_team(Team(id=254))


def test_update_team_and_list_sorted():
    store = EventStore()
    store.create_team(Team(id=1114))
    store.create_team(Team(id=254))
    store.update_team(Team(id=254, yellow_card=True))
    teams = store.get_all_teams()
    assert [team.id for team in teams] == [254, 1114]
    assert teams[0].yellow_card is True


def test_update_missing_team_raises():
    with pytest.raises(KeyError):
        EventStore().update_team(Team(id=5))


def test_award_ids_assigned_increasing_and_never_reused():
    store = EventStore()
    first = Award(award_name="Safety Award")
    second = Award(type=AwardType.WINNER, award_name="Winner")
    store.create_award(first)
    store.create_award(second)
    assert first.id < second.id
    store.delete_award(second.id)
    third = Award(award_name="Spirit")
    store.create_award(third)
    assert third.id > second.id
    assert store.get_award_by_id(second.id) is None
    assert [award.id for award in store.get_all_awards()] == [first.id, third.id]


def test_awards_by_type():
    store = EventStore()
    store.create_award(Award(type=AwardType.FINALIST, award_name="Finalist"))
    store.create_award(Award(type=AwardType.WINNER, award_name="Winner"))
    winners = store.get_awards_by_type(AwardType.WINNER)
    assert [award.award_name for award in winners] == ["Winner"]


def test_delete_missing_award_raises():
    with pytest.raises(KeyError):
        EventStore().delete_award(3)


def test_lower_thirds_ordered_by_display_order():
    store = EventStore()
    late = LowerThird(top_text="late", display_order=store.next_lower_third_display_order() + 5)
    store.create_lower_third(late)
    early = LowerThird(top_text="early", display_order=0)
    store.create_lower_third(early)
    assert [lt.top_text for lt in store.get_all_lower_thirds()] == ["early", "late"]
    assert store.next_lower_third_display_order() > late.display_order


def test_lower_thirds_by_award():
    store = EventStore()
    store.create_lower_third(LowerThird(top_text="Marco", award_id=0))
    store.create_lower_third(LowerThird(top_text="Winner", award_id=7))
    found = store.get_lower_thirds_by_award_id(7)
    assert [lt.top_text for lt in found] == ["Winner"]
    store.delete_lower_third(found[0].id)
    assert store.get_lower_thirds_by_award_id(7) == []


def test_alliance_round_trip():
    store = EventStore()
    alliance = Alliance(id=1, team_ids=[101, 102, 103], lineup=(102, 101, 103))
    store.create_alliance(alliance)
    assert store.get_alliance_by_id(1) == alliance
    assert store.get_alliance_by_id(2) is None
    assert store.get_all_alliances() == [alliance]


def test_match_helpers():
    assert Match(type="practice").type_prefix() == "P"
    assert Match(type="qualification").type_prefix() == "Q"
    assert Match(type="elimination").type_prefix() == ""
    assert not Match().is_complete()
    assert Match(status=MatchStatus.TIE).is_complete()


def test_matches_by_type():
    store = EventStore()
    store.create_match(Match(type="qualification", display_name="1"))
    store.create_match(Match(type="practice", display_name="1"))
    store.create_match(Match(type="qualification", display_name="2"))
    names = [match.display_name for match in store.get_matches_by_type("qualification")]
    assert names == ["1", "2"]


def test_latest_match_result_wins():
    store = EventStore()
    match = Match(type="qualification")
    store.create_match(match)
    assert store.get_match_result_for_match(match.id) is None
    store.create_match_result(MatchResult(match_id=match.id, play_number=1, red_cards={"1": "red"}))
    store.create_match_result(MatchResult(match_id=match.id, play_number=2))
    latest = store.get_match_result_for_match(match.id)
    assert latest.play_number == 2
    assert latest.red_cards == {}