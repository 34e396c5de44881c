from __future__ import annotations

from league_reconciler.fixtures import (
    deduplicate_matches,
    flag_duplicates,
    match_key,
    partition_matches,
    rename_team_in_matches,
)
from league_reconciler.models import Match, MatchEvent, PlayerOfTheMatch


def _finished(team_a: str, team_b: str, score_a: int, score_b: int, day: str = "2024-01-01", **extra) -> Match:
    return Match(
        team_a=team_a,
        team_b=team_b,
        full_date=day,
        status="finished",
        score_a=score_a,
        score_b=score_b,
        **extra,
    )


def test_match_key_is_symmetric() -> None:
    home_first = Match(team_a="Royal Leopards", team_b="Green Mamba", full_date="2024-03-02")
    away_first = Match(team_a="GREEN MAMBA", team_b="Royal Leopards", full_date="2024-03-02")
    assert match_key(home_first) == match_key(away_first) == "greenmamba-royalleopards-2024-03-02"


def test_match_key_falls_back_to_short_date() -> None:
    match = Match(team_a="A", team_b="B", date="14")
    assert match_key(match) == "a-b-14"


def test_finished_record_wins_over_scheduled_duplicate() -> None:
    result = _finished("Royal Leopards", "Green Mamba", 2, 1, id="result")
    fixture = Match(team_a="Green Mamba", team_b="Royal Leopards", full_date="2024-01-01", id="fixture")

    assert list(deduplicate_matches([result, fixture]).values()) == [result]
    assert list(deduplicate_matches([fixture, result]).values()) == [result]


def test_last_seen_wins_otherwise() -> None:
    first = _finished("A", "B", 1, 0, id=1)
    second = _finished("A", "B", 2, 0, id=2)
    unique = deduplicate_matches([first, second])
    assert len(unique) == 1
    assert next(iter(unique.values())).id == 2


def test_different_dates_are_different_matches() -> None:
    unique = deduplicate_matches(
        [_finished("A", "B", 1, 0, day="2024-01-01"), _finished("A", "B", 1, 0, day="2024-04-01")]
    )
    assert len(unique) == 2


def test_rename_team_in_matches_rewrites_teams_events_and_potm() -> None:
    match = _finished(
        "Mbabane Swallows FC",
        "Green Mamba",
        1,
        0,
        events=(
            MatchEvent(type="goal", player_name="Sabelo", team_name="mbabane swallows fc"),
            MatchEvent(type="goal", player_name="Felix", team_name="Green Mamba"),
        ),
        player_of_the_match=PlayerOfTheMatch(name="Sabelo", team_name="Mbabane Swallows F.C."),
    )
    untouched = _finished("Royal Leopards", "Green Mamba", 0, 0)

    renamed = rename_team_in_matches([match, untouched], "Mbabane Swallows FC", "Mbabane Swallows")

    assert renamed[0].team_a == "Mbabane Swallows"
    assert renamed[0].team_b == "Green Mamba"
    assert renamed[0].events[0].team_name == "Mbabane Swallows"
    assert renamed[0].events[1].team_name == "Green Mamba"
    assert renamed[0].player_of_the_match.team_name == "Mbabane Swallows"
    assert renamed[1] == untouched
    assert match.team_a == "Mbabane Swallows FC"


def test_partition_matches_moves_finished_fixtures_to_results() -> None:
    finished = _finished("A", "B", 1, 1)
    missing_score = Match(team_a="A", team_b="C", status="finished", score_a=2)
    scheduled = Match(team_a="B", team_b="C")

    results, fixtures = partition_matches([scheduled, finished, missing_score])

    assert results == [finished]
    assert fixtures == [scheduled, missing_score]


def test_flag_duplicates_uses_the_dedup_key() -> None:
    existing = [_finished("Royal Leopards", "Green Mamba", 2, 1)]
    candidates = [
        Match(team_a="Green Mamba", team_b="Royal Leopards", full_date="2024-01-01"),
        Match(team_a="Green Mamba", team_b="Royal Leopards", full_date="2024-05-01"),
    ]
    flagged = flag_duplicates(existing, candidates)
    assert [is_duplicate for _, is_duplicate in flagged] == [True, False]
