"""League tables folded from deduplicated finished matches."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from .fixtures import deduplicate_matches
from .models import LeagueRow, Match, Team
from .names import normalize_name
from .players import merge_team_snapshots

LOGGER = logging.getLogger(__name__)

POINTS_FOR_WIN = 3
POINTS_FOR_DRAW = 1
FORM_LENGTH = 5


def _kickoff_date(value: str) -> date:
    try:
        return date.fromisoformat(value.strip()[:10])
    except ValueError:
        return date.min


class _RowBuilder:
    def __init__(self) -> None:
        self.played = 0
        self.won = 0
        self.drawn = 0
        self.lost = 0
        self.goals_for = 0
        self.goals_against = 0
        self.points = 0
        self.results: List[str] = []

    def record(self, scored: int, conceded: int) -> None:
        self.played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.won += 1
            self.points += POINTS_FOR_WIN
            self.results.append("W")
        elif scored < conceded:
            self.lost += 1
            self.results.append("L")
        else:
            self.drawn += 1
            self.points += POINTS_FOR_DRAW
            self.results.append("D")

    def freeze(self) -> LeagueRow:
        return LeagueRow(
            played=self.played,
            won=self.won,
            drawn=self.drawn,
            lost=self.lost,
            goals_for=self.goals_for,
            goals_against=self.goals_against,
            goal_difference=self.goals_for - self.goals_against,
            points=self.points,
            form=" ".join(reversed(self.results[-FORM_LENGTH:])),
        )


def _standing_sort_key(team: Team) -> tuple:
    row = team.stats
    return (-row.points, -row.goal_difference, -row.goals_for)


def calculate_standings(
    teams: Iterable[Team],
    results: Iterable[Match],
    fixtures: Optional[Iterable[Match]] = None,
) -> List[Team]:
    """Return the teams with freshly computed league rows, table ordered.

    Only finished matches with both scores count; fixtures are scanned too so
    a result filed among the fixtures is not lost. Matches naming a team that
    is not in ``teams`` are skipped.
    """
    merged = merge_team_snapshots(teams)
    rows: Dict[str, _RowBuilder] = {normalize_name(team.name): _RowBuilder() for team in merged}

    candidates = [
        match
        for match in list(results) + list(fixtures or [])
        if match.is_finished and match.has_score
    ]
    unique = deduplicate_matches(candidates).values()
    for match in sorted(unique, key=lambda item: _kickoff_date(item.date_key)):
        key_a = normalize_name(match.team_a)
        key_b = normalize_name(match.team_b)
        row_a = rows.get(key_a) if key_a else None
        row_b = rows.get(key_b) if key_b else None
        if row_a is None or row_b is None or key_a == key_b:
            LOGGER.debug("Skipping unresolvable match %s vs %s", match.team_a, match.team_b)
            continue
        row_a.record(match.score_a, match.score_b)
        row_b.record(match.score_b, match.score_a)

    updated = [
        replace(team, stats=rows[normalize_name(team.name)].freeze()) for team in merged
    ]
    return sorted(updated, key=_standing_sort_key)


def calculate_group_standings(teams: Sequence[Team], matches: Iterable[Match]) -> List[Team]:
    members = {normalize_name(team.name) for team in teams}
    in_group = [
        match
        for match in matches
        if normalize_name(match.team_a) in members and normalize_name(match.team_b) in members
    ]
    return calculate_standings(teams, in_group)


__all__ = [
    "FORM_LENGTH",
    "POINTS_FOR_DRAW",
    "POINTS_FOR_WIN",
    "calculate_group_standings",
    "calculate_standings",
]
