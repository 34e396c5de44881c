"""Top-scorer leaderboard built on reconciled player statistics."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import Match, ScorerRecord, Team
from .players import reconcile_players

GOAL_WEIGHT = 10
POTM_WEIGHT = 5


def aggregate_goals_from_events(
    fixtures: Iterable[Match] = (),
    results: Iterable[Match] = (),
    teams: Iterable[Team] = (),
) -> List[ScorerRecord]:
    reconciled = reconcile_players(teams, list(fixtures) + list(results))
    records: List[ScorerRecord] = []
    for team in reconciled:
        for player in team.players:
            stats = player.stats
            if stats.goals <= 0 and stats.potm_wins <= 0:
                continue
            records.append(
                ScorerRecord(
                    name=player.name,
                    team_name=team.name,
                    goals=stats.goals,
                    potm_wins=stats.potm_wins,
                    score=stats.goals * GOAL_WEIGHT + stats.potm_wins * POTM_WEIGHT,
                    crest_url=team.crest_url,
                    player_id=player.id,
                )
            )
    records.sort(key=lambda record: (-record.goals, -record.score))
    return records


def shortlist(records: Sequence[ScorerRecord], limit: int = 5) -> List[ScorerRecord]:
    """Top ``limit`` entries, e.g. the player-of-the-month candidates."""
    if limit <= 0:
        return []
    return list(records[:limit])


__all__ = [
    "GOAL_WEIGHT",
    "POTM_WEIGHT",
    "aggregate_goals_from_events",
    "shortlist",
]
