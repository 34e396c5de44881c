"""Whole-competition operations that combine the engine steps."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from .fixtures import partition_matches, rename_team_in_matches
from .models import Competition, Team
from .names import normalize_name
from .players import merge_team_snapshots, reconcile_players
from .standings import calculate_standings

LOGGER = logging.getLogger(__name__)


class UnknownTeamError(LookupError):
    """Raised when an admin operation names a team the competition lacks."""


def recalculate_competition(competition: Competition, *, reconcile: bool = True) -> Competition:
    """Rebuild standings (and player stats) for one competition snapshot.

    Fixtures and results are re-partitioned first, so a result filed as a
    fixture moves to the results list and vice versa.
    """
    results, fixtures = partition_matches(competition.matches)
    teams = list(competition.teams)
    if reconcile:
        teams = reconcile_players(teams, fixtures + results)
    teams = calculate_standings(teams, results, fixtures)
    LOGGER.info(
        "Recalculated %s: %d teams, %d results, %d fixtures",
        competition.name,
        len(teams),
        len(results),
        len(fixtures),
    )
    return replace(
        competition,
        teams=tuple(teams),
        fixtures=tuple(fixtures),
        results=tuple(results),
    )


def _find_team(competition: Competition, name: str) -> Optional[Team]:
    key = normalize_name(name)
    for team in competition.teams:
        if key and normalize_name(team.name) == key:
            return team
    return None


def merge_teams(
    competition: Competition,
    keep_name: str,
    remove_name: str,
    *,
    reconcile: bool = True,
) -> Competition:
    """Fold ``remove_name`` into ``keep_name`` and recalculate.

    Players and staff of both records are combined, every match reference
    to the removed team is renamed, and the tables are rebuilt.
    """
    keep = _find_team(competition, keep_name)
    remove = _find_team(competition, remove_name)
    if keep is None or remove is None:
        missing = keep_name if keep is None else remove_name
        raise UnknownTeamError(f"Team {missing!r} not found in {competition.name!r}")
    if keep is remove:
        return recalculate_competition(competition, reconcile=reconcile)

    merged_team = merge_team_snapshots([keep, replace(remove, name=keep.name)])[0]
    dropped = {normalize_name(keep.name), normalize_name(remove.name)}
    teams = [team for team in competition.teams if normalize_name(team.name) not in dropped]
    teams.append(merged_team)

    renamed = replace(
        competition,
        teams=tuple(teams),
        fixtures=tuple(rename_team_in_matches(competition.fixtures, remove.name, keep.name)),
        results=tuple(rename_team_in_matches(competition.results, remove.name, keep.name)),
    )
    LOGGER.info("Merged %r into %r", remove.name, keep.name)
    return recalculate_competition(renamed, reconcile=reconcile)


__all__ = [
    "UnknownTeamError",
    "merge_teams",
    "recalculate_competition",
]
