"""Deduplication and bulk edits over fixture and result records."""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import Match
from .names import normalize_name


def match_key(match: Match) -> str:
    """Identify the real-world match: unordered team pair plus date."""
    first, second = sorted((normalize_name(match.team_a), normalize_name(match.team_b)))
    return f"{first}-{second}-{match.date_key}"


def deduplicate_matches(matches: Iterable[Match]) -> Dict[str, Match]:
    """Collapse records sharing a :func:`match_key` into one.

    A finished record is never displaced by a record that is not finished;
    otherwise the record seen last wins.
    """
    unique: Dict[str, Match] = {}
    for match in matches:
        key = match_key(match)
        current = unique.get(key)
        if current is not None and current.is_finished and not match.is_finished:
            continue
        unique[key] = match
    return unique


def _rename(value: Optional[str], old_key: str, new_name: str) -> Optional[str]:
    if value and normalize_name(value) == old_key:
        return new_name
    return value


def rename_team_in_matches(
    matches: Sequence[Match], old_name: str, new_name: str
) -> List[Match]:
    old_key = normalize_name(old_name)
    renamed: List[Match] = []
    for match in matches:
        events = tuple(
            replace(event, team_name=_rename(event.team_name, old_key, new_name))
            for event in match.events
        )
        potm = match.player_of_the_match
        if potm is not None:
            potm = replace(potm, team_name=_rename(potm.team_name, old_key, new_name))
        renamed.append(
            replace(
                match,
                team_a=_rename(match.team_a, old_key, new_name) or "",
                team_b=_rename(match.team_b, old_key, new_name) or "",
                events=events,
                player_of_the_match=potm,
            )
        )
    return renamed


def partition_matches(matches: Iterable[Match]) -> Tuple[List[Match], List[Match]]:
    """Split matches into (results, fixtures).

    Results are finished matches carrying both scores; everything else,
    including finished records with a missing score, stays a fixture.
    """
    results: List[Match] = []
    fixtures: List[Match] = []
    for match in matches:
        if match.is_finished and match.has_score:
            results.append(match)
        else:
            fixtures.append(match)
    return results, fixtures


def flag_duplicates(
    existing: Iterable[Match], candidates: Sequence[Match]
) -> List[Tuple[Match, bool]]:
    known = {match_key(match) for match in existing}
    return [(candidate, match_key(candidate) in known) for candidate in candidates]


__all__ = [
    "deduplicate_matches",
    "flag_duplicates",
    "match_key",
    "partition_matches",
    "rename_team_in_matches",
]
