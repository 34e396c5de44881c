"""Name keys and deterministic identities for free-text team and player names."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Set

if TYPE_CHECKING:  # pragma: no cover
    from .models import Match, Team

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_name(value: Optional[str]) -> str:
    """Return the comparison key for a team or player name.

    Two names refer to the same entity exactly when their keys are equal, so
    every comparison in the package goes through this function.
    """
    if not value:
        return ""
    return _NON_ALNUM.sub("", str(value).lower()).strip()


def stable_id(value: Optional[str]) -> int:
    """Derive a non-negative id from the normalized name.

    Uses the 31-multiplier rolling hash wrapped to a signed 32-bit integer, so
    the result is the same in every process (unlike the salted ``hash``).
    """
    result = 0
    for char in normalize_name(value):
        result = (result * 31 + ord(char)) & 0xFFFFFFFF
    if result >= 0x80000000:
        result -= 0x100000000
    return abs(result)


def resolve_official_name(name: Optional[str], official_names: Iterable[str]) -> Optional[str]:
    target = normalize_name(name)
    if not target:
        return None
    for official in official_names:
        if normalize_name(official) == target:
            return official
    return None


def find_unknown_team_names(teams: Sequence["Team"], matches: Iterable["Match"]) -> List[str]:
    """List team names used by matches that match no known team."""
    known: Set[str] = {normalize_name(team.name) for team in teams}
    unknown: Set[str] = set()
    for match in matches:
        for raw in (match.team_a, match.team_b):
            name = (raw or "").strip()
            if name and normalize_name(name) not in known:
                unknown.add(name)
    return sorted(unknown)


__all__ = [
    "find_unknown_team_names",
    "normalize_name",
    "resolve_official_name",
    "stable_id",
]
