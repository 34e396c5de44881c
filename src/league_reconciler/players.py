"""Merge team snapshots and rebuild player career statistics from matches."""

from __future__ import annotations

import logging
from dataclasses import asdict, replace
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Set, Tuple

from .fixtures import deduplicate_matches
from .models import (
    DEFAULT_POSITION,
    LineupEntry,
    Match,
    Player,
    PlayerBio,
    PlayerStats,
    StaffMember,
    Team,
)
from .names import normalize_name, stable_id

LOGGER = logging.getLogger(__name__)

DISCOVERED_NATIONALITY = "Eswatini"
CLEAN_SHEET_POSITIONS = frozenset({"Goalkeeper", "Defender"})
EVENT_STAT_FIELDS: Mapping[str, str] = {
    "goal": "goals",
    "assist": "assists",
    "yellow-card": "yellow_cards",
    "red-card": "red_cards",
}


def _is_placeholder_url(url: str) -> bool:
    cleaned = (url or "").strip().lower()
    return not cleaned or "placeholder" in cleaned


def _is_blank(value: object) -> bool:
    return value is None or value == "" or value == [] or value == {}


def _merge_player(primary: Player, other: Player) -> Player:
    return replace(
        primary,
        name=primary.name or other.name,
        photo_url=primary.photo_url or other.photo_url,
        bio=primary.bio or other.bio,
        number=primary.number or other.number,
        club=primary.club or other.club,
        base_stats=primary.base_stats
        if primary.base_stats != PlayerStats()
        else other.base_stats,
        transfer_history=primary.transfer_history or other.transfer_history,
        discovered=primary.discovered and other.discovered,
    )


def _has_assigned_id(player: Player) -> bool:
    """False for ids derived from the name (loader default or discovery)."""
    return not player.discovered and player.id != stable_id(player.name)


def _find_player(players: Sequence[Player], candidate: Player) -> Optional[int]:
    for index, player in enumerate(players):
        if player.id == candidate.id:
            return index
    key = normalize_name(candidate.name)
    if key:
        for index, player in enumerate(players):
            if normalize_name(player.name) != key:
                continue
            # Namesakes with their own ids are different people.
            if _has_assigned_id(player) and _has_assigned_id(candidate):
                continue
            return index
    return None


def _merge_rosters(primary: Sequence[Player], other: Iterable[Player]) -> List[Player]:
    merged = list(primary)
    for player in other:
        index = _find_player(merged, player)
        if index is None:
            merged.append(player)
        else:
            merged[index] = _merge_player(merged[index], player)
    return merged


def _merge_staff(
    primary: Sequence[StaffMember], other: Iterable[StaffMember]
) -> List[StaffMember]:
    merged = list(primary)
    for member in other:
        duplicate = any(
            (member.id is not None and existing.id == member.id)
            or normalize_name(existing.name) == normalize_name(member.name)
            for existing in merged
        )
        if not duplicate:
            merged.append(member)
    return merged


def _merge_team(primary: Team, other: Team) -> Team:
    crest_url = primary.crest_url
    if _is_placeholder_url(crest_url) and not _is_placeholder_url(other.crest_url):
        crest_url = other.crest_url
    extras = dict(other.extras)
    for key, value in primary.extras.items():
        if key not in extras or not _is_blank(value):
            extras[key] = value
    return replace(
        primary,
        id=primary.id if primary.id is not None else other.id,
        crest_url=crest_url or other.crest_url,
        players=tuple(_merge_rosters(primary.players, other.players)),
        staff=tuple(_merge_staff(primary.staff, other.staff)),
        competition_id=primary.competition_id or other.competition_id,
        extras=extras,
    )


def merge_team_snapshots(teams: Iterable[Team]) -> List[Team]:
    """Fold team records that share a normalized name into one record each.

    The first snapshot of a team fixes its position and display name. Players
    from every snapshot are kept; duplicates (same id, else same normalized
    name) are combined field by field.
    """
    merged: Dict[str, Team] = {}
    for team in teams:
        key = normalize_name(team.name)
        current = merged.get(key)
        if current is None:
            deduped = replace(team, players=tuple(_merge_rosters((), team.players)))
            merged[key] = deduped
        else:
            merged[key] = _merge_team(current, team)
    return list(merged.values())


class _TeamLedger:
    """Mutable per-call counters for one team's roster."""

    def __init__(self, team: Team) -> None:
        self.team = team
        self.players: List[Player] = list(team.players)
        self.counters: List[Dict[str, int]] = [
            asdict(player.base_stats) for player in self.players
        ]
        self.counted: List[Set[str]] = [set() for _ in self.players]

    def resolve(
        self,
        player_id: Optional[int],
        name: Optional[str],
        *,
        create: bool = True,
    ) -> Optional[int]:
        if player_id is not None:
            for index, player in enumerate(self.players):
                if player.id == player_id:
                    return index
        key = normalize_name(name)
        if key:
            for index, player in enumerate(self.players):
                if normalize_name(player.name) == key:
                    return index
        if not create or (player_id is None and not key):
            return None
        display_name = (name or "").strip() or f"Player #{player_id}"
        player = Player(
            id=player_id if player_id is not None else stable_id(display_name),
            name=display_name,
            position=DEFAULT_POSITION,
            bio=PlayerBio(nationality=DISCOVERED_NATIONALITY),
            discovered=True,
        )
        LOGGER.debug("Discovered player %r (id %s) for %s", player.name, player.id, self.team.name)
        self.players.append(player)
        self.counters.append(asdict(PlayerStats()))
        self.counted.append(set())
        return len(self.players) - 1

    def resolve_entry(self, entry: LineupEntry) -> Optional[int]:
        if isinstance(entry, int):
            return self.resolve(entry, None)
        return self.resolve(None, entry)

    def bump(self, index: int, field_name: str) -> None:
        self.counters[index][field_name] += 1

    def freeze(self) -> Team:
        players = tuple(
            replace(player, stats=PlayerStats(**counters))
            for player, counters in zip(self.players, self.counters)
        )
        return replace(self.team, players=players)


def _ledger_for(ledgers: Mapping[str, _TeamLedger], name: Optional[str]) -> Optional[_TeamLedger]:
    key = normalize_name(name)
    return ledgers.get(key) if key else None


def _locate(
    ledgers: Mapping[str, _TeamLedger],
    match: Match,
    team_name: Optional[str],
    player_id: Optional[int],
    player_name: Optional[str],
) -> Optional[Tuple[_TeamLedger, int]]:
    if team_name:
        ledger = _ledger_for(ledgers, team_name)
        if ledger is None:
            LOGGER.debug("Skipping reference to unknown team %r", team_name)
            return None
        index = ledger.resolve(player_id, player_name)
        return (ledger, index) if index is not None else None
    # No team named: only attach to an existing player of either side.
    for side in (match.team_a, match.team_b):
        ledger = _ledger_for(ledgers, side)
        if ledger is None:
            continue
        index = ledger.resolve(player_id, player_name, create=False)
        if index is not None:
            return ledger, index
    return None


def _scan_lineups(ledgers: Mapping[str, _TeamLedger], match: Match, key: str) -> None:
    if match.lineups is None:
        return
    sides = (
        (match.team_a, match.lineups.team_a, match.score_b),
        (match.team_b, match.lineups.team_b, match.score_a),
    )
    for team_name, lineup, conceded in sides:
        ledger = _ledger_for(ledgers, team_name)
        if ledger is None or lineup is None:
            continue
        kept_clean = match.is_finished and conceded == 0
        for entry in lineup.involved:
            index = ledger.resolve_entry(entry)
            if index is None or key in ledger.counted[index]:
                continue
            ledger.counted[index].add(key)
            ledger.bump(index, "appearances")
            if kept_clean and ledger.players[index].position in CLEAN_SHEET_POSITIONS:
                ledger.bump(index, "clean_sheets")


def _scan_events(ledgers: Mapping[str, _TeamLedger], match: Match) -> None:
    for event in match.events:
        field_name = EVENT_STAT_FIELDS.get(event.event_type)
        if field_name is None:
            continue
        if event.player_id is None and not normalize_name(event.player_name):
            continue
        located = _locate(ledgers, match, event.team_name, event.player_id, event.player_name)
        if located is None:
            continue
        ledger, index = located
        ledger.bump(index, field_name)


def _scan_player_of_the_match(ledgers: Mapping[str, _TeamLedger], match: Match) -> None:
    potm = match.player_of_the_match
    if potm is None:
        return
    located = _locate(ledgers, match, potm.team_name, potm.player_id, potm.name)
    if located is None:
        return
    ledger, index = located
    ledger.bump(index, "potm_wins")


def reconcile_players(teams: Iterable[Team], matches: Iterable[Match]) -> List[Team]:
    """Recompute every player's ``stats`` as baseline plus match contributions.

    Counting always restarts from ``base_stats``, so the result depends only
    on the inputs and repeated calls agree.
    """
    ledgers: Dict[str, _TeamLedger] = {
        normalize_name(team.name): _TeamLedger(team) for team in merge_team_snapshots(teams)
    }
    for key, match in deduplicate_matches(matches).items():
        _scan_lineups(ledgers, match, key)
        _scan_events(ledgers, match)
        _scan_player_of_the_match(ledgers, match)
    return [ledger.freeze() for ledger in ledgers.values()]


__all__ = [
    "CLEAN_SHEET_POSITIONS",
    "DISCOVERED_NATIONALITY",
    "EVENT_STAT_FIELDS",
    "merge_team_snapshots",
    "reconcile_players",
]
