"""Value types for teams, players and matches plus their JSON loaders."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .names import stable_id

POSITIONS: Tuple[str, ...] = ("Goalkeeper", "Defender", "Midfielder", "Forward")
DEFAULT_POSITION = "Midfielder"
MATCH_STATUSES: Tuple[str, ...] = (
    "scheduled",
    "live",
    "finished",
    "postponed",
    "cancelled",
    "abandoned",
    "suspended",
)

LineupEntry = Union[int, str]


def _coerce_optional_int(value: object) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _coerce_int(value: object, default: int = 0) -> int:
    coerced = _coerce_optional_int(value)
    return default if coerced is None else coerced


def _coerce_str(value: object) -> str:
    if value is None:
        return ""
    return str(value)


def _optional_str(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _first(payload: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in payload and payload[key] is not None:
            return payload[key]
    return None


@dataclass(frozen=True)
class LeagueRow:
    """One league-table row. Always derived, never patched in place."""

    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    goal_difference: int = 0
    points: int = 0
    form: str = ""

    def to_dict(self) -> Dict[str, object]:
        return {
            "p": self.played,
            "w": self.won,
            "d": self.drawn,
            "l": self.lost,
            "gs": self.goals_for,
            "gc": self.goals_against,
            "gd": self.goal_difference,
            "pts": self.points,
            "form": self.form,
        }


@dataclass(frozen=True)
class PlayerStats:
    appearances: int = 0
    goals: int = 0
    assists: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    clean_sheets: int = 0
    potm_wins: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "appearances": self.appearances,
            "goals": self.goals,
            "assists": self.assists,
            "yellowCards": self.yellow_cards,
            "redCards": self.red_cards,
            "cleanSheets": self.clean_sheets,
            "potmWins": self.potm_wins,
        }


@dataclass(frozen=True)
class PlayerBio:
    nationality: str = ""
    age: int = 0
    height: str = "-"

    def to_dict(self) -> Dict[str, object]:
        return {"nationality": self.nationality, "age": self.age, "height": self.height}


@dataclass(frozen=True)
class TransferRecord:
    from_club: str
    to_club: str
    year: Optional[int]

    def to_dict(self) -> Dict[str, object]:
        return {"from": self.from_club, "to": self.to_club, "year": self.year}


@dataclass(frozen=True)
class Player:
    id: int
    name: str
    position: str = DEFAULT_POSITION
    number: int = 0
    photo_url: str = ""
    bio: Optional[PlayerBio] = None
    base_stats: PlayerStats = field(default_factory=PlayerStats)
    stats: PlayerStats = field(default_factory=PlayerStats)
    transfer_history: Tuple[TransferRecord, ...] = ()
    club: Optional[str] = None
    discovered: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "number": self.number,
            "photoUrl": self.photo_url,
            "bio": self.bio.to_dict() if self.bio else None,
            "baseStats": self.base_stats.to_dict(),
            "stats": self.stats.to_dict(),
            "transferHistory": [item.to_dict() for item in self.transfer_history],
            "club": self.club,
            "discovered": self.discovered or None,
        }


@dataclass(frozen=True)
class StaffMember:
    id: Optional[int]
    name: str
    role: str = ""
    email: str = ""
    phone: str = ""
    photo_url: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "email": self.email,
            "phone": self.phone,
            "photoUrl": self.photo_url,
        }


@dataclass(frozen=True)
class Team:
    name: str
    id: Optional[int] = None
    stats: LeagueRow = field(default_factory=LeagueRow)
    crest_url: str = ""
    players: Tuple[Player, ...] = ()
    staff: Tuple[StaffMember, ...] = ()
    competition_id: Optional[str] = None
    # Branding, sponsor, social media and similar metadata the engine never reads.
    extras: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = dict(self.extras)
        payload.update(
            {
                "id": self.id,
                "name": self.name,
                "stats": self.stats.to_dict(),
                "crestUrl": self.crest_url,
                "players": [player.to_dict() for player in self.players],
                "staff": [member.to_dict() for member in self.staff],
                "competitionId": self.competition_id,
            }
        )
        return payload


@dataclass(frozen=True)
class MatchEvent:
    type: str
    minute: Optional[int] = None
    description: str = ""
    player_name: Optional[str] = None
    player_id: Optional[int] = None
    team_name: Optional[str] = None

    @property
    def event_type(self) -> str:
        return self.type.strip().lower().replace("_", "-")

    def to_dict(self) -> Dict[str, object]:
        return {
            "type": self.type,
            "minute": self.minute,
            "description": self.description,
            "playerName": self.player_name,
            "playerID": self.player_id,
            "teamName": self.team_name,
        }


@dataclass(frozen=True)
class Lineup:
    starters: Tuple[LineupEntry, ...] = ()
    subs: Tuple[LineupEntry, ...] = ()

    @property
    def involved(self) -> Tuple[LineupEntry, ...]:
        seen: List[LineupEntry] = []
        for entry in self.starters + self.subs:
            if entry not in seen:
                seen.append(entry)
        return tuple(seen)

    def to_dict(self) -> Dict[str, object]:
        return {"starters": list(self.starters), "subs": list(self.subs)}


@dataclass(frozen=True)
class MatchLineups:
    team_a: Optional[Lineup] = None
    team_b: Optional[Lineup] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "teamA": self.team_a.to_dict() if self.team_a else None,
            "teamB": self.team_b.to_dict() if self.team_b else None,
        }


@dataclass(frozen=True)
class PlayerOfTheMatch:
    name: str = ""
    player_id: Optional[int] = None
    team_name: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {"name": self.name, "playerID": self.player_id, "teamName": self.team_name}


@dataclass(frozen=True)
class Match:
    team_a: str
    team_b: str
    id: Union[int, str, None] = None
    date: str = ""
    full_date: Optional[str] = None
    status: str = "scheduled"
    score_a: Optional[int] = None
    score_b: Optional[int] = None
    events: Tuple[MatchEvent, ...] = ()
    lineups: Optional[MatchLineups] = None
    player_of_the_match: Optional[PlayerOfTheMatch] = None
    matchday: Optional[int] = None
    time: str = ""
    venue: Optional[str] = None
    competition: Optional[str] = None
    score_a_pen: Optional[int] = None
    score_b_pen: Optional[int] = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    @property
    def is_finished(self) -> bool:
        return self.status == "finished"

    @property
    def has_score(self) -> bool:
        return self.score_a is not None and self.score_b is not None

    @property
    def date_key(self) -> str:
        return self.full_date or self.date or ""

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = dict(self.extras)
        payload.update(
            {
                "id": self.id,
                "teamA": self.team_a,
                "teamB": self.team_b,
                "date": self.date,
                "fullDate": self.full_date,
                "time": self.time,
                "status": self.status,
                "scoreA": self.score_a,
                "scoreB": self.score_b,
                "scoreAPen": self.score_a_pen,
                "scoreBPen": self.score_b_pen,
                "matchday": self.matchday,
                "venue": self.venue,
                "competition": self.competition,
                "events": [event.to_dict() for event in self.events] or None,
                "lineups": self.lineups.to_dict() if self.lineups else None,
                "playerOfTheMatch": self.player_of_the_match.to_dict()
                if self.player_of_the_match
                else None,
            }
        )
        return payload


@dataclass(frozen=True)
class ScorerRecord:
    """Leaderboard entry derived from reconciled player stats."""

    name: str
    team_name: str
    goals: int
    potm_wins: int
    score: int
    crest_url: str = ""
    player_id: Optional[int] = None

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class Competition:
    name: str
    teams: Tuple[Team, ...] = ()
    fixtures: Tuple[Match, ...] = ()
    results: Tuple[Match, ...] = ()
    extras: Mapping[str, Any] = field(default_factory=dict)

    @property
    def matches(self) -> List[Match]:
        return list(self.fixtures) + list(self.results)


# --- loaders -----------------------------------------------------------------

_TEAM_KEYS = {"id", "name", "stats", "crestUrl", "players", "staff", "competitionId"}
_MATCH_KEYS = {
    "id",
    "teamA",
    "teamB",
    "date",
    "fullDate",
    "time",
    "status",
    "scoreA",
    "scoreB",
    "scoreAPen",
    "scoreBPen",
    "matchday",
    "venue",
    "competition",
    "events",
    "lineups",
    "playerOfTheMatch",
}


def league_row_from_dict(payload: object) -> LeagueRow:
    if not isinstance(payload, Mapping):
        return LeagueRow()
    return LeagueRow(
        played=_coerce_int(_first(payload, "p", "played")),
        won=_coerce_int(_first(payload, "w", "won")),
        drawn=_coerce_int(_first(payload, "d", "drawn")),
        lost=_coerce_int(_first(payload, "l", "lost")),
        goals_for=_coerce_int(_first(payload, "gs", "goals_for", "goalsFor")),
        goals_against=_coerce_int(_first(payload, "gc", "goals_against", "goalsAgainst")),
        goal_difference=_coerce_int(
            _first(payload, "gd", "goal_difference", "goalDifference")
        ),
        points=_coerce_int(_first(payload, "pts", "points")),
        form=_coerce_str(payload.get("form")).strip(),
    )


def player_stats_from_dict(payload: object) -> PlayerStats:
    if not isinstance(payload, Mapping):
        return PlayerStats()
    return PlayerStats(
        appearances=_coerce_int(payload.get("appearances")),
        goals=_coerce_int(payload.get("goals")),
        assists=_coerce_int(payload.get("assists")),
        yellow_cards=_coerce_int(_first(payload, "yellowCards", "yellow_cards")),
        red_cards=_coerce_int(_first(payload, "redCards", "red_cards")),
        clean_sheets=_coerce_int(_first(payload, "cleanSheets", "clean_sheets")),
        potm_wins=_coerce_int(_first(payload, "potmWins", "potm_wins")),
    )


def _bio_from_dict(payload: object) -> Optional[PlayerBio]:
    if not isinstance(payload, Mapping):
        return None
    return PlayerBio(
        nationality=_coerce_str(payload.get("nationality")),
        age=_coerce_int(payload.get("age")),
        height=_coerce_str(payload.get("height")) or "-",
    )


def _transfers_from_list(entries: object) -> Tuple[TransferRecord, ...]:
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        return ()
    transfers: List[TransferRecord] = []
    for entry in entries:
        if not isinstance(entry, Mapping):
            continue
        transfers.append(
            TransferRecord(
                from_club=_coerce_str(entry.get("from")),
                to_club=_coerce_str(entry.get("to")),
                year=_coerce_optional_int(entry.get("year")),
            )
        )
    return tuple(transfers)


def player_from_dict(payload: Mapping[str, Any]) -> Optional[Player]:
    name = _coerce_str(payload.get("name")).strip()
    player_id = _coerce_optional_int(payload.get("id"))
    if not name and player_id is None:
        return None
    if player_id is None:
        player_id = stable_id(name)
    position = _coerce_str(payload.get("position")).strip().capitalize()
    if position not in POSITIONS:
        position = DEFAULT_POSITION
    return Player(
        id=player_id,
        name=name,
        position=position,
        number=_coerce_int(payload.get("number")),
        photo_url=_coerce_str(payload.get("photoUrl")),
        bio=_bio_from_dict(payload.get("bio")),
        base_stats=player_stats_from_dict(payload.get("baseStats")),
        stats=player_stats_from_dict(payload.get("stats")),
        transfer_history=_transfers_from_list(payload.get("transferHistory")),
        club=_optional_str(payload.get("club")),
        discovered=bool(payload.get("discovered")),
    )


def _staff_from_dict(payload: Mapping[str, Any]) -> Optional[StaffMember]:
    name = _coerce_str(payload.get("name")).strip()
    if not name:
        return None
    return StaffMember(
        id=_coerce_optional_int(payload.get("id")),
        name=name,
        role=_coerce_str(payload.get("role")),
        email=_coerce_str(payload.get("email")),
        phone=_coerce_str(payload.get("phone")),
        photo_url=_optional_str(payload.get("photoUrl")),
    )


def _mapping_list(entries: object) -> List[Mapping[str, Any]]:
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        return []
    return [entry for entry in entries if isinstance(entry, Mapping)]


def team_from_dict(payload: Mapping[str, Any]) -> Team:
    players = [player_from_dict(entry) for entry in _mapping_list(payload.get("players"))]
    staff = [_staff_from_dict(entry) for entry in _mapping_list(payload.get("staff"))]
    return Team(
        name=_coerce_str(payload.get("name")).strip(),
        id=_coerce_optional_int(payload.get("id")),
        stats=league_row_from_dict(payload.get("stats")),
        crest_url=_coerce_str(payload.get("crestUrl")),
        players=tuple(player for player in players if player is not None),
        staff=tuple(member for member in staff if member is not None),
        competition_id=_optional_str(payload.get("competitionId")),
        extras={key: value for key, value in payload.items() if key not in _TEAM_KEYS},
    )


def _event_from_dict(payload: Mapping[str, Any]) -> MatchEvent:
    return MatchEvent(
        type=_coerce_str(payload.get("type")),
        minute=_coerce_optional_int(payload.get("minute")),
        description=_coerce_str(payload.get("description")),
        player_name=_optional_str(payload.get("playerName")),
        player_id=_coerce_optional_int(_first(payload, "playerID", "playerId")),
        team_name=_optional_str(payload.get("teamName")),
    )


def _lineup_entries(entries: object) -> Tuple[LineupEntry, ...]:
    if not isinstance(entries, Sequence) or isinstance(entries, str):
        return ()
    cleaned: List[LineupEntry] = []
    for entry in entries:
        number = _coerce_optional_int(entry)
        if number is not None:
            cleaned.append(number)
        elif isinstance(entry, str) and entry.strip():
            cleaned.append(entry.strip())
    return tuple(cleaned)


def _lineup_from_dict(payload: object) -> Optional[Lineup]:
    if not isinstance(payload, Mapping):
        return None
    return Lineup(
        starters=_lineup_entries(payload.get("starters")),
        subs=_lineup_entries(payload.get("subs")),
    )


def _lineups_from_dict(payload: object) -> Optional[MatchLineups]:
    if not isinstance(payload, Mapping):
        return None
    return MatchLineups(
        team_a=_lineup_from_dict(payload.get("teamA")),
        team_b=_lineup_from_dict(payload.get("teamB")),
    )


def _potm_from_dict(payload: object) -> Optional[PlayerOfTheMatch]:
    if not isinstance(payload, Mapping):
        return None
    name = _coerce_str(payload.get("name")).strip()
    player_id = _coerce_optional_int(_first(payload, "playerID", "playerId"))
    if not name and player_id is None:
        return None
    return PlayerOfTheMatch(
        name=name,
        player_id=player_id,
        team_name=_optional_str(payload.get("teamName")),
    )


def match_from_dict(payload: Mapping[str, Any]) -> Match:
    status = _coerce_str(payload.get("status")).strip().lower() or "scheduled"
    if status not in MATCH_STATUSES:
        status = "scheduled"
    raw_id = payload.get("id")
    return Match(
        id=raw_id if isinstance(raw_id, (int, str)) else None,
        team_a=_coerce_str(payload.get("teamA")).strip(),
        team_b=_coerce_str(payload.get("teamB")).strip(),
        date=_coerce_str(payload.get("date")),
        full_date=_optional_str(payload.get("fullDate")),
        status=status,
        score_a=_coerce_optional_int(payload.get("scoreA")),
        score_b=_coerce_optional_int(payload.get("scoreB")),
        events=tuple(_event_from_dict(entry) for entry in _mapping_list(payload.get("events"))),
        lineups=_lineups_from_dict(payload.get("lineups")),
        player_of_the_match=_potm_from_dict(payload.get("playerOfTheMatch")),
        matchday=_coerce_optional_int(payload.get("matchday")),
        time=_coerce_str(payload.get("time")),
        venue=_optional_str(payload.get("venue")),
        competition=_optional_str(payload.get("competition")),
        score_a_pen=_coerce_optional_int(payload.get("scoreAPen")),
        score_b_pen=_coerce_optional_int(payload.get("scoreBPen")),
        extras={key: value for key, value in payload.items() if key not in _MATCH_KEYS},
    )


__all__ = [
    "Competition",
    "DEFAULT_POSITION",
    "LeagueRow",
    "Lineup",
    "LineupEntry",
    "MATCH_STATUSES",
    "Match",
    "MatchEvent",
    "MatchLineups",
    "POSITIONS",
    "Player",
    "PlayerBio",
    "PlayerOfTheMatch",
    "PlayerStats",
    "ScorerRecord",
    "StaffMember",
    "Team",
    "TransferRecord",
    "league_row_from_dict",
    "match_from_dict",
    "player_from_dict",
    "player_stats_from_dict",
    "team_from_dict",
]
