"""Producers of candidate match records from external sources.

Both importers only create :class:`Match` records; reconciling them with the
stored snapshot is left to the engine like any manually entered record.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from bs4 import BeautifulSoup, Tag

from .models import Match
from .names import resolve_official_name
from .snapshot import _http_get

LOGGER = logging.getLogger(__name__)

FOOTBALL_DATA_BASE_URL = "https://api.football-data.org/v4"
FOOTBALL_DATA_TOKEN_ENV = "FOOTBALL_DATA_API_KEY"

SCORE_PATTERN = re.compile(r"^\s*(?P<home>\d+)\s*[-:–]\s*(?P<away>\d+)\s*$")
DATE_FORMATS: Tuple[str, ...] = ("%Y-%m-%d", "%d.%m.%Y", "%d/%m/%Y", "%d.%m.%y")
HEADER_ALIASES: Mapping[str, Tuple[str, ...]] = {
    "date": ("date", "datum", "fulldate"),
    "time": ("time", "zeit", "kickoff", "ko"),
    "home": ("home", "heim", "teama", "hometeam"),
    "away": ("away", "gast", "teamb", "awayteam"),
    "score": ("score", "result", "ergebnis", "ft"),
    "venue": ("venue", "ground", "stadium"),
}
DEFAULT_COLUMNS: Tuple[str, ...] = ("date", "home", "score", "away")


def _map_team(name: str, official_names: Optional[Sequence[str]]) -> Optional[str]:
    cleaned = (name or "").strip()
    if not cleaned:
        return None
    if official_names is None:
        return cleaned
    return resolve_official_name(cleaned, official_names)


def _football_data_match(
    event: Mapping[str, object],
    *,
    finished: bool,
    official_names: Optional[Sequence[str]],
) -> Optional[Match]:
    home = event.get("homeTeam") or {}
    away = event.get("awayTeam") or {}
    home_raw = str(home.get("name") or "") if isinstance(home, Mapping) else ""
    away_raw = str(away.get("name") or "") if isinstance(away, Mapping) else ""
    team_a = _map_team(home_raw, official_names)
    team_b = _map_team(away_raw, official_names)
    if not team_a or not team_b:
        LOGGER.warning("Could not match team names %r vs %r; skipping", home_raw, away_raw)
        return None

    try:
        kickoff = datetime.fromisoformat(str(event.get("utcDate") or "").replace("Z", "+00:00"))
    except ValueError:
        LOGGER.warning("Fixture %s has no usable utcDate; skipping", event.get("id"))
        return None

    score_a: Optional[int] = None
    score_b: Optional[int] = None
    if finished:
        score = event.get("score") or {}
        full_time = score.get("fullTime") if isinstance(score, Mapping) else None
        if isinstance(full_time, Mapping):
            score_a = full_time.get("home")
            score_b = full_time.get("away")

    matchday = event.get("matchday")
    return Match(
        id=event.get("id"),
        team_a=team_a,
        team_b=team_b,
        date=str(kickoff.day),
        full_date=kickoff.date().isoformat(),
        time=kickoff.strftime("%H:%M"),
        status="finished" if finished else "scheduled",
        score_a=score_a if isinstance(score_a, int) else None,
        score_b=score_b if isinstance(score_b, int) else None,
        matchday=matchday if isinstance(matchday, int) else None,
        venue=str(event["venue"]) if event.get("venue") else None,
        extras={"day": kickoff.strftime("%a").upper()},
    )


def fetch_football_data_matches(
    competition_code: str,
    *,
    finished: bool = False,
    api_key: Optional[str] = None,
    official_names: Optional[Sequence[str]] = None,
    base_url: str = FOOTBALL_DATA_BASE_URL,
) -> List[Match]:
    """Download fixtures (or results) for one competition from football-data.org.

    Team names are mapped onto ``official_names`` when given; rows whose teams
    cannot be matched are skipped rather than imported under a new name.
    """
    token = api_key or os.environ.get(FOOTBALL_DATA_TOKEN_ENV)
    headers = {"X-Auth-Token": token} if token else None
    response = _http_get(
        f"{base_url.rstrip('/')}/competitions/{competition_code}/matches",
        headers=headers,
        params={"status": "FINISHED" if finished else "SCHEDULED"},
    )
    payload = response.json()
    events = payload.get("matches") if isinstance(payload, Mapping) else None
    matches: List[Match] = []
    for event in events or []:
        if not isinstance(event, Mapping):
            continue
        match = _football_data_match(event, finished=finished, official_names=official_names)
        if match is not None:
            matches.append(match)
    return matches


def _header_key(label: str) -> str:
    return re.sub(r"[^a-z]", "", label.lower())


def _resolve_columns(header_cells: Iterable[Tag]) -> Dict[str, int]:
    columns: Dict[str, int] = {}
    for index, cell in enumerate(header_cells):
        label = _header_key(cell.get_text(" ", strip=True))
        for field_name, aliases in HEADER_ALIASES.items():
            if label in aliases and field_name not in columns:
                columns[field_name] = index
    return columns


def _parse_date_cell(value: str) -> Optional[str]:
    cleaned = value.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(cleaned, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def parse_results_table(
    html: str,
    *,
    official_names: Optional[Sequence[str]] = None,
) -> List[Match]:
    """Parse the first table of a league page into match records.

    Columns are located through the header row; without one the order
    date, home, score, away is assumed. Rows with a score like ``2-1`` or
    ``2:1`` become finished results, the rest scheduled fixtures.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        return []

    columns: Dict[str, int] = {}
    header_row = table.find("tr")
    if header_row is not None and header_row.find("th") is not None:
        columns = _resolve_columns(header_row.find_all("th"))
    if not {"home", "away"} <= columns.keys():
        columns = {name: index for index, name in enumerate(DEFAULT_COLUMNS)}

    def cell_text(cells: List[Tag], field_name: str) -> str:
        index = columns.get(field_name)
        if index is None or index >= len(cells):
            return ""
        return cells[index].get_text(" ", strip=True)

    matches: List[Match] = []
    for row in table.find_all("tr"):
        cells = row.find_all("td")
        if not cells:
            continue
        team_a = _map_team(cell_text(cells, "home"), official_names)
        team_b = _map_team(cell_text(cells, "away"), official_names)
        if not team_a or not team_b:
            LOGGER.warning("Skipping table row with unknown teams: %s", row.get_text(" ", strip=True))
            continue
        date_text = cell_text(cells, "date")
        score = SCORE_PATTERN.match(cell_text(cells, "score"))
        matches.append(
            Match(
                team_a=team_a,
                team_b=team_b,
                date=date_text,
                full_date=_parse_date_cell(date_text),
                time=cell_text(cells, "time"),
                venue=cell_text(cells, "venue") or None,
                status="finished" if score else "scheduled",
                score_a=int(score.group("home")) if score else None,
                score_b=int(score.group("away")) if score else None,
            )
        )
    return matches


__all__ = [
    "FOOTBALL_DATA_BASE_URL",
    "FOOTBALL_DATA_TOKEN_ENV",
    "fetch_football_data_matches",
    "parse_results_table",
]
