"""Read and write competition snapshots as JSON documents."""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import requests

from .models import Competition, match_from_dict, team_from_dict

LOGGER = logging.getLogger(__name__)

DEFAULT_SNAPSHOT_PATH = Path("data/competition.json")
DEFAULT_OUTPUT_PATH = Path("data/competition_recalculated.json")
REQUEST_HEADERS: Dict[str, str] = {
    "User-Agent": "league-reconciler/1.0 (+https://github.com/)",
    "Accept": "application/json",
}

_SNAPSHOT_KEYS = {"name", "teams", "fixtures", "results"}


class SnapshotError(ValueError):
    """The snapshot document cannot be turned into a competition."""


def prune_empty(value: Any) -> Any:
    """Recursively drop ``None`` entries from dicts and lists.

    The document store rejects undefined fields, so this runs on every
    payload before it leaves the process.
    """
    if isinstance(value, Mapping):
        return {
            key: prune_empty(item) for key, item in value.items() if item is not None
        }
    if isinstance(value, (list, tuple)):
        return [prune_empty(item) for item in value if item is not None]
    return value


def _entries(payload: Mapping[str, Any], key: str) -> List[Mapping[str, Any]]:
    raw = payload.get(key)
    if not isinstance(raw, list):
        return []
    return [entry for entry in raw if isinstance(entry, Mapping)]


def competition_from_dict(payload: object, *, default_name: str = "") -> Competition:
    if not isinstance(payload, Mapping):
        raise SnapshotError("Competition snapshot must be a JSON object.")
    return Competition(
        name=str(payload.get("name") or default_name),
        teams=tuple(team_from_dict(entry) for entry in _entries(payload, "teams")),
        fixtures=tuple(match_from_dict(entry) for entry in _entries(payload, "fixtures")),
        results=tuple(match_from_dict(entry) for entry in _entries(payload, "results")),
        extras={key: value for key, value in payload.items() if key not in _SNAPSHOT_KEYS},
    )


def competition_to_dict(competition: Competition) -> Dict[str, object]:
    payload: Dict[str, object] = dict(competition.extras)
    payload.update(
        {
            "name": competition.name,
            "teams": [team.to_dict() for team in competition.teams],
            "fixtures": [match.to_dict() for match in competition.fixtures],
            "results": [match.to_dict() for match in competition.results],
        }
    )
    return prune_empty(payload)


def load_competition(path: Path) -> Competition:
    if not isinstance(path, Path):
        path = Path(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise SnapshotError(f"{path}: invalid JSON ({exc})") from exc
    return competition_from_dict(payload, default_name=path.stem)


def _http_get(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, str]] = None,
    retries: int = 3,
    delay_seconds: float = 1.0,
) -> requests.Response:
    merged_headers = dict(REQUEST_HEADERS)
    if headers:
        merged_headers.update(headers)
    for attempt in range(retries):
        try:
            response = requests.get(url, timeout=30, headers=merged_headers, params=params)
            response.raise_for_status()
            return response
        except requests.RequestException as exc:
            if isinstance(exc, (requests.exceptions.ProxyError, requests.exceptions.ConnectionError)):
                raise
            if attempt == retries - 1:
                raise
            backoff = delay_seconds * (2 ** attempt)
            LOGGER.warning("GET %s failed (%s), retrying in %.1fs", url, exc, backoff)
            time.sleep(backoff)
    raise requests.RequestException(f"No attempts made for {url}")


def fetch_competition(
    url: str,
    *,
    headers: Optional[Dict[str, str]] = None,
    retries: int = 3,
    delay_seconds: float = 1.0,
) -> Competition:
    response = _http_get(url, headers=headers, retries=retries, delay_seconds=delay_seconds)
    try:
        payload = response.json()
    except ValueError as exc:
        raise SnapshotError(f"{url}: response is not JSON") from exc
    return competition_from_dict(payload)


def load_snapshot(
    path: Optional[Path] = None,
    *,
    url: Optional[str] = None,
) -> Competition:
    """Load a snapshot from ``url`` if given, else from ``path``.

    A failed download falls back to the local file when one exists.
    """
    if path is not None and not isinstance(path, Path):
        path = Path(path)
    if url:
        try:
            return fetch_competition(url)
        except requests.RequestException as exc:
            if path is None or not path.exists():
                raise
            LOGGER.warning("Download of %s failed (%s); using %s", url, exc, path)
    if path is None:
        path = DEFAULT_SNAPSHOT_PATH
    return load_competition(path)


def write_competition(competition: Competition, output_path: Path) -> Dict[str, object]:
    if not isinstance(output_path, Path):
        output_path = Path(output_path)
    payload = competition_to_dict(competition)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )
    return payload


__all__ = [
    "DEFAULT_OUTPUT_PATH",
    "DEFAULT_SNAPSHOT_PATH",
    "REQUEST_HEADERS",
    "SnapshotError",
    "competition_from_dict",
    "competition_to_dict",
    "fetch_competition",
    "load_competition",
    "load_snapshot",
    "prune_empty",
    "write_competition",
]
