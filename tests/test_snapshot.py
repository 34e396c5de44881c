from __future__ import annotations

import json

import pytest
import requests

from league_reconciler import snapshot
from league_reconciler.snapshot import (
    SnapshotError,
    competition_from_dict,
    competition_to_dict,
    load_competition,
    load_snapshot,
    prune_empty,
    write_competition,
)


class _FakeResponse:
    def __init__(self, payload, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._payload


def test_prune_empty_drops_none_recursively() -> None:
    payload = {"a": None, "b": [1, None, {"c": None, "d": 0}], "e": {"f": ""}}
    assert prune_empty(payload) == {"b": [1, {"d": 0}], "e": {"f": ""}}


def test_snapshot_round_trip_keeps_unknown_fields(snapshot_payload) -> None:
    competition = competition_from_dict(snapshot_payload)

    payload = competition_to_dict(competition)

    assert payload["name"] == "Premier League"
    assert payload["season"] == "2024/25"
    team = payload["teams"][0]
    assert team["branding"] == {"primaryColor": "#c00"}
    assert team["players"][0]["baseStats"]["goals"] == 12
    assert "club" not in team["players"][0]
    assert payload["results"][0]["events"][0]["playerID"] == 10
    assert competition_from_dict(payload) == competition


def test_competition_from_dict_rejects_non_objects() -> None:
    with pytest.raises(SnapshotError):
        competition_from_dict([1, 2, 3])


def test_load_competition_reports_invalid_json(tmp_path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SnapshotError):
        load_competition(path)


def test_load_competition_uses_file_stem_as_default_name(tmp_path) -> None:
    path = tmp_path / "cup.json"
    path.write_text(json.dumps({"teams": [{"name": "Green Mamba"}]}), encoding="utf-8")
    competition = load_competition(path)
    assert competition.name == "cup"
    assert [team.name for team in competition.teams] == ["Green Mamba"]


def test_write_competition_creates_parent_directories(tmp_path, snapshot_payload) -> None:
    target = tmp_path / "out" / "competition.json"
    written = write_competition(competition_from_dict(snapshot_payload), target)
    assert json.loads(target.read_text(encoding="utf-8")) == written


def test_load_snapshot_prefers_the_url(monkeypatch, snapshot_payload) -> None:
    calls = []

    def fake_get(url, **kwargs):
        calls.append((url, kwargs["headers"]["Accept"]))
        return _FakeResponse(snapshot_payload)

    monkeypatch.setattr(snapshot.requests, "get", fake_get)

    competition = load_snapshot(url="https://example.com/league.json")

    assert competition.name == "Premier League"
    assert calls == [("https://example.com/league.json", "application/json")]


def test_load_snapshot_falls_back_to_file(monkeypatch, tmp_path, snapshot_payload) -> None:
    path = tmp_path / "competition.json"
    path.write_text(json.dumps(snapshot_payload), encoding="utf-8")

    def fake_get(url, **kwargs):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(snapshot.requests, "get", fake_get)

    competition = load_snapshot(path, url="https://example.com/league.json")
    assert len(competition.teams) == 2


def test_load_snapshot_without_file_raises_download_error(monkeypatch, tmp_path) -> None:
    def fake_get(url, **kwargs):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(snapshot.requests, "get", fake_get)

    with pytest.raises(requests.exceptions.ConnectionError):
        load_snapshot(tmp_path / "missing.json", url="https://example.com/league.json")


def test_http_get_retries_server_errors(monkeypatch) -> None:
    responses = [_FakeResponse({}, 503), _FakeResponse({"ok": True})]
    sleeps = []
    monkeypatch.setattr(snapshot.requests, "get", lambda url, **kwargs: responses.pop(0))
    monkeypatch.setattr(snapshot.time, "sleep", sleeps.append)

    response = snapshot._http_get("https://example.com", delay_seconds=0.5)

    assert response.json() == {"ok": True}
    assert sleeps == [0.5]
