from __future__ import annotations

import json
from pathlib import Path

import requests

from league_reconciler import snapshot
from league_reconciler.__main__ import build_parser, format_table, main
from league_reconciler.models import LeagueRow, Team


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])
    assert args.snapshot == Path("data/competition.json")
    assert args.output == Path("data/competition_recalculated.json")
    assert args.top == 5
    assert args.group == []
    assert args.merge_teams is None
    assert args.skip_players is False


def test_parser_collects_groups_and_merge() -> None:
    args = build_parser().parse_args(
        ["--group", "A", "--group", "B", "--merge-teams", "Keep FC", "Old FC", "--top", "3"]
    )
    assert args.group == ["A", "B"]
    assert args.merge_teams == ["Keep FC", "Old FC"]
    assert args.top == 3


def test_format_table_lists_positions() -> None:
    lines = format_table([Team(name="Green Mamba", stats=LeagueRow(played=2, won=2, points=6, form="W W"))])
    assert lines[0].split()[:3] == ["#", "Team", "P"]
    assert lines[1].split() == ["1", "Green", "Mamba", "2", "2", "0", "0", "0", "0", "0", "6", "W", "W"]


def test_main_writes_recalculated_snapshot(tmp_path, capsys, snapshot_payload) -> None:
    source = tmp_path / "competition.json"
    target = tmp_path / "out.json"
    snapshot_payload["results"][0]["teamB"] = "Green Mamba FC"
    source.write_text(json.dumps(snapshot_payload), encoding="utf-8")

    exit_code = main(["--snapshot", str(source), "--output", str(target), "--group", "Mbabane Swallows"])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Team names without a team record: Green Mamba FC" in output
    assert "Premier League table:" in output
    assert "Top scorers:" in output
    assert "Sabelo Ndzinisa (Mbabane Swallows): 14 goals, 1 POTM" in output

    written = json.loads(target.read_text(encoding="utf-8"))
    assert written["season"] == "2024/25"
    assert written["teams"][0]["stats"]["pts"] == 0
    assert written["teams"][0]["stats"]["p"] == 0


def test_main_merges_teams(tmp_path, snapshot_payload) -> None:
    source = tmp_path / "competition.json"
    target = tmp_path / "out.json"
    snapshot_payload["teams"].append({"name": "Green Mamba FC"})
    source.write_text(json.dumps(snapshot_payload), encoding="utf-8")

    exit_code = main(
        ["--snapshot", str(source), "--output", str(target), "--merge-teams", "Green Mamba", "Green Mamba FC"]
    )

    assert exit_code == 0
    written = json.loads(target.read_text(encoding="utf-8"))
    assert [team["name"] for team in written["teams"]] == ["Mbabane Swallows", "Green Mamba"]
    assert written["teams"][0]["stats"]["pts"] == 3


def test_main_reports_missing_team_for_merge(tmp_path, snapshot_payload) -> None:
    source = tmp_path / "competition.json"
    source.write_text(json.dumps(snapshot_payload), encoding="utf-8")
    exit_code = main(
        ["--snapshot", str(source), "--output", str(tmp_path / "out.json"), "--merge-teams", "Green Mamba", "Nobody"]
    )
    assert exit_code == 1


def test_main_reports_missing_snapshot(tmp_path) -> None:
    assert main(["--snapshot", str(tmp_path / "missing.json")]) == 1


def test_main_skip_players_also_applies_to_merge(tmp_path, snapshot_payload) -> None:
    source = tmp_path / "competition.json"
    target = tmp_path / "out.json"
    snapshot_payload["teams"][0]["players"][0]["stats"] = {"goals": 99}
    snapshot_payload["teams"].append({"name": "Green Mamba FC"})
    source.write_text(json.dumps(snapshot_payload), encoding="utf-8")

    exit_code = main(
        [
            "--snapshot", str(source),
            "--output", str(target),
            "--skip-players",
            "--merge-teams", "Green Mamba", "Green Mamba FC",
        ]
    )

    assert exit_code == 0
    written = json.loads(target.read_text(encoding="utf-8"))
    sabelo = written["teams"][0]["players"][0]
    assert sabelo["name"] == "Sabelo Ndzinisa"
    assert sabelo["stats"]["goals"] == 99


def test_main_reports_failed_download_without_local_file(monkeypatch, tmp_path) -> None:
    def fake_get(url, **kwargs):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(snapshot.requests, "get", fake_get)

    exit_code = main(
        [
            "--snapshot", str(tmp_path / "missing.json"),
            "--snapshot-url", "https://example.com/league.json",
            "--output", str(tmp_path / "out.json"),
        ]
    )

    assert exit_code == 1
    assert not (tmp_path / "out.json").exists()
