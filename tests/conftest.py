from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    root = Path(__file__).resolve().parents[1]
    src_path = root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def snapshot_payload() -> dict:
    """A small competition document in the stored JSON shape."""
    return {
        "name": "Premier League",
        "season": "2024/25",
        "teams": [
            {
                "id": 1,
                "name": "Mbabane Swallows",
                "crestUrl": "https://cdn.example.com/swallows.png",
                "stats": {"p": 9, "w": 9, "d": 0, "l": 0, "gs": 20, "gc": 0, "gd": 20, "pts": 27, "form": "W W W"},
                "players": [
                    {
                        "id": 10,
                        "name": "Sabelo Ndzinisa",
                        "position": "Forward",
                        "number": 9,
                        "baseStats": {"appearances": 20, "goals": 12},
                    },
                    {"id": 11, "name": "Mphile Tsabedze", "position": "Goalkeeper", "number": 1},
                ],
                "branding": {"primaryColor": "#c00"},
            },
            {
                "id": 2,
                "name": "Green Mamba",
                "crestUrl": "",
                "players": [{"id": 20, "name": "Felix Badenhorst", "position": "Defender"}],
            },
        ],
        "fixtures": [
            {
                "id": "f1",
                "teamA": "Green Mamba",
                "teamB": "Mbabane Swallows",
                "date": "8",
                "fullDate": "2024-02-08",
                "status": "scheduled",
            }
        ],
        "results": [
            {
                "id": "r1",
                "teamA": "Mbabane Swallows",
                "teamB": "Green Mamba",
                "date": "1",
                "fullDate": "2024-01-01",
                "status": "finished",
                "scoreA": 3,
                "scoreB": 0,
                "events": [
                    {"type": "goal", "minute": 12, "playerName": "Sabelo Ndzinisa", "playerID": 10, "teamName": "Mbabane Swallows"},
                    {"type": "goal", "minute": 50, "playerName": "Sabelo Ndzinisa", "teamName": "Mbabane Swallows"},
                    {"type": "goal", "minute": 77, "playerName": "Lindo Mkhonta", "teamName": "MBABANE SWALLOWS"},
                    {"type": "yellow_card", "minute": 80, "playerName": "Felix Badenhorst", "teamName": "Green Mamba"},
                ],
                "lineups": {
                    "teamA": {"starters": [10, 11], "subs": []},
                    "teamB": {"starters": [20], "subs": []},
                },
                "playerOfTheMatch": {"name": "Sabelo Ndzinisa", "playerID": 10, "teamName": "Mbabane Swallows"},
            }
        ],
    }
