from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import requests

from .competition import UnknownTeamError, merge_teams, recalculate_competition
from .models import Team
from .names import find_unknown_team_names, normalize_name
from .scorers import aggregate_goals_from_events, shortlist
from .snapshot import (
    DEFAULT_OUTPUT_PATH,
    DEFAULT_SNAPSHOT_PATH,
    SnapshotError,
    load_snapshot,
    write_competition,
)
from .standings import calculate_group_standings

LOGGER = logging.getLogger("league_reconciler")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Recalculate league tables and player statistics for a competition snapshot"
    )
    parser.add_argument(
        "--snapshot",
        type=Path,
        default=DEFAULT_SNAPSHOT_PATH,
        help="Competition snapshot JSON (default: data/competition.json).",
    )
    parser.add_argument(
        "--snapshot-url",
        default=None,
        help=(
            "Download the snapshot from this URL instead. "
            "Falls back to --snapshot if the download fails."
        ),
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=DEFAULT_OUTPUT_PATH,
        help="Target JSON for the recalculated snapshot (default: data/competition_recalculated.json).",
    )
    parser.add_argument(
        "--top",
        type=int,
        default=5,
        help="Number of top scorers to print (default: 5).",
    )
    parser.add_argument(
        "--group",
        action="append",
        default=[],
        metavar="TEAM",
        help="Print a group table for these teams. Repeat for every group member.",
    )
    parser.add_argument(
        "--merge-teams",
        nargs=2,
        metavar=("KEEP", "REMOVE"),
        default=None,
        help="Merge the REMOVE team into KEEP before recalculating.",
    )
    parser.add_argument(
        "--skip-players",
        action="store_true",
        help="Only rebuild the league table; leave player statistics untouched.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log skipped records and discovered players.",
    )
    return parser


def format_table(teams: Sequence[Team]) -> List[str]:
    lines = [
        f"{'#':>2}  {'Team':<28} {'P':>3} {'W':>3} {'D':>3} {'L':>3} "
        f"{'GS':>4} {'GC':>4} {'GD':>4} {'PTS':>4}  Form"
    ]
    for position, team in enumerate(teams, start=1):
        row = team.stats
        lines.append(
            f"{position:>2}  {team.name[:28]:<28} {row.played:>3} {row.won:>3} {row.drawn:>3} "
            f"{row.lost:>3} {row.goals_for:>4} {row.goals_against:>4} {row.goal_difference:>4} "
            f"{row.points:>4}  {row.form}"
        )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        competition = load_snapshot(args.snapshot, url=args.snapshot_url)
        if args.merge_teams:
            keep_name, remove_name = args.merge_teams
            competition = merge_teams(
                competition, keep_name, remove_name, reconcile=not args.skip_players
            )
    except (SnapshotError, UnknownTeamError, FileNotFoundError, requests.RequestException) as exc:
        LOGGER.error("%s", exc)
        return 1

    unknown = find_unknown_team_names(competition.teams, competition.matches)
    if unknown:
        print("Team names without a team record:", ", ".join(unknown))

    recalculated = recalculate_competition(competition, reconcile=not args.skip_players)
    print(f"{recalculated.name or 'Competition'} table:")
    for line in format_table(recalculated.teams):
        print(line)

    if args.group:
        members = {normalize_name(name) for name in args.group}
        group_teams = [team for team in competition.teams if normalize_name(team.name) in members]
        print("Group table:")
        for line in format_table(calculate_group_standings(group_teams, competition.matches)):
            print(line)

    scorers = aggregate_goals_from_events(
        competition.fixtures, competition.results, competition.teams
    )
    print("Top scorers:")
    for record in shortlist(scorers, args.top):
        print(f"  {record.name} ({record.team_name}): {record.goals} goals, {record.potm_wins} POTM")

    write_competition(recalculated, args.output)
    print(
        "Snapshot recalculated:",
        f"{len(recalculated.teams)} teams, {len(recalculated.results)} results -> {args.output}",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
