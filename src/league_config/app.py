from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any, Iterable

from .config import CURRENT_VERSION, DEFAULT_CONFS, DEFAULT_DIVS
from .league import InvalidConfiguration, MergeResult, merge_league_config_sync
from .logging_utils import setup_logging
from .models import LeagueSnapshot, TeamInfo
from .settings import initial_settings
from .settings_store import LeagueConfig


class LeagueFileError(ValueError):
    pass


def build_default_team_infos() -> list[TeamInfo]:
    """Thirty teams in two conferences of three five-team divisions."""
    divisions: dict[str, list[tuple[str, str, str, float]]] = {
        "Atlantic": [
            ("BOS", "Boston", "Harbor Kings", 7.3),
            ("BKN", "Brooklyn", "Bridges", 2.6),
            ("NYC", "New York", "Metro Sparks", 21.0),
            ("PHI", "Philadelphia", "Liberty Blades", 6.1),
            ("TOR", "Toronto", "Polar Caps", 6.7),
        ],
        "Central": [
            ("CHI", "Chicago", "Lake Vipers", 9.1),
            ("CLE", "Cleveland", "Steel River", 1.9),
            ("DET", "Detroit", "Iron Rangers", 4.3),
            ("IND", "Indianapolis", "Prairie Storm", 2.1),
            ("MIL", "Milwaukee", "Timberwolves", 1.6),
        ],
        "Southeast": [
            ("ATL", "Atlanta", "Red Hawks", 6.1),
            ("CHA", "Charlotte", "Granite Bears", 2.6),
            ("MIA", "Miami", "Pacific Tide", 6.2),
            ("ORL", "Orlando", "Bay Comets", 2.7),
            ("WAS", "Washington", "Capital Foxes", 6.3),
        ],
        "Southwest": [
            ("DAL", "Dallas", "Desert Fire", 7.6),
            ("HOU", "Houston", "Atlantic Wolves", 7.1),
            ("MEM", "Memphis", "Canyon Coyotes", 1.3),
            ("NOL", "New Orleans", "Emerald Orcas", 1.3),
            ("SA", "San Antonio", "Golden Peaks", 2.6),
        ],
        "Northwest": [
            ("DEN", "Denver", "Summit Eagles", 2.9),
            ("MIN", "Minneapolis", "Glaciers", 3.6),
            ("OKC", "Oklahoma City", "Icebreakers", 1.4),
            ("POR", "Portland", "Silver Pines", 2.5),
            ("UTA", "Salt Lake City", "Aurora", 1.2),
        ],
        "Pacific": [
            ("GSW", "San Francisco", "Fog", 6.7),
            ("LA", "Los Angeles", "Earthquakes", 12.8),
            ("LAL", "Los Angeles", "Lowriders", 12.8),
            ("PHO", "Phoenix", "Vultures", 4.9),
            ("SAC", "Sacramento", "Gold Rush", 2.4),
        ],
    }
    did_by_name = {div["name"]: div for div in DEFAULT_DIVS}

    teams: list[TeamInfo] = []
    for division, entries in divisions.items():
        div = did_by_name[division]
        for abbrev, region, name, pop in entries:
            teams.append(
                TeamInfo(
                    abbrev=abbrev,
                    region=region,
                    name=name,
                    pop=pop,
                    img_url=f"/img/logos/{abbrev}.svg",
                    cid=div["cid"],
                    did=div["did"],
                )
            )
    return teams


def build_default_topology() -> dict[str, list[dict[str, Any]]]:
    return {
        "confs": [dict(conf) for conf in DEFAULT_CONFS],
        "divs": [dict(div) for div in DEFAULT_DIVS],
    }


def load_league_file(path: str | Path) -> LeagueSnapshot:
    file_path = Path(path)
    try:
        raw = json.loads(file_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        raise LeagueFileError(f"Failed to load league file ({exc})") from exc
    if not isinstance(raw, dict):
        raise LeagueFileError("League file has invalid format")
    snapshot = LeagueSnapshot.from_dict(raw)
    if snapshot.version is not None and snapshot.version > CURRENT_VERSION:
        raise LeagueFileError(
            f"Unsupported league file version {snapshot.version}; app supports up to {CURRENT_VERSION}."
        )
    return snapshot


def format_settings(config: LeagueConfig, keys: Iterable[str] | None = None) -> str:
    settings = initial_settings(config)
    chosen = list(keys) if keys is not None else sorted(settings)
    width = max((len(key) for key in chosen), default=0)
    lines = [f"Season {config.season} (phase {config.phase}), {config.get('numActiveTeams')} active teams"]
    for key in chosen:
        lines.append(f"{key:<{width}}  {json.dumps(settings.get(key))}")
    return "\n".join(lines)


def format_result(result: MergeResult, keys: Iterable[str] | None = None) -> str:
    lines = [format_settings(result.config, keys)]
    for notice in result.notices:
        lines.append(f"[{notice.severity}] {notice.message}")
    for message in result.diagnostics:
        lines.append(f"[warning] {message}")
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Merge a league file into a new league's settings.")
    parser.add_argument("league_file", nargs="?", help="League file JSON (omit for a fresh league)")
    parser.add_argument("--user-tid", type=int, default=0)
    parser.add_argument("--version", type=int, default=None, help="Override the league file version")
    parser.add_argument("--key", action="append", dest="keys", help="Only print these settings")
    parser.add_argument("--json", action="store_true", help="Print the merged settings as JSON")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    try:
        snapshot = load_league_file(args.league_file) if args.league_file else None
        result = merge_league_config_sync(snapshot, build_default_team_infos(), args.user_tid, args.version)
    except (LeagueFileError, InvalidConfiguration) as exc:
        parser.exit(1, f"error: {exc}\n")

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print(format_result(result, args.keys))
    return 0
