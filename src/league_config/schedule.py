from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from .models import TeamInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ConfDivGames:
    num_games_div: int | None
    num_games_conf: int | None
    altered: bool = False


def _group_sizes(teams: list[TeamInfo]) -> tuple[dict[int, int], dict[int, int], dict[int, set[int]]]:
    div_sizes: dict[int, int] = {}
    conf_sizes: dict[int, int] = {}
    divs_by_conf: dict[int, set[int]] = {}
    for team in teams:
        div_sizes[team.did] = div_sizes.get(team.did, 0) + 1
        conf_sizes[team.cid] = conf_sizes.get(team.cid, 0) + 1
        divs_by_conf.setdefault(team.cid, set()).add(team.did)
    return div_sizes, conf_sizes, divs_by_conf


def schedule_problem(
    teams: Iterable[TeamInfo],
    num_games: int,
    num_games_conf: int | None,
    num_games_div: int | None,
) -> str | None:
    """Why a division/conference game split cannot be scheduled, or None if it can."""
    active = [t for t in teams if not t.disabled]
    if num_games_div is None and num_games_conf is None:
        return None
    for label, count in (("division", num_games_div), ("conference", num_games_conf)):
        if count is not None and (isinstance(count, bool) or not isinstance(count, (int, float))):
            return f"{label} game count {count!r} is not a number"

    div_games = num_games_div or 0
    conf_games = num_games_conf or 0
    if div_games < 0 or conf_games < 0:
        return "division and conference game counts cannot be negative"
    if div_games + conf_games > num_games:
        return f"{div_games} division + {conf_games} conference games exceeds the {num_games} game season"

    div_sizes, conf_sizes, divs_by_conf = _group_sizes(active)

    if div_games > 0:
        for did, size in div_sizes.items():
            if size < 2:
                return f"division {did} has no opponents for division games"
            if (size * div_games) % 2 != 0:
                return f"division {did} cannot pair up {div_games} games per team"

    for cid, conf_size in conf_sizes.items():
        if conf_games > 0:
            for did in divs_by_conf[cid]:
                if conf_size - div_sizes[did] < 1:
                    return f"conference {cid} has no non-division opponents for division {did}"
            if (conf_size * conf_games) % 2 != 0:
                return f"conference {cid} cannot pair up {conf_games} games per team"
        remaining = num_games - div_games - conf_games
        if remaining > 0 and len(active) - conf_size < 1:
            return f"conference {cid} has no opponents for its {remaining} other games"

    return None


def initial_num_games_conf_div_settings(
    teams: Iterable[TeamInfo],
    num_games: int,
    num_games_conf: int | None,
    num_games_div: int | None,
) -> ConfDivGames:
    """Keep the requested division/conference game counts if they can be scheduled.

    Otherwise both are cleared, which leaves the schedule unconstrained.
    """
    problem = schedule_problem(teams, num_games, num_games_conf, num_games_div)
    if problem is None:
        return ConfDivGames(num_games_div=num_games_div, num_games_conf=num_games_conf)
    logger.info("Resetting division/conference game counts: %s", problem)
    return ConfDivGames(num_games_div=None, num_games_conf=None, altered=True)
