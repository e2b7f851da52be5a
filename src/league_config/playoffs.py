"""Playoff bracket validation and bracket-size calculators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Protocol, Sequence

from .config import PLAYOFF_PRUNE_RATIO
from .models import PlayoffShape, TeamInfo

PLAY_IN_SLOTS_PER_GROUP = 2
DEFAULT_SERIES_LENGTH = 7


class InvalidPlayoffShape(ValueError):
    pass


@dataclass(slots=True)
class PlayoffCheck:
    ok: bool
    error: InvalidPlayoffShape | None = None

    @property
    def reason(self) -> str:
        return str(self.error) if self.error is not None else ""


def _groups(by_conf: int | bool) -> int:
    if by_conf is True:
        return 2
    if not by_conf:
        return 1
    return max(1, int(by_conf))


def _fail(message: str) -> PlayoffCheck:
    return PlayoffCheck(ok=False, error=InvalidPlayoffShape(message))


def check_playoff_settings(
    num_rounds: int,
    num_playoff_byes: int,
    num_active_teams: int,
    play_in: bool,
    by_conf: int | bool,
    conference_sizes: Sequence[int] | None = None,
) -> PlayoffCheck:
    """Check that a bracket can actually be filled by the league's teams.

    ``by_conf`` is the number of conferences the bracket is split across
    (``0``/``False`` for a single league-wide bracket, ``True`` for two).
    ``conference_sizes`` optionally gives the active team count of each of
    those conferences so per-conference capacity can be checked too.
    """
    if num_rounds < 0:
        return _fail("Number of playoff rounds cannot be negative")
    if num_playoff_byes < 0:
        return _fail("Number of playoff byes cannot be negative")

    bracket_size = 2**num_rounds
    if num_rounds == 0 and num_playoff_byes > 0:
        return _fail("Cannot have playoff byes without any playoff rounds")
    if num_rounds > 0 and num_playoff_byes > bracket_size // 2:
        return _fail(
            f"{num_playoff_byes} first round byes is too many for a {num_rounds} round playoff "
            f"(max {bracket_size // 2})"
        )

    num_playoff_teams = bracket_size - num_playoff_byes
    if num_playoff_teams > num_active_teams:
        return _fail(
            f"{num_rounds} playoff rounds with {num_playoff_byes} first round byes means "
            f"{num_playoff_teams} teams make the playoffs, but there are only {num_active_teams} active teams"
        )

    groups = _groups(by_conf)
    if groups > 1:
        if bracket_size % groups != 0:
            return _fail(f"A {num_rounds} round playoff cannot be split evenly across {groups} conferences")
        if num_playoff_byes % groups != 0:
            return _fail(f"Playoffs split by conference need a number of byes divisible by {groups}")

    per_group = num_playoff_teams // groups
    play_in_slots = PLAY_IN_SLOTS_PER_GROUP if play_in else 0
    if play_in:
        if per_group < PLAY_IN_SLOTS_PER_GROUP:
            return _fail("The play-in tournament needs at least 2 playoff spots per bracket")
        needed = num_playoff_teams + play_in_slots * groups
        if needed > num_active_teams:
            return _fail(
                f"The play-in tournament needs {needed} teams, but there are only {num_active_teams} active teams"
            )

    if conference_sizes is not None and groups > 1:
        for idx, size in enumerate(conference_sizes):
            if size < per_group + play_in_slots:
                return _fail(
                    f"Conference {idx + 1} has {size} active teams, but needs {per_group + play_in_slots} "
                    "to fill its side of the bracket"
                )

    return PlayoffCheck(ok=True)


def check_playoff_shape(
    shape: PlayoffShape,
    num_active_teams: int,
    conference_sizes: Sequence[int] | None = None,
) -> PlayoffCheck:
    return check_playoff_settings(
        shape.num_rounds, shape.byes, num_active_teams, shape.play_in, shape.by_conf, conference_sizes
    )


def validate_playoff_settings(
    num_rounds: int,
    num_playoff_byes: int,
    num_active_teams: int,
    play_in: bool,
    by_conf: int | bool,
    conference_sizes: Sequence[int] | None = None,
) -> None:
    check = check_playoff_settings(
        num_rounds, num_playoff_byes, num_active_teams, play_in, by_conf, conference_sizes
    )
    if check.error is not None:
        raise check.error


def valid_num_games_playoff_series(
    num_games_playoff_series: Sequence[int],
    num_rounds: int | None,
    num_active_teams: int,
) -> list[int]:
    """Per-round series lengths for a legacy round count.

    Pads earlier rounds with the first round's length, trims the earliest
    rounds when there are too many, then drops rounds the league cannot fill.
    """
    series = [int(games) for games in num_games_playoff_series]
    if num_rounds is None:
        num_rounds = len(series)
    num_rounds = max(0, int(num_rounds))

    if num_rounds > len(series):
        filler = series[0] if series else DEFAULT_SERIES_LENGTH
        series = [filler] * (num_rounds - len(series)) + series
    elif num_rounds < len(series):
        series = series[len(series) - num_rounds :]

    while len(series) > 1 and 2 ** len(series) > num_active_teams:
        series.pop(0)
    return series


def prune_playoff_rounds(
    num_games_playoff_series: Sequence[int],
    num_active_teams: int,
    ratio: float = PLAYOFF_PRUNE_RATIO,
) -> list[int]:
    """Drop opening rounds until no more than ``ratio`` of the league makes it."""
    series = list(num_games_playoff_series)
    while len(series) > 1 and 2 ** len(series) > ratio * num_active_teams:
        series.pop(0)
    return series


class PlayoffTopologyResolver(Protocol):
    async def resolve(
        self,
        season: int,
        *,
        playoffs_by_conf: bool,
        confs: list[dict[str, Any]],
        skip_playoff_series: bool = True,
    ) -> list[dict[str, Any]]:
        """Conferences the playoffs of ``season`` are split across (empty for league-wide)."""
        ...


class TeamInfoTopologyResolver:
    """Realizes conferences from the team list being merged."""

    def __init__(self, team_infos: Iterable[TeamInfo]) -> None:
        self.team_infos = list(team_infos)

    async def resolve(
        self,
        season: int,
        *,
        playoffs_by_conf: bool,
        confs: list[dict[str, Any]],
        skip_playoff_series: bool = True,
    ) -> list[dict[str, Any]]:
        if not playoffs_by_conf:
            return []
        active_cids = {t.cid for t in self.team_infos if not t.disabled}
        realized = [conf for conf in confs if conf.get("cid") in active_cids]
        return realized if len(realized) > 1 else []


def conference_sizes(team_infos: Iterable[TeamInfo], confs: Sequence[dict[str, Any]]) -> list[int]:
    counts: dict[int, int] = {}
    for team in team_infos:
        if not team.disabled:
            counts[team.cid] = counts.get(team.cid, 0) + 1
    return [counts.get(conf.get("cid"), 0) for conf in confs]
