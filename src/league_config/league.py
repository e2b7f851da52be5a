from __future__ import annotations

import asyncio
import copy
import logging
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_SEASON, GRACE_PERIOD_SEASONS, default_value
from .migrations import apply_migrations
from .models import DIFFICULTY, PHASE, LeagueSnapshot, Notice, PlayoffShape, TeamInfo
from .playoffs import (
    PlayoffTopologyResolver,
    TeamInfoTopologyResolver,
    check_playoff_shape,
    conference_sizes,
    prune_playoff_rounds,
    valid_num_games_playoff_series,
)
from .population import equalize_regions
from .schedule import initial_num_games_conf_div_settings
from .settings_store import LeagueConfig
from .timeline import MalformedTimeline, Timeline, has_history

logger = logging.getLogger(__name__)

# Recomputed from the team list on every merge, never taken from a file.
TOPOLOGY_KEYS = frozenset({"numTeams", "numActiveTeams", "teamInfoCache"})
LEGACY_PLAYOFF_ROUNDS_KEY = "numPlayoffRounds"
SCHEDULE_RESET_MESSAGE = (
    '"# Division Games" and "# Conference Games" settings were reset because the supplied values did not work.'
)


class InvalidConfiguration(ValueError):
    pass


@dataclass(slots=True)
class MergeResult:
    config: LeagueConfig
    notices: list[Notice] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)
    migrations: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "config": self.config.to_dict(),
            "notices": [notice.to_dict() for notice in self.notices],
            "diagnostics": list(self.diagnostics),
            "migrations": list(self.migrations),
        }


class LeagueConfigBuilder:
    """Builds the settings of a new league from defaults, a league file and user choices.

    One builder handles one merge. Steps run in a fixed order since later ones
    read values settled by earlier ones (season/phase before userTid history,
    bracket size before the play-in check, and so on).
    """

    def __init__(
        self,
        snapshot: LeagueSnapshot | None,
        team_infos: list[TeamInfo],
        user_tid: int,
        version: int | None = None,
        *,
        resolver: PlayoffTopologyResolver | None = None,
    ) -> None:
        self.snapshot = snapshot or LeagueSnapshot()
        self.team_infos = team_infos
        self.user_tid = int(user_tid)
        self.version = version if version is not None else self.snapshot.version
        self.resolver = resolver or TeamInfoTopologyResolver(team_infos)
        self.file_settings: dict[str, Any] | None = self.snapshot.settings
        self.config = LeagueConfig()
        self.notices: list[Notice] = []
        self.diagnostics: list[str] = []
        self.migrations: list[str] = []

    @property
    def is_imported(self) -> bool:
        return self.file_settings is not None or self.version is not None

    @property
    def num_active_teams(self) -> int:
        return sum(1 for t in self.team_infos if not t.disabled)

    async def build(self) -> MergeResult:
        self._init_defaults()
        if self.file_settings is not None:
            self._apply_file_settings()
            self._resolve_user_tid()
            self._ensure_user_tids()
        self._ensure_easy_difficulty_flag()
        self._reconcile_playoff_rounds()
        if self.is_imported:
            self.migrations = apply_migrations(self.config, self.file_settings or {}, self.version)
        await self._ensure_play_in_valid()
        self._validate_draft_rounds()
        if self.config.get("equalizeRegions"):
            self._equalize_regions()
        self._reset_conf_div_games()
        self._carry_over_draft_picks()
        return MergeResult(
            config=self.config,
            notices=self.notices,
            diagnostics=self.diagnostics,
            migrations=self.migrations,
        )

    def _diagnose(self, message: str) -> None:
        logger.warning(message)
        self.diagnostics.append(message)

    def _init_defaults(self) -> None:
        starting_season = self.snapshot.starting_season
        if starting_season is None:
            starting_season = DEFAULT_SEASON
        config = self.config
        config.set("season", starting_season)
        config.set("startingSeason", starting_season)
        config.set("gracePeriodEnd", starting_season + GRACE_PERIOD_SEASONS)
        config.set("userTid", Timeline.constant(self.user_tid))
        config.set("userTids", [self.user_tid])
        config.set("numTeams", len(self.team_infos))
        config.set("numActiveTeams", self.num_active_teams)
        config.set("teamInfoCache", [t.cache_entry() for t in self.team_infos])

    def _apply_file_settings(self) -> None:
        for key, value in (self.file_settings or {}).items():
            # userTid needs the file's season/phase, so it gets its own pass.
            if key == "userTid" or key in TOPOLOGY_KEYS:
                continue
            if has_history(value):
                try:
                    value = Timeline.from_raw(value)
                except MalformedTimeline as exc:
                    self._diagnose(f"Ignoring league file setting {key}: {exc}")
                    continue
            else:
                value = copy.deepcopy(value)
            self.config.set(key, value)

    def _resolve_user_tid(self) -> None:
        raw = (self.file_settings or {}).get("userTid")
        if raw is None or not has_history(raw):
            return
        try:
            history = Timeline.from_raw(raw)
        except MalformedTimeline as exc:
            self._diagnose(f"Ignoring league file userTid history: {exc}")
            return

        config = self.config
        if history.latest() == self.user_tid:
            config.set("userTid", history)
        elif config.season == config.get("startingSeason"):
            # First season of the file, so the new team applies from the start.
            config.set("userTid", Timeline.constant(self.user_tid))
        else:
            try:
                config.set("userTid", history.set_effective_now(config.season, config.phase, self.user_tid))
            except MalformedTimeline as exc:
                self._diagnose(f"Resetting userTid history: {exc}")
                config.set("userTid", Timeline.constant(self.user_tid))

    def _ensure_user_tids(self) -> None:
        user_tids = self.config.get("userTids")
        if not isinstance(user_tids, list) or self.user_tid not in user_tids:
            self.config.set("userTids", [self.user_tid])

    def _ensure_easy_difficulty_flag(self) -> None:
        try:
            difficulty = float(self.config.get("difficulty", default=DIFFICULTY.NORMAL))
        except (TypeError, ValueError):
            return
        if difficulty <= DIFFICULTY.EASY:
            self.config.set("easyDifficultyInPast", True)

    def _playoff_groups(self) -> int:
        confs = self.config.get("confs") or []
        if self.config.get("playoffsByConf") and len(confs) > 1:
            return len(confs)
        return 0

    def _reconcile_playoff_rounds(self) -> None:
        config = self.config
        raw_series = config.get("numGamesPlayoffSeries")
        try:
            old_series = [int(games) for games in raw_series] if isinstance(raw_series, list) else []
        except (TypeError, ValueError):
            old_series = []
        new_series = list(old_series)
        num_active = self.num_active_teams

        byes = self._num_playoff_byes()
        if byes is None:
            self._diagnose(f"Resetting numPlayoffByes: {config.get('numPlayoffByes')!r} is not a number")
            config.set("numPlayoffByes", Timeline.constant(0))
            byes = 0

        legacy = LEGACY_PLAYOFF_ROUNDS_KEY in config
        shape = PlayoffShape(
            round_sizes=old_series,
            byes=byes,
            play_in=bool(config.get("playIn")),
            by_conf=self._playoff_groups(),
        )
        check = check_playoff_shape(shape, num_active)
        if not check.ok:
            logger.info("Playoff settings from league file rejected: %s", check.reason)
            legacy = True

        if legacy:
            try:
                legacy_rounds = int(config.raw(LEGACY_PLAYOFF_ROUNDS_KEY))
            except (TypeError, ValueError):
                legacy_rounds = None
            new_series = valid_num_games_playoff_series(old_series, legacy_rounds, num_active)
            config.delete(LEGACY_PLAYOFF_ROUNDS_KEY)

        # A custom 16 team league should not send all 16 teams to the playoffs.
        if not (self.file_settings and self.file_settings.get("numGamesPlayoffSeries")):
            new_series = prune_playoff_rounds(new_series, num_active)

        if new_series != old_series:
            # Non-default bracket sizes may not fit whatever bye count was in place.
            self._wrap("numPlayoffByes", 0)
            self._wrap("numGamesPlayoffSeries", new_series)
            logger.info("Playoff rounds changed from %s to %s", old_series, new_series)

    def _wrap(self, key: str, value: Any) -> None:
        try:
            self.config.wrap(key, value)
        except MalformedTimeline as exc:
            self._diagnose(f"Dropping later {key} history: {exc}")
            self.config.wrap_replacing_later(key, value)

    def _num_playoff_byes(self) -> int | None:
        try:
            return int(self.config.get("numPlayoffByes") or 0)
        except (TypeError, ValueError):
            return None

    async def _ensure_play_in_valid(self) -> None:
        config = self.config
        if not config.get("playIn"):
            return

        try:
            confs = await self.resolver.resolve(
                config.season,
                playoffs_by_conf=bool(config.get("playoffsByConf")),
                confs=list(config.get("confs") or []),
                skip_playoff_series=True,
            )
        except Exception as exc:
            self._diagnose(f"Disabling play-in tournament, playoff conferences could not be resolved: {exc}")
            config.set("playIn", False)
            return

        by_conf = len(confs) if len(confs) > 1 else 0
        shape = PlayoffShape(
            round_sizes=list(config.get("numGamesPlayoffSeries") or []),
            byes=self._num_playoff_byes() or 0,
            play_in=True,
            by_conf=by_conf,
        )
        check = check_playoff_shape(
            shape, self.num_active_teams, conference_sizes(self.team_infos, confs) if by_conf else None
        )
        if not check.ok:
            self._diagnose(f"Disabling play-in tournament: {check.reason}")
            config.set("playIn", False)

    def _validate_draft_rounds(self) -> None:
        num_draft_rounds = self.config.get("numDraftRounds", default=0)
        try:
            invalid = int(num_draft_rounds) < 0
        except (TypeError, ValueError):
            invalid = True
        if invalid:
            raise InvalidConfiguration(f"numDraftRounds must be a non-negative number, got {num_draft_rounds!r}")

    def _equalize_regions(self) -> None:
        pop = equalize_regions(self.team_infos, self.snapshot.scheduled_events)
        logger.info("Equalized team populations to %.2f", pop)

    def _reset_conf_div_games(self) -> None:
        config = self.config
        requested_div = config.get("numGamesDiv")
        requested_conf = config.get("numGamesConf")
        try:
            num_games = int(config.get("numGames", default=default_value("numGames")))
        except (TypeError, ValueError):
            self._diagnose(f"Resetting numGames: {config.get('numGames')!r} is not a number")
            num_games = default_value("numGames")
            config.set("numGames", num_games)
        info = initial_num_games_conf_div_settings(
            self.team_infos,
            num_games,
            requested_conf,
            requested_div,
        )
        config.set("numGamesDiv", info.num_games_div)
        config.set("numGamesConf", info.num_games_conf)

        # Only warn if the supplied values were customized.
        if info.altered and (
            requested_conf != default_value("numGamesConf") or requested_div != default_value("numGamesDiv")
        ):
            self.notices.append(Notice(message=SCHEDULE_RESET_MESSAGE, persist=False))

    def _carry_over_draft_picks(self) -> None:
        config = self.config
        draft_picks = self.snapshot.draft_picks
        if config.phase != PHASE.DRAFT or not draft_picks:
            return
        current = [dp for dp in draft_picks if dp.season == config.season]
        not_started = all(dp.round == 0 for dp in current) or any(dp.round == 1 and dp.pick == 1 for dp in current)
        if not_started and current:
            config.set("numDraftPicksCurrent", len(current))


async def merge_league_config(
    snapshot: LeagueSnapshot | None,
    team_infos: list[TeamInfo],
    user_tid: int,
    version: int | None = None,
    *,
    resolver: PlayoffTopologyResolver | None = None,
) -> MergeResult:
    builder = LeagueConfigBuilder(snapshot, team_infos, user_tid, version, resolver=resolver)
    return await builder.build()


def merge_league_config_sync(
    snapshot: LeagueSnapshot | None,
    team_infos: list[TeamInfo],
    user_tid: int,
    version: int | None = None,
    *,
    resolver: PlayoffTopologyResolver | None = None,
) -> MergeResult:
    return asyncio.run(merge_league_config(snapshot, team_infos, user_tid, version, resolver=resolver))
