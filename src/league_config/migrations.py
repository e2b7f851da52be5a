"""Version-gated fixups for league files written by older releases.

Each ``Migration`` declares the file versions it applies to; a file without a
version is treated as the oldest and gets every migration. New rules go at the
end of ``MIGRATIONS``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

from .config import DEFAULT_TIEBREAKERS, PLAY_IN_MIN_VERSION, TIEBREAKERS_MAX_LEGACY_VERSION
from .models import PHASE
from .settings_store import LeagueConfig
from .timeline import NEG_INF, Timeline

logger = logging.getLogger(__name__)

Transform = Callable[[LeagueConfig, dict[str, Any]], bool]


@dataclass(frozen=True)
class Migration:
    name: str
    transform: Transform
    min_version: int | None = None
    max_version: int | None = None

    def applies_to(self, version: int | None) -> bool:
        if version is None:
            return True
        if self.min_version is not None and version < self.min_version:
            return False
        if self.max_version is not None and version > self.max_version:
            return False
        return True


def backfill_coin_flip_tiebreakers(config: LeagueConfig, file_settings: dict[str, Any]) -> bool:
    # Old leagues broke ties randomly up to the point they get loaded here.
    if file_settings.get("tiebreakers"):
        return False
    season = file_settings.get("season")
    phase = file_settings.get("phase")
    if season is None or phase is None:
        return False
    actual_phase = file_settings.get("nextPhase")
    if actual_phase is None:
        actual_phase = phase
    try:
        switch_season = int(season)
        if int(actual_phase) >= PHASE.PLAYOFFS:
            switch_season += 1
    except (TypeError, ValueError):
        return False

    config.set(
        "tiebreakers",
        Timeline.from_pairs([(NEG_INF, ["coinFlip"]), (switch_season, list(DEFAULT_TIEBREAKERS))]),
    )
    return True


def disable_play_in(config: LeagueConfig, file_settings: dict[str, Any]) -> bool:
    if not config.get("playIn"):
        return False
    config.set("playIn", False)
    return True


MIGRATIONS: tuple[Migration, ...] = (
    Migration("coin_flip_tiebreakers", backfill_coin_flip_tiebreakers, max_version=TIEBREAKERS_MAX_LEGACY_VERSION),
    Migration("disable_play_in", disable_play_in, max_version=PLAY_IN_MIN_VERSION - 1),
)


def apply_migrations(
    config: LeagueConfig,
    file_settings: dict[str, Any],
    version: int | None,
    migrations: Sequence[Migration] = MIGRATIONS,
) -> list[str]:
    applied: list[str] = []
    for migration in migrations:
        if not migration.applies_to(version):
            continue
        if migration.transform(config, file_settings):
            logger.info("Applied league file migration %s (version %s)", migration.name, version)
            applied.append(migration.name)
    return applied
