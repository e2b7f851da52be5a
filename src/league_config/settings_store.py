from __future__ import annotations

import copy
from typing import Any, Iterator

from .config import default_settings
from .timeline import Timeline, has_history, next_configurable_season, unwrap


class LeagueConfig:
    """Setting name -> value store with timeline-aware reads and writes.

    Values are either plain (scalars, lists, dicts) or ``Timeline`` instances.
    ``get`` always hands back a plain value; ``wrap`` records a change at the
    next configurable season instead of rewriting history.
    """

    def __init__(self, settings: dict[str, Any] | None = None) -> None:
        self._settings: dict[str, Any] = default_settings() if settings is None else settings

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LeagueConfig:
        settings: dict[str, Any] = {}
        for key, value in raw.items():
            settings[key] = Timeline.from_raw(value) if has_history(value) else copy.deepcopy(value)
        return cls(settings)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for key, value in self._settings.items():
            out[key] = value.to_raw() if isinstance(value, Timeline) else copy.deepcopy(value)
        return out

    def copy(self) -> LeagueConfig:
        return LeagueConfig(copy.deepcopy(self._settings))

    def __contains__(self, key: object) -> bool:
        return key in self._settings

    def __iter__(self) -> Iterator[str]:
        return iter(self._settings)

    def __len__(self) -> int:
        return len(self._settings)

    @property
    def season(self) -> int:
        return int(self._settings.get("season", 0))

    @property
    def phase(self) -> int:
        return int(self._settings.get("phase", 0))

    def raw(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)

    def get(self, key: str, season: float | None = None, default: Any = None) -> Any:
        if key not in self._settings:
            return default
        return unwrap(self._settings[key], season)

    def get_current(self, key: str, default: Any = None) -> Any:
        return self.get(key, season=self.season, default=default)

    def set(self, key: str, value: Any) -> None:
        self._settings[key] = value

    def delete(self, key: str) -> None:
        self._settings.pop(key, None)

    def wrap(self, key: str, value: Any) -> Timeline:
        """Write ``value`` effective from the next configurable season."""
        if key not in self._settings:
            timeline = Timeline.constant(value)
            self._settings[key] = timeline
            return timeline
        current = self._settings[key]
        timeline = current if isinstance(current, Timeline) else Timeline.constant(current)
        timeline = timeline.set_effective_now(self.season, self.phase, value)
        self._settings[key] = timeline
        return timeline

    def wrap_replacing_later(self, key: str, value: Any) -> Timeline:
        """Like ``wrap``, but entries at or after the next configurable season are dropped first."""
        current = self._settings.get(key)
        if not isinstance(current, Timeline):
            return self.wrap(key, value)
        start = next_configurable_season(self.season, self.phase)
        timeline = current.before(start).with_value_at(start, value)
        self._settings[key] = timeline
        return timeline
