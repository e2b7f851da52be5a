"""Season-versioned setting values.

A ``Timeline`` is an ordered list of ``(start, value)`` entries where each value
is in effect from its ``start`` season up to the next entry's ``start``. The
first entry always starts at ``NEG_INF`` so every season resolves to something.
Timelines are immutable; writes return a new instance.
"""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass
from typing import Any, Iterable

from .models import PHASE

NEG_INF = -math.inf

_NEG_INF_MARKERS = (None, "-Infinity", "-inf")


class MalformedTimeline(ValueError):
    pass


@dataclass(frozen=True)
class TimelineEntry:
    start: float
    value: Any


def next_configurable_season(season: int, phase: int) -> int:
    """First season a settings change made now can apply to.

    Once the playoffs are over, the current season is history and changes
    roll over to the next one.
    """
    if phase > PHASE.PLAYOFFS:
        return season + 1
    return season


@dataclass(frozen=True)
class Timeline:
    entries: tuple[TimelineEntry, ...]

    def __post_init__(self) -> None:
        if not self.entries:
            raise MalformedTimeline("timeline has no entries")
        if self.entries[0].start != NEG_INF:
            raise MalformedTimeline(f"timeline must start at -Infinity, not {self.entries[0].start!r}")
        previous = NEG_INF
        for entry in self.entries[1:]:
            start = entry.start
            if isinstance(start, bool) or not isinstance(start, int):
                raise MalformedTimeline(f"timeline start must be a season number, not {start!r}")
            if start <= previous:
                raise MalformedTimeline(f"timeline starts must be strictly ascending ({previous!r} then {start!r})")
            previous = start

    @classmethod
    def constant(cls, value: Any) -> Timeline:
        return cls((TimelineEntry(NEG_INF, value),))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[float, Any]]) -> Timeline:
        return cls(tuple(TimelineEntry(start, value) for start, value in pairs))

    @classmethod
    def from_raw(cls, raw: Any) -> Timeline:
        """Build from the serialized ``[{"start": ..., "value": ...}]`` form.

        JSON has no infinity, so a leading ``null`` start means ``NEG_INF``.
        """
        if isinstance(raw, Timeline):
            return raw
        if not has_history(raw):
            raise MalformedTimeline("expected a non-empty list of {start, value} entries")
        entries: list[TimelineEntry] = []
        for idx, row in enumerate(raw):
            start = row["start"]
            if idx == 0 and (start in _NEG_INF_MARKERS or start == NEG_INF):
                start = NEG_INF
            elif isinstance(start, float) and start.is_integer():
                start = int(start)
            entries.append(TimelineEntry(start, row["value"]))
        return cls(tuple(entries))

    def to_raw(self) -> list[dict[str, Any]]:
        return [
            {
                "start": None if entry.start == NEG_INF else entry.start,
                "value": copy.deepcopy(entry.value),
            }
            for entry in self.entries
        ]

    def __len__(self) -> int:
        return len(self.entries)

    def latest(self) -> Any:
        return self.entries[-1].value

    def resolve(self, as_of_season: float) -> Any:
        value = self.entries[0].value
        for entry in self.entries:
            if entry.start > as_of_season:
                break
            value = entry.value
        return value

    def with_value_at(self, start: int, value: Any) -> Timeline:
        """Overwrite the last entry if it starts at ``start``, else append one."""
        last = self.entries[-1]
        if last.start == start:
            return Timeline((*self.entries[:-1], TimelineEntry(start, value)))
        return Timeline((*self.entries, TimelineEntry(start, value)))

    def set_effective_now(self, current_season: int, current_phase: int, value: Any) -> Timeline:
        return self.with_value_at(next_configurable_season(current_season, current_phase), value)

    def before(self, season: int) -> Timeline:
        """Entries starting earlier than ``season``; the ``NEG_INF`` entry always stays."""
        return Timeline(tuple(entry for entry in self.entries if entry.start < season))


def has_history(raw: Any) -> bool:
    if isinstance(raw, Timeline):
        return True
    return (
        isinstance(raw, list)
        and len(raw) > 0
        and all(isinstance(row, dict) and "start" in row and "value" in row for row in raw)
    )


def resolve(timeline: Timeline, as_of_season: float) -> Any:
    return timeline.resolve(as_of_season)


def set_effective_now(timeline: Timeline, current_season: int, current_phase: int, value: Any) -> Timeline:
    return timeline.set_effective_now(current_season, current_phase, value)


def unwrap(value: Any, season: float | None = None) -> Any:
    """Plain value of a setting; timelines resolve at ``season`` (latest when None)."""
    if isinstance(value, Timeline):
        return value.latest() if season is None else value.resolve(season)
    return value
