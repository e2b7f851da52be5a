import pytest

from league_config.models import PHASE
from league_config.timeline import (
    NEG_INF,
    MalformedTimeline,
    Timeline,
    has_history,
    next_configurable_season,
    resolve,
    set_effective_now,
    unwrap,
)


def _history() -> Timeline:
    return Timeline.from_pairs([(NEG_INF, "a"), (2020, "b"), (2025, "c")])


@pytest.mark.parametrize(
    "season,expected",
    [
        (1990, "a"),
        (2019, "a"),
        (2020, "b"),
        (2024, "b"),
        (2025, "c"),
        (2040, "c"),
    ],
)
def test_resolve_table(season, expected) -> None:
    assert resolve(_history(), season) == expected


def test_resolve_never_goes_back_in_time() -> None:
    timeline = _history()
    order = ["a", "b", "c"]
    indexes = [order.index(timeline.resolve(season)) for season in range(2010, 2035)]
    assert indexes == sorted(indexes)


def test_from_raw_turns_null_start_into_negative_infinity() -> None:
    timeline = Timeline.from_raw([{"start": None, "value": 3}, {"start": 2031, "value": 7}])
    assert timeline.entries[0].start == NEG_INF
    assert timeline.to_raw() == [{"start": None, "value": 3}, {"start": 2031, "value": 7}]


@pytest.mark.parametrize(
    "raw",
    [
        [],
        [{"start": 2020, "value": 1}],
        [{"start": None, "value": 1}, {"start": 2025, "value": 2}, {"start": 2021, "value": 3}],
        [{"start": None, "value": 1}, {"start": 2025, "value": 2}, {"start": 2025, "value": 3}],
        [{"start": None, "value": 1}, {"start": None, "value": 2}],
    ],
)
def test_malformed_timelines_are_rejected(raw) -> None:
    with pytest.raises(MalformedTimeline):
        Timeline.from_raw(raw)


def test_next_configurable_season_rolls_over_after_playoffs() -> None:
    assert next_configurable_season(2030, PHASE.REGULAR_SEASON) == 2030
    assert next_configurable_season(2030, PHASE.PLAYOFFS) == 2030
    assert next_configurable_season(2030, PHASE.DRAFT) == 2031


def test_set_effective_now_appends_then_overwrites_same_season() -> None:
    timeline = Timeline.constant(3)
    appended = set_effective_now(timeline, 2030, PHASE.REGULAR_SEASON, 7)
    assert appended.to_raw() == [{"start": None, "value": 3}, {"start": 2030, "value": 7}]

    corrected = appended.set_effective_now(2030, PHASE.REGULAR_SEASON, 9)
    assert corrected.to_raw() == [{"start": None, "value": 3}, {"start": 2030, "value": 9}]
    assert len(timeline) == 1


def test_set_effective_now_after_playoffs_targets_next_season() -> None:
    timeline = Timeline.constant(3).set_effective_now(2030, PHASE.FREE_AGENCY, 7)
    assert timeline.resolve(2030) == 3
    assert timeline.resolve(2031) == 7


def test_set_effective_now_is_idempotent() -> None:
    once = _history().set_effective_now(2030, PHASE.PRESEASON, "d")
    twice = once.set_effective_now(2030, PHASE.PRESEASON, "d")
    assert twice == once
    assert len(twice) == len(once)
    assert twice.resolve(2030) == once.resolve(2030) == "d"


def test_set_effective_now_before_latest_entry_is_rejected() -> None:
    with pytest.raises(MalformedTimeline):
        _history().set_effective_now(2022, PHASE.PRESEASON, "x")


def test_unwrap_and_has_history() -> None:
    assert unwrap(5) == 5
    assert unwrap(_history()) == "c"
    assert unwrap(_history(), 2021) == "b"
    assert has_history([{"start": None, "value": 1}])
    assert not has_history([7, 7, 7])
    assert not has_history([])


def test_before_keeps_only_earlier_entries() -> None:
    assert _history().before(2025).to_raw() == [{"start": None, "value": "a"}, {"start": 2020, "value": "b"}]
    assert _history().before(2000) == Timeline.constant("a")
