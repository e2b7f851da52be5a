from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class PHASE(IntEnum):
    EXPANSION_DRAFT = -2
    FANTASY_DRAFT = -1
    PRESEASON = 0
    REGULAR_SEASON = 1
    AFTER_TRADE_DEADLINE = 2
    PLAYOFFS = 3
    DRAFT_LOTTERY = 4
    DRAFT = 5
    AFTER_DRAFT = 6
    RESIGN_PLAYERS = 7
    FREE_AGENCY = 8


class DIFFICULTY:
    EASY = -0.25
    NORMAL = 0.0
    HARD = 0.25
    INSANE = 1.0


EVENT_EXPANSION_DRAFT = "expansionDraft"
EVENT_TEAM_INFO = "teamInfo"


@dataclass(slots=True)
class TeamInfo:
    abbrev: str
    region: str
    name: str
    pop: float = 1.0
    img_url: str | None = None
    img_url_small: str | None = None
    disabled: bool = False
    cid: int = 0
    did: int = 0

    def cache_entry(self) -> dict[str, Any]:
        return {
            "abbrev": self.abbrev,
            "disabled": self.disabled,
            "imgURL": self.img_url,
            "imgURLSmall": self.img_url_small,
            "name": self.name,
            "region": self.region,
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> TeamInfo:
        return cls(
            abbrev=str(raw.get("abbrev", "")),
            region=str(raw.get("region", "")),
            name=str(raw.get("name", "")),
            pop=float(raw["pop"]) if raw.get("pop") is not None else 1.0,
            img_url=raw.get("imgURL"),
            img_url_small=raw.get("imgURLSmall"),
            disabled=bool(raw.get("disabled", False)),
            cid=int(raw.get("cid", 0) or 0),
            did=int(raw.get("did", 0) or 0),
        )


@dataclass(slots=True)
class DraftPick:
    season: int | str
    round: int
    pick: int
    tid: int | None = None


@dataclass(slots=True)
class ScheduledEvent:
    type: str
    season: int
    phase: int
    info: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class LeagueSnapshot:
    """Parsed league file payload. Every field is optional."""

    settings: dict[str, Any] | None = None
    starting_season: int | None = None
    version: int | None = None
    scheduled_events: list[ScheduledEvent] = field(default_factory=list)
    draft_picks: list[DraftPick] | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> LeagueSnapshot:
        settings = _parse_game_attributes(raw.get("gameAttributes"))

        starting_season = raw.get("startingSeason")
        try:
            starting_season = int(starting_season) if starting_season is not None else None
        except (TypeError, ValueError):
            starting_season = None

        version = raw.get("version")
        try:
            version = int(version) if version is not None else None
        except (TypeError, ValueError):
            version = None

        events: list[ScheduledEvent] = []
        raw_events = raw.get("scheduledEvents", [])
        if isinstance(raw_events, list):
            for row in raw_events:
                if not isinstance(row, dict) or not isinstance(row.get("type"), str):
                    continue
                info = row.get("info")
                events.append(
                    ScheduledEvent(
                        type=row["type"],
                        season=int(row.get("season", 0) or 0),
                        phase=int(row.get("phase", 0) or 0),
                        info=info if isinstance(info, dict) else {},
                    )
                )

        draft_picks: list[DraftPick] | None = None
        raw_picks = raw.get("draftPicks")
        if isinstance(raw_picks, list):
            draft_picks = []
            for row in raw_picks:
                if not isinstance(row, dict):
                    continue
                try:
                    draft_picks.append(
                        DraftPick(
                            season=row.get("season", 0),
                            round=int(row.get("round", 0) or 0),
                            pick=int(row.get("pick", 0) or 0),
                            tid=row.get("tid"),
                        )
                    )
                except (TypeError, ValueError):
                    continue

        return cls(
            settings=settings,
            starting_season=starting_season,
            version=version,
            scheduled_events=events,
            draft_picks=draft_picks,
        )


def _parse_game_attributes(raw: Any) -> dict[str, Any] | None:
    if isinstance(raw, dict):
        return dict(raw)
    # Very old league files store settings as a list of {key, value} rows.
    if isinstance(raw, list):
        out: dict[str, Any] = {}
        for row in raw:
            if isinstance(row, dict) and isinstance(row.get("key"), str):
                out[row["key"]] = row.get("value")
        return out
    return None


@dataclass(slots=True)
class PlayoffShape:
    round_sizes: list[int]
    byes: int = 0
    play_in: bool = False
    by_conf: int = 0

    @property
    def num_rounds(self) -> int:
        return len(self.round_sizes)

    @property
    def num_playoff_teams(self) -> int:
        return 2**self.num_rounds - self.byes


@dataclass(slots=True)
class Notice:
    message: str
    severity: str = "info"
    persist: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"severity": self.severity, "message": self.message, "persist": self.persist}
