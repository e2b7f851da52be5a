from __future__ import annotations

import asyncio
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .app import build_default_team_infos, build_default_topology
from .config import CURRENT_VERSION, TIMELINE_KEYS, default_settings
from .league import InvalidConfiguration, MergeResult, merge_league_config
from .models import LeagueSnapshot, TeamInfo
from .playoffs import check_playoff_settings
from .settings import initial_settings
from .settings_store import LeagueConfig


class TeamInfoSelection(BaseModel):
    abbrev: str
    region: str
    name: str
    pop: float = 1.0
    imgURL: str | None = None
    imgURLSmall: str | None = None
    disabled: bool = False
    cid: int = 0
    did: int = 0


class MergeSelection(BaseModel):
    league_file: dict[str, Any] = {}
    teams: list[TeamInfoSelection] | None = None
    user_tid: int = 0
    version: int | None = None


class PlayoffSettingsSelection(BaseModel):
    num_rounds: int
    num_playoff_byes: int = 0
    num_active_teams: int
    play_in: bool = False
    by_conf: int = 0
    conference_sizes: list[int] | None = None


class ConfigService:
    def __init__(self) -> None:
        self.last_result: MergeResult | None = None
        self._lock = asyncio.Lock()

    def _team_infos(self, teams: list[TeamInfoSelection] | None) -> list[TeamInfo]:
        if not teams:
            return build_default_team_infos()
        return [TeamInfo.from_dict(t.model_dump()) for t in teams]

    async def merge(self, payload: MergeSelection) -> dict[str, Any]:
        team_infos = self._team_infos(payload.teams)
        if not 0 <= payload.user_tid < len(team_infos):
            raise HTTPException(status_code=400, detail=f"Unknown team id {payload.user_tid}")
        snapshot = LeagueSnapshot.from_dict(payload.league_file) if payload.league_file else None
        version = payload.version if payload.version is not None else (snapshot.version if snapshot else None)
        if version is not None and version > CURRENT_VERSION:
            raise HTTPException(
                status_code=400,
                detail=f"Unsupported league file version {version}; app supports up to {CURRENT_VERSION}.",
            )
        try:
            result = await merge_league_config(snapshot, team_infos, payload.user_tid, version)
        except InvalidConfiguration as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        self.last_result = result
        out = result.to_dict()
        out["teams"] = [
            {"abbrev": t.abbrev, "region": t.region, "name": t.name, "pop": t.pop, "disabled": t.disabled}
            for t in team_infos
        ]
        return out

    def settings(self) -> dict[str, Any]:
        if self.last_result is None:
            raise HTTPException(status_code=404, detail="No league has been created yet")
        return {"initialSettings": initial_settings(self.last_result.config)}

    def defaults(self) -> dict[str, Any]:
        return {
            "version": CURRENT_VERSION,
            "settings": LeagueConfig(default_settings()).to_dict(),
            "timelineKeys": sorted(TIMELINE_KEYS),
            **build_default_topology(),
        }

    def validate_playoffs(self, payload: PlayoffSettingsSelection) -> dict[str, Any]:
        check = check_playoff_settings(
            payload.num_rounds,
            payload.num_playoff_byes,
            payload.num_active_teams,
            payload.play_in,
            payload.by_conf,
            payload.conference_sizes,
        )
        return {"ok": check.ok, "reason": check.reason}


service = ConfigService()
app = FastAPI(title="League Config API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/defaults")
def defaults() -> dict[str, Any]:
    return service.defaults()


@app.post("/api/league-config/merge")
async def merge(payload: MergeSelection) -> dict[str, Any]:
    async with service._lock:
        return await service.merge(payload)


@app.get("/api/settings")
async def settings() -> dict[str, Any]:
    async with service._lock:
        return service.settings()


@app.post("/api/playoff-settings/validate")
def validate_playoffs(payload: PlayoffSettingsSelection) -> dict[str, Any]:
    return service.validate_playoffs(payload)
