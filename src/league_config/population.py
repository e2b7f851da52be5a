from __future__ import annotations

from typing import Iterable

from .models import EVENT_EXPANSION_DRAFT, EVENT_TEAM_INFO, ScheduledEvent, TeamInfo


def average_population(team_infos: list[TeamInfo]) -> float:
    if not team_infos:
        return 0.0
    total = sum(t.pop for t in team_infos)
    return round(total / len(team_infos), 2)


def equalize_regions(team_infos: list[TeamInfo], scheduled_events: Iterable[ScheduledEvent] = ()) -> float:
    """Give every team the league-average population, in place.

    Populations carried by future expansion drafts and team info changes are
    overwritten too so they replay against the same baseline.
    """
    pop = average_population(team_infos)
    for team in team_infos:
        team.pop = pop

    for event in scheduled_events:
        if event.type == EVENT_EXPANSION_DRAFT:
            for row in event.info.get("teams", []):
                if isinstance(row, dict):
                    row["pop"] = pop
        elif event.type == EVENT_TEAM_INFO and event.info.get("pop") is not None:
            event.info["pop"] = pop
    return pop
