from league_config.app import build_default_team_infos
from league_config.models import TeamInfo
from league_config.schedule import initial_num_games_conf_div_settings, schedule_problem


def _teams(num_confs: int, divs_per_conf: int, teams_per_div: int) -> list[TeamInfo]:
    teams: list[TeamInfo] = []
    did = 0
    for cid in range(num_confs):
        for _ in range(divs_per_conf):
            for idx in range(teams_per_div):
                teams.append(TeamInfo(abbrev=f"T{did}{idx}", region=f"Region {did}", name=f"Team {idx}", cid=cid, did=did))
            did += 1
    return teams


def test_default_league_schedules_cleanly() -> None:
    assert schedule_problem(build_default_team_infos(), 82, 36, 16) is None


def test_unconstrained_schedule_is_always_valid() -> None:
    assert schedule_problem(_teams(1, 1, 3), 82, None, None) is None


def test_too_many_division_and_conference_games() -> None:
    problem = schedule_problem(build_default_team_infos(), 82, 60, 30)
    assert problem is not None
    assert "exceeds the 82 game season" in problem


def test_odd_division_pairings_are_rejected() -> None:
    problem = schedule_problem(build_default_team_infos(), 82, 36, 15)
    assert problem is not None
    assert "cannot pair up 15 games" in problem


def test_single_team_division_has_no_opponents() -> None:
    problem = schedule_problem(_teams(1, 3, 1), 10, 0, 2)
    assert problem is not None
    assert "no opponents for division games" in problem


def test_conference_needs_non_division_opponents() -> None:
    problem = schedule_problem(_teams(2, 1, 4), 20, 2, 6)
    assert problem is not None
    assert "non-division opponents" in problem


def test_remaining_games_need_teams_outside_the_conference() -> None:
    problem = schedule_problem(_teams(1, 2, 4), 20, 4, 6)
    assert problem is not None
    assert "other games" in problem


def test_disabled_teams_do_not_count() -> None:
    teams = build_default_team_infos()
    seen_divs: set[int] = set()
    for team in teams:
        if team.did not in seen_divs:
            team.disabled = True
            seen_divs.add(team.did)
    assert schedule_problem(teams, 82, 36, 15) is None


def test_initial_settings_keep_values_that_work() -> None:
    info = initial_num_games_conf_div_settings(build_default_team_infos(), 82, 36, 16)
    assert (info.num_games_div, info.num_games_conf, info.altered) == (16, 36, False)


def test_initial_settings_clear_values_that_do_not_work() -> None:
    info = initial_num_games_conf_div_settings(build_default_team_infos(), 82, 36, 15)
    assert info.num_games_div is None
    assert info.num_games_conf is None
    assert info.altered


def test_non_numeric_game_counts_cannot_be_scheduled() -> None:
    problem = schedule_problem(build_default_team_infos(), 82, "36", 16)
    assert problem is not None
    assert "not a number" in problem
