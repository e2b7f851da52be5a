import json

import pytest

from league_config.app import LeagueFileError, build_default_team_infos, load_league_file, main
from league_config.config import CURRENT_VERSION, DEFAULT_TIEBREAKERS
from league_config.league import LEGACY_PLAYOFF_ROUNDS_KEY, merge_league_config_sync
from league_config.migrations import MIGRATIONS, Migration, apply_migrations
from league_config.models import LeagueSnapshot
from league_config.playoffs import TeamInfoTopologyResolver
from league_config.settings_store import LeagueConfig


class RecordingResolver(TeamInfoTopologyResolver):
    def __init__(self, team_infos) -> None:
        super().__init__(team_infos)
        self.calls: list[int] = []

    async def resolve(self, season, *, playoffs_by_conf, confs, skip_playoff_series=True):
        self.calls.append(season)
        return await super().resolve(
            season, playoffs_by_conf=playoffs_by_conf, confs=confs, skip_playoff_series=skip_playoff_series
        )


def _merge(settings: dict, version, **kwargs):
    snapshot = LeagueSnapshot.from_dict({"gameAttributes": settings, "version": version})
    return merge_league_config_sync(snapshot, build_default_team_infos(), 0, **kwargs)


@pytest.mark.regression
def test_legacy_round_count_is_converted_and_tiebreakers_backfilled() -> None:
    result = _merge({"season": 2030, "phase": 1, LEGACY_PLAYOFF_ROUNDS_KEY: 4}, 40)
    config = result.config

    assert LEGACY_PLAYOFF_ROUNDS_KEY not in config
    series = config.get("numGamesPlayoffSeries")
    assert series == [7, 7, 7, 7]
    assert 2 ** len(series) <= 0.75 * 30

    assert config.get("tiebreakers", season=2029) == ["coinFlip"]
    assert config.get("tiebreakers", season=2030) == list(DEFAULT_TIEBREAKERS)
    assert result.migrations == ["coin_flip_tiebreakers", "disable_play_in"]


@pytest.mark.regression
def test_legacy_round_count_too_big_for_the_league() -> None:
    teams = build_default_team_infos()[:10]
    snapshot = LeagueSnapshot.from_dict({"gameAttributes": {LEGACY_PLAYOFF_ROUNDS_KEY: 5}, "version": 40})
    config = merge_league_config_sync(snapshot, teams, 0).config
    assert config.get("numGamesPlayoffSeries") == [7, 7]
    assert LEGACY_PLAYOFF_ROUNDS_KEY not in config


@pytest.mark.regression
@pytest.mark.parametrize(
    "phase,next_phase,switch_season",
    [
        (1, None, 2030),
        (2, None, 2030),
        (3, None, 2031),
        (7, None, 2031),
        (1, 3, 2031),
    ],
)
def test_tiebreaker_switch_season_follows_the_phase(phase, next_phase, switch_season) -> None:
    config = _merge({"season": 2030, "phase": phase, "nextPhase": next_phase}, 40).config
    assert config.get("tiebreakers", season=switch_season - 1) == ["coinFlip"]
    assert config.get("tiebreakers", season=switch_season) == list(DEFAULT_TIEBREAKERS)


@pytest.mark.regression
def test_existing_tiebreakers_are_not_backfilled() -> None:
    config = _merge({"season": 2030, "phase": 1, "tiebreakers": ["head2head", "coinFlip"]}, 40).config
    assert config.get("tiebreakers", season=1900) == ["head2head", "coinFlip"]


@pytest.mark.regression
def test_version_43_only_loses_play_in() -> None:
    result = _merge({"season": 2030, "phase": 1}, 43)
    assert result.config.get("playIn") is False
    assert result.config.get("tiebreakers", season=1900) == list(DEFAULT_TIEBREAKERS)
    assert result.migrations == ["disable_play_in"]


@pytest.mark.regression
def test_play_in_disabled_below_version_46_without_validation() -> None:
    resolver = RecordingResolver(build_default_team_infos())
    result = _merge({"season": 2030, "phase": 1, "playIn": True}, 44, resolver=resolver)
    assert result.config.get("playIn") is False
    assert resolver.calls == []


@pytest.mark.regression
def test_play_in_validated_from_version_46() -> None:
    resolver = RecordingResolver(build_default_team_infos())
    result = _merge({"season": 2030, "phase": 1, "playIn": True}, 46, resolver=resolver)
    assert result.config.get("playIn") is True
    assert resolver.calls == [2030]
    assert result.migrations == []


@pytest.mark.regression
def test_unversioned_file_gets_every_migration() -> None:
    result = _merge({"season": 2030, "phase": 1}, None)
    assert result.migrations == [migration.name for migration in MIGRATIONS]


def test_migrations_respect_version_bounds() -> None:
    seen: list[str] = []

    def record(name):
        def transform(config, file_settings):
            seen.append(name)
            return True

        return transform

    migrations = (
        Migration("old", record("old"), max_version=10),
        Migration("middle", record("middle"), min_version=5, max_version=20),
        Migration("new", record("new"), min_version=15),
    )
    applied = apply_migrations(LeagueConfig(), {}, 12, migrations)
    assert applied == ["middle"]
    assert seen == ["middle"]


@pytest.mark.regression
def test_loads_legacy_list_game_attributes(tmp_path) -> None:
    league_path = tmp_path / "league.json"
    league_path.write_text(
        json.dumps(
            {
                "version": 30,
                "startingSeason": 2020,
                "gameAttributes": [
                    {"key": "season", "value": 2022},
                    {"key": "phase", "value": 7},
                    {"key": "numGames", "value": 60},
                ],
            }
        ),
        encoding="utf-8",
    )
    snapshot = load_league_file(league_path)
    assert snapshot.settings == {"season": 2022, "phase": 7, "numGames": 60}

    config = merge_league_config_sync(snapshot, build_default_team_infos(), 0).config
    assert config.season == 2022
    assert config.get("startingSeason") == 2020
    assert config.get("numGames") == 60
    assert config.get("tiebreakers", season=2022) == ["coinFlip"]
    assert config.get("tiebreakers", season=2023) == list(DEFAULT_TIEBREAKERS)


@pytest.mark.regression
def test_rejects_future_league_version_with_clear_error(tmp_path) -> None:
    league_path = tmp_path / "league.json"
    league_path.write_text(json.dumps({"version": CURRENT_VERSION + 1, "gameAttributes": {}}), encoding="utf-8")
    with pytest.raises(LeagueFileError) as excinfo:
        load_league_file(league_path)
    assert "Unsupported league file version" in str(excinfo.value)


@pytest.mark.regression
def test_rejects_corrupt_league_files(tmp_path) -> None:
    corrupt = tmp_path / "corrupt.json"
    corrupt.write_text("{not json", encoding="utf-8")
    with pytest.raises(LeagueFileError) as excinfo:
        load_league_file(corrupt)
    assert "Failed to load league file" in str(excinfo.value)

    wrong_shape = tmp_path / "list.json"
    wrong_shape.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(LeagueFileError) as excinfo:
        load_league_file(wrong_shape)
    assert "invalid format" in str(excinfo.value)


def test_cli_prints_merged_settings_as_json(tmp_path, capsys) -> None:
    league_path = tmp_path / "league.json"
    league_path.write_text(json.dumps({"version": 40, "gameAttributes": {LEGACY_PLAYOFF_ROUNDS_KEY: 3}}), encoding="utf-8")
    assert main([str(league_path), "--json", "--user-tid", "5"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["config"]["userTid"] == [{"start": None, "value": 5}]
    assert LEGACY_PLAYOFF_ROUNDS_KEY not in out["config"]
    assert "disable_play_in" in out["migrations"]


def test_cli_reports_bad_league_file(tmp_path, capsys) -> None:
    league_path = tmp_path / "league.json"
    league_path.write_text("{not json", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        main([str(league_path)])
    assert excinfo.value.code == 1
    assert "Failed to load league file" in capsys.readouterr().err
