"""Static league configuration constants and the built-in default settings."""

from __future__ import annotations

import copy
from typing import Any

from .models import DIFFICULTY, PHASE
from .timeline import Timeline

# League file format versions.
CURRENT_VERSION = 51
TIEBREAKERS_MAX_LEGACY_VERSION = 42
PLAY_IN_MIN_VERSION = 46

DEFAULT_SEASON = 2025
GRACE_PERIOD_SEASONS = 2
PLAYOFF_PRUNE_RATIO = 0.75


DEFAULT_TIEBREAKERS: tuple[str, ...] = (
    "head2head",
    "divWinner",
    "divRecordIfSame",
    "confRecordIfSame",
    "marginOfVictory",
    "coinFlip",
)

DEFAULT_CONFS: tuple[dict[str, Any], ...] = (
    {"cid": 0, "name": "Eastern Conference"},
    {"cid": 1, "name": "Western Conference"},
)

DEFAULT_DIVS: tuple[dict[str, Any], ...] = (
    {"did": 0, "cid": 0, "name": "Atlantic"},
    {"did": 1, "cid": 0, "name": "Central"},
    {"did": 2, "cid": 0, "name": "Southeast"},
    {"did": 3, "cid": 1, "name": "Southwest"},
    {"did": 4, "cid": 1, "name": "Northwest"},
    {"did": 5, "cid": 1, "name": "Pacific"},
)

# Frequency-weighted injury table: (name, frequency, mean games out).
DEFAULT_INJURIES: tuple[dict[str, Any], ...] = (
    {"name": "Ankle Sprain", "frequency": 1900, "games": 2.8},
    {"name": "Bone Bruise", "frequency": 300, "games": 4.1},
    {"name": "Concussion", "frequency": 240, "games": 7.4},
    {"name": "Groin Strain", "frequency": 310, "games": 4.4},
    {"name": "Hamstring Strain", "frequency": 540, "games": 4.5},
    {"name": "Knee Sprain", "frequency": 260, "games": 7.4},
    {"name": "Back Spasms", "frequency": 480, "games": 3.3},
    {"name": "Torn ACL", "frequency": 22, "games": 256.0},
    {"name": "Torn Achilles", "frequency": 12, "games": 230.0},
    {"name": "Fractured Hand", "frequency": 55, "games": 20.4},
)

DEFAULT_TRAGIC_DEATHS: tuple[dict[str, Any], ...] = (
    {"reason": "was killed in a car accident", "frequency": 5},
    {"reason": "died after a sudden illness", "frequency": 3},
    {"reason": "drowned while on vacation", "frequency": 1},
)

DEFAULT_GOAT_FORMULA = "dpoy + 2 * mvp + 0.5 * allLeague + ws + 3 * champ"

# Settings whose value can change at a season boundary.
TIMELINE_KEYS: frozenset[str] = frozenset(
    {
        "userTid",
        "confs",
        "divs",
        "numGamesPlayoffSeries",
        "numPlayoffByes",
        "tiebreakers",
        "pointsFormula",
        "ties",
        "otl",
    }
)

_SCALAR_DEFAULTS: dict[str, Any] = {
    "season": DEFAULT_SEASON,
    "startingSeason": DEFAULT_SEASON,
    "phase": int(PHASE.PRESEASON),
    "nextPhase": None,
    "userTids": [0],
    "godMode": False,
    "godModeInPast": False,
    "easyDifficultyInPast": False,
    "difficulty": DIFFICULTY.NORMAL,
    "gracePeriodEnd": DEFAULT_SEASON + GRACE_PERIOD_SEASONS,
    "numTeams": 30,
    "numActiveTeams": 30,
    "teamInfoCache": [],
    "numGames": 82,
    "numGamesDiv": 16,
    "numGamesConf": 36,
    "quarterLength": 12,
    "numPeriods": 4,
    "maxRosterSize": 15,
    "minRosterSize": 13,
    "salaryCap": 140_000,
    "minPayroll": 105_000,
    "luxuryPayroll": 170_000,
    "luxuryTax": 1.5,
    "minContract": 1_100,
    "maxContract": 48_000,
    "minContractLength": 1,
    "maxContractLength": 5,
    "salaryCapType": "soft",
    "budget": True,
    "aiTradesFactor": 1.0,
    "injuryRate": 0.25 / 100,
    "homeCourtAdvantage": 1.0,
    "rookieContractLengths": [3, 2],
    "rookiesCanRefuse": True,
    "tragicDeathRate": 1 / (82 * 30 * 50),
    "brotherRate": 0.02,
    "sonRate": 0.02,
    "forceRetireAge": 0,
    "draftType": "nba2019",
    "draftAges": [19, 22],
    "numDraftRounds": 2,
    "numDraftPicksCurrent": None,
    "numSeasonsFutureDraftPicks": 4,
    "draftPickAutoContract": True,
    "draftPickAutoContractPercent": 25.0,
    "draftPickAutoContractRounds": 1,
    "draftLotteryCustomNumPicks": 4,
    "draftLotteryCustomChances": [140, 140, 140, 125, 105, 90, 75, 60, 45, 30, 20, 15, 10, 5],
    "playersRefuseToNegotiate": True,
    "allStarGame": 0.7,
    "allStarNum": 12,
    "allStarType": "top",
    "tradeDeadline": 0.6,
    "autoDeleteOldBoxScores": True,
    "stopOnInjury": False,
    "stopOnInjuryGames": 20,
    "aiJerseyRetirement": True,
    "equalizeRegions": False,
    "hideDisabledTeams": False,
    "hofFactor": 1.0,
    "inflationAvg": 0.0,
    "inflationMax": 0.0,
    "inflationMin": 0.0,
    "inflationStd": 0.0,
    "playoffsByConf": True,
    "playoffsNumTeamsDiv": 0,
    "playoffsReseed": False,
    "playIn": True,
    "playerBioInfo": None,
    "playerMoodTraits": True,
    "numPlayersOnCourt": 5,
    "numPlayersDunk": 4,
    "numPlayersThree": 8,
    "fantasyPoints": None,
    "foulRateFactor": 1.0,
    "foulsNeededToFoulOut": 6,
    "foulsUntilBonus": [5, 4, 2],
    "threePointers": True,
    "pace": 100.0,
    "threePointTendencyFactor": 1.0,
    "threePointAccuracyFactor": 1.0,
    "twoPointAccuracyFactor": 1.0,
    "blockFactor": 1.0,
    "stealFactor": 1.0,
    "turnoverFactor": 1.0,
    "orbFactor": 1.0,
    "elam": False,
    "elamASG": True,
    "elamMinutes": 4.0,
    "elamOvertime": False,
    "elamPoints": 24,
    "challengeNoDraftPicks": False,
    "challengeNoFreeAgents": False,
    "challengeNoTrades": False,
    "challengeLoseBestPlayer": False,
    "challengeNoRatings": False,
    "challengeFiredLuxuryTax": False,
    "challengeFiredMissPlayoffs": False,
    "challengeThanosMode": False,
    "realPlayerDeterminism": 0.0,
    "repeatSeason": None,
    "realDraftRatings": None,
    "injuries": None,
    "tragicDeaths": None,
    "goatFormula": None,
    "dh": "all",
}

_TIMELINE_DEFAULTS: dict[str, Any] = {
    "userTid": 0,
    "confs": [dict(conf) for conf in DEFAULT_CONFS],
    "divs": [dict(div) for div in DEFAULT_DIVS],
    "numGamesPlayoffSeries": [7, 7, 7, 7],
    "numPlayoffByes": 0,
    "tiebreakers": list(DEFAULT_TIEBREAKERS),
    "pointsFormula": "",
    "ties": False,
    "otl": False,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    **_SCALAR_DEFAULTS,
    **{key: Timeline.constant(value) for key, value in _TIMELINE_DEFAULTS.items()},
}


def default_settings() -> dict[str, Any]:
    """Fresh copy of the built-in defaults, safe for the caller to mutate."""
    return copy.deepcopy(DEFAULT_SETTINGS)


def default_value(key: str) -> Any:
    """Latest default for ``key`` with timelines unwrapped."""
    value = DEFAULT_SETTINGS.get(key)
    if isinstance(value, Timeline):
        return copy.deepcopy(value.latest())
    return copy.deepcopy(value)
