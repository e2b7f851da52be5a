"""Read-only settings listing for the league settings form."""

from __future__ import annotations

import copy
from typing import Any

from .config import DEFAULT_GOAT_FORMULA, DEFAULT_INJURIES, DEFAULT_TRAGIC_DEATHS
from .settings_store import LeagueConfig

SETTING_KEYS: tuple[str, ...] = (
    "godMode",
    "godModeInPast",
    "numGames",
    "numGamesDiv",
    "numGamesConf",
    "numActiveTeams",
    "quarterLength",
    "maxRosterSize",
    "minRosterSize",
    "salaryCap",
    "minPayroll",
    "luxuryPayroll",
    "luxuryTax",
    "minContract",
    "maxContract",
    "minContractLength",
    "maxContractLength",
    "aiTradesFactor",
    "injuryRate",
    "homeCourtAdvantage",
    "rookieContractLengths",
    "rookiesCanRefuse",
    "tragicDeathRate",
    "brotherRate",
    "sonRate",
    "forceRetireAge",
    "salaryCapType",
    "numGamesPlayoffSeries",
    "numPlayoffByes",
    "draftType",
    "draftAges",
    "playersRefuseToNegotiate",
    "allStarGame",
    "allStarNum",
    "allStarType",
    "budget",
    "numSeasonsFutureDraftPicks",
    "foulRateFactor",
    "foulsNeededToFoulOut",
    "foulsUntilBonus",
    "threePointers",
    "pace",
    "threePointTendencyFactor",
    "threePointAccuracyFactor",
    "twoPointAccuracyFactor",
    "blockFactor",
    "stealFactor",
    "turnoverFactor",
    "orbFactor",
    "challengeNoDraftPicks",
    "challengeNoFreeAgents",
    "challengeNoTrades",
    "challengeLoseBestPlayer",
    "challengeNoRatings",
    "challengeFiredLuxuryTax",
    "challengeFiredMissPlayoffs",
    "challengeThanosMode",
    "realPlayerDeterminism",
    "repeatSeason",
    "ties",
    "otl",
    "elam",
    "elamASG",
    "elamMinutes",
    "elamOvertime",
    "elamPoints",
    "playerMoodTraits",
    "numPlayersOnCourt",
    "numDraftRounds",
    "tradeDeadline",
    "autoDeleteOldBoxScores",
    "difficulty",
    "stopOnInjury",
    "stopOnInjuryGames",
    "aiJerseyRetirement",
    "numPeriods",
    "tiebreakers",
    "pointsFormula",
    "equalizeRegions",
    "realDraftRatings",
    "hideDisabledTeams",
    "hofFactor",
    "injuries",
    "tragicDeaths",
    "inflationAvg",
    "inflationMax",
    "inflationMin",
    "inflationStd",
    "playoffsByConf",
    "playoffsNumTeamsDiv",
    "playoffsReseed",
    "playerBioInfo",
    "playIn",
    "numPlayersDunk",
    "numPlayersThree",
    "fantasyPoints",
    "goatFormula",
    "draftPickAutoContract",
    "draftPickAutoContractPercent",
    "draftPickAutoContractRounds",
    "dh",
    "draftLotteryCustomNumPicks",
    "draftLotteryCustomChances",
    "confs",
)


def initial_settings(config: LeagueConfig) -> dict[str, Any]:
    """Current value of every user-editable setting, as the settings form shows it."""
    settings: dict[str, Any] = {key: copy.deepcopy(config.get_current(key)) for key in SETTING_KEYS}

    settings["repeatSeason"] = bool(settings["repeatSeason"])
    if settings["injuries"] is None:
        settings["injuries"] = [dict(row) for row in DEFAULT_INJURIES]
    if settings["tragicDeaths"] is None:
        settings["tragicDeaths"] = [dict(row) for row in DEFAULT_TRAGIC_DEATHS]
    if settings["goatFormula"] is None:
        settings["goatFormula"] = DEFAULT_GOAT_FORMULA

    # Only the new league form can change these, so they start blank here.
    settings["noStartingInjuries"] = False
    if settings["realDraftRatings"] is None:
        settings["realDraftRatings"] = "rookie"
    settings["randomization"] = "none"
    settings["realStats"] = "none"
    return settings
