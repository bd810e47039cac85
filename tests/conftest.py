"""Shared test fixtures for Trackside."""

from unittest.mock import AsyncMock

import pytest

from trackside.models.race import ParsedRace, RaceScoringResult


@pytest.fixture
def sample_race_data() -> dict:
    """Six-horse parsed card as exported by the DRF parser."""
    return {
        "header": {
            "trackCode": "SAR",
            "trackName": "Saratoga",
            "raceNumber": 5,
            "surface": "dirt",
            "distance": "6 Furlongs",
            "distanceFurlongs": 6.0,
            "classification": "Allowance",
            "purse": 80000,
        },
        "horses": [
            {"programNumber": 1, "horseName": "Bold Ruler", "postPosition": 1,
             "morningLineOdds": "9-5", "runningStyle": "E/P"},
            {"programNumber": 2, "horseName": "Quiet Storm", "postPosition": 2,
             "morningLineOdds": "3-1", "runningStyle": "P"},
            {"programNumber": 3, "horseName": "Late Show", "postPosition": 3,
             "morningLineOdds": "5-1", "runningStyle": "S"},
            {"programNumber": 4, "horseName": "Gate Crasher", "postPosition": 4,
             "morningLineOdds": "6-1", "runningStyle": "P"},
            {"programNumber": 5, "horseName": "Hidden Gem", "postPosition": 5,
             "morningLineOdds": "8-1", "runningStyle": "P"},
            {"programNumber": 6, "horseName": "Slow Poke", "postPosition": 6,
             "morningLineOdds": "20-1", "runningStyle": "S"},
        ],
    }


@pytest.fixture
def sample_scoring_data() -> dict:
    """Scoring engine output matching sample_race_data."""
    return {
        "scores": [
            {"programNumber": 1, "horseName": "Bold Ruler", "rank": 1, "finalScore": 210,
             "confidenceTier": "high", "positiveFactors": ["Top speed figure"],
             "morningLineOdds": "9-5"},
            {"programNumber": 2, "horseName": "Quiet Storm", "rank": 2, "finalScore": 185,
             "confidenceTier": "medium", "positiveFactors": ["Trainer in form"],
             "morningLineOdds": "3-1"},
            {"programNumber": 3, "horseName": "Late Show", "rank": 3, "finalScore": 170,
             "confidenceTier": "medium", "morningLineOdds": "5-1"},
            {"programNumber": 4, "horseName": "Gate Crasher", "rank": 4, "finalScore": 150,
             "confidenceTier": "low", "negativeFactors": ["Wide post"],
             "morningLineOdds": "6-1"},
            {"programNumber": 5, "horseName": "Hidden Gem", "rank": 5, "finalScore": 140,
             "confidenceTier": "low", "negativeFactors": ["Class rise", "Poor workouts"],
             "morningLineOdds": "8-1"},
            {"programNumber": 6, "horseName": "Slow Poke", "rank": 6, "finalScore": 110,
             "confidenceTier": "low",
             "negativeFactors": ["Class rise", "Poor workouts", "Off a long layoff"],
             "morningLineOdds": "20-1"},
        ],
        "raceAnalysis": {"paceScenario": "honest"},
    }


@pytest.fixture
def sample_race(sample_race_data) -> ParsedRace:
    return ParsedRace.from_dict(sample_race_data)


@pytest.fixture
def sample_scoring(sample_scoring_data) -> RaceScoringResult:
    return RaceScoringResult.from_dict(sample_scoring_data)


@pytest.fixture
def mock_bots() -> dict:
    """All four bots returning well-formed, uneventful responses."""
    return {
        "trip_trouble": AsyncMock(return_value={"horsesWithTripTrouble": []}),
        "pace_scenario": AsyncMock(return_value={
            "paceProjection": "MODERATE",
            "advantagedStyles": ["P"],
            "disadvantagedStyles": [],
            "loneSpeedException": False,
            "speedDuelLikely": False,
        }),
        "vulnerable_favorite": AsyncMock(return_value={
            "isVulnerable": False, "reasons": [], "confidence": "LOW",
        }),
        "field_spread": AsyncMock(return_value=(
            '```json\n{"fieldType": "SEPARATED", "topTierCount": 2, "recommendedSpread": "NARROW"}\n```'
        )),
    }
