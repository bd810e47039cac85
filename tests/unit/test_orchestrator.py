"""Tests for concurrent signal bot orchestration."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from trackside.ai.orchestrator import BOT_NAMES, run_signal_bots


class TestRunSignalBots:
    @pytest.mark.asyncio
    async def test_all_bots_succeed(self, sample_race, sample_scoring, mock_bots):
        report = await run_signal_bots(sample_race, sample_scoring, mock_bots, timeout=1)
        assert report.results.success_count == len(BOT_NAMES)
        assert report.errors == {}
        assert report.results.field_spread.field_type == "SEPARATED"
        for bot in mock_bots.values():
            bot.assert_awaited_once_with(sample_race, sample_scoring)

    @pytest.mark.asyncio
    async def test_failing_bot_becomes_none(self, sample_race, sample_scoring, mock_bots):
        mock_bots["pace_scenario"] = AsyncMock(side_effect=RuntimeError("rate limited"))
        report = await run_signal_bots(sample_race, sample_scoring, mock_bots, timeout=1)
        assert report.results.pace_scenario is None
        assert report.results.success_count == 3
        assert report.errors["pace_scenario"] == "rate limited"

    @pytest.mark.asyncio
    async def test_timeout_becomes_none(self, sample_race, sample_scoring, mock_bots):
        async def _slow(race, scoring):
            await asyncio.sleep(5)
            return {"fieldType": "TIGHT"}

        mock_bots["field_spread"] = _slow
        report = await run_signal_bots(sample_race, sample_scoring, mock_bots, timeout=0.05)
        assert report.results.field_spread is None
        assert "timed out" in report.errors["field_spread"]
        assert report.results.success_count == 3

    @pytest.mark.asyncio
    async def test_unparsable_response(self, sample_race, sample_scoring, mock_bots):
        mock_bots["vulnerable_favorite"] = AsyncMock(return_value="I cannot help with that")
        report = await run_signal_bots(sample_race, sample_scoring, mock_bots, timeout=1)
        assert report.results.vulnerable_favorite is None
        assert report.errors["vulnerable_favorite"] == "unparsable response"

    @pytest.mark.asyncio
    async def test_missing_and_unknown_bots(self, sample_race, sample_scoring, mock_bots):
        bots = {"trip_trouble": mock_bots["trip_trouble"], "horoscope": AsyncMock(return_value={})}
        report = await run_signal_bots(sample_race, sample_scoring, bots, timeout=1)
        assert report.results.success_count == 1
        assert report.results.trip_trouble is not None
        bots["horoscope"].assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_bots(self, sample_race, sample_scoring):
        report = await run_signal_bots(sample_race, sample_scoring, {}, timeout=1)
        assert report.results.success_count == 0
        assert report.errors == {}
