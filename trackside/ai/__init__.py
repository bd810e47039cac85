"""Bot response parsing and orchestration."""

from trackside.ai.orchestrator import BotRunReport, run_signal_bots
from trackside.ai.parser import (
    SignalParseError,
    parse_bot_json,
    parse_field_spread_response,
    parse_multi_bot_results,
    parse_pace_scenario_response,
    parse_trip_trouble_response,
    parse_vulnerable_favorite_response,
)

__all__ = [
    "BotRunReport",
    "run_signal_bots",
    "SignalParseError",
    "parse_bot_json",
    "parse_field_spread_response",
    "parse_multi_bot_results",
    "parse_pace_scenario_response",
    "parse_trip_trouble_response",
    "parse_vulnerable_favorite_response",
]
