"""Run the four signal bots concurrently and collect their parsed output.

The bots themselves (prompting, model calls) live with the caller. Each bot
is an async callable ``bot(race, scoring) -> raw response``; a bot that
raises, times out, or returns something unparsable contributes ``None``.
Partial failure is the normal case, not an exception.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable

from trackside.ai.parser import (
    parse_field_spread_response,
    parse_pace_scenario_response,
    parse_trip_trouble_response,
    parse_vulnerable_favorite_response,
)
from trackside.config import settings
from trackside.models.race import ParsedRace, RaceScoringResult
from trackside.models.signals import MultiBotRawResults

logger = logging.getLogger(__name__)

BotCallable = Callable[[ParsedRace, RaceScoringResult], Awaitable[Any]]

BOT_NAMES = ("trip_trouble", "pace_scenario", "vulnerable_favorite", "field_spread")

_PARSERS = {
    "trip_trouble": parse_trip_trouble_response,
    "pace_scenario": parse_pace_scenario_response,
    "vulnerable_favorite": parse_vulnerable_favorite_response,
    "field_spread": parse_field_spread_response,
}


@dataclass
class BotRunReport:
    """Outcome of one multi-bot run."""

    results: MultiBotRawResults
    errors: dict[str, str] = field(default_factory=dict)
    elapsed_ms: int = 0


async def _run_one(
    bot: BotCallable,
    race: ParsedRace,
    scoring: RaceScoringResult,
    timeout: float,
) -> Any:
    return await asyncio.wait_for(bot(race, scoring), timeout=timeout)


async def run_signal_bots(
    race: ParsedRace,
    scoring: RaceScoringResult,
    bots: dict[str, BotCallable],
    timeout: float | None = None,
) -> BotRunReport:
    """Run every supplied bot in parallel and parse what comes back.

    Args:
        race: Parsed race card.
        scoring: Algorithm scoring result.
        bots: Mapping of bot name (see BOT_NAMES) to async callable. Missing
            names are treated as bots that did not run.
        timeout: Per-bot timeout in seconds (default from settings).

    Returns:
        BotRunReport with the parsed MultiBotRawResults and per-bot errors.
    """
    timeout = timeout if timeout is not None else settings.bot_timeout_seconds
    start = time.monotonic()

    unknown = set(bots) - set(BOT_NAMES)
    if unknown:
        logger.warning(f"Ignoring unknown bots: {', '.join(sorted(unknown))}")

    names = [n for n in BOT_NAMES if n in bots]
    outcomes = await asyncio.gather(
        *(_run_one(bots[n], race, scoring, timeout) for n in names),
        return_exceptions=True,
    )

    parsed: dict[str, Any] = {}
    errors: dict[str, str] = {}
    for name, outcome in zip(names, outcomes):
        if isinstance(outcome, asyncio.TimeoutError):
            errors[name] = f"timed out after {timeout:.0f}s"
            logger.warning(f"R{race.header.race_number} {name} bot timed out")
            continue
        if isinstance(outcome, Exception):
            errors[name] = str(outcome) or type(outcome).__name__
            logger.warning(f"R{race.header.race_number} {name} bot failed: {outcome}")
            continue
        signal = _PARSERS[name](outcome)
        if signal is None:
            errors[name] = "unparsable response"
            continue
        parsed[name] = signal

    results = MultiBotRawResults(**parsed)
    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.info(
        f"R{race.header.race_number} signal bots: {results.success_count}/{len(BOT_NAMES)} "
        f"succeeded in {elapsed_ms}ms"
    )
    return BotRunReport(results=results, errors=errors, elapsed_ms=elapsed_ms)
