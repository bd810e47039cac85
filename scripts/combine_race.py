#!/usr/bin/env python3
"""Combine algorithm scoring and bot signals for one race.

Usage:
    python scripts/combine_race.py bundle.json [--exacta-unit 2] [--trifecta-unit 1] [--json]

The bundle is a JSON object with three keys:
    race     - parsed race card ({header, horses})
    scoring  - scoring engine output ({scores, raceAnalysis})
    signals  - bot outputs keyed tripTrouble / paceScenario /
               vulnerableFavorite / fieldSpread (any may be missing; each
               may be an object or the bot's raw text response)

Prints the template, tickets and per-horse insights, or the full result as
JSON with --json.
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from trackside.ai.parser import parse_multi_bot_results  # noqa: E402
from trackside.combiner.engine import combine_signals, format_combined_result  # noqa: E402
from trackside.config import settings  # noqa: E402
from trackside.models.race import ParsedRace, RaceScoringResult  # noqa: E402

logger = logging.getLogger("combine_race")


def load_bundle(path: Path) -> tuple[ParsedRace, RaceScoringResult, dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object")
    race = ParsedRace.from_dict(data.get("race") or {})
    scoring = RaceScoringResult.from_dict(data.get("scoring") or {})
    return race, scoring, data.get("signals") or {}


def main() -> int:
    parser = argparse.ArgumentParser(description="Combine race scoring with bot signals")
    parser.add_argument("bundle", type=Path, help="JSON bundle with race, scoring and signals")
    parser.add_argument("--exacta-unit", type=float, default=None, help="$ per exacta combination")
    parser.add_argument("--trifecta-unit", type=float, default=None, help="$ per trifecta combination")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--debug", action="store_true", help="Log combiner decisions")
    args = parser.parse_args()

    level = "DEBUG" if (args.debug or settings.debug) else settings.log_level.upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        race, scoring, signals = load_bundle(args.bundle)
    except (OSError, ValueError) as e:
        logger.error(f"Could not load bundle: {e}")
        return 1

    raw = parse_multi_bot_results(signals)
    result = combine_signals(
        raw, race, scoring,
        exacta_unit=args.exacta_unit,
        trifecta_unit=args.trifecta_unit,
    )

    if args.json:
        print(json.dumps(asdict(result), indent=2))
    else:
        print(format_combined_result(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
