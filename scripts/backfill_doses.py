#!/usr/bin/env python3
"""
Backfill dose instances for every active reminder over a date range.

Runs as a dry run unless --execute is given; a dry run prints the doses
that would be created. Existing doses are never duplicated.

Usage:
    python scripts/backfill_doses.py --start 2024-03-01 --end 2024-03-07
    python scripts/backfill_doses.py --start 2024-03-01 --end 2024-03-07 --execute
"""

import argparse
import asyncio
import sys
from datetime import date

# Add the src directory to the Python path
sys.path.insert(0, "src")

from medreminder.adapters.db.mongo.client import init_database
from medreminder.adapters.db.mongo.repositories.dose_repository import MongoDoseRepository
from medreminder.adapters.db.mongo.repositories.reminder_repository import MongoReminderRepository
from medreminder.application.use_cases.backfill_doses import BackfillDosesUseCase
from medreminder.application.use_cases.generate_doses import DoseGenerator
from medreminder.core.config import get_settings
from medreminder.core.structured_logger import configure_logging
from medreminder.core.utils.datetime_utils import WallClock, parse_day


def _day(value: str) -> date:
    parsed = parse_day(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD")
    return parsed


async def run(start: date, end: date, execute: bool) -> int:
    settings = get_settings()
    configure_logging(settings.logging.level, settings.logging.format)
    client = await init_database(settings.database)
    try:
        clock = WallClock(settings.reminders.timezone)
        dose_repository = MongoDoseRepository()
        use_case = BackfillDosesUseCase(MongoReminderRepository(), DoseGenerator(dose_repository, clock))
        result = await use_case.execute(start, end, dry_run=not execute)
    finally:
        client.close()

    if execute:
        print(f"✅ Created {result.doses} dose(s) for {result.reminders} active reminder(s)")
    else:
        for reminder_id, scheduled_time in result.planned:
            print(f"  would create {reminder_id} @ {scheduled_time.isoformat()}")
        print(f"🔍 Dry run: {result.doses} dose(s) missing across {result.reminders} active reminder(s)")
        print("   Re-run with --execute to create them.")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Backfill dose instances for active reminders")
    parser.add_argument("--start", required=True, type=_day, help="First day, YYYY-MM-DD")
    parser.add_argument("--end", required=True, type=_day, help="Last day (inclusive), YYYY-MM-DD")
    parser.add_argument("--execute", action="store_true", help="Create the doses instead of listing them")
    args = parser.parse_args()

    if args.end < args.start:
        parser.error("--end must not be before --start")
    return asyncio.run(run(args.start, args.end, args.execute))


if __name__ == "__main__":
    sys.exit(main())
