#!/usr/bin/env python3
"""
Manually run one reminder scheduler tick.

This runs the same logic as the automatic scheduler: every enabled SMS
configuration whose reminder minute is now gets its affirmation. Useful from
cron when the API process runs with SCHEDULER_ENABLED=false.

Usage:
    python scripts/run_reminder_tick.py
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import configure_logging
from scheduler import ReminderScheduler
from services import AffirmationGenerator
from services.sms_notifier import sms_notifier
from storage.database import db


async def run_reminder_tick():
    """Run a single tick and print its summary."""
    configure_logging()
    await db.create_tables()

    scheduler = ReminderScheduler(
        settings_source=db,
        content_generator=AffirmationGenerator(),
        notifier=sms_notifier,
    )

    try:
        result = await scheduler.process_tick()
    finally:
        await db.dispose()

    print(f"\n{'='*60}")
    print(f"  SUMMARY")
    print(f"{'='*60}")
    print(f"Configurations loaded: {result.loaded}")
    print(f"Enabled SMS reminders: {result.eligible}")
    print(f"Due this minute: {result.due}")
    print(f"Sent: {result.sent}  Failed: {result.failed}")
    if result.aborted:
        print("Tick aborted: settings could not be loaded")
    print(f"{'='*60}\n")

    return 1 if result.aborted or result.failed else 0


if __name__ == "__main__":
    sys.exit(asyncio.run(run_reminder_tick()))
