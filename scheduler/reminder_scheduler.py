"""
Reminder scheduler - drives daily affirmation SMS delivery.

Once per tick it loads every reminder configuration, keeps the enabled SMS
ones, and for each configuration whose reminder is due it generates an
affirmation, sends it, and records the send. The send is recorded only after
the notifier confirms delivery.

One scheduler should run per deployment. Two instances against the same
database can both observe the due minute and double-send.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Protocol

from config.settings import settings
from core import get_logger, mask_phone_number
from prompts import DAILY_AFFIRMATION_SMS, FALLBACK_AFFIRMATION
from schemas import ReminderSettingsSchema
from scheduler.fire_decision import should_fire
from services.sms_notifier import SMSResult
from utils.timezones import utc_now

logger = get_logger(__name__)


class SettingsSource(Protocol):
    async def list_reminder_settings(self) -> List[ReminderSettingsSchema]: ...

    async def record_successful_send(self, user_id: str, sent_at: Optional[datetime] = None) -> bool: ...


class ContentGenerator(Protocol):
    async def generate_daily_affirmation_text(self) -> str: ...


class Notifier(Protocol):
    async def send_text(self, destination: str, body: str) -> SMSResult: ...


@dataclass
class TickResult:
    """Summary of one scheduler tick."""
    loaded: int = 0
    eligible: int = 0
    due: int = 0
    sent: int = 0
    failed: int = 0
    aborted: bool = False


class ReminderScheduler:
    """
    Owns the recurring tick and the per-configuration delivery pipeline.

    Usage:
        scheduler = ReminderScheduler(db, AffirmationGenerator(), sms_notifier)
        scheduler.start()   # inside a running event loop
        ...
        await scheduler.shutdown()
    """

    def __init__(
        self,
        settings_source: SettingsSource,
        content_generator: ContentGenerator,
        notifier: Notifier,
        interval_seconds: Optional[float] = None,
        call_timeout_seconds: Optional[float] = None,
        max_concurrency: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        monotonic: Optional[Callable[[], float]] = None,
    ):
        self.settings_source = settings_source
        self.content_generator = content_generator
        self.notifier = notifier
        self.interval_seconds = interval_seconds or settings.REMINDER_CHECK_INTERVAL_SECONDS
        self.call_timeout_seconds = call_timeout_seconds or settings.EXTERNAL_CALL_TIMEOUT_SECONDS
        self._semaphore = asyncio.Semaphore(max_concurrency or settings.MAX_CONCURRENT_DELIVERIES)
        self._clock = clock
        self._sleep = sleep
        self._monotonic = monotonic

        self._running = False
        self._task: Optional[asyncio.Task] = None
        self._current_tick: Optional[asyncio.Future] = None

    @property
    def is_running(self) -> bool:
        return self._running

    # ==================== Process control ====================

    def start(self) -> None:
        """
        Start the recurring tick and run the first check immediately.

        Calling start() on a running scheduler does nothing. Must be called
        from inside a running event loop.
        """
        if self._running:
            return

        loop = asyncio.get_running_loop()
        self._running = True
        self._task = loop.create_task(self._run(), name="reminder-scheduler")
        logger.info("Reminder scheduler started", interval_seconds=self.interval_seconds)

    def stop(self) -> None:
        """
        Prevent any further ticks. Safe to call when not running.

        A tick already in progress is left to finish; see shutdown().
        """
        if not self._running:
            return

        self._running = False
        if self._task is not None:
            self._task.cancel()
            self._task = None
        logger.info("Reminder scheduler stopped")

    async def shutdown(self) -> None:
        """Stop the scheduler and wait for an in-flight tick to complete."""
        self.stop()
        if self._current_tick is not None and not self._current_tick.done():
            await asyncio.gather(self._current_tick, return_exceptions=True)

    async def _run(self) -> None:
        monotonic = self._monotonic or asyncio.get_running_loop().time
        next_run = monotonic()

        while self._running:
            # A restart must not overlap the previous loop's tick
            if self._current_tick is not None and not self._current_tick.done():
                await asyncio.shield(self._current_tick)

            self._current_tick = asyncio.ensure_future(self.process_tick())
            try:
                # stop() cancels this wait; the tick itself runs to completion
                await asyncio.shield(self._current_tick)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Reminder tick crashed")

            # Fixed-rate cadence: stay on the grid set by the first tick
            next_run += self.interval_seconds
            delay = next_run - monotonic()
            if delay < 0:
                skipped = int(-delay // self.interval_seconds) + 1
                logger.warning("Reminder tick overran its interval", skipped_ticks=skipped)
                next_run += skipped * self.interval_seconds
                delay = next_run - monotonic()

            await self._sleep(delay)

    # ==================== Tick ====================

    async def process_tick(self) -> TickResult:
        """
        Check every configuration once and deliver the reminders that are due.

        Never raises: a failing settings source aborts just this tick, and
        failures while delivering one reminder do not affect the others.
        """
        result = TickResult()
        now = self._clock()

        try:
            configurations = await self.settings_source.list_reminder_settings()
        except Exception as e:
            logger.error("Could not load reminder settings, skipping tick", error=str(e))
            result.aborted = True
            return result

        result.loaded = len(configurations)
        eligible = [c for c in configurations if c.wants_sms]
        result.eligible = len(eligible)

        due = [
            c for c in eligible
            if should_fire(
                c.reminder_time or settings.DEFAULT_REMINDER_TIME,
                c.timezone or settings.DEFAULT_TIMEZONE,
                c.last_sent_at,
                now,
            )
        ]
        result.due = len(due)

        logger.debug(
            "Checked reminder configurations",
            loaded=result.loaded,
            eligible=result.eligible,
            due=result.due,
            now=now.isoformat(),
        )

        if not due:
            return result

        outcomes = await asyncio.gather(*(self._deliver(c) for c in due))
        result.sent = sum(1 for ok in outcomes if ok)
        result.failed = result.due - result.sent

        logger.info("Reminder tick complete", sent=result.sent, failed=result.failed)
        return result

    async def _deliver(self, config: ReminderSettingsSchema) -> bool:
        """Generate, send and record one reminder. Returns True when recorded as sent."""
        async with self._semaphore:
            try:
                logger.info("Sending affirmation", user_id=config.user_id)

                affirmation = await self._generate_text()
                body = DAILY_AFFIRMATION_SMS.format(affirmation=affirmation)

                send_result = await self._send_text(config.phone_number, body)
                if not send_result.success:
                    logger.error(
                        "Failed to send affirmation",
                        user_id=config.user_id,
                        to=mask_phone_number(config.phone_number),
                        error=send_result.error,
                    )
                    return False

                await self.settings_source.record_successful_send(
                    config.user_id, sent_at=self._clock()
                )
                logger.info(
                    "Affirmation sent",
                    user_id=config.user_id,
                    message_id=send_result.message_id,
                )
                return True

            except Exception as e:
                logger.error("Failed to process reminder", user_id=config.user_id, error=str(e))
                return False

    async def _generate_text(self) -> str:
        try:
            return await asyncio.wait_for(
                self.content_generator.generate_daily_affirmation_text(),
                timeout=self.call_timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning("Affirmation generation timed out, using fallback", timeout=self.call_timeout_seconds)
        except Exception as e:
            logger.warning("Affirmation generation failed, using fallback", error=str(e))
        return FALLBACK_AFFIRMATION

    async def _send_text(self, destination: str, body: str) -> SMSResult:
        try:
            return await asyncio.wait_for(
                self.notifier.send_text(destination, body),
                timeout=self.call_timeout_seconds,
            )
        except asyncio.TimeoutError:
            return SMSResult(success=False, error=f"SMS send timed out after {self.call_timeout_seconds}s")
        except Exception as e:
            return SMSResult(success=False, error=str(e) or "Failed to send SMS")
