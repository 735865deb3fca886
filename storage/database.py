"""
Async database operations for reminder settings.
Async SQLAlchemy with retry logic, error wrapping and Pydantic schemas at the boundary.
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import List, Optional, AsyncIterator

from sqlalchemy.ext.asyncio import (
    AsyncConnection,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
    AsyncEngine,
)
from sqlalchemy import select, text, update, or_
from sqlalchemy.exc import SQLAlchemyError
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)

from config.settings import settings
from core import get_logger, DatabaseException, DatabaseConnectionError, InvalidInputError
from storage.models import Base, ReminderSettings
from schemas import DeliveryMethod, ReminderSettingsSchema, ReminderSettingsUpdateSchema
from utils.timezones import ensure_utc, utc_now

logger = get_logger(__name__)


class AsyncDatabase:
    """
    Async database interface for reminder settings:
    - Connection pooling and retry logic
    - Type-safe operations with Pydantic
    - Proper error handling and logging
    - Transaction management

    Doubles as the scheduler's settings source.
    """

    def __init__(self, db_url: Optional[str] = None):
        """Initialize async database engine and session factory."""
        db_url = db_url or settings.DATABASE_URL
        # Convert postgresql:// to postgresql+asyncpg://
        if db_url.startswith("postgresql://"):
            db_url = db_url.replace("postgresql://", "postgresql+asyncpg://")

        engine_kwargs = {"echo": settings.LOG_LEVEL == "DEBUG"}
        if db_url.startswith("postgresql+asyncpg://"):
            engine_kwargs.update(
                pool_size=10,
                max_overflow=20,
                pool_pre_ping=True,  # Verify connections before use
                pool_recycle=3600,  # Recycle connections after 1 hour
            )

        self.engine: AsyncEngine = create_async_engine(db_url, **engine_kwargs)

        self.async_session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info("Async database engine initialized", db_url=db_url.split("@")[-1])

    @asynccontextmanager
    async def get_session(self) -> AsyncIterator[AsyncSession]:
        """
        Context manager for database sessions with automatic cleanup.

        Yields:
            AsyncSession instance
        """
        async with self.async_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception as e:
                await session.rollback()
                logger.error("Session rolled back", error=str(e))
                raise
            finally:
                await session.close()

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[AsyncConnection]:
        """Open a raw engine connection, raising DatabaseConnectionError if that fails."""
        conn = self.engine.connect()
        try:
            await conn.start()
        except (SQLAlchemyError, OSError) as e:
            logger.error("Database connection failed", error=str(e))
            raise DatabaseConnectionError(str(e))

        try:
            yield conn
        finally:
            await conn.close()

    async def check_connection(self) -> None:
        """
        Run a trivial query against the database.

        Raises:
            DatabaseConnectionError: If the database cannot be reached
        """
        async with self._connect() as conn:
            try:
                await conn.execute(text("SELECT 1"))
            except SQLAlchemyError as e:
                raise DatabaseConnectionError(str(e))

    async def create_tables(self) -> None:
        """Create all database tables."""
        async with self._connect() as conn:
            async with conn.begin():
                await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables created")

    async def drop_tables(self) -> None:
        """Drop all database tables (use with caution)."""
        async with self._connect() as conn:
            async with conn.begin():
                await conn.run_sync(Base.metadata.drop_all)
        logger.warning("Database tables dropped")

    async def dispose(self) -> None:
        """Close pooled connections."""
        await self.engine.dispose()

    # ==================== Reminder Settings ====================

    async def get_reminder_settings(self, user_id: str) -> Optional[ReminderSettingsSchema]:
        """Get a user's reminder settings, or None if they never saved any."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(ReminderSettings).where(ReminderSettings.user_id == user_id)
                )
                row = result.scalar_one_or_none()
                return ReminderSettingsSchema.model_validate(row) if row else None

        except SQLAlchemyError as e:
            logger.error("Failed to get reminder settings", user_id=user_id, error=str(e))
            raise DatabaseException(f"Failed to get reminder settings: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(DatabaseException),
        reraise=True,
    )
    async def list_reminder_settings(self) -> List[ReminderSettingsSchema]:
        """
        Get every reminder configuration.

        The scheduler filters these itself, so disabled and app-only rows are included.

        Raises:
            DatabaseException: If the query keeps failing after retries
        """
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(ReminderSettings).order_by(ReminderSettings.id)
                )
                rows = result.scalars().all()
                return [ReminderSettingsSchema.model_validate(r) for r in rows]

        except SQLAlchemyError as e:
            logger.error("Failed to list reminder settings", error=str(e))
            raise DatabaseException(f"Failed to list reminder settings: {e}")

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(DatabaseException),
        reraise=True,
    )
    async def list_enabled_sms_reminder_settings(self) -> List[ReminderSettingsSchema]:
        """Get enabled SMS configurations that have a phone number (filtered in SQL)."""
        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(ReminderSettings)
                    .where(
                        ReminderSettings.is_enabled == True,  # noqa: E712
                        ReminderSettings.delivery_method == DeliveryMethod.SMS.value,
                        ReminderSettings.phone_number.is_not(None),
                        ReminderSettings.phone_number != "",
                    )
                    .order_by(ReminderSettings.id)
                )
                rows = result.scalars().all()
                return [ReminderSettingsSchema.model_validate(r) for r in rows]

        except SQLAlchemyError as e:
            logger.error("Failed to list SMS reminder settings", error=str(e))
            raise DatabaseException(f"Failed to list SMS reminder settings: {e}")

    async def upsert_reminder_settings(
        self, user_id: str, updates: ReminderSettingsUpdateSchema
    ) -> ReminderSettingsSchema:
        """
        Create or partially update a user's reminder settings.

        Args:
            user_id: Owning user ID
            updates: Fields to change; None fields are left untouched

        Returns:
            ReminderSettingsSchema after the write

        Raises:
            InvalidInputError: If SMS delivery would be enabled without a phone number
            DatabaseException: If database operation fails
        """
        changes = updates.model_dump(exclude_none=True, mode="json")

        try:
            async with self.get_session() as session:
                result = await session.execute(
                    select(ReminderSettings).where(ReminderSettings.user_id == user_id)
                )
                row = result.scalar_one_or_none()

                if row:
                    for key, value in changes.items():
                        setattr(row, key, value)
                    row.updated_at = datetime.utcnow()
                else:
                    row = ReminderSettings(
                        user_id=user_id,
                        is_enabled=changes.get("is_enabled", False),
                        reminder_time=changes.get("reminder_time", settings.DEFAULT_REMINDER_TIME),
                        timezone=changes.get("timezone", settings.DEFAULT_TIMEZONE),
                        delivery_method=changes.get("delivery_method", DeliveryMethod.APP.value),
                        phone_number=changes.get("phone_number"),
                        created_at=datetime.utcnow(),
                        updated_at=datetime.utcnow(),
                    )
                    session.add(row)

                if (
                    row.is_enabled
                    and row.delivery_method == DeliveryMethod.SMS.value
                    and not (row.phone_number or "").strip()
                ):
                    raise InvalidInputError("phone_number", "required for SMS delivery")

                await session.flush()
                logger.info("Saved reminder settings", user_id=user_id, fields=sorted(changes))
                return ReminderSettingsSchema.model_validate(row)

        except SQLAlchemyError as e:
            logger.error("Failed to save reminder settings", user_id=user_id, error=str(e))
            raise DatabaseException(f"Failed to save reminder settings: {e}")

    async def record_successful_send(
        self, user_id: str, sent_at: Optional[datetime] = None
    ) -> bool:
        """
        Mark a reminder as delivered.

        The update only applies when last_sent_at is empty or older than
        ``sent_at``, so the marker never moves backward.

        Args:
            user_id: Owning user ID
            sent_at: Delivery instant, defaults to now

        Returns:
            True if the row was updated

        Raises:
            DatabaseException: If database operation fails
        """
        sent_at_utc = ensure_utc(sent_at or utc_now()).replace(tzinfo=None)

        try:
            async with self.get_session() as session:
                result = await session.execute(
                    update(ReminderSettings)
                    .where(
                        ReminderSettings.user_id == user_id,
                        or_(
                            ReminderSettings.last_sent_at.is_(None),
                            ReminderSettings.last_sent_at < sent_at_utc,
                        ),
                    )
                    .values(last_sent_at=sent_at_utc, updated_at=datetime.utcnow())
                )
                updated = (result.rowcount or 0) > 0

            if updated:
                logger.debug("Recorded reminder send", user_id=user_id, sent_at=sent_at_utc.isoformat())
            else:
                logger.warning(
                    "Reminder send not recorded (missing row or newer marker)",
                    user_id=user_id,
                    sent_at=sent_at_utc.isoformat(),
                )
            return updated

        except SQLAlchemyError as e:
            logger.error("Failed to record reminder send", user_id=user_id, error=str(e))
            raise DatabaseException(f"Failed to record reminder send: {e}")


# Singleton instance
db = AsyncDatabase()
