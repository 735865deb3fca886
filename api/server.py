from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Body, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from config.settings import settings
from core import get_logger, DatabaseConnectionError, DatabaseException, InvalidInputError
from scheduler import ReminderScheduler
from schemas import ReminderSettingsSchema, ReminderSettingsUpdateSchema, SendSMSRequest
from services import AffirmationGenerator
from services.sms_notifier import sms_notifier
from storage.database import db

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifecycle manager for the FastAPI app.
    Starts and stops the reminder scheduler alongside the API.
    """
    # Startup
    logger.info("Starting up API and reminder scheduler...")
    await db.create_tables()

    scheduler = ReminderScheduler(
        settings_source=db,
        content_generator=AffirmationGenerator(),
        notifier=sms_notifier,
    )
    app.state.scheduler = scheduler

    if settings.SCHEDULER_ENABLED:
        if not settings.twilio_configured:
            logger.warning("Twilio credentials incomplete, scheduled reminders will fail to send")
        scheduler.start()
    else:
        logger.info("Reminder scheduler disabled by configuration")

    yield

    # Shutdown
    logger.info("Shutting down...")
    await scheduler.shutdown()
    await db.dispose()


app = FastAPI(title="Affirmation Reminder API", lifespan=lifespan)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Allow all for now, restrict in prod if needed
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _bad_request(message: str, field: Optional[str] = None) -> JSONResponse:
    content = {"message": message}
    if field is not None:
        content["field"] = field
    return JSONResponse(status_code=400, content=content)


@app.get("/api/health")
async def health_check(request: Request):
    scheduler = getattr(request.app.state, "scheduler", None)
    try:
        await db.check_connection()
        database = "ok"
    except DatabaseConnectionError:
        database = "unavailable"

    return {
        "status": "ok" if database == "ok" else "degraded",
        "database": database,
        "scheduler_running": bool(scheduler and scheduler.is_running),
    }


# ── Reminder Settings Endpoints ──────────────────────────────────────

@app.get("/api/reminders/{user_id}", response_model=Optional[ReminderSettingsSchema])
async def get_reminder_settings(user_id: str):
    """Get a user's reminder settings (null if never saved)."""
    try:
        return await db.get_reminder_settings(user_id)
    except DatabaseException as e:
        logger.error("Error fetching reminder settings", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to fetch reminder settings")


@app.put("/api/reminders/{user_id}", response_model=ReminderSettingsSchema)
async def update_reminder_settings(user_id: str, payload: dict = Body(...)):
    """Create or partially update a user's reminder settings."""
    try:
        updates = ReminderSettingsUpdateSchema.model_validate(payload)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        return _bad_request(first["msg"], field)

    try:
        return await db.upsert_reminder_settings(user_id, updates)
    except InvalidInputError as e:
        return _bad_request(e.message, e.context.get("field"))
    except DatabaseException as e:
        logger.error("Error saving reminder settings", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Failed to save reminder settings")


@app.post("/api/reminders/{user_id}/send-sms")
async def send_sms_reminder(user_id: str, req: SendSMSRequest):
    """Send an affirmation by SMS right away (manual test send)."""
    if not req.phone_number or not req.affirmation:
        return _bad_request("Phone number and affirmation are required")

    result = await sms_notifier.send_affirmation_reminder(req.phone_number, req.affirmation)
    if result.success:
        logger.info("Manual affirmation SMS sent", user_id=user_id, message_id=result.message_id)
        return {"message": "SMS sent successfully"}

    logger.warning("Manual affirmation SMS failed", user_id=user_id, error=result.error)
    return JSONResponse(
        status_code=500,
        content={"message": result.error or "Failed to send SMS reminder"},
    )
