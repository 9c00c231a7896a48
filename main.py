from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.cron import CronTrigger
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from dotenv import load_dotenv
import logging

# Database imports
from db import engine, SessionLocal

# Model imports
from models import Base

# Router imports
from router import admin, attendance, auth, disciplinary, schedules, trustpilot, user

# Service imports
from services.disciplinary_service import expire_disciplinary_actions

load_dotenv()

ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "http://localhost:5173").split(",")
APP_TIMEZONE = os.getenv("APP_TIMEZONE", "UTC")
DISCIPLINARY_SWEEP_HOUR = int(os.getenv("DISCIPLINARY_SWEEP_HOUR", "2"))
# Turn off on all but one deployment when several processes serve the app
ENABLE_SCHEDULER = os.getenv("ENABLE_SCHEDULER", "true").strip().lower() in ("1", "true", "yes")

logger = logging.getLogger("moderator_hub")


def expire_disciplinary_job():
    """Deactivate warnings and strikes whose expiry date has passed."""
    db = SessionLocal()
    try:
        total = expire_disciplinary_actions(db)
        logger.info(f"Disciplinary expiry sweep done. total_expired={total}")
    except Exception as ex:
        db.rollback()
        logger.exception("Disciplinary expiry sweep failed: %s", ex)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    Base.metadata.create_all(bind=engine)
    app.state.scheduler = None
    if not ENABLE_SCHEDULER:
        logger.info("Scheduler disabled (ENABLE_SCHEDULER=false)")
        yield
        return

    scheduler = BackgroundScheduler(timezone=APP_TIMEZONE)
    scheduler.add_job(
        expire_disciplinary_job,
        CronTrigger(hour=DISCIPLINARY_SWEEP_HOUR, minute=0),
        id='expire_disciplinary_actions',
        name='Deactivate expired disciplinary actions',
        replace_existing=True
    )
    scheduler.start()
    app.state.scheduler = scheduler
    try:
        yield
    finally:
        # shutdown
        scheduler.shutdown()


app = FastAPI(
    title="Moderator Hub API",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report validation failures field by field so forms can show them inline."""
    errors = []
    for err in exc.errors():
        # Drop the "body"/"query"/"path" prefix
        loc = [str(part) for part in err.get("loc", ())[1:]] or [str(part) for part in err.get("loc", ())]
        errors.append({"field": ".".join(loc), "message": err.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=422,
        content={"message": "Validation failed", "errors": errors},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# Routers
app.include_router(auth.router)
app.include_router(attendance.router)
app.include_router(user.router)
app.include_router(trustpilot.router)
app.include_router(schedules.router)
app.include_router(disciplinary.router)
app.include_router(admin.router)


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

# uvicorn main:app --reload
# http://127.0.0.1:8000/docs
# for tests run: python -m pytest -q
