"""Main FastAPI application for Vocabulary Adventure."""
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from app.routers import learner, study, session
from app.dependencies import shutdown_registry
from app.exceptions import (
    DayNotFoundError,
    InsufficientWordsError,
    InvalidOptionError,
    InvalidStateError,
    NoActiveSessionError
)
from app.limiter import limiter
from app.logging_config import setup_logging, get_logger
from app.config import settings

# Set up logging on module import
log_level = settings.LOG_LEVEL if settings.LOG_LEVEL else None
setup_logging(log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Prepare the audio directory on startup and stop speech on shutdown."""
    logger.info("Application startup initiated")
    os.makedirs(settings.AUDIO_DIR, exist_ok=True)

    yield

    shutdown_registry()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Vocabulary Adventure API",
    description="""
    Vocabulary practice for children, one "day" of words at a time.

    ## Flow

    1. **Bootstrap**: GET `/api/bootstrap` to get a learner cookie and the list of days
    2. **Study**: POST `/api/study/start` then page through flashcards with `/next`, `/prev`, `/flip`
    3. **Session**: POST `/api/session/start` with `mode` = `quiz` or `learn`
    4. **Answer**: POST `/api/session/answer`; poll GET `/api/session/state` after the dwell interval
    5. **Result**: GET `/api/session/result` for score, stars and message

    ## Modes

    - **Quiz**: one attempt per question, percentage score
    - **Learn**: retry each question until correct, scored by mistakes
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_tags=[
        {"name": "learner", "description": "Learner bootstrap and vocabulary"},
        {"name": "study", "description": "Flashcard study before a session"},
        {"name": "session", "description": "Quiz and learn sessions, answers and results"},
        {"name": "health", "description": "Service health checks"}
    ]
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

logger.info(f"Rate limiting {'enabled' if settings.RATE_LIMIT_ENABLED else 'disabled'}")


def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(DayNotFoundError)
async def day_not_found_handler(request: Request, exc: DayNotFoundError):
    logger.info(f"Unknown day requested: {exc.day_id}")
    return _error_response(404, exc)


@app.exception_handler(NoActiveSessionError)
async def no_session_handler(request: Request, exc: NoActiveSessionError):
    return _error_response(404, exc)


@app.exception_handler(InvalidOptionError)
async def invalid_option_handler(request: Request, exc: InvalidOptionError):
    logger.warning(f"Rejected answer: {exc}")
    return _error_response(400, exc)


@app.exception_handler(InvalidStateError)
async def invalid_state_handler(request: Request, exc: InvalidStateError):
    logger.warning(f"Rejected operation: {exc}")
    return _error_response(409, exc)


@app.exception_handler(InsufficientWordsError)
async def insufficient_words_handler(request: Request, exc: InsufficientWordsError):
    logger.error(f"Cannot build session: {exc}")
    return _error_response(422, exc)


# Pronunciation files rendered by the speaker
app.mount("/static/audio", StaticFiles(directory=settings.AUDIO_DIR, check_dir=False), name="audio")

# Include routers
app.include_router(learner.router)
app.include_router(study.router)
app.include_router(session.router)


@app.get("/health", tags=["health"])
async def health_check():
    """Liveness check.

    Example Response:
        {
            "status": "healthy",
            "tts": "enabled",
            "timestamp": "2026-10-19T10:30:00.000000+00:00",
            "environment": "production"
        }
    """
    logger.debug("Health check passed")
    return {
        "status": "healthy",
        "tts": "enabled" if settings.TTS_ENABLED else "disabled",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.ENVIRONMENT
    }
