"""Learner bootstrap and vocabulary browsing endpoints."""
from fastapi import APIRouter, Depends, Request, Response
from app.config import settings
from app.constants import COOKIE_NAME
from app.data.vocabulary import WordEntry, get_words, list_days, VOCABULARY
from app.dependencies import get_registry
from app.services.learners import LearnerRegistry, LearnerState

router = APIRouter(prefix="/api", tags=["learner"])


def format_word(word: WordEntry) -> dict:
    return {
        "id": word.id,
        "word": word.word,
        "meaning": word.meaning,
        "audio_file": word.audio_file,
    }


def get_or_create_learner(request: Request, response: Response, registry: LearnerRegistry) -> LearnerState:
    """
    Get the cookie's learner, or register a new one and set its cookie.

    Ids are only ever issued here; an unknown or expired cookie gets a fresh id.

    Args:
        request: FastAPI request
        response: FastAPI response (to set cookie)
        registry: Learner registry

    Returns:
        LearnerState for the cookie's learner id
    """
    learner_id = request.cookies.get(COOKIE_NAME)
    learner = registry.get(learner_id) if learner_id else None
    if learner is not None:
        return learner

    learner = registry.register()
    response.set_cookie(
        key=COOKIE_NAME,
        value=learner.learner_id,
        max_age=settings.COOKIE_MAX_AGE,
        httponly=settings.COOKIE_HTTPONLY,
        samesite=settings.COOKIE_SAMESITE,
        secure=settings.COOKIE_SECURE
    )
    return learner


@router.get("/bootstrap")
async def bootstrap(
    request: Request,
    response: Response,
    registry: LearnerRegistry = Depends(get_registry)
):
    """
    Bootstrap the learner and return the home screen data.

    Returns:
    - learner id
    - current view (home, study, quiz or result)
    - days with word counts
    """
    learner = get_or_create_learner(request, response, registry)

    return {
        "learner_id": learner.learner_id,
        "view": learner.view.value,
        "day_id": learner.day_id,
        "days": [{"day_id": day, "word_count": len(VOCABULARY[day])} for day in list_days()]
    }


@router.get("/days")
async def days():
    """List the lesson days in order."""
    return [{"day_id": day, "word_count": len(VOCABULARY[day])} for day in list_days()]


@router.get("/days/{day_id}/words")
async def day_words(day_id: str):
    """Words of one day, in lesson order. 404 for an unknown day."""
    return {
        "day_id": day_id,
        "words": [format_word(word) for word in get_words(day_id)]
    }
