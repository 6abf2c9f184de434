"""FastAPI dependencies: the learner registry and the cookie-identified learner."""
from typing import Optional
from fastapi import Depends, HTTPException, Request
from app.config import settings
from app.constants import COOKIE_NAME
from app.logging_config import get_logger
from app.services.learners import LearnerRegistry, LearnerState
from app.services.speech import GTTSSpeaker, NullSpeaker

logger = get_logger(__name__)

_registry: Optional[LearnerRegistry] = None


def build_registry() -> LearnerRegistry:
    """Create the process-wide registry with the configured speaker."""
    if settings.TTS_ENABLED:
        speaker = GTTSSpeaker(settings.AUDIO_DIR, lang=settings.TTS_LANG, slow=settings.TTS_SLOW)
    else:
        speaker = NullSpeaker()
    logger.info(f"Learner registry created (tts={'on' if settings.TTS_ENABLED else 'off'})")
    return LearnerRegistry(speaker=speaker)


def get_registry() -> LearnerRegistry:
    global _registry
    if _registry is None:
        _registry = build_registry()
    return _registry


def shutdown_registry() -> None:
    global _registry
    if _registry is None:
        return
    _registry.close_all()
    if isinstance(_registry.speaker, GTTSSpeaker):
        _registry.speaker.shutdown()
    _registry = None


def get_learner(
    request: Request,
    registry: LearnerRegistry = Depends(get_registry)
) -> LearnerState:
    """Look up the learner from the cookie set by /api/bootstrap (401 if unknown)."""
    learner_id = request.cookies.get(COOKIE_NAME)
    if not learner_id:
        raise HTTPException(status_code=401, detail="No learner session found")

    learner = registry.get(learner_id)
    if learner is None:
        logger.warning("Unknown learner cookie rejected")
        raise HTTPException(status_code=401, detail="Unknown learner; call /api/bootstrap first")
    return learner
