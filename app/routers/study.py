"""Flashcard study endpoints."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator
from app.dependencies import get_learner
from app.routers.learner import format_word
from app.services.flashcards import DeckState
from app.services.learners import LearnerState

router = APIRouter(prefix="/api/study", tags=["study"])


class StartStudyRequest(BaseModel):
    """Request body for opening a day's flashcards."""
    day_id: str = Field(..., min_length=1, max_length=50, description="Day identifier, e.g. Day1")

    @field_validator('day_id')
    @classmethod
    def validate_day_id(cls, v):
        """Strip whitespace and reject blank ids."""
        if not v or v.strip() == '':
            raise ValueError('day_id cannot be empty')
        return v.strip()


def format_deck(learner: LearnerState, state: DeckState) -> dict:
    return {
        "day_id": learner.day_id,
        "view": learner.view.value,
        "card": format_word(state.card),
        "index": state.index,
        "total": state.total,
        "flipped": state.flipped,
        "finished": state.finished,
        "is_first": state.is_first,
        "is_last": state.is_last,
    }


@router.post("/start")
async def start_study(
    study_request: StartStudyRequest,
    learner: LearnerState = Depends(get_learner)
):
    """Open the flashcards for a day and pronounce the first word."""
    deck = learner.start_study(study_request.day_id)
    return format_deck(learner, deck.state())


@router.get("/state")
async def study_state(learner: LearnerState = Depends(get_learner)):
    deck = learner.require_deck()
    return format_deck(learner, deck.state())


@router.post("/next")
async def next_card(learner: LearnerState = Depends(get_learner)):
    """Move to the next card; on the last card, mark the deck finished."""
    deck = learner.require_deck()
    return format_deck(learner, deck.next())


@router.post("/prev")
async def previous_card(learner: LearnerState = Depends(get_learner)):
    deck = learner.require_deck()
    return format_deck(learner, deck.prev())


@router.post("/flip")
async def flip_card(learner: LearnerState = Depends(get_learner)):
    deck = learner.require_deck()
    return format_deck(learner, deck.flip())


@router.post("/speak")
async def speak_card(learner: LearnerState = Depends(get_learner)):
    """Pronounce the current card again."""
    deck = learner.require_deck()
    deck.speak()
    return format_deck(learner, deck.state())
