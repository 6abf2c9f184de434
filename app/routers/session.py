"""Quiz and learn session endpoints."""
from typing import Optional
from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field, field_validator
from app.constants import ANSWER_SUBMISSION_RATE_LIMIT, SESSION_START_RATE_LIMIT
from app.dependencies import get_learner
from app.limiter import limiter
from app.services.learners import LearnerState
from app.services.question_builder import Question
from app.services.results import summarize_result
from app.services.session_engine import Feedback, SessionMode, SessionPolicy, SessionSnapshot

router = APIRouter(prefix="/api/session", tags=["session"])


class StartSessionRequest(BaseModel):
    """Request body for starting a session."""
    day_id: str = Field(..., min_length=1, max_length=50, description="Day identifier, e.g. Day1")
    mode: SessionMode = SessionMode.QUIZ

    @field_validator('day_id')
    @classmethod
    def validate_day_id(cls, v):
        """Strip whitespace and reject blank ids."""
        if not v or v.strip() == '':
            raise ValueError('day_id cannot be empty')
        return v.strip()


class AnswerSubmission(BaseModel):
    """Request body for answer submission."""
    option_id: int = Field(..., gt=0, description="Id of the chosen option's word")


def format_question(question: Question) -> dict:
    """Prompt word plus options; options show meanings, never which one is right."""
    return {
        "word": question.target.word,
        "audio_file": question.target.audio_file,
        "options": [
            {"id": option.id, "meaning": option.meaning}
            for option in question.options
        ]
    }


def format_feedback(snapshot: SessionSnapshot, feedback: Feedback, question: Question) -> dict:
    data = {
        "is_correct": feedback.is_correct,
        "selected_option_id": feedback.selected_option.id,
    }
    # The right answer is revealed only once the question is resolved for good
    if feedback.is_correct or snapshot.mode == SessionMode.QUIZ:
        data["correct_option_id"] = question.target.id
    return data


def format_snapshot(learner: LearnerState, snapshot: SessionSnapshot) -> dict:
    question = snapshot.current_question
    return {
        "session_id": snapshot.session_id,
        "day_id": learner.day_id,
        "view": learner.view.value,
        "mode": snapshot.mode.value,
        "phase": snapshot.phase.value,
        "current_index": snapshot.current_index,
        "total": snapshot.total,
        "progress": round(snapshot.progress * 100, 1),
        "score_correct": snapshot.score_correct,
        "score_wrong": snapshot.score_wrong,
        "question": format_question(question) if question else None,
        "feedback": (
            format_feedback(snapshot, snapshot.feedback, question)
            if snapshot.feedback and question else None
        ),
    }


@router.post("/start")
@limiter.limit(SESSION_START_RATE_LIMIT)
async def start_session(
    session_request: StartSessionRequest,
    request: Request,
    learner: LearnerState = Depends(get_learner)
):
    """
    Start a new session for a day, replacing any session in progress.

    Args:
        session_request: Day and mode (quiz or learn)

    Returns:
    - session snapshot with the first question
    """
    session = learner.start_session(session_request.day_id, session_request.mode)
    return format_snapshot(learner, session.snapshot())


@router.get("/state")
async def session_state(learner: LearnerState = Depends(get_learner)):
    """Current snapshot of the learner's session."""
    session = learner.require_session()
    return format_snapshot(learner, session.snapshot())


@router.post("/answer")
@limiter.limit(ANSWER_SUBMISSION_RATE_LIMIT)
async def submit_answer(
    answer: AnswerSubmission,
    request: Request,
    learner: LearnerState = Depends(get_learner)
):
    """
    Submit an answer to the current question.

    A submission while feedback is still showing is ignored
    (``accepted`` is false) and leaves the scores untouched.

    Returns:
    - accepted flag
    - session snapshot (phase is "feedback" right after an accepted answer)
    """
    session = learner.require_session()
    feedback: Optional[Feedback] = session.select_by_id(answer.option_id)
    snapshot = session.snapshot()

    return {
        "accepted": feedback is not None,
        "dwell_seconds": _dwell_for(session.policy, feedback),
        **format_snapshot(learner, snapshot)
    }


@router.get("/result")
async def session_result(learner: LearnerState = Depends(get_learner)):
    """
    Result screen data for the finished session.

    Quiz mode reports a percentage; learn mode reports ``mistakes`` instead and
    its ``percentage`` is null. Stars come from whichever of the two applies.
    """
    summary = summarize_result(learner.require_result())
    return {
        "day_id": learner.day_id,
        "mode": summary.mode.value,
        "score_correct": summary.score_correct,
        "score_wrong": summary.score_wrong,
        "total_questions": summary.total_questions,
        "percentage": summary.percentage,
        "mistakes": summary.score_wrong if summary.mode == SessionMode.LEARN else None,
        "stars": summary.stars,
        "message": summary.message,
        "celebrate": summary.celebrate,
    }


@router.delete("")
async def leave_session(learner: LearnerState = Depends(get_learner)):
    """Go back home, abandoning any deck or session in progress."""
    learner.go_home()
    return {"view": learner.view.value}


def _dwell_for(policy: SessionPolicy, feedback: Optional[Feedback]) -> Optional[float]:
    if feedback is None:
        return None
    return policy.correct_dwell if feedback.is_correct else policy.wrong_dwell
