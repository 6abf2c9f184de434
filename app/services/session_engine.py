"""Quiz and learn session state machine.

A session walks a learner through a list of questions:

    ANSWERING --select--> FEEDBACK --dwell elapsed--> ANSWERING (same or next index)
                                                  \\-> COMPLETE (after the last question)

Two policies share the same engine:

- Quiz mode: one attempt per question, always advances after feedback, the
  final result is a percentage score.
- Learn mode: retry until correct, advances only on a correct answer, the
  final result is the mistake count (which may exceed the question count).

The dwell interval is scheduled through an injectable scheduler. Every pending
transition carries the generation it was scheduled in, and ``close()`` cancels
the handle and bumps the generation, so a late callback never touches a
session the learner has already left.
"""
import random
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence
from app.constants import (
    CORRECT_DWELL_SECONDS,
    RETRY_DWELL_SECONDS,
    QUIZ_WRONG_DWELL_SECONDS,
    DISTRACTOR_COUNT
)
from app.data.vocabulary import WordEntry
from app.exceptions import InvalidOptionError, InvalidStateError
from app.logging_config import get_logger
from app.services.question_builder import Question, build_questions
from app.services.scheduler import AsyncioScheduler, Scheduler, TimerHandle
from app.services.speech import Speaker

logger = get_logger(__name__)


class Phase(str, Enum):
    """Where the session is in its question loop."""
    ANSWERING = "answering"
    FEEDBACK = "feedback"
    COMPLETE = "complete"


class SessionMode(str, Enum):
    """Scoring policy chosen when the session is created."""
    QUIZ = "quiz"    # One attempt per question
    LEARN = "learn"  # Retry until correct


@dataclass(frozen=True)
class SessionPolicy:
    """Retry/advance rules and dwell intervals for a session mode."""
    mode: SessionMode
    retry_until_correct: bool
    correct_dwell: float
    wrong_dwell: float


QUIZ_POLICY = SessionPolicy(
    mode=SessionMode.QUIZ,
    retry_until_correct=False,
    correct_dwell=CORRECT_DWELL_SECONDS,
    wrong_dwell=QUIZ_WRONG_DWELL_SECONDS,
)

LEARN_POLICY = SessionPolicy(
    mode=SessionMode.LEARN,
    retry_until_correct=True,
    correct_dwell=CORRECT_DWELL_SECONDS,
    wrong_dwell=RETRY_DWELL_SECONDS,
)


def policy_for(mode: SessionMode) -> SessionPolicy:
    return LEARN_POLICY if SessionMode(mode) == SessionMode.LEARN else QUIZ_POLICY


@dataclass(frozen=True)
class Feedback:
    """Correct/incorrect indication shown during the dwell interval."""
    is_correct: bool
    selected_option: WordEntry


@dataclass(frozen=True)
class SessionResult:
    """Final tally raised once when the session completes."""
    score_correct: int
    score_wrong: int
    total_questions: int
    mode: SessionMode

    @property
    def accuracy(self) -> float:
        """Share of questions answered correctly (quiz mode score)."""
        if self.total_questions == 0:
            return 0.0
        return self.score_correct / self.total_questions

    @property
    def mistakes(self) -> int:
        """Wrong answers across all attempts (learn mode score)."""
        return self.score_wrong


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session handed to the presentation layer."""
    session_id: str
    mode: SessionMode
    phase: Phase
    current_question: Optional[Question]
    feedback: Optional[Feedback]
    current_index: int
    total: int
    score_correct: int
    score_wrong: int

    @property
    def progress(self) -> float:
        """Fraction of questions resolved, 0.0 to 1.0."""
        return self.current_index / self.total if self.total else 0.0


class SessionEngine:
    """Drives one session over an owned list of questions.

    Args:
        questions: Questions in presentation order (owned by the session)
        policy: QUIZ_POLICY or LEARN_POLICY
        scheduler: Runs the dwell-interval transition; defaults to the asyncio loop
        speaker: Receives a pronounce request whenever a new question is shown
        on_change: Called with a SessionSnapshot after every transition
        on_complete: Called once with the SessionResult
        session_id: Identifier used in logs; generated if omitted
    """

    def __init__(
        self,
        questions: Sequence[Question],
        policy: SessionPolicy = QUIZ_POLICY,
        scheduler: Optional[Scheduler] = None,
        speaker: Optional[Speaker] = None,
        on_change: Optional[Callable[[SessionSnapshot], None]] = None,
        on_complete: Optional[Callable[[SessionResult], None]] = None,
        session_id: Optional[str] = None
    ):
        if not questions:
            raise ValueError("A session needs at least one question")

        self.session_id = session_id or uuid.uuid4().hex
        self.policy = policy
        self._questions: List[Question] = list(questions)
        self._scheduler = scheduler or AsyncioScheduler()
        self._speaker = speaker
        self._on_change = on_change
        self._on_complete = on_complete

        self.current_index = 0
        self.score_correct = 0
        self.score_wrong = 0
        self.phase = Phase.ANSWERING
        self.feedback: Optional[Feedback] = None
        self.result: Optional[SessionResult] = None

        self._started = False
        self._closed = False
        self._generation = 0
        self._pending: Optional[TimerHandle] = None

    @property
    def questions(self) -> List[Question]:
        return list(self._questions)

    @property
    def total_questions(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self.phase == Phase.COMPLETE:
            return None
        return self._questions[self.current_index]

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def has_pending_transition(self) -> bool:
        return self._pending is not None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            session_id=self.session_id,
            mode=self.policy.mode,
            phase=self.phase,
            current_question=self.current_question,
            feedback=self.feedback,
            current_index=self.current_index,
            total=self.total_questions,
            score_correct=self.score_correct,
            score_wrong=self.score_wrong,
        )

    def start(self) -> SessionSnapshot:
        """Present the first question. Calling it again has no effect."""
        if not self._started:
            self._started = True
            logger.info(
                f"Session started: mode={self.policy.mode.value}, questions={self.total_questions}",
                extra={"session_id": self.session_id}
            )
            self._enter_question()
        return self.snapshot()

    def select(self, option: WordEntry) -> Optional[Feedback]:
        """
        Answer the current question.

        Args:
            option: One of the current question's options

        Returns:
            The Feedback now on display, or None if the selection was ignored
            because feedback for a previous selection is still showing

        Raises:
            InvalidStateError: If the session is complete or closed
            InvalidOptionError: If the option is not offered by the current question
        """
        if not self._accepting_answers():
            return None

        question = self._questions[self.current_index]
        if not question.has_option(option):
            raise InvalidOptionError(
                f"Option {option!r} is not offered by question {self.current_index + 1}"
            )

        if not self._started:
            self.start()

        is_correct = option.id == question.target.id
        if is_correct:
            self.score_correct += 1
        else:
            self.score_wrong += 1

        self.phase = Phase.FEEDBACK
        self.feedback = Feedback(is_correct=is_correct, selected_option=option)
        logger.debug(
            f"Answer {'correct' if is_correct else 'wrong'} for '{question.target.word}'",
            extra={"session_id": self.session_id, "question_index": self.current_index}
        )
        self._notify()

        advance = is_correct or not self.policy.retry_until_correct
        delay = self.policy.correct_dwell if is_correct else self.policy.wrong_dwell
        self._schedule(delay, advance)
        return self.feedback

    def select_by_id(self, option_id: int) -> Optional[Feedback]:
        """Answer by option id, as sent by the presentation layer."""
        if not self._accepting_answers():
            return None

        option = self._questions[self.current_index].option_by_id(option_id)
        if option is None:
            raise InvalidOptionError(
                f"Option id {option_id} is not offered by question {self.current_index + 1}"
            )
        return self.select(option)

    def close(self) -> None:
        """Abandon the session (learner went home or picked another day)."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        logger.info(
            f"Session closed in phase {self.phase.value}",
            extra={"session_id": self.session_id}
        )

    def _accepting_answers(self) -> bool:
        """False while feedback is showing; raises once the session is over."""
        if self._closed:
            raise InvalidStateError("Session is closed")
        if self.phase == Phase.COMPLETE:
            raise InvalidStateError("Session already completed")
        if self.phase == Phase.FEEDBACK:
            logger.debug(
                "Selection ignored while feedback is showing",
                extra={"session_id": self.session_id}
            )
            return False
        return True

    def _schedule(self, delay: float, advance: bool) -> None:
        generation = self._generation

        def fire():
            if self._closed or generation != self._generation:
                logger.debug("Dropping stale transition", extra={"session_id": self.session_id})
                return
            self._pending = None
            self._finish_feedback(advance)

        self._pending = self._scheduler.call_later(delay, fire)

    def _finish_feedback(self, advance: bool) -> None:
        self.feedback = None

        if not advance:
            # Retry the same question
            self.phase = Phase.ANSWERING
            self._notify()
            return

        if self.current_index >= self.total_questions - 1:
            self._complete()
            return

        self.current_index += 1
        self._enter_question()

    def _enter_question(self) -> None:
        self.phase = Phase.ANSWERING
        self._notify()
        self._pronounce(self._questions[self.current_index].target.word)

    def _complete(self) -> None:
        if self.result is not None:
            return

        self.phase = Phase.COMPLETE
        self.current_index = self.total_questions
        self.result = SessionResult(
            score_correct=self.score_correct,
            score_wrong=self.score_wrong,
            total_questions=self.total_questions,
            mode=self.policy.mode,
        )
        logger.info(
            f"Session complete: correct={self.score_correct}, wrong={self.score_wrong}, "
            f"total={self.total_questions}",
            extra={"session_id": self.session_id}
        )
        self._notify()
        if self._on_complete is not None:
            self._on_complete(self.result)

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self.snapshot())

    def _pronounce(self, text: str) -> None:
        if self._speaker is None:
            return
        try:
            self._speaker.speak(text)
        except Exception as e:
            logger.warning(
                f"Pronunciation failed for '{text}': {e}",
                extra={"session_id": self.session_id}
            )


def create_session(
    words: Sequence[WordEntry],
    mode: SessionMode = SessionMode.QUIZ,
    scheduler: Optional[Scheduler] = None,
    speaker: Optional[Speaker] = None,
    rng: Optional[random.Random] = None,
    distractor_count: int = DISTRACTOR_COUNT,
    on_change: Optional[Callable[[SessionSnapshot], None]] = None,
    on_complete: Optional[Callable[[SessionResult], None]] = None
) -> SessionEngine:
    """
    Build questions for a word list and start a session over them.

    Raises:
        InsufficientWordsError: If the word list is too short for the option count
    """
    questions = build_questions(words, distractor_count=distractor_count, rng=rng)
    engine = SessionEngine(
        questions,
        policy=policy_for(mode),
        scheduler=scheduler,
        speaker=speaker,
        on_change=on_change,
        on_complete=on_complete,
    )
    engine.start()
    return engine
