"""Per-learner navigation state: home -> study -> quiz -> result.

Each learner has at most one study deck or session at a time. Choosing a new
day, starting a new session or going home closes the previous session, which
cancels its pending dwell transition.
"""
import random
import uuid
from collections import OrderedDict
from enum import Enum
from typing import Optional
from app.constants import MAX_LEARNERS
from app.data.vocabulary import get_words
from app.exceptions import NoActiveSessionError
from app.logging_config import get_logger
from app.services.flashcards import FlashcardDeck
from app.services.scheduler import AsyncioScheduler, Scheduler
from app.services.session_engine import SessionEngine, SessionMode, SessionResult, create_session
from app.services.speech import Speaker

logger = get_logger(__name__)


class View(str, Enum):
    """Screen the learner is on."""
    HOME = "home"
    STUDY = "study"
    QUIZ = "quiz"
    RESULT = "result"


class LearnerState:
    """Navigation state for one anonymous learner."""

    def __init__(
        self,
        learner_id: str,
        scheduler: Scheduler,
        speaker: Optional[Speaker] = None,
        rng: Optional[random.Random] = None
    ):
        self.learner_id = learner_id
        self.view = View.HOME
        self.day_id: Optional[str] = None
        self.deck: Optional[FlashcardDeck] = None
        self.session: Optional[SessionEngine] = None
        self.result: Optional[SessionResult] = None
        self._scheduler = scheduler
        self._speaker = speaker
        self._rng = rng

    def start_study(self, day_id: str) -> FlashcardDeck:
        """Open the flashcards for a day (raises DayNotFoundError)."""
        words = get_words(day_id)
        self._reset()
        self.day_id = day_id
        self.deck = FlashcardDeck(words, speaker=self._speaker)
        self.view = View.STUDY
        logger.info("Study started", extra={"learner_id": self.learner_id, "day_id": day_id})
        return self.deck

    def start_session(self, day_id: str, mode: SessionMode = SessionMode.QUIZ) -> SessionEngine:
        """
        Replace any current session with a fresh one for ``day_id``.

        Raises:
            DayNotFoundError: Unknown day
            InsufficientWordsError: Day too short for multiple choice
        """
        words = get_words(day_id)
        session = create_session(
            words,
            mode=mode,
            scheduler=self._scheduler,
            speaker=self._speaker,
            rng=self._rng,
            on_complete=self._on_complete,
        )
        self._reset()
        self.day_id = day_id
        self.session = session
        self.view = View.QUIZ
        logger.info(
            f"Session started for {day_id} in {SessionMode(mode).value} mode",
            extra={"learner_id": self.learner_id, "day_id": day_id, "session_id": session.session_id}
        )
        return session

    def go_home(self) -> None:
        self._reset()
        logger.debug("Returned home", extra={"learner_id": self.learner_id})

    def require_deck(self) -> FlashcardDeck:
        if self.deck is None:
            raise NoActiveSessionError("No flashcards open; start studying a day first")
        return self.deck

    def require_session(self) -> SessionEngine:
        if self.session is None:
            raise NoActiveSessionError("No session in progress; start one first")
        return self.session

    def require_result(self) -> SessionResult:
        if self.result is None:
            raise NoActiveSessionError("No finished session to show results for")
        return self.result

    def _on_complete(self, result: SessionResult) -> None:
        self.result = result
        self.view = View.RESULT

    def _reset(self) -> None:
        if self.session is not None:
            self.session.close()
        self.session = None
        self.deck = None
        self.result = None
        self.day_id = None
        self.view = View.HOME


class LearnerRegistry:
    """In-memory map of learner id to navigation state for this process.

    Holds at most ``max_learners`` learners. Registering one more drops the
    least recently active learner and closes its session.
    """

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        speaker: Optional[Speaker] = None,
        rng: Optional[random.Random] = None,
        max_learners: int = MAX_LEARNERS
    ):
        if max_learners < 1:
            raise ValueError("max_learners must be at least 1")
        self.scheduler = scheduler or AsyncioScheduler()
        self.speaker = speaker
        self.rng = rng
        self.max_learners = max_learners
        self._learners: "OrderedDict[str, LearnerState]" = OrderedDict()

    @staticmethod
    def new_learner_id() -> str:
        return f"voca_{uuid.uuid4()}"

    def get(self, learner_id: str) -> Optional[LearnerState]:
        """Known learner, or None. Marks the learner as recently active."""
        learner = self._learners.get(learner_id)
        if learner is not None:
            self._learners.move_to_end(learner_id)
        return learner

    def register(self) -> LearnerState:
        """Create a learner under a fresh server-issued id."""
        learner_id = self.new_learner_id()
        learner = LearnerState(learner_id, self.scheduler, speaker=self.speaker, rng=self.rng)
        self._learners[learner_id] = learner
        logger.info("New learner", extra={"learner_id": learner_id})

        while len(self._learners) > self.max_learners:
            _, evicted = self._learners.popitem(last=False)
            evicted.go_home()
            logger.info("Dropped inactive learner", extra={"learner_id": evicted.learner_id})
        return learner

    def __contains__(self, learner_id: str) -> bool:
        return learner_id in self._learners

    def __len__(self) -> int:
        return len(self._learners)

    def close_all(self) -> None:
        for learner in self._learners.values():
            learner.go_home()
