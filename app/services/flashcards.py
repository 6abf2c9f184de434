"""Flashcard deck for the study screen that comes before a quiz."""
from dataclasses import dataclass
from typing import List, Optional, Sequence
from app.data.vocabulary import WordEntry
from app.logging_config import get_logger
from app.services.speech import Speaker

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeckState:
    """What the study screen shows."""
    card: WordEntry
    index: int
    total: int
    flipped: bool
    finished: bool

    @property
    def is_first(self) -> bool:
        return self.index == 0

    @property
    def is_last(self) -> bool:
        return self.index == self.total - 1


class FlashcardDeck:
    """
    Walks through a day's words one card at a time.

    The front of a card shows the word, the back its meaning. Moving to a
    card turns it face up again and pronounces the word. Going past the last
    card marks the deck finished, which is the cue to start the quiz.
    """

    def __init__(self, words: Sequence[WordEntry], speaker: Optional[Speaker] = None):
        if not words:
            raise ValueError("A flashcard deck needs at least one word")
        self._words: List[WordEntry] = list(words)
        self._speaker = speaker
        self.index = 0
        self.flipped = False
        self.finished = False
        self.speak()

    @property
    def current(self) -> WordEntry:
        return self._words[self.index]

    @property
    def total(self) -> int:
        return len(self._words)

    def state(self) -> DeckState:
        return DeckState(
            card=self.current,
            index=self.index,
            total=self.total,
            flipped=self.flipped,
            finished=self.finished,
        )

    def next(self) -> DeckState:
        if self.index < self.total - 1:
            self._move_to(self.index + 1)
        else:
            self.finished = True
        return self.state()

    def prev(self) -> DeckState:
        if self.index > 0:
            self._move_to(self.index - 1)
        return self.state()

    def flip(self) -> DeckState:
        self.flipped = not self.flipped
        return self.state()

    def speak(self) -> None:
        """Pronounce the current word; never raises."""
        if self._speaker is None:
            return
        try:
            self._speaker.speak(self.current.word)
        except Exception as e:
            logger.warning(f"Pronunciation failed for '{self.current.word}': {e}")

    def _move_to(self, index: int) -> None:
        self.index = index
        self.flipped = False
        self.speak()
