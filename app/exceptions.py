"""Domain errors raised by the vocabulary store and the session engine."""


class VocabError(Exception):
    """Base class for all application errors."""


class DayNotFoundError(VocabError):
    """Raised when a day id is not present in the vocabulary store."""

    def __init__(self, day_id: str):
        super().__init__(f"Unknown day: {day_id}")
        self.day_id = day_id


class InsufficientWordsError(VocabError):
    """Raised when a word list is too small to build multiple-choice questions."""

    def __init__(self, available: int, required: int):
        super().__init__(
            f"Need at least {required} distinct words to build questions, got {available}"
        )
        self.available = available
        self.required = required


class InvalidOptionError(VocabError):
    """Raised when a selected option is not one of the current question's options."""


class InvalidStateError(VocabError):
    """Raised when an operation is not allowed in the session's current phase."""


class NoActiveSessionError(VocabError):
    """Raised when a learner has no study deck or session of the requested kind."""
