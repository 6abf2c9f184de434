"""Multiple-choice question generation with distractor selection."""
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from app.constants import DISTRACTOR_COUNT
from app.data.vocabulary import WordEntry
from app.exceptions import InsufficientWordsError


@dataclass(frozen=True)
class Question:
    """One multiple-choice question: a target word and its shuffled options."""
    target: WordEntry
    options: Tuple[WordEntry, ...]

    def has_option(self, option: WordEntry) -> bool:
        return option in self.options

    def option_by_id(self, option_id: int) -> Optional[WordEntry]:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


def _distinct(words: Sequence[WordEntry]) -> List[WordEntry]:
    """Drop repeated ids, keeping first occurrence order."""
    seen = set()
    unique = []
    for word in words:
        if word.id not in seen:
            seen.add(word.id)
            unique.append(word)
    return unique


def generate_distractors(
    words: Sequence[WordEntry],
    target: WordEntry,
    count: int = DISTRACTOR_COUNT,
    rng: Optional[random.Random] = None
) -> List[WordEntry]:
    """
    Pick distractor words for multiple choice.

    Args:
        words: Candidate pool (may include the target)
        target: The correct answer word
        count: Number of distractors needed (default 3)
        rng: Random source; defaults to the module-level generator

    Returns:
        List of WordEntry objects (distractors only, not including target)
    """
    rng = rng or random
    others = [w for w in _distinct(words) if w.id != target.id]

    if len(others) < count:
        raise InsufficientWordsError(available=len(others) + 1, required=count + 1)

    return rng.sample(others, count)


def build_question(
    words: Sequence[WordEntry],
    target: WordEntry,
    distractor_count: int = DISTRACTOR_COUNT,
    rng: Optional[random.Random] = None
) -> Question:
    """Build a single question for ``target`` with options in random order."""
    rng = rng or random
    options = [target] + generate_distractors(words, target, distractor_count, rng)
    # random.shuffle is a Fisher-Yates shuffle, so every ordering is equally likely
    rng.shuffle(options)
    return Question(target=target, options=tuple(options))


def build_questions(
    words: Sequence[WordEntry],
    distractor_count: int = DISTRACTOR_COUNT,
    rng: Optional[random.Random] = None
) -> List[Question]:
    """
    Create one question per word, returned in random order.

    Process:
    1. Validate there are enough distinct words for the option count
    2. For each word, sample distractors without replacement from the rest
    3. Shuffle each question's options and then the question order

    Args:
        words: Day's word list
        distractor_count: Wrong options per question (default 3)
        rng: Random source, injectable for tests

    Returns:
        List of Question objects

    Raises:
        InsufficientWordsError: If fewer than distractor_count + 1 distinct words
    """
    if distractor_count < 0:
        raise ValueError("distractor_count must not be negative")

    rng = rng or random
    unique = _distinct(words)

    if len(unique) < distractor_count + 1:
        raise InsufficientWordsError(available=len(unique), required=distractor_count + 1)

    questions = [build_question(unique, target, distractor_count, rng) for target in unique]
    rng.shuffle(questions)
    return questions
