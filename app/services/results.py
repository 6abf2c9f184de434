"""Result screen scoring: stars, message and celebration."""
from dataclasses import dataclass
from typing import Optional
from app.constants import RESULT_MESSAGES, THREE_STAR_PERCENTAGE, TWO_STAR_PERCENTAGE
from app.services.session_engine import SessionMode, SessionResult


@dataclass(frozen=True)
class ResultSummary:
    score_correct: int
    score_wrong: int
    total_questions: int
    mode: SessionMode
    percentage: Optional[float]
    stars: int
    message: str
    celebrate: bool


def score_percentage(result: SessionResult) -> Optional[float]:
    """
    Percentage shown on the quiz result screen.

    Learn mode always ends with every question correct, so it has no
    percentage score (None); its result is the mistake count.
    """
    if result.mode == SessionMode.LEARN:
        return None
    if result.total_questions == 0:
        return 0.0
    return result.score_correct / result.total_questions * 100


def star_rating(percentage: float) -> int:
    """3 stars for a perfect score, 2 from 60%, otherwise 1."""
    if percentage >= THREE_STAR_PERCENTAGE:
        return 3
    if percentage >= TWO_STAR_PERCENTAGE:
        return 2
    return 1


def mistake_star_rating(mistakes: int, total_questions: int) -> int:
    """
    Learn mode stars: 3 for no mistakes, 2 while mistakes stay within the
    share of questions a two-star quiz may miss (4 of 10), otherwise 1.
    """
    if mistakes == 0:
        return 3
    allowed = total_questions * (100.0 - TWO_STAR_PERCENTAGE) / 100.0
    if mistakes <= allowed:
        return 2
    return 1


def summarize_result(result: SessionResult) -> ResultSummary:
    percentage = score_percentage(result)
    if percentage is None:
        stars = mistake_star_rating(result.mistakes, result.total_questions)
    else:
        stars = star_rating(percentage)
        percentage = round(percentage, 1)
    return ResultSummary(
        score_correct=result.score_correct,
        score_wrong=result.score_wrong,
        total_questions=result.total_questions,
        mode=result.mode,
        percentage=percentage,
        stars=stars,
        message=RESULT_MESSAGES[stars],
        celebrate=stars >= 2,
    )
