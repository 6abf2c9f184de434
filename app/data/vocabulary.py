"""Static vocabulary grouped by day, with lookup helpers."""
import re
from dataclasses import dataclass
from typing import Dict, List
from app.constants import AUDIO_PATH_TEMPLATE
from app.exceptions import DayNotFoundError


def slugify(text: str) -> str:
    """File-safe lowercase name for a word, e.g. "ice cream" -> "ice_cream"."""
    return re.sub(r"[^a-z0-9]+", "_", text.lower()).strip("_")


@dataclass(frozen=True)
class WordEntry:
    """A single vocabulary item: target-language word and its meaning."""
    id: int
    word: str
    meaning: str

    @property
    def slug(self) -> str:
        """File-safe name used for the pronunciation file."""
        return slugify(self.word)

    @property
    def audio_file(self) -> str:
        return AUDIO_PATH_TEMPLATE.format(slug=self.slug)


def _day(*entries) -> List[WordEntry]:
    return [WordEntry(id=i, word=w, meaning=m) for i, w, m in entries]


# Day id -> ordered word list. Ids are unique across all days.
VOCABULARY: Dict[str, List[WordEntry]] = {
    "Day1": _day(
        (1, "cat", "고양이"),
        (2, "dog", "개"),
        (3, "bird", "새"),
        (4, "fish", "물고기"),
        (5, "rabbit", "토끼"),
        (6, "horse", "말"),
        (7, "cow", "소"),
        (8, "pig", "돼지"),
        (9, "duck", "오리"),
        (10, "lion", "사자"),
    ),
    "Day2": _day(
        (11, "apple", "사과"),
        (12, "banana", "바나나"),
        (13, "grape", "포도"),
        (14, "orange", "오렌지"),
        (15, "strawberry", "딸기"),
        (16, "peach", "복숭아"),
        (17, "watermelon", "수박"),
        (18, "lemon", "레몬"),
        (19, "cherry", "체리"),
        (20, "pear", "배"),
    ),
    "Day3": _day(
        (21, "red", "빨간색"),
        (22, "blue", "파란색"),
        (23, "yellow", "노란색"),
        (24, "green", "초록색"),
        (25, "white", "하얀색"),
        (26, "black", "검은색"),
        (27, "pink", "분홍색"),
        (28, "purple", "보라색"),
        (29, "brown", "갈색"),
        (30, "gray", "회색"),
    ),
    "Day4": _day(
        (31, "school", "학교"),
        (32, "teacher", "선생님"),
        (33, "book", "책"),
        (34, "pencil", "연필"),
        (35, "desk", "책상"),
        (36, "chair", "의자"),
        (37, "bag", "가방"),
        (38, "friend", "친구"),
        (39, "eraser", "지우개"),
        (40, "ruler", "자"),
    ),
}


def list_days() -> List[str]:
    """Return day ids in lesson order."""
    return list(VOCABULARY.keys())


def get_words(day_id: str) -> List[WordEntry]:
    """
    Look up the word list for a day.

    Args:
        day_id: Day identifier, e.g. "Day1"

    Returns:
        Ordered list of WordEntry values (a copy; the store is read-only)

    Raises:
        DayNotFoundError: If the day does not exist
    """
    try:
        return list(VOCABULARY[day_id])
    except KeyError:
        raise DayNotFoundError(day_id) from None


def all_words() -> List[WordEntry]:
    """Every word in the store, in day order."""
    return [entry for words in VOCABULARY.values() for entry in words]
