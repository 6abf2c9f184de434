"""Pytest fixtures for testing."""
import os
import random
import tempfile

# Settings are read at import time, so configure them before importing the app
os.environ.setdefault("TTS_ENABLED", "false")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("AUDIO_DIR", os.path.join(tempfile.gettempdir(), "voca_test_audio"))

import pytest
from fastapi.testclient import TestClient
from app.data.vocabulary import WordEntry, get_words
from app.dependencies import get_registry
from app.main import app
from app.services.learners import LearnerRegistry
from app.services.question_builder import Question


class ManualHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose timers only fire when the test says so."""

    def __init__(self):
        self.handles = []

    def call_later(self, delay, callback):
        handle = ManualHandle(delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled]

    def run_pending(self):
        """Fire every timer scheduled so far (not ones scheduled while firing)."""
        due, self.handles = self.pending, []
        for handle in due:
            handle.callback()
        return len(due)


class RecordingSpeaker:
    def __init__(self):
        self.spoken = []

    def speak(self, text):
        self.spoken.append(text)


class BrokenSpeaker:
    def __init__(self):
        self.calls = 0

    def speak(self, text):
        self.calls += 1
        raise RuntimeError("speech engine unavailable")


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def speaker():
    return RecordingSpeaker()


@pytest.fixture
def broken_speaker():
    return BrokenSpeaker()


@pytest.fixture
def rng():
    return random.Random(20261019)


@pytest.fixture
def five_words():
    """The Day1 scenario: five words with ids 1-5."""
    return [
        WordEntry(id=1, word="cat", meaning="고양이"),
        WordEntry(id=2, word="dog", meaning="개"),
        WordEntry(id=3, word="bird", meaning="새"),
        WordEntry(id=4, word="fish", meaning="물고기"),
        WordEntry(id=5, word="rabbit", meaning="토끼"),
    ]


@pytest.fixture
def day1_words():
    return get_words("Day1")


def make_questions(words):
    """Deterministic questions: target first, then the next three words cyclically."""
    questions = []
    for i, target in enumerate(words):
        others = [words[(i + k) % len(words)] for k in range(1, 4)]
        questions.append(Question(target=target, options=tuple([target] + others)))
    return questions


@pytest.fixture
def questions(five_words):
    return make_questions(five_words)


@pytest.fixture
def registry(scheduler, speaker, rng):
    return LearnerRegistry(scheduler=scheduler, speaker=speaker, rng=rng)


@pytest.fixture
def client(registry):
    """Test client with a bootstrapped learner cookie and a manual scheduler."""
    app.dependency_overrides[get_registry] = lambda: registry
    test_client = TestClient(app)
    response = test_client.get("/api/bootstrap")
    assert response.status_code == 200

    yield test_client

    app.dependency_overrides.clear()
