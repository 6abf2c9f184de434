"""Application-wide constants and configuration values.

This module centralizes all magic numbers and hardcoded values used throughout
the application, making them easier to maintain and adjust.
"""

# Question Configuration
DISTRACTOR_COUNT = 3
"""Number of incorrect answer options to show with each question."""

# Dwell Intervals (seconds)
CORRECT_DWELL_SECONDS = 1.5
"""How long the correct-answer feedback stays visible before advancing."""

RETRY_DWELL_SECONDS = 1.0
"""How long wrong-answer feedback stays visible before the learner retries."""

QUIZ_WRONG_DWELL_SECONDS = 1.5
"""How long wrong-answer feedback stays visible in quiz mode before advancing."""

# Result Screen
THREE_STAR_PERCENTAGE = 100.0
"""Score percentage required for three stars."""

TWO_STAR_PERCENTAGE = 60.0
"""Score percentage required for two stars (and the celebration)."""

RESULT_MESSAGES = {
    3: "Perfect! You're a Genius! 🏆",
    2: "Great Job! Keep it up! 👍",
    1: "Good try! Practice more! 💪",
}
"""Encouragement shown on the result screen, keyed by star count."""

# Cookie Configuration
COOKIE_NAME = "voca_uid"
"""Name of the cookie used to store the anonymous learner id."""

# Learner Registry
MAX_LEARNERS = 1000
"""Learners kept in memory; the least recently active one is dropped beyond this."""

# Rate Limiting
DEFAULT_RATE_LIMIT = "100/minute"
"""Default request limit per client address."""

SESSION_START_RATE_LIMIT = "10/minute"
"""Maximum number of session starts allowed per minute per client."""

ANSWER_SUBMISSION_RATE_LIMIT = "60/minute"
"""Maximum number of answer submissions allowed per minute per client."""

# Audio Configuration
AUDIO_PATH_TEMPLATE = "/static/audio/{slug}.mp3"
"""Template for pronunciation file URLs. {slug} is the word's file-safe name."""
