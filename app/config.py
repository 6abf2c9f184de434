"""Application configuration settings.

This module provides centralized configuration management for the Vocabulary
Adventure application. All settings can be overridden via environment variables.

Environment Variables:
    ENVIRONMENT: Deployment environment name
        Default: development
        Options: development, staging, production
        Affects: logging format, cookie security defaults

    LOG_LEVEL: Logging verbosity level
        Default: INFO (production), DEBUG (development)
        Options: DEBUG, INFO, WARNING, ERROR, CRITICAL

    COOKIE_SECURE: Whether to require HTTPS for learner cookies
        Default: false
        Production: true

    COOKIE_MAX_AGE: Learner cookie duration in seconds
        Default: 31536000 (1 year)

    AUDIO_DIR: Directory where rendered pronunciation files are stored
        Default: app/static/audio

    TTS_ENABLED: Render pronunciations with gTTS when a word is presented
        Default: true

    TTS_LANG: Language code passed to gTTS
        Default: en

    TTS_SLOW: Use gTTS slow speech (easier for children)
        Default: true

    RATE_LIMIT_ENABLED: Enable slowapi request rate limiting
        Default: true

Usage:
    >>> from app.config import settings
    >>> print(settings.AUDIO_DIR)
    >>> if settings.is_production:
    ...     print("Running in production mode")
"""
import os


class Settings:
    """Application settings loaded from environment variables.

    Boolean values are case-insensitive ('true', 'True', 'TRUE' all work).
    """

    # Cookie security settings
    COOKIE_SECURE: bool = os.getenv("COOKIE_SECURE", "false").lower() == "true"
    """Require HTTPS for learner cookies. Must be True in production."""

    COOKIE_HTTPONLY: bool = True
    """Prevent JavaScript access to learner cookies."""

    COOKIE_SAMESITE: str = "lax"
    """Cookie SameSite policy. Options: strict, lax, none."""

    COOKIE_MAX_AGE: int = int(os.getenv("COOKIE_MAX_AGE", str(365 * 24 * 60 * 60)))
    """Learner cookie lifetime in seconds. Default: 1 year."""

    # Application settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    """Deployment environment: development, staging, or production."""

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "")
    """Logging level. Empty string means auto-detect based on ENVIRONMENT."""

    # Speech settings
    AUDIO_DIR: str = os.getenv("AUDIO_DIR", "app/static/audio")
    """Directory holding rendered word pronunciations (served under /static/audio)."""

    TTS_ENABLED: bool = os.getenv("TTS_ENABLED", "true").lower() == "true"
    """Render pronunciations with gTTS. Disable for offline runs and tests."""

    TTS_LANG: str = os.getenv("TTS_LANG", "en")
    """gTTS language code of the target-language words."""

    TTS_SLOW: bool = os.getenv("TTS_SLOW", "true").lower() == "true"
    """Slower speech for young learners."""

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    """Enable slowapi rate limiting on session endpoints."""

    @property
    def is_production(self) -> bool:
        """Check if running in production environment.

        Returns:
            True if ENVIRONMENT is 'production' (case-insensitive)
        """
        return self.ENVIRONMENT.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment.

        Returns:
            True if ENVIRONMENT is 'development' (case-insensitive)
        """
        return self.ENVIRONMENT.lower() == "development"


settings = Settings()
"""Global settings instance. Import and use throughout the application."""
