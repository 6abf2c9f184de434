"""Text-to-speech collaborators for word pronunciation.

Speech is fire-and-forget: callers never wait on it and failures are logged,
never propagated. ``GTTSSpeaker`` renders each word to an mp3 under the audio
directory (served at ``/static/audio``) so the browser can play it.
"""
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Protocol
from gtts import gTTS
from app.data.vocabulary import slugify
from app.logging_config import get_logger

logger = get_logger(__name__)


class Speaker(Protocol):
    def speak(self, text: str) -> None:
        ...


class NullSpeaker:
    """Speaker used when TTS is disabled."""

    def speak(self, text: str) -> None:
        logger.debug(f"TTS disabled, not pronouncing '{text}'")


def audio_path(audio_dir: str, text: str) -> str:
    """Filesystem path of the rendered pronunciation for ``text``."""
    return os.path.join(audio_dir, f"{slugify(text)}.mp3")


def render_pronunciation(text: str, audio_dir: str, lang: str = "en", slow: bool = True) -> Optional[str]:
    """
    Render ``text`` to an mp3 with gTTS, skipping files that already exist.

    Args:
        text: Word to pronounce
        audio_dir: Output directory
        lang: gTTS language code
        slow: Slower speech for clarity

    Returns:
        Path of the mp3 file, or None if rendering failed
    """
    filepath = audio_path(audio_dir, text)
    if os.path.exists(filepath):
        return filepath

    # Only a completely saved file is moved to the served path
    partial = filepath + ".part"
    try:
        os.makedirs(audio_dir, exist_ok=True)
        tts = gTTS(text=text, lang=lang, slow=slow)
        tts.save(partial)
        os.replace(partial, filepath)
    except Exception as e:
        logger.warning(f"Could not render pronunciation for '{text}': {e}")
        if os.path.exists(partial):
            os.remove(partial)
        return None

    logger.debug(f"Rendered pronunciation for '{text}' to {filepath}")
    return filepath


class GTTSSpeaker:
    """Renders pronunciations on one background worker.

    Only one request is pending at a time: a new ``speak`` cancels the previous
    request if it has not started yet.
    """

    def __init__(self, audio_dir: str, lang: str = "en", slow: bool = True):
        self.audio_dir = audio_dir
        self.lang = lang
        self.slow = slow
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="tts")
        self._pending: Optional[Future] = None

    def speak(self, text: str) -> None:
        if self._pending is not None and self._pending.cancel():
            logger.debug("Cancelled pending pronunciation")

        try:
            self._pending = self._executor.submit(
                render_pronunciation, text, self.audio_dir, self.lang, self.slow
            )
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Speech unavailable, skipping '{text}': {e}")
            self._pending = None

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
