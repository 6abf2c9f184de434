#!/usr/bin/env python3
"""
Generate and verify pronunciation files for every vocabulary word using gTTS.

Usage:
    python generate_audio.py                 # Render missing files
    python generate_audio.py --day Day1      # Render one day only
    python generate_audio.py --verify        # Check files exist and look valid
    python generate_audio.py --verify --strict
"""
import argparse
import os
import sys
from typing import Dict, List, Sequence
from app.config import settings
from app.data.vocabulary import WordEntry, all_words, get_words
from app.services.speech import audio_path, render_pronunciation

# Minimum expected file size in bytes (suspiciously small if below this)
MIN_FILE_SIZE_BYTES = 1000  # 1KB


def generate_audio_files(words: Sequence[WordEntry], audio_dir: str) -> List[str]:
    """Render every word that has no file yet. Returns the words that failed."""
    failed = []
    for entry in words:
        print(f"Generating audio for {entry.word}...")
        if render_pronunciation(entry.word, audio_dir, lang=settings.TTS_LANG, slow=settings.TTS_SLOW):
            print(f"  ✓ {entry.slug}.mp3")
        else:
            print(f"  ✗ Error generating {entry.slug}.mp3")
            failed.append(entry.word)

    print(f"\n✓ Processed {len(words)} words in {audio_dir}")
    return failed


def verify_audio_files(words: Sequence[WordEntry], audio_dir: str) -> Dict[str, List[str]]:
    """
    Check that each word has a plausible pronunciation file.

    Args:
        words: Words to check
        audio_dir: Directory holding the mp3 files

    Returns:
        Dictionary with "valid", "missing" and "small" lists of words
    """
    report = {"valid": [], "missing": [], "small": []}

    for entry in words:
        file_path = audio_path(audio_dir, entry.word)
        if not os.path.exists(file_path):
            report["missing"].append(entry.word)
        elif os.path.getsize(file_path) < MIN_FILE_SIZE_BYTES:
            report["small"].append(entry.word)
        else:
            report["valid"].append(entry.word)

    return report


def print_report(report: Dict[str, List[str]], total: int, strict: bool = False) -> bool:
    """Print a verification summary and return whether it passes."""
    print("-" * 50)
    print("Summary:")
    print(f"  Valid files:   {len(report['valid'])}/{total}")
    print(f"  Missing files: {len(report['missing'])}")
    print(f"  Small files:   {len(report['small'])}")

    if report["missing"]:
        print(f"\nMissing files: {', '.join(report['missing'])}")
    if report["small"]:
        print(f"\nSmall files (may need regeneration): {', '.join(report['small'])}")

    has_errors = bool(report["missing"])
    has_warnings = bool(report["small"])

    if has_errors or (strict and has_warnings):
        print("\nResult: FAIL" + (" (strict mode)" if strict and not has_errors else ""))
        return False
    print("\nResult: PASS" + (" with warnings" if has_warnings else ""))
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Generate or verify vocabulary pronunciation files")
    parser.add_argument("--day", help="Only process this day (e.g. Day1)")
    parser.add_argument("--audio-dir", default=settings.AUDIO_DIR, help="Output directory")
    parser.add_argument("--verify", action="store_true", help="Verify instead of generating")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="With --verify, treat warnings as errors"
    )
    args = parser.parse_args()

    words = get_words(args.day) if args.day else all_words()

    if args.verify:
        print(f"Verifying audio files in: {args.audio_dir}")
        success = print_report(verify_audio_files(words, args.audio_dir), len(words), args.strict)
    else:
        success = not generate_audio_files(words, args.audio_dir)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
