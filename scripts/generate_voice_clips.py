#!/usr/bin/env python3
"""
Generate pre-recorded voice clips for Theo Letters

Uses Piper TTS to speak every digit and letter in every supported language
and saves them as WAV files. These are played at runtime instead of
generating speech on the fly, so a tap is heard right away.

Clips land in packs/core-sounds/content/voice/<locale>/<char>.wav
"""

import argparse
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
sys.path.insert(0, str(PROJECT_ROOT))

from theo_letters.constants import CLIP_CHARACTERS, VOICE_CLIPS_DIR, VOICE_MODELS
from theo_letters.tts import (
    clip_filename, find_voice_model, get_voice_search_paths, synthesize_to_wav,
)


def clips_to_generate(language_code: str, force: bool = False) -> list[tuple[str, Path]]:
    """(text, output path) for every clip of a locale that is missing, or all with force."""
    voice_dir = VOICE_CLIPS_DIR / language_code
    result = []
    for char in CLIP_CHARACTERS[language_code]:
        output_path = voice_dir / clip_filename(char)
        if force or not output_path.exists():
            result.append((char, output_path))
    return result


def generate_language(language_code: str, force: bool = False) -> int:
    """Generate clips for one locale. Returns the process exit code."""
    to_generate = clips_to_generate(language_code, force)
    if not to_generate:
        print(f"[{language_code}] All voice clips already exist. Use --force to regenerate.")
        return 0

    model_path = find_voice_model(language_code)
    if model_path is None:
        print(f"ERROR: Piper voice model {VOICE_MODELS[language_code]} not found.")
        print("Searched in:")
        for path in get_voice_search_paths():
            print(f"  {path / f'{VOICE_MODELS[language_code]}.onnx'}")
        print()
        print("Please install the voice model first.")
        return 1

    try:
        from piper import PiperVoice
    except ImportError:
        print("ERROR: piper-tts not installed.")
        print("Install with: pip install piper-tts")
        return 1

    print(f"[{language_code}] Using voice model: {model_path}")
    voice = PiperVoice.load(str(model_path))

    (VOICE_CLIPS_DIR / language_code).mkdir(parents=True, exist_ok=True)
    print(f"[{language_code}] Generating {len(to_generate)} voice clips...")
    for text, output_path in to_generate:
        if synthesize_to_wav(voice, text, output_path):
            print(f"  Created {output_path.name}")
        else:
            print(f"  FAILED: {output_path.name}")
    print()
    return 0


def main():
    """Generate all voice clips."""
    parser = argparse.ArgumentParser(description="Generate pre-recorded digit and letter clips")
    parser.add_argument("--force", "-f", action="store_true",
                        help="Regenerate all clips even if they exist")
    parser.add_argument("--language", "-l", choices=sorted(VOICE_MODELS),
                        help="Only generate clips for this locale")
    args = parser.parse_args()

    languages = [args.language] if args.language else list(VOICE_MODELS)
    status = 0
    for language_code in languages:
        status = max(status, generate_language(language_code, args.force))

    if status == 0:
        print(f"Done! Voice clips saved to {VOICE_CLIPS_DIR}")
    return status


if __name__ == "__main__":
    exit(main())
