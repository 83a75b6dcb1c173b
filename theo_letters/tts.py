"""
Text-to-Speech module using Piper TTS

Piper is a fast, local, neural TTS system.
https://github.com/rhasspy/piper

One voice per locale (see VOICE_MODELS). Every call is fire-and-forget:
failures are logged and never reach the caller.
"""

import logging
import os
import tempfile
import threading
import wave
from pathlib import Path

# Suppress pygame welcome message
os.environ['PYGAME_HIDE_SUPPORT_PROMPT'] = '1'
import pygame.mixer

from . import constants
from .constants import VOICE_MODELS, VOICE_CLIPS_DIR

logger = logging.getLogger(__name__)


def supported_languages() -> list[str]:
    """Locale codes that have a configured voice"""
    return list(VOICE_MODELS)


def clip_filename(text: str) -> str:
    """Convert spoken text to a clip filename (spaces to underscores)."""
    return text.strip().lower().replace(" ", "_") + ".wav"


def _get_voice_clip(text: str, language_code: str) -> Path | None:
    """Check if a pre-generated voice clip exists for this text and locale."""
    clip_path = VOICE_CLIPS_DIR / language_code / clip_filename(text)
    if clip_path.exists():
        return clip_path
    return None


def get_voice_search_paths() -> list[Path]:
    """Get list of paths to search for voice models."""
    paths = [
        Path.home() / ".local" / "share" / "piper-voices",
        Path.home() / ".cache" / "piper",
        Path("/opt/theo/piper-voices"),
        Path("/opt/piper"),
    ]
    # On macOS/Linux, also check the actual user home (in case HOME is overridden)
    try:
        import pwd
        real_home = Path(pwd.getpwuid(os.getuid()).pw_dir)
        paths.insert(0, real_home / ".local" / "share" / "piper-voices")
    except (ImportError, KeyError):
        pass
    return paths


def find_voice_model(language_code: str) -> Path | None:
    """Find the Piper model file for a locale, or None."""
    model_name = VOICE_MODELS.get(language_code)
    if model_name is None:
        return None
    for base_path in get_voice_search_paths():
        candidate = base_path / f"{model_name}.onnx"
        if candidate.exists():
            return candidate
    return None


# Loaded Piper voices per locale. None marks a locale whose voice failed to load.
_voices: dict = {}
_voices_lock = threading.Lock()


def _get_piper_voice(language_code: str):
    """Get or create the Piper voice for a locale"""
    with _voices_lock:
        if language_code in _voices:
            return _voices[language_code]

        voice = None
        try:
            from piper import PiperVoice

            model_path = find_voice_model(language_code)
            if model_path is None:
                logger.warning(f"No Piper voice model found for {language_code}")
            else:
                voice = PiperVoice.load(str(model_path))
                logger.info(f"Loaded Piper voice {model_path.name} for {language_code}")
        except ImportError:
            logger.warning("piper-tts is not installed, speech is unavailable")
        except Exception as e:
            logger.warning(f"Failed to load Piper voice for {language_code}: {e}")

        _voices[language_code] = voice
        return voice


_mixer_initialized = False


def _ensure_mixer() -> bool:
    """Initialize the pygame mixer once. Returns False if there is no audio device."""
    global _mixer_initialized
    if _mixer_initialized:
        return True
    if pygame.mixer.get_init():
        _mixer_initialized = True
        return True
    # Use larger buffer (1024) to prevent audio clipping at start
    try:
        pygame.mixer.init(frequency=44100, size=-16, channels=2, buffer=1024)
        _mixer_initialized = True
        return True
    except pygame.error as e:
        logger.warning(f"Audio mixer unavailable: {e}")
        return False


_init_done: set[str] = set()


def init(language_code: str | None = None) -> None:
    """Pre-load voice model(s) and mixer in the background."""
    codes = [language_code] if language_code else supported_languages()
    codes = [code for code in codes if code in VOICE_MODELS and code not in _init_done]
    if not codes or constants.SPEECH_DISABLED:
        return
    _init_done.update(codes)
    thread = threading.Thread(target=_init_sync, args=(codes,), daemon=True)
    thread.start()


def _init_sync(codes: list[str]) -> None:
    """Initialize in background thread"""
    _ensure_mixer()
    for code in codes:
        _get_piper_voice(code)


_current_channel = None
_speech_id = 0  # Incremented on each speak() call to cancel stale requests


def stop() -> None:
    """Stop any currently playing speech and cancel pending"""
    global _current_channel, _speech_id
    _speech_id += 1  # Invalidate any pending speech (atomic due to GIL)
    ch = _current_channel
    if ch:
        try:
            ch.stop()
        except pygame.error:
            pass
    _current_channel = None


def speak(text: str, language_code: str) -> bool:
    """
    Speak the given text in the given locale.
    Runs in a background thread to not block the UI.
    Cancels any currently playing or generating speech first.

    Args:
        text: The text to speak (callers pass it lowercased)
        language_code: Locale code, e.g. "en-GB" or "de-DE"

    Returns:
        True if speech was started, False otherwise
    """
    if not text or not text.strip():
        return False

    if language_code not in VOICE_MODELS:
        logger.debug(f"Ignoring speech in unsupported language {language_code!r}")
        return False

    if constants.SPEECH_DISABLED:
        logger.debug(f"Speech disabled, not uttering {text!r}")
        return False

    logger.info(f"Uttering {text!r} in {language_code}")

    # Stop any previous speech and get new ID
    stop()
    my_id = _speech_id

    thread = threading.Thread(
        target=_speak_sync, args=(text, language_code, my_id), daemon=True
    )
    thread.start()
    return True


def _speak_sync(text: str, language_code: str, speech_id: int) -> bool:
    """Synchronous speech - called from background thread"""
    if speech_id != _speech_id:
        return False

    if not _ensure_mixer():
        return False

    # Check for pre-generated voice clip first
    clip_path = _get_voice_clip(text, language_code)
    if clip_path:
        return _play_file(clip_path, speech_id)

    # Fall back to Piper TTS
    voice = _get_piper_voice(language_code)
    if voice is None:
        return False

    # Check again after potentially slow voice load
    if speech_id != _speech_id:
        return False

    with tempfile.NamedTemporaryFile(suffix='.wav', delete=False) as f:
        wav_path = Path(f.name)

    try:
        if not synthesize_to_wav(voice, text, wav_path):
            return False

        # Check if we've been cancelled after generating
        if speech_id != _speech_id:
            return False

        return _play_file(wav_path, speech_id)
    except Exception as e:
        logger.warning(f"Speech failed for {text!r} in {language_code}: {e}")
        return False
    finally:
        wav_path.unlink(missing_ok=True)


def synthesize_to_wav(voice, text: str, wav_path: Path) -> bool:
    """
    Synthesize text into a WAV file with a loaded Piper voice.

    Pads with pauses before and after to prevent clipping on short words,
    which single letters always are.
    """
    audio_chunks = list(voice.synthesize(f"... {text} ..."))
    if not audio_chunks:
        return False

    first_chunk = audio_chunks[0]
    with wave.open(str(wav_path), 'wb') as wav_file:
        wav_file.setnchannels(first_chunk.sample_channels)
        wav_file.setsampwidth(first_chunk.sample_width)
        wav_file.setframerate(first_chunk.sample_rate)
        for chunk in audio_chunks:
            wav_file.writeframes(chunk.audio_int16_bytes)
    return True


def _play_file(path: Path, speech_id: int) -> bool:
    """Play a WAV file, stopping early if a newer request arrives."""
    global _current_channel

    try:
        if speech_id != _speech_id:
            return False

        sound = pygame.mixer.Sound(str(path))
        channel = sound.play()
        _current_channel = channel

        if channel:
            while channel.get_busy():
                if speech_id != _speech_id:
                    channel.stop()
                    break
                pygame.time.wait(50)

        _current_channel = None
        return True

    except Exception as e:
        logger.warning(f"Could not play {path.name}: {e}")
        return False


def is_available(language_code: str) -> bool:
    """Check if TTS is available for a locale"""
    if language_code not in VOICE_MODELS:
        return False
    return _get_piper_voice(language_code) is not None
