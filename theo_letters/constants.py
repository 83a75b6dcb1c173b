"""
Theo Letters - Shared Constants

Central location for constants used across the app.
"""

import os
from pathlib import Path

# =============================================================================
# TIMING
# =============================================================================

# Focus requests right after the first layout don't stick. Anything over 0.5
# seconds works, so wait a full second before focusing the input surface.
FOCUS_DELAY = 1.0

# Glyph fade-in when a new character arrives
GLYPH_FADE_DURATION = 0.3

# =============================================================================
# LANGUAGES AND VOICES
# =============================================================================

# Locale codes understood by the speech service
LOCALE_ENGLISH = "en-GB"
LOCALE_GERMAN = "de-DE"

# Piper voice model per locale (https://github.com/rhasspy/piper)
VOICE_MODELS = {
    LOCALE_ENGLISH: "en_GB-alan-medium",
    LOCALE_GERMAN: "de_DE-thorsten-medium",
}

# Characters each locale has pre-generated clips for
DIGITS = "0123456789"
LETTERS = "abcdefghijklmnopqrstuvwxyz"
CLIP_CHARACTERS = {
    LOCALE_ENGLISH: DIGITS + LETTERS,
    LOCALE_GERMAN: DIGITS + LETTERS + "äöü",
}

# Pre-generated voice clips, one subdirectory per locale
VOICE_CLIPS_DIR = Path(__file__).parent.parent / "packs" / "core-sounds" / "content" / "voice"

# =============================================================================
# ENVIRONMENT TOGGLES
# =============================================================================

DEBUG = bool(os.environ.get("THEO_DEBUG"))
SPEECH_DISABLED = bool(os.environ.get("THEO_NO_SPEECH"))

# =============================================================================
# LOOK
# =============================================================================

GLYPH_COLOR = "#1f5fff"         # blue glyph
GLYPH_PANEL_COLOR = "#ffb366"   # orange at half strength over white
SELECTOR_COLOR = "#33cc00"      # green selectors

# Selector labels
MODE_LABELS = {
    "digits": "123",
    "letters": "ABC",
}
LANGUAGE_LABELS = {
    LOCALE_ENGLISH: "🇬🇧",
    LOCALE_GERMAN: "🇩🇪",
}
