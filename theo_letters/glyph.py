"""
Theo Letters: Input-to-Utterance State Machine

Pure logic, no I/O. Every UI event becomes an explicit call on
GlyphController, which updates its state and returns the effects the UI
layer should perform:

  Render         redraw the big glyph (animated when new text arrives)
  Focus          move input focus to the digit or letter surface
  Speak          one utterance for the speech service
  ScheduleFocus  arm the one-shot delayed focus after the view appears

Usage:
    controller = GlyphController()
    controller.on_text_changed("7")
    # [Render(glyph='7', animate=True), Speak(text='7', language_code='en-GB')]
    controller.on_language_changed(Language.GERMAN)
    # [Speak(text='7', language_code='de-DE')]
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .constants import FOCUS_DELAY, LOCALE_ENGLISH, LOCALE_GERMAN

logger = logging.getLogger(__name__)


# =============================================================================
# Modes, Languages, Focus
# =============================================================================

class Mode(Enum):
    """Which input surface is active"""
    DIGITS = "digits"
    LETTERS = "letters"


class Language(Enum):
    """Spoken language, valued by its locale code"""
    ENGLISH = LOCALE_ENGLISH
    GERMAN = LOCALE_GERMAN

    @property
    def code(self) -> str:
        return self.value

    @classmethod
    def from_code(cls, code: str) -> "Language":
        """Look up a language by locale code. Raises ValueError if unknown."""
        for language in cls:
            if language.code == code:
                return language
        raise ValueError(f"Unsupported language code: {code!r}")


class FocusField(Enum):
    """The two invisible text-entry surfaces"""
    DIGITS = "digits"
    LETTERS = "letters"


FOCUS_FOR_MODE = {
    Mode.DIGITS: FocusField.DIGITS,
    Mode.LETTERS: FocusField.LETTERS,
}


def glyph_for(buffer: str) -> str:
    """The glyph for an input buffer: its last character in uppercase, or ''."""
    if not buffer:
        return ""
    return buffer[-1].upper()


# =============================================================================
# Effects
# =============================================================================

@dataclass(frozen=True)
class Render:
    """Redraw the glyph label"""
    glyph: str
    animate: bool = False


@dataclass(frozen=True)
class Focus:
    """Focus one of the input surfaces"""
    field: FocusField


@dataclass(frozen=True)
class Speak:
    """
    One utterance.

    Attributes:
        text: Lowercased text to speak
        language_code: Locale code, e.g. "en-GB"
    """
    text: str
    language_code: str


class DelayedFocus:
    """
    Handle for the one-shot focus scheduled when the view appears.

    The handle carries no target. The controller decides which surface to
    focus when the handle fires, so a mode change during the delay is honored.
    A cancelled handle never fires, and a handle fires at most once.
    """

    def __init__(self, delay: float = FOCUS_DELAY):
        self.delay = delay
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> bool:
        """Mark the handle as fired. Returns False if it was not pending."""
        if not self.pending:
            return False
        self.fired = True
        return True

    def __repr__(self) -> str:
        status = "cancelled" if self.cancelled else "fired" if self.fired else "pending"
        return f"DelayedFocus({self.delay}s {status})"


@dataclass(frozen=True)
class ScheduleFocus:
    """Arm a timer that calls GlyphController.on_focus_timer(handle) after handle.delay"""
    handle: DelayedFocus


Effect = Union[Render, Focus, Speak, ScheduleFocus]


# =============================================================================
# Controller
# =============================================================================

@dataclass(frozen=True)
class GlyphState:
    """Snapshot of the controller state"""
    mode: Mode
    language: Language
    buffer: str
    glyph: str
    focus: Optional[FocusField]


class GlyphController:
    """
    Owns mode, language, input buffer and focus, and derives the glyph.

    States are NoGlyph and HasGlyph(char):
    - Text changes move between them and speak whenever the new glyph is
      non-empty, even if it equals the previous one.
    - Language changes keep the glyph and speak it again if there is one.
    - Mode changes and appearing only route focus.
    """

    def __init__(
        self,
        mode: Mode = Mode.DIGITS,
        language: Language = Language.ENGLISH,
        focus_delay: float = FOCUS_DELAY,
    ):
        self._mode = mode
        self._language = language
        self._buffer = ""
        self._focus: Optional[FocusField] = None
        self._pending_focus: Optional[DelayedFocus] = None
        self.focus_delay = focus_delay

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def language(self) -> Language:
        return self._language

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def glyph(self) -> str:
        # Always derived from the buffer, never stored
        return glyph_for(self._buffer)

    @property
    def focus(self) -> Optional[FocusField]:
        return self._focus

    @property
    def state(self) -> GlyphState:
        return GlyphState(
            mode=self._mode,
            language=self._language,
            buffer=self._buffer,
            glyph=self.glyph,
            focus=self._focus,
        )

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    def on_appear(self) -> list[Effect]:
        """View appeared: schedule focus for after the layout settles."""
        if self._pending_focus is not None:
            self._pending_focus.cancel()
        handle = DelayedFocus(self.focus_delay)
        self._pending_focus = handle
        return [ScheduleFocus(handle)]

    def on_focus_timer(self, handle: Optional[DelayedFocus] = None) -> list[Effect]:
        """
        The delayed focus fired.

        Focuses the surface for the mode current at this moment. Returns no
        effects if the handle was cancelled (teardown, or a newer appear).
        """
        if handle is None:
            handle = self._pending_focus
        if handle is None or not handle.fire():
            return []
        if handle is self._pending_focus:
            self._pending_focus = None
        return [self._focus_on(FOCUS_FOR_MODE[self._mode])]

    def on_mode_changed(self, new_mode: Mode) -> list[Effect]:
        self._mode = new_mode
        return [self._focus_on(FOCUS_FOR_MODE[new_mode])]

    def on_text_changed(self, new_buffer: str) -> list[Effect]:
        self._buffer = new_buffer
        glyph = self.glyph
        effects: list[Effect] = [Render(glyph, animate=True)]
        if glyph:
            effects.append(self._speak(glyph))
        return effects

    def on_language_changed(self, new_language: Language) -> list[Effect]:
        self._language = new_language
        glyph = self.glyph
        if not glyph:
            return []
        return [self._speak(glyph)]

    def on_teardown(self) -> None:
        """View is going away. A pending delayed focus becomes a no-op."""
        if self._pending_focus is not None:
            self._pending_focus.cancel()
            self._pending_focus = None

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _focus_on(self, field: FocusField) -> Focus:
        self._focus = field
        return Focus(field)

    def _speak(self, glyph: str) -> Speak:
        logger.debug(f"Speak {glyph!r} in {self._language.code}")
        return Speak(glyph.lower(), self._language.code)
