#!/usr/bin/env python3
"""
Theo Letters - Main Textual TUI Application

Type a digit or a letter and see it big, and hear it spoken.

Keyboard controls:
- F1 / F2: Digits (123) or letters (ABC)
- Tab: Switch between digits and letters
- F3 / F4: English or German voice
- F12: Switch language
"""

import logging
from functools import partial

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.theme import Theme
from textual.timer import Timer
from textual.widgets import Input, Static
from rich.text import Text

from . import big_glyph, constants, tts
from .constants import (
    DIGITS, GLYPH_COLOR, GLYPH_FADE_DURATION, GLYPH_PANEL_COLOR,
    LANGUAGE_LABELS, LETTERS, MODE_LABELS, SELECTOR_COLOR,
)
from .glyph import (
    Effect, Focus, FocusField, GlyphController, Language, Mode, Render,
    ScheduleFocus, Speak, DelayedFocus,
)

logger = logging.getLogger(__name__)


# Input surface per focus field, and what each one accepts
INPUT_IDS = {
    FocusField.DIGITS: "digits-input",
    FocusField.LETTERS: "letters-input",
}
DIGIT_KEYS = set(DIGITS)
LETTER_KEYS = set(LETTERS + LETTERS.upper() + "äöüÄÖÜ")


class SelectorOption(Static):
    """One choice in a Selector. Styled by the Selector it sits in."""

    def __init__(self, caption: str, **kwargs):
        super().__init__(**kwargs)
        self.caption = caption

    def render(self) -> str:
        return self.caption


class Selector(Horizontal):
    """A segmented control: one option per choice, the active one highlighted"""

    DEFAULT_CSS = """
    Selector {
        width: auto;
        height: 3;
    }

    Selector > SelectorOption {
        width: auto;
        min-width: 7;
        height: 3;
        padding: 0 2;
        border: tall $panel;
        background: $panel;
        content-align: center middle;
    }

    Selector > SelectorOption.active {
        border: tall $accent;
        background: $primary;
        color: $background;
        text-style: bold;
    }

    Selector > SelectorOption.dim {
        color: $text-muted;
    }
    """

    def __init__(self, options: dict[str, str], active: str, **kwargs):
        super().__init__(**kwargs)
        self.options = options
        self.active = active

    def compose(self) -> ComposeResult:
        for key, label in self.options.items():
            option = SelectorOption(label, id=f"option-{key}")
            option.add_class("active" if key == self.active else "dim")
            yield option

    def set_active(self, active: str) -> None:
        self.active = active
        for key in self.options:
            try:
                option = self.query_one(f"#option-{key}", SelectorOption)
            except NoMatches:
                continue
            option.remove_class("active", "dim")
            option.add_class("active" if key == active else "dim")


class HiddenInput(Input, inherit_bindings=False):
    """
    Invisible text field that collects typed characters.

    Only one is focused at a time. Both share the same buffer, so the value
    can hold characters this field would not accept itself. Only the keys
    in `allowed` and backspace get through, and pasted text is filtered the
    same way. The cursor stays at the end.
    """

    BINDINGS = [
        Binding("backspace", "delete_left", "Delete", show=False),
    ]

    DEFAULT_CSS = """
    HiddenInput {
        width: 1;
        height: 1;
        border: none;
        padding: 0;
        opacity: 0;
    }

    HiddenInput:focus {
        border: none;
    }
    """

    def __init__(self, allowed: set[str], **kwargs):
        super().__init__(select_on_focus=False, **kwargs)
        self.allowed = allowed

    def on_key(self, event: events.Key) -> None:
        """Filter keys before Input inserts them"""
        if event.key == "backspace":
            return  # Let the binding handle it
        if event.character and event.character in self.allowed:
            return  # Let default insertion work
        event.stop()
        event.prevent_default()

    def on_paste(self, event: events.Paste) -> None:
        """Keep only the characters this field accepts from pasted text"""
        event.stop()
        event.prevent_default()
        text = "".join(char for char in event.text if char in self.allowed)
        if text:
            self.insert_text_at_cursor(text)


class GlyphLabel(Static):
    """The big glyph on an orange panel"""

    DEFAULT_CSS = f"""
    GlyphLabel {{
        width: auto;
        height: auto;
        min-width: {big_glyph.GLYPH_WIDTH + 4};
        min-height: {big_glyph.GLYPH_HEIGHT + 2};
        padding: 1 2;
        background: {GLYPH_PANEL_COLOR};
        content-align: center middle;
    }}
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.glyph = ""

    def show(self, glyph: str, animate: bool = False) -> None:
        self.glyph = glyph
        self.refresh(layout=True)
        if animate and glyph:
            self.styles.opacity = 0.0
            self.styles.animate("opacity", value=1.0, duration=GLYPH_FADE_DURATION)

    def render(self) -> Text:
        rows = big_glyph.render(self.glyph)
        return Text("\n".join(rows), style=f"bold {GLYPH_COLOR}")


class TheoApp(App):
    """
    Theo Letters - a digit and letter picker for small children.

    Every UI event goes through GlyphController; the effects it returns are
    carried out here.
    """

    CSS = """
    Screen {
        background: $background;
    }

    #selectors {
        width: 100%;
        height: 3;
        padding: 0 2;
    }

    #selector-spacer {
        width: 1fr;
        height: 3;
    }

    #inputs {
        width: 1;
        height: 2;
    }

    #glyph-area {
        width: 100%;
        height: 1fr;
        align: center middle;
    }
    """

    # Nothing is focused until the delayed focus fires
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("f1", "set_mode('digits')", "123", show=False, priority=True),
        Binding("f2", "set_mode('letters')", "ABC", show=False, priority=True),
        Binding("tab", "cycle_mode", "Mode", show=False, priority=True),
        Binding("f3", "set_language('en-GB')", "English", show=False, priority=True),
        Binding("f4", "set_language('de-DE')", "German", show=False, priority=True),
        Binding("f12", "toggle_language", "Language", show=False, priority=True),
    ]

    def __init__(self, focus_delay: float = constants.FOCUS_DELAY):
        super().__init__()
        self.controller = GlyphController(focus_delay=focus_delay)
        self._focus_timer: Timer | None = None

        self.register_theme(
            Theme(
                name="theo-light",
                primary=SELECTOR_COLOR,
                secondary="#2a9d00",
                warning="#e0a030",
                error="#d04040",
                success=SELECTOR_COLOR,
                accent=GLYPH_COLOR,
                background="#fdf8f0",
                surface="#ffffff",
                panel="#fff1e0",
                dark=False,
            )
        )
        self.theme = "theo-light"

    def compose(self) -> ComposeResult:
        """Create the UI layout"""
        with Vertical(id="main"):
            with Horizontal(id="selectors"):
                yield Selector(
                    MODE_LABELS, self.controller.mode.value, id="mode-selector"
                )
                yield Static("", id="selector-spacer")
                yield Selector(
                    LANGUAGE_LABELS, self.controller.language.code, id="language-selector"
                )
            with Container(id="inputs"):
                yield HiddenInput(LETTER_KEYS, id=INPUT_IDS[FocusField.LETTERS])
                yield HiddenInput(DIGIT_KEYS, id=INPUT_IDS[FocusField.DIGITS])
            with Container(id="glyph-area"):
                yield GlyphLabel(id="glyph")

    def on_mount(self) -> None:
        """Called when app starts"""
        tts.init(self.controller.language.code)
        self._apply(self.controller.on_appear())

    def on_unmount(self) -> None:
        """Called when app is shutting down"""
        self.controller.on_teardown()
        if self._focus_timer is not None:
            self._focus_timer.stop()
            self._focus_timer = None
        tts.stop()

    # -------------------------------------------------------------------------
    # Events into the controller
    # -------------------------------------------------------------------------

    def on_input_changed(self, event: Input.Changed) -> None:
        """Either hidden input changed: keep both in sync and update the glyph"""
        event.stop()
        value = event.value
        if value == self.controller.buffer:
            return

        for input_id in INPUT_IDS.values():
            if event.input.id == input_id:
                continue
            try:
                other = self.query_one(f"#{input_id}", HiddenInput)
            except NoMatches:
                continue
            with other.prevent(Input.Changed):
                other.value = value
                other.cursor_position = len(value)

        self._apply(self.controller.on_text_changed(value))

    def action_set_mode(self, mode_name: str) -> None:
        """Switch between digits and letters (F1/F2)"""
        new_mode = Mode(mode_name)
        if new_mode == self.controller.mode:
            return
        self._apply(self.controller.on_mode_changed(new_mode))
        self._update_selector("#mode-selector", new_mode.value)

    def action_cycle_mode(self) -> None:
        """Tab flips the mode"""
        if self.controller.mode == Mode.DIGITS:
            self.action_set_mode(Mode.LETTERS.value)
        else:
            self.action_set_mode(Mode.DIGITS.value)

    def action_set_language(self, code: str) -> None:
        """Switch the spoken language (F3/F4)"""
        new_language = Language.from_code(code)
        if new_language == self.controller.language:
            return
        tts.init(code)
        self._apply(self.controller.on_language_changed(new_language))
        self._update_selector("#language-selector", code)

    def action_toggle_language(self) -> None:
        """F12 flips the language"""
        if self.controller.language == Language.ENGLISH:
            self.action_set_language(Language.GERMAN.code)
        else:
            self.action_set_language(Language.ENGLISH.code)

    def _on_focus_timer(self, handle: DelayedFocus) -> None:
        self._focus_timer = None
        self._apply(self.controller.on_focus_timer(handle))

    # -------------------------------------------------------------------------
    # Effects out of the controller
    # -------------------------------------------------------------------------

    def _apply(self, effects: list[Effect]) -> None:
        for effect in effects:
            if isinstance(effect, Render):
                self._render_glyph(effect)
            elif isinstance(effect, Focus):
                self._focus_field(effect.field)
            elif isinstance(effect, Speak):
                tts.speak(effect.text, effect.language_code)
            elif isinstance(effect, ScheduleFocus):
                if self._focus_timer is not None:
                    self._focus_timer.stop()
                self._focus_timer = self.set_timer(
                    effect.handle.delay, partial(self._on_focus_timer, effect.handle)
                )

    def _render_glyph(self, effect: Render) -> None:
        try:
            label = self.query_one("#glyph", GlyphLabel)
        except NoMatches:
            return
        label.show(effect.glyph, animate=effect.animate)

    def _focus_field(self, field: FocusField) -> None:
        try:
            self.query_one(f"#{INPUT_IDS[field]}", HiddenInput).focus()
        except NoMatches:
            logger.debug(f"Input surface {field.value} is not mounted")

    def _update_selector(self, selector_id: str, active: str) -> None:
        try:
            self.query_one(selector_id, Selector).set_active(active)
        except NoMatches:
            pass


def main():
    """Entry point for Theo Letters"""
    if constants.DEBUG:
        from textual.logging import TextualHandler
        logging.basicConfig(level=logging.DEBUG, handlers=[TextualHandler()])

    app = TheoApp()
    app.run(mouse=False)  # Keyboard only


if __name__ == "__main__":
    main()
