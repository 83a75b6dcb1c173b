#!/usr/bin/env python3
"""Tests for the Textual app - focus routing, typing, selectors.

Drives TheoApp headless through App.run_test(). Speech is patched out,
so each test can check exactly which utterances were requested.

Run with: pytest tests/test_app.py -v
"""

import asyncio
import sys
from pathlib import Path
from unittest.mock import call, patch

import pytest
from textual import events

sys.path.insert(0, str(Path(__file__).parent.parent))

from theo_letters import tts
from theo_letters.glyph import FocusField, Language, Mode
from theo_letters.theo_letters import (
    GlyphLabel, HiddenInput, INPUT_IDS, SelectorOption, TheoApp,
)

# Short enough to keep tests quick, long enough to see nothing focused before it
FOCUS_DELAY = 0.05


@pytest.fixture
def speak():
    with patch.object(tts, "speak") as speak_mock, patch.object(tts, "init"):
        yield speak_mock


def run_app(scenario, focus_delay: float = FOCUS_DELAY):
    """Run an async scenario(app, pilot) against a fresh headless app."""
    async def runner():
        app = TheoApp(focus_delay=focus_delay)
        async with app.run_test() as pilot:
            await scenario(app, pilot)
        return app
    return asyncio.run(runner())


async def wait_for_focus(pilot):
    await pilot.pause(FOCUS_DELAY * 4)


def focused_id(app):
    return app.focused.id if app.focused else None


class TestAppear:
    """Delayed focus after start."""

    def test_digits_focused_after_delay(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            assert focused_id(app) == INPUT_IDS[FocusField.DIGITS]

        run_app(scenario)

    def test_not_focused_before_delay(self, speak):
        async def scenario(app, pilot):
            await pilot.pause()
            assert focused_id(app) is None

        run_app(scenario, focus_delay=5.0)

    def test_mode_change_during_delay_is_honored(self, speak):
        async def scenario(app, pilot):
            await pilot.press("f2")
            await wait_for_focus(pilot)
            assert focused_id(app) == INPUT_IDS[FocusField.LETTERS]

        run_app(scenario)


class TestTyping:
    """Typed characters become the big glyph and are spoken."""

    def test_digit_is_shown_and_spoken(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("7")
            await pilot.pause()
            assert app.controller.glyph == "7"
            assert app.query_one("#glyph", GlyphLabel).glyph == "7"
            speak.assert_called_once_with("7", "en-GB")

        run_app(scenario)

    def test_letters_in_digit_mode_are_ignored(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("x")
            await pilot.pause()
            assert app.controller.glyph == ""
            speak.assert_not_called()

        run_app(scenario)

    def test_letter_mode(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("tab", "b")
            await pilot.pause()
            assert app.controller.mode == Mode.LETTERS
            assert app.controller.glyph == "B"
            speak.assert_called_once_with("b", "en-GB")

        run_app(scenario)

    def test_buffer_is_shared_between_inputs(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("3", "f2", "c")
            await pilot.pause()
            assert app.controller.buffer == "3c"
            for input_id in INPUT_IDS.values():
                assert app.query_one(f"#{input_id}", HiddenInput).value == "3c"
            assert speak.call_args_list == [call("3", "en-GB"), call("c", "en-GB")]

        run_app(scenario)

    def test_same_key_twice_speaks_twice(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("5", "5")
            await pilot.pause()
            assert speak.call_args_list == [call("5", "en-GB"), call("5", "en-GB")]

        run_app(scenario)

    def test_pasted_letters_do_not_reach_digit_input(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            app.focused.post_message(events.Paste("hello?"))
            await pilot.pause()
            assert app.controller.buffer == ""
            assert app.controller.glyph == ""
            speak.assert_not_called()

        run_app(scenario)

    def test_paste_keeps_only_allowed_characters(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            app.focused.post_message(events.Paste("a1-b2"))
            await pilot.pause()
            assert app.controller.buffer == "12"
            assert app.controller.glyph == "2"
            speak.assert_called_once_with("2", "en-GB")

        run_app(scenario)

    def test_paste_into_letter_input(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("f2")
            app.focused.post_message(events.Paste("9 ü!"))
            await pilot.pause()
            assert app.controller.buffer == "ü"
            assert app.controller.glyph == "Ü"

        run_app(scenario)

    def test_backspace_to_empty_is_silent(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("1", "backspace")
            await pilot.pause()
            assert app.controller.glyph == ""
            assert app.query_one("#glyph", GlyphLabel).glyph == ""
            speak.assert_called_once_with("1", "en-GB")

        run_app(scenario)


class TestLanguage:
    """Switching the spoken language."""

    def test_switch_repeats_glyph_in_german(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("f2", "b")
            await pilot.pause()
            speak.reset_mock()
            await pilot.press("f4")
            await pilot.pause()
            assert app.controller.language == Language.GERMAN
            assert app.controller.glyph == "B"
            speak.assert_called_once_with("b", "de-DE")

        run_app(scenario)

    def test_switch_without_glyph_is_silent(self, speak):
        async def scenario(app, pilot):
            await pilot.press("f12")
            await pilot.pause()
            assert app.controller.language == Language.GERMAN
            speak.assert_not_called()

        run_app(scenario)

    def test_selecting_active_language_does_nothing(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("9")
            await pilot.pause()
            speak.reset_mock()
            await pilot.press("f3")
            await pilot.pause()
            speak.assert_not_called()

        run_app(scenario)

    def test_selector_highlights_active_language(self, speak):
        async def scenario(app, pilot):
            await pilot.press("f4")
            await pilot.pause()
            german = app.query_one("#option-de-DE", SelectorOption)
            english = app.query_one("#option-en-GB", SelectorOption)
            assert german.has_class("active")
            assert english.has_class("dim")

        run_app(scenario)


class TestModeSelector:
    """Switching between digits and letters."""

    def test_letters_focuses_letter_input(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("f2")
            await pilot.pause()
            assert focused_id(app) == INPUT_IDS[FocusField.LETTERS]
            assert app.query_one("#option-letters", SelectorOption).has_class("active")
            assert app.query_one("#option-digits", SelectorOption).has_class("dim")

        run_app(scenario)

    def test_mode_change_keeps_glyph(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("4", "tab")
            await pilot.pause()
            assert app.controller.glyph == "4"
            speak.assert_called_once_with("4", "en-GB")

        run_app(scenario)

    def test_tab_cycles_back_to_digits(self, speak):
        async def scenario(app, pilot):
            await wait_for_focus(pilot)
            await pilot.press("tab", "tab")
            await pilot.pause()
            assert app.controller.mode == Mode.DIGITS
            assert focused_id(app) == INPUT_IDS[FocusField.DIGITS]

        run_app(scenario)
