"""Tests for generate_voice_clips.py"""

import os
import sys
from unittest.mock import patch

# Add scripts directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'scripts'))

import generate_voice_clips
from generate_voice_clips import clips_to_generate, generate_language


class TestClipsToGenerate:
    """Which clips a run would write."""

    def test_english_digits_and_letters(self, tmp_path):
        with patch.object(generate_voice_clips, "VOICE_CLIPS_DIR", tmp_path):
            clips = clips_to_generate("en-GB")
        texts = [text for text, _ in clips]
        assert texts == list("0123456789abcdefghijklmnopqrstuvwxyz")
        assert clips[0][1] == tmp_path / "en-GB" / "0.wav"

    def test_german_adds_umlauts(self, tmp_path):
        with patch.object(generate_voice_clips, "VOICE_CLIPS_DIR", tmp_path):
            texts = [text for text, _ in clips_to_generate("de-DE")]
        assert len(texts) == 39
        assert texts[-3:] == ["ä", "ö", "ü"]

    def test_existing_clips_are_skipped(self, tmp_path):
        (tmp_path / "en-GB").mkdir()
        (tmp_path / "en-GB" / "a.wav").write_bytes(b"")
        with patch.object(generate_voice_clips, "VOICE_CLIPS_DIR", tmp_path):
            texts = [text for text, _ in clips_to_generate("en-GB")]
        assert "a" not in texts
        assert len(texts) == 35

    def test_force_regenerates_existing(self, tmp_path):
        (tmp_path / "en-GB").mkdir()
        (tmp_path / "en-GB" / "a.wav").write_bytes(b"")
        with patch.object(generate_voice_clips, "VOICE_CLIPS_DIR", tmp_path):
            texts = [text for text, _ in clips_to_generate("en-GB", force=True)]
        assert "a" in texts
        assert len(texts) == 36


class TestGenerateLanguage:
    """Exit codes for one locale."""

    def test_missing_voice_model_fails(self, tmp_path):
        with patch.object(generate_voice_clips, "VOICE_CLIPS_DIR", tmp_path), \
                patch.object(generate_voice_clips, "find_voice_model", return_value=None), \
                patch.object(generate_voice_clips, "get_voice_search_paths", return_value=[tmp_path]):
            assert generate_language("de-DE") == 1
        assert not (tmp_path / "de-DE").exists()

    def test_nothing_to_do(self, tmp_path):
        locale_dir = tmp_path / "en-GB"
        locale_dir.mkdir()
        for char in "0123456789abcdefghijklmnopqrstuvwxyz":
            (locale_dir / f"{char}.wav").write_bytes(b"")
        with patch.object(generate_voice_clips, "VOICE_CLIPS_DIR", tmp_path), \
                patch.object(generate_voice_clips, "find_voice_model") as find_model:
            assert generate_language("en-GB") == 0
        find_model.assert_not_called()
