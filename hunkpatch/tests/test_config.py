"""Unit tests for settings loading."""

import pytest
from pydantic import ValidationError

from hunkpatch.config import PatchSettings, load_settings
from hunkpatch.patching.applier import DEFAULT_FUZZ


class TestLoadSettings:
    """Tests for load_settings."""

    def test_defaults(self, monkeypatch):
        for name in ("HUNKPATCH_FUZZ", "HUNKPATCH_ENCODING", "HUNKPATCH_DRY_RUN"):
            monkeypatch.delenv(name, raising=False)

        settings = load_settings()

        assert settings == PatchSettings(fuzz=DEFAULT_FUZZ, encoding="utf-8", dry_run=False)

    def test_environment(self, monkeypatch):
        monkeypatch.setenv("HUNKPATCH_FUZZ", "5")
        monkeypatch.setenv("HUNKPATCH_ENCODING", "latin-1")
        monkeypatch.setenv("HUNKPATCH_DRY_RUN", "yes")

        settings = load_settings()

        assert settings.fuzz == 5
        assert settings.encoding == "latin-1"
        assert settings.dry_run is True

    def test_explicit_arguments_win(self, monkeypatch):
        monkeypatch.setenv("HUNKPATCH_FUZZ", "5")
        monkeypatch.setenv("HUNKPATCH_DRY_RUN", "1")

        settings = load_settings(fuzz=0, dry_run=False)

        assert settings.fuzz == 0
        assert settings.dry_run is False

    def test_bad_integer_falls_back(self, monkeypatch):
        monkeypatch.setenv("HUNKPATCH_FUZZ", "lots")

        assert load_settings().fuzz == DEFAULT_FUZZ

    def test_negative_fuzz_rejected(self):
        with pytest.raises(ValidationError):
            PatchSettings(fuzz=-1)
