"""Tests for settings and .env loading."""

import os

import pytest
from pydantic import ValidationError

from py_efgy.config import Settings, get_settings, load_env_file


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in list(os.environ):
            if name.startswith("EFGY_"):
                monkeypatch.delenv(name)
        settings = Settings(_env_file=None)

        assert settings.bounding_box_size == 1000.0
        assert settings.duplicate_policy == "ignore"
        assert settings.kernel == "float"
        assert settings.perimeter_sweep is True
        assert settings.centre_on_first_site is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("EFGY_BOUNDING_BOX_SIZE", "250")
        monkeypatch.setenv("EFGY_KERNEL", "exact")
        monkeypatch.setenv("EFGY_PERIMETER_SWEEP", "false")
        settings = Settings()

        assert settings.bounding_box_size == 250.0
        assert settings.kernel == "exact"
        assert settings.perimeter_sweep is False

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"tolerance": 0},
            {"bounding_box_size": -5},
            {"bisector_extent_factor": 2.0},
            {"kernel": "interval"},
            {"duplicate_policy": "replace"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValidationError):
            Settings(**kwargs)

    def test_get_settings_is_shared(self):
        assert get_settings() is get_settings()


class TestLoadEnvFile:
    def test_missing_file_is_ignored(self, tmp_path):
        load_env_file(tmp_path / "absent.env")

    def test_fills_only_missing_variables(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "EFGY_TEST_FROM_FILE=file\nEFGY_TEST_ALREADY_SET=file\n", encoding="utf-8"
        )
        monkeypatch.setenv("EFGY_TEST_ALREADY_SET", "process")
        # registered so monkeypatch removes it again afterwards
        monkeypatch.setenv("EFGY_TEST_FROM_FILE", "placeholder")
        monkeypatch.delenv("EFGY_TEST_FROM_FILE")

        load_env_file(env_file)

        assert os.environ["EFGY_TEST_FROM_FILE"] == "file"
        assert os.environ["EFGY_TEST_ALREADY_SET"] == "process"
