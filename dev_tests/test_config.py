"""
Tests for config.py - defaults and environment overrides.
"""

import os
from unittest.mock import patch

from config import AnalyzerSettings, Config, UploadSettings


class TestDefaults:
    def test_analyzer_defaults(self):
        assert AnalyzerSettings().max_input_chars == 2_000_000

    def test_upload_defaults(self):
        settings = UploadSettings()
        assert settings.max_size_bytes == 10 * 1024 * 1024
        assert settings.max_files_per_request == 20
        assert settings.allowed_extensions == [".txt", ".docx", ".rtf", ".html", ".htm"]

    def test_app_defaults(self):
        env_keys = ["APP_HOST", "APP_PORT", "APP_RELOAD", "APP_WORKERS"]
        with patch.dict(os.environ, {}, clear=False):
            for key in env_keys:
                os.environ.pop(key, None)
            cfg = Config()
        assert cfg.APP_HOST == "0.0.0.0"
        assert cfg.APP_PORT == 8000
        assert cfg.APP_RELOAD is False
        assert cfg.APP_WORKERS == 1


class TestEnvironmentOverrides:
    def test_numeric_overrides(self):
        env = {
            "ANALYZER_MAX_INPUT_CHARS": "5000",
            "UPLOADS_MAX_SIZE_BYTES": "2048",
            "UPLOADS_MAX_FILES_PER_REQUEST": "3",
            "APP_PORT": "9001",
            "APP_WORKERS": "4",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = Config()
        assert cfg.ANALYZER.max_input_chars == 5000
        assert cfg.UPLOADS.max_size_bytes == 2048
        assert cfg.UPLOADS.max_files_per_request == 3
        assert cfg.APP_PORT == 9001
        assert cfg.APP_WORKERS == 4

    def test_zero_disables_input_limit(self):
        with patch.dict(os.environ, {"ANALYZER_MAX_INPUT_CHARS": "0"}, clear=False):
            cfg = Config()
        assert cfg.ANALYZER.max_input_chars == 0

    def test_malformed_values_are_ignored(self):
        env = {
            "ANALYZER_MAX_INPUT_CHARS": "lots",
            "UPLOADS_MAX_SIZE_BYTES": "-1",
            "UPLOADS_MAX_FILES_PER_REQUEST": "0",
        }
        with patch.dict(os.environ, env, clear=False):
            cfg = Config()
        assert cfg.ANALYZER.max_input_chars == 2_000_000
        assert cfg.UPLOADS.max_size_bytes == 10 * 1024 * 1024
        assert cfg.UPLOADS.max_files_per_request == 20

    def test_reload_flag(self):
        with patch.dict(os.environ, {"APP_RELOAD": "yes"}, clear=False):
            assert Config().APP_RELOAD is True
        with patch.dict(os.environ, {"APP_RELOAD": "off"}, clear=False):
            assert Config().APP_RELOAD is False

    def test_instances_do_not_share_nested_settings(self):
        with patch.dict(os.environ, {"UPLOADS_MAX_FILES_PER_REQUEST": "7"}, clear=False):
            first = Config()
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("UPLOADS_MAX_FILES_PER_REQUEST", None)
            second = Config()
        assert first.UPLOADS.max_files_per_request == 7
        assert second.UPLOADS.max_files_per_request == 20

    def test_verbose_phase_logs_flag(self):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("VERBOSE_PHASE_LOGS", None)
            assert Config().VERBOSE_PHASE_LOGS is False
        with patch.dict(os.environ, {"VERBOSE_PHASE_LOGS": "true"}, clear=False):
            assert Config().VERBOSE_PHASE_LOGS is True
