"""
Tests for logging setup.
"""

import logging

import pytest

from dotkit.core.observability.logging_config import ENV_LEVEL, resolve_level, setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestResolveLevel:
    def test_flags(self, monkeypatch):
        monkeypatch.delenv(ENV_LEVEL, raising=False)
        assert resolve_level(debug=True, verbose=True) == "DEBUG"
        assert resolve_level(verbose=True) == "INFO"
        assert resolve_level(quiet=True) == "ERROR"
        assert resolve_level() == "WARNING"

    def test_environment(self, monkeypatch):
        monkeypatch.setenv(ENV_LEVEL, "INFO")
        assert resolve_level() == "INFO"
        assert resolve_level(quiet=True) == "ERROR"


class TestSetupLogging:
    def test_console_level(self):
        setup_logging("INFO")
        root = logging.getLogger()
        assert root.level == logging.INFO
        assert len(root.handlers) == 1

    def test_unknown_level_is_warning(self):
        setup_logging("chatty")
        assert logging.getLogger().level == logging.WARNING

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "dotkit.log"
        setup_logging("WARNING", log_file=str(log_file), log_file_level="DEBUG")

        logging.getLogger("dotkit.test").debug("renamed %s", "~/.zshrc")
        for h in logging.getLogger().handlers:
            h.flush()

        assert logging.getLogger().level == logging.DEBUG
        assert "renamed ~/.zshrc" in log_file.read_text()
