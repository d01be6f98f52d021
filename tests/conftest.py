"""Shared test fixtures."""

from __future__ import annotations

import pytest

import mdsel_claude.config as cfg_module
from mdsel_claude.config import AppConfig, CliConfig, LoggingConfig
from mdsel_claude.server import handlers


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from the real config dir and mdsel env vars."""
    for name in ("MDSEL_MIN_WORDS", "MDSEL_CLI", "MDSEL_TIMEOUT", "MDSEL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("MDSEL_LOG_FILE", str(tmp_path / "mdsel-claude.log"))
    monkeypatch.setattr(cfg_module, "CONFIG_DIR", tmp_path / "config")
    monkeypatch.setattr(cfg_module, "CONFIG_FILE", tmp_path / "config" / "config.toml")
    cfg_module.reset_config()
    handlers.reset_adapter()
    yield
    cfg_module.reset_config()
    handlers.reset_adapter()


@pytest.fixture
def app_config(tmp_path):
    """Create a test configuration."""
    return AppConfig(
        cli=CliConfig(binary="mdsel", timeout=5),
        logging=LoggingConfig(level="DEBUG", file=str(tmp_path / "test.log")),
    )


@pytest.fixture
def make_markdown(tmp_path):
    """Write a Markdown file with the given number of words."""

    def _make(words: int, name: str = "doc.md") -> str:
        path = tmp_path / name
        path.write_text(" ".join(f"word{i}" for i in range(words)))
        return str(path)

    return _make
