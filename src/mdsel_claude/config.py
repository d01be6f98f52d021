"""Configuration management using TOML + environment variables."""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

import tomli_w

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".mdsel-claude"
CONFIG_FILE = CONFIG_DIR / "config.toml"

THRESHOLD_ENV_VAR = "MDSEL_MIN_WORDS"
DEFAULT_MIN_WORDS = 200


@dataclass
class CliConfig:
    binary: str = "mdsel"
    timeout: int = 30


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    file: str = "~/.mdsel-claude/mdsel-claude.log"


@dataclass
class AppConfig:
    cli: CliConfig = field(default_factory=CliConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_threshold() -> int:
    """Return the word-count threshold for Markdown reminders.

    Reads ``MDSEL_MIN_WORDS`` on every call so a changed environment takes
    effect without a restart. Missing, malformed or non-positive values
    fall back to ``DEFAULT_MIN_WORDS``.
    """
    raw = os.environ.get(THRESHOLD_ENV_VAR)
    if raw is None:
        return DEFAULT_MIN_WORDS
    raw = raw.strip()
    # Plain ASCII digits only: no sign, no "1_000", no "12.5"
    if not (raw.isascii() and raw.isdigit()):
        return DEFAULT_MIN_WORDS
    value = int(raw)
    if value <= 0:
        return DEFAULT_MIN_WORDS
    return value


def _as_int(source: str, raw: object, current: int) -> int:
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    if isinstance(raw, str):
        try:
            return int(raw.strip())
        except ValueError:
            pass
    logger.warning("Ignoring non-integer %s=%r", source, raw)
    return current


def load_config() -> AppConfig:
    """Load configuration from TOML file with env var overrides."""
    config = AppConfig()

    if CONFIG_FILE.exists():
        with open(CONFIG_FILE, "rb") as f:
            data = tomllib.load(f)

        cli = data.get("cli", {})
        config.cli.binary = cli.get("binary", config.cli.binary)
        if "timeout" in cli:
            config.cli.timeout = _as_int("cli.timeout", cli["timeout"], config.cli.timeout)

        logging_cfg = data.get("logging", {})
        config.logging.level = logging_cfg.get("level", config.logging.level)
        config.logging.file = logging_cfg.get("file", config.logging.file)

    # Environment variable overrides
    if env_binary := os.environ.get("MDSEL_CLI"):
        config.cli.binary = env_binary
    if env_timeout := os.environ.get("MDSEL_TIMEOUT"):
        config.cli.timeout = _as_int("MDSEL_TIMEOUT", env_timeout, config.cli.timeout)
    if env_log_level := os.environ.get("MDSEL_LOG_LEVEL"):
        config.logging.level = env_log_level
    if env_log_file := os.environ.get("MDSEL_LOG_FILE"):
        config.logging.file = env_log_file

    return config


def save_config(config: AppConfig) -> None:
    """Save configuration to TOML file."""
    CONFIG_DIR.mkdir(mode=0o700, parents=True, exist_ok=True)

    data = {
        "cli": {
            "binary": config.cli.binary,
            "timeout": config.cli.timeout,
        },
        "logging": {
            "level": config.logging.level,
            "file": config.logging.file,
        },
    }

    with open(CONFIG_FILE, "wb") as f:
        tomli_w.dump(data, f)

    os.chmod(CONFIG_FILE, 0o600)


# Global singleton
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get or load the global config singleton."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global config (for testing)."""
    global _config
    _config = None
