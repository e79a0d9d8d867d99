"""Process settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_BASE = Path(__file__).resolve().parent.parent

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: str | None = None) -> str:
    value = os.getenv(name, default)
    if value is None:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def resolve_config_dir(project_base: Path = PROJECT_BASE) -> Path:
    """Return the directory holding the balance documents.

    ``HACKSTEAD_CONFIG_DIR`` overrides the bundled ``config`` directory that
    sits next to the package in a checkout.
    """

    override = os.getenv("HACKSTEAD_CONFIG_DIR")
    if override:
        return Path(override).expanduser().resolve()
    return (project_base / "config").resolve()


def _parse_log_level(value: str) -> int:
    normalized = value.strip().upper()
    if normalized.isdigit():
        return int(normalized)
    level = logging.getLevelName(normalized)
    if isinstance(level, int):
        return level
    return logging.INFO


@dataclass(slots=True)
class HacksteadSettings:
    config_dir: Path
    log_level: int = logging.INFO
    strict: bool = False

    @classmethod
    def from_env(cls) -> "HacksteadSettings":
        config_dir = resolve_config_dir()
        log_level = _parse_log_level(env("HACKSTEAD_LOG_LEVEL", "INFO"))
        strict = env("HACKSTEAD_STRICT", "").strip().lower() in _TRUTHY
        return cls(config_dir=config_dir, log_level=log_level, strict=strict)


__all__ = ["HacksteadSettings", "env", "resolve_config_dir"]
