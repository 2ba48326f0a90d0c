from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


class ConfigError(ValueError):
    """Raised when runtime configuration is invalid or re-initialized inconsistently."""


_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


@dataclass(frozen=True)
class AdaptConfig:
    """
    Process-wide settings for error rendering and logging.

    Parameters
    ----------
    debug
        If True, converters log captured errors with tracebacks and exit messages
        keep full provenance.
    console_level
        Logging level for console output.
    file_level
        Logging level for file output.
    log_file
        Optional path of a plain-text log file.
    env_prefix
        Prefix for environment-variable overrides.

    Usage example
    -------------
        cfg = AdaptConfig(debug=True, log_file=Path("logs/run.log"))
    """

    debug: bool = False
    console_level: int = 20  # logging.INFO
    file_level: int = 10  # logging.DEBUG
    log_file: Optional[Path] = None

    env_prefix: str = field(default="ADAPT_", repr=False)

    @classmethod
    def from_env(cls, *, default: Optional["AdaptConfig"] = None) -> "AdaptConfig":
        """
        Create config from environment variables.

        Supported variables (prefix controlled by env_prefix on `default`):
        - <PFX>DEBUG: "1"/"0"
        - <PFX>LOG_LEVEL: console level name, e.g. "WARNING"
        - <PFX>LOG_FILE: path

        Invalid values fall back to `default`.

        Usage example
        -------------
            cfg = AdaptConfig.from_env(default=AdaptConfig(env_prefix="MYTOOL_"))
        """
        base = default if default is not None else cls()
        pfx = base.env_prefix

        debug_raw = os.getenv(f"{pfx}DEBUG", "1" if base.debug else "0").strip()
        debug = debug_raw not in ("0", "false", "False", "")

        level_raw = os.getenv(f"{pfx}LOG_LEVEL", "").strip().upper()
        console_level = _LEVELS.get(level_raw, base.console_level)
        if debug:
            console_level = min(console_level, logging.DEBUG)

        log_file_raw = os.getenv(f"{pfx}LOG_FILE", "").strip()
        log_file = Path(log_file_raw) if log_file_raw else base.log_file

        return cls(
            debug=debug,
            console_level=console_level,
            file_level=base.file_level,
            log_file=log_file,
            env_prefix=pfx,
        )


_lock = threading.Lock()
_active: Optional[AdaptConfig] = None


def init_config(cfg: Optional[AdaptConfig] = None) -> AdaptConfig:
    """
    Install the process-wide config once.

    With `cfg` None the config is read from the environment. Calling again with
    an equal config (or None) returns the active one; a different config raises
    ConfigError.
    """
    global _active
    with _lock:
        if _active is None:
            _active = cfg if cfg is not None else AdaptConfig.from_env()
        elif cfg is not None and cfg != _active:
            raise ConfigError("adapt config already initialized with different settings.")
        return _active


def get_config() -> AdaptConfig:
    """Return the active config, initializing it from the environment on first use."""
    if _active is not None:
        return _active
    return init_config()
