from __future__ import annotations

import logging
from typing import Any, Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import AdaptConfig, get_config

LOGGER_NAME = "adapt"

FILE_FORMAT = "%(asctime)s | %(levelname)s | signal=%(signal)s | %(pathname)s:%(lineno)d | %(message)s"


class _SignalFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        # Ensure `signal` exists for formatter
        if not hasattr(record, "signal"):
            setattr(record, "signal", "-")
        return True


def configure_logging(*, cfg: Optional[AdaptConfig] = None) -> logging.Logger:
    """
    Configure console (rich, stderr) and optional file logging for the "adapt" logger.

    Returns
    -------
    logger
        The configured "adapt" logger. Package modules log through its children.

    Usage example
    -------------
        logger = configure_logging(cfg=AdaptConfig(log_file=Path("logs/run.log")))
        logger.info("Hello")
    """
    cfg = cfg if cfg is not None else get_config()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = False

    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=cfg.debug,
        show_path=cfg.debug,
        markup=False,
    )
    console_handler.setLevel(cfg.console_level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    console_handler.addFilter(_SignalFilter())
    logger.addHandler(console_handler)

    # File handler (always plain, one line per record)
    if cfg.log_file is not None:
        cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(cfg.log_file, encoding="utf-8")
        file_handler.setLevel(cfg.file_level)
        file_handler.setFormatter(logging.Formatter(fmt=FILE_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        file_handler.addFilter(_SignalFilter())
        logger.addHandler(file_handler)

    logger.debug("Logging configured (debug=%s, log_file=%s)", cfg.debug, cfg.log_file)
    return logger


def format_log(template: Any, *args: Any) -> str:
    """
    Format a log line.

    A template containing ``%`` is printf-formatted with `args`; otherwise each
    arg is appended after a space.
    """
    text = str(template)
    if not args:
        return text
    if "%" in text:
        return text % args
    return " ".join([text] + [str(arg) for arg in args])


def info(template: Any, *args: Any) -> None:
    """
    Log an INFO line attributed to the caller's file and line.

    Usage example
    -------------
        info("loaded %d rows", n)
        info("loaded", n, "rows")
    """
    logging.getLogger(LOGGER_NAME).info("%s", format_log(template, *args), stacklevel=2)
