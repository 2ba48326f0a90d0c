"""Boundary converters: turn an in-flight AdaptError or ExitSignal into a result.

Each converter is a context manager wrapped around a function body. Errors raised
by this package are captured and converted; any other exception is not touched
and keeps propagating with its identity intact.
"""

from __future__ import annotations

import functools
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Iterator, NoReturn, Optional, Protocol, TypeVar

from rich.console import Console

from .chain import extract_errno, extract_status, format_error, short_message
from .config import get_config
from .guards import format_args
from .logging import LOGGER_NAME
from .types import AdaptError, Errno, ExitSignal

logger = logging.getLogger(__name__)

T = TypeVar("T")

LogCallback = Callable[..., None]


class Channel(Protocol):
    """Anything accepting a non-blocking put, e.g. ``queue.Queue`` or ``asyncio.Queue``."""

    def put_nowait(self, item: Any) -> None: ...


@dataclass
class ErrorOutcome:
    """Slot filled by ``recover_to_error``; `err` stays None on normal exit."""
    err: Optional[AdaptError] = None


@dataclass
class ExitOutcome:
    """Slot filled by ``recover_to_exit``; `captured` stays False on normal exit."""
    rc: int = 0
    msg: str = ""
    captured: bool = False


@dataclass
class ErrnoOutcome:
    """Slot filled by ``unpanic``; `code` stays None on normal exit."""
    code: Optional[Errno] = None


def _log_capture(kind: str, exc: BaseException) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug(
        "%s captured %s: %s",
        kind,
        type(exc).__name__,
        short_message(exc),
        exc_info=exc if get_config().debug else None,
        extra={"signal": type(exc).__name__},
    )


def _forward(exc: ExitSignal, annotation: str) -> ExitSignal:
    if not annotation:
        return exc
    return ExitSignal(annotation, cause=exc)


@contextmanager
def recover_to_error(*args: Any) -> Iterator[ErrorOutcome]:
    """
    Capture an AdaptError raised in the block as an error value.

    The captured error becomes the cause of a new AdaptError carrying this
    converter's annotation (see ``format_args``), stored on the yielded outcome.
    The annotation is resolved on entry, so a bad template fails before the block
    runs and never masks a captured error.
    An ExitSignal is forwarded, annotated when an annotation is given.

    Usage example
    -------------
        def load(path):
            with recover_to_error("loading %s", path) as out:
                check(read(path))
            return out.err
    """
    annotation = format_args(*args)
    outcome = ErrorOutcome()
    try:
        yield outcome
    except AdaptError as exc:
        _log_capture("recover_to_error", exc)
        outcome.err = AdaptError(annotation, cause=exc)
    except ExitSignal as exc:
        forwarded = _forward(exc, annotation)
        if forwarded is exc:
            raise
        raise forwarded from exc


@contextmanager
def recover_to_channel(channel: Channel, *args: Any) -> Iterator[None]:
    """
    Like ``recover_to_error`` but sends the wrapped error on `channel`.

    Nothing is sent on normal exit. The put never blocks; the receiver owns any
    timeout policy.

    Usage example
    -------------
        results: queue.Queue = queue.Queue()

        def worker(item):
            with recover_to_channel(results, "item %s", item):
                process(item)

        threading.Thread(target=worker, args=(1,)).start()
        err = results.get(timeout=5)
    """
    annotation = format_args(*args)
    try:
        yield
    except AdaptError as exc:
        _log_capture("recover_to_channel", exc)
        channel.put_nowait(AdaptError(annotation, cause=exc))
    except ExitSignal as exc:
        forwarded = _forward(exc, annotation)
        if forwarded is exc:
            raise
        raise forwarded from exc


@contextmanager
def recover_to_exit() -> Iterator[ExitOutcome]:
    """
    Capture an AdaptError or ExitSignal as a process exit code and message.

    For an AdaptError the message keeps provenance (``format_error``); for an
    ExitSignal it is the short form, unless the active config has debug on.
    The rc is the first status in the chain (``extract_status``).

    Usage example
    -------------
        with recover_to_exit() as out:
            run()
        if out.msg:
            print(out.msg, file=sys.stderr)
        sys.exit(out.rc)
    """
    outcome = ExitOutcome()
    try:
        yield outcome
    except AdaptError as exc:
        _log_capture("recover_to_exit", exc)
        outcome.captured = True
        outcome.rc = extract_status(exc)
        outcome.msg = format_error(exc)
    except ExitSignal as exc:
        _log_capture("recover_to_exit", exc)
        outcome.captured = True
        outcome.rc = extract_status(exc)
        outcome.msg = format_error(exc) if get_config().debug else short_message(exc)


@contextmanager
def unpanic(log: Optional[LogCallback] = None) -> Iterator[ErrnoOutcome]:
    """
    Capture an AdaptError or ExitSignal as an Errno, reporting its message via `log`.

    `log` is called as ``log("%s", message)``; it defaults to the "adapt"
    logger's ``error``. The code defaults to ``Errno.EPERM`` when the chain
    carries no errno.
    """
    report = log if log is not None else logging.getLogger(LOGGER_NAME).error
    outcome = ErrnoOutcome()
    try:
        yield outcome
    except (AdaptError, ExitSignal) as exc:
        _log_capture("unpanic", exc)
        outcome.code = extract_errno(exc)
        report("%s", short_message(exc) if isinstance(exc, ExitSignal) else format_error(exc))


def returns_error(*annotation: Any) -> Callable[[Callable[..., Optional[T]]], Callable[..., Any]]:
    """
    Decorator form of ``recover_to_error`` for functions returning an error or None.

    A captured AdaptError, wrapped with `annotation`, becomes the return value.

    Usage example
    -------------
        @returns_error("syncing %s", "cache")
        def sync():
            check(push())
            return None
    """

    def decorator(fn: Callable[..., Optional[T]]) -> Callable[..., Any]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with recover_to_error(*annotation) as out:
                return fn(*args, **kwargs)
            return out.err

        return wrapper

    return decorator


def run_main(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> NoReturn:
    """
    Run `fn` as a program entry point and exit the process.

    A captured error is printed as a single line on stderr and its derived
    status becomes the exit code. An int returned normally is used as the exit
    code; anything else exits 0. Foreign exceptions propagate.
    """
    rc = 0
    with recover_to_exit() as out:
        result = fn(*args, **kwargs)
        if isinstance(result, int) and not isinstance(result, bool):
            rc = result
    if out.msg:
        Console(stderr=True, soft_wrap=True, emoji=False).print(out.msg, markup=False, highlight=False, emoji=False)
    raise SystemExit(out.rc if out.captured else rc)
