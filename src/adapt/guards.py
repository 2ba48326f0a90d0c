from __future__ import annotations

import logging
import sys
from typing import Any, NoReturn, Optional

from .chain import build_chain, find_in_chain, short_message
from .logging import LOGGER_NAME, format_log
from .types import AdaptError, ExitSignal, SourceLocation


def caller_location(depth: int = 1) -> SourceLocation:
    """
    Return the source location `depth` frames above the caller.

    ``caller_location(1)`` called inside ``f`` gives the line that called ``f``.
    """
    frame = sys._getframe(depth + 1)
    return SourceLocation(path=frame.f_code.co_filename, line=frame.f_lineno)


def format_args(*args: Any) -> str:
    """
    Resolve optional annotation arguments into a message.

    No args gives ``""``, one arg is stringified, and with two or more the first
    is a printf-style template for the rest.

    Usage example
    -------------
        format_args()                      # ""
        format_args(404)                   # "404"
        format_args("open %s: %d", p, 2)   # "open <p>: 2"
    """
    if not args:
        return ""
    if len(args) == 1:
        return str(args[0])
    template, *values = args
    return str(template) % tuple(values)


def check(err: Optional[BaseException], *args: Any, status: Optional[int] = None) -> None:
    """
    Raise `err` wrapped in an AdaptError annotated with the caller's location.

    Does nothing when `err` is None.

    Usage example
    -------------
        with recover_to_error() as out:
            data = read(path)
            check(validate(data), "validating %s", path)
    """
    if err is None:
        return
    raise AdaptError(format_args(*args), cause=err, origin=caller_location(1), status=status)


def assert_that(cond: Any, *args: Any) -> None:
    """
    Raise an AdaptError reading "assertion failed[: <annotation>]" when `cond` is falsy.

    Usage example
    -------------
        assert_that(len(rows) > 0, "no rows in %s", path)
    """
    if cond:
        return
    text = format_args(*args)
    message = f"assertion failed: {text}" if text else "assertion failed"
    raise AdaptError(message, origin=caller_location(1))


def raise_if_matches(err: Optional[BaseException], target: Any, *args: Any) -> None:
    """
    Raise an ExitSignal when `target` appears anywhere in `err`'s chain.

    `target` is matched as in ``find_in_chain``: an exception instance, an
    exception class, or an int status such as ``errno.EPIPE``. The signal wraps
    `err`; its message joins the annotation with the short message of the link
    just above the match (the match itself when `err` is the match).

    Usage example
    -------------
        err = run_step()
        raise_if_matches(err, errno.EPIPE, "pipeline %d error", 7)
        check(err)
    """
    if err is None:
        return
    index = find_in_chain(err, target)
    if index is None:
        return
    chain = build_chain(err)
    link = chain[index - 1] if index > 0 else chain[0]
    message = ": ".join(part for part in (format_args(*args), short_message(link)) if part)
    raise ExitSignal(message, cause=err, link=link)


def uerr(template: Any, *args: Any) -> NoReturn:
    """
    Report a user-facing error: log it at ERROR with the caller's location, then raise it.

    Formatting follows ``info``: a template containing ``%`` is printf-formatted,
    otherwise args are appended after spaces.
    """
    message = format_log(template, *args)
    origin = caller_location(1)
    logging.getLogger(LOGGER_NAME).error("%s", message, stacklevel=2, extra={"signal": "uerr"})
    raise AdaptError(message, origin=origin)
