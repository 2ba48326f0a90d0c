"""Traversal and rendering of wrapped-error chains.

A chain is the sequence of links reached by repeatedly unwrapping an error,
most recent first. Every walk here is iterative and bounded, so very deep
chains and foreign exceptions with a cyclic unwrap relation both terminate.
"""

from __future__ import annotations

import errno
from typing import Any, Iterator, List, Optional

from .types import AdaptError, ChainedError, Errno, ExitSignal

# Hard cap on links visited in one walk.
MAX_CHAIN_DEPTH = 100_000

# Status used when no link carries one. EPERM is 1 on POSIX.
DEFAULT_STATUS = errno.EPERM

_SEP = ": "


def unwrap(err: BaseException) -> Optional[BaseException]:
    """
    Return the error wrapped by `err`, if any.

    Objects exposing an ``unwrap()`` method are asked directly; other exceptions
    fall back to their explicit ``__cause__`` (``raise ... from ...``).
    """
    method = getattr(err, "unwrap", None)
    if callable(method):
        return method()
    return err.__cause__


def iter_chain(err: Optional[BaseException], *, max_depth: int = MAX_CHAIN_DEPTH) -> Iterator[BaseException]:
    """Yield `err` and each cause below it, stopping on a revisited link or at `max_depth`."""
    seen: set[int] = set()
    current = err
    depth = 0
    while current is not None and depth < max_depth:
        if id(current) in seen:
            return
        seen.add(id(current))
        yield current
        depth += 1
        current = unwrap(current)


def build_chain(err: Optional[BaseException], *, max_depth: int = MAX_CHAIN_DEPTH) -> List[BaseException]:
    """
    Return the full list of links, most recent first.

    Usage example
    -------------
        links = build_chain(err)
        links[0] is err
    """
    return list(iter_chain(err, max_depth=max_depth))


def status_of(link: BaseException) -> Optional[int]:
    """Numeric status carried by a single link, or None."""
    if isinstance(link, AdaptError):
        return link.status
    if isinstance(link, OSError):
        return link.errno
    return None


def extract_status(err: Optional[BaseException], default: int = DEFAULT_STATUS) -> int:
    """
    Return the first status found walking from the head of the chain.

    An ``AdaptError`` with an explicit status and an ``OSError`` with an errno
    both count. Returns `default` when no link carries a status.
    """
    for link in iter_chain(err):
        code = status_of(link)
        if code is not None:
            return code
    return default


def extract_errno(err: Optional[BaseException], default: Errno = Errno.EPERM) -> Errno:
    """Like `extract_status`, but only codes known to the errno table qualify."""
    for link in iter_chain(err):
        code = status_of(link)
        if code is None:
            continue
        try:
            return Errno(code)
        except ValueError:
            continue
    return default


def _matches(link: BaseException, target: Any) -> bool:
    if link is target:
        return True
    if isinstance(target, type):
        return isinstance(link, target)
    if isinstance(target, int) and not isinstance(target, bool):
        return status_of(link) == target
    try:
        return bool(link == target)
    except Exception:
        return False


def find_in_chain(err: Optional[BaseException], target: Any) -> Optional[int]:
    """
    Return the index of the first link matching `target`, or None.

    `target` may be an exception instance (identity or equality), an exception
    class (isinstance), or an int compared with each link's status, so
    ``errno.EPIPE`` matches any ``OSError`` carrying that errno.
    """
    for index, link in enumerate(iter_chain(err)):
        if _matches(link, target):
            return index
    return None


def chain_contains(err: Optional[BaseException], target: Any) -> bool:
    """Return True if any link of `err`'s chain matches `target`."""
    return find_in_chain(err, target) is not None


def _segments(err: BaseException, *, with_origin: bool) -> List[str]:
    parts: List[str] = []
    for link in iter_chain(err):
        if not isinstance(link, ChainedError):
            text = str(link)
            if text:
                parts.append(text)
            break
        if with_origin and isinstance(link, AdaptError) and link.origin is not None:
            parts.append(str(link.origin))
        if link.message:
            parts.append(link.message)
        # Short form: an exit signal already embeds the text of its non-exit cause.
        if not with_origin and isinstance(link, ExitSignal) and not isinstance(link.cause, ExitSignal):
            break
    return parts


def format_error(err: BaseException) -> str:
    """
    Render ``"<origin>: <message>: <cause>"`` down the chain, skipping empty parts.

    A foreign link contributes its own ``str()`` and ends the rendering.
    """
    return _SEP.join(_segments(err, with_origin=True))


def short_message(err: BaseException) -> str:
    """Render the chain's messages only, without provenance."""
    return _SEP.join(_segments(err, with_origin=False))
