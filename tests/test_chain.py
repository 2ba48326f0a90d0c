from __future__ import annotations

import errno
from typing import Optional

from adapt.chain import (
    DEFAULT_STATUS,
    build_chain,
    chain_contains,
    extract_errno,
    extract_status,
    find_in_chain,
    format_error,
    short_message,
    unwrap,
)
from adapt.types import AdaptError, Errno, SourceLocation


class _LowerError(Exception):
    """Foreign error exposing its own unwrap(), like a third-party wrapper type."""

    def __str__(self) -> str:
        return "lower error"

    def unwrap(self) -> Optional[BaseException]:
        return ValueError("bottom error")


class _Cyclic(Exception):
    def __init__(self) -> None:
        super().__init__("cyclic")
        self.other: Optional["_Cyclic"] = None

    def unwrap(self) -> Optional[BaseException]:
        return self.other


class _Endless(Exception):
    """Hands back a fresh link on every unwrap."""

    def unwrap(self) -> BaseException:
        return _Endless("again")


def test_unwrap_prefers_method_then_dunder_cause() -> None:
    assert str(unwrap(_LowerError())) == "bottom error"

    root = KeyError("k")
    try:
        try:
            raise root
        except KeyError as exc:
            raise RuntimeError("outer") from exc
    except RuntimeError as outer:
        assert unwrap(outer) is root

    assert unwrap(ValueError("alone")) is None


def test_build_chain_is_most_recent_first() -> None:
    root = ValueError("root")
    mid = AdaptError("mid", cause=root)
    top = AdaptError("top", cause=mid)
    assert build_chain(top) == [top, mid, root]
    assert build_chain(None) == []


def test_build_chain_descends_into_foreign_unwrap() -> None:
    err = AdaptError(cause=AdaptError(cause=_LowerError()))
    links = build_chain(err)
    assert len(links) == 4
    assert isinstance(links[2], _LowerError)
    assert str(links[3]) == "bottom error"


def test_traversal_of_deep_chain_terminates() -> None:
    err: BaseException = OSError(errno.ENOENT, "No such file or directory")
    for i in range(10_000):
        err = AdaptError(f"level {i}" if i % 1000 == 0 else "", cause=err)

    assert len(build_chain(err)) == 10_001
    assert extract_status(err) == errno.ENOENT
    assert short_message(err).startswith("level 9000: level 8000")


def test_cyclic_foreign_unwrap_terminates() -> None:
    a, b = _Cyclic(), _Cyclic()
    a.other, b.other = b, a
    err = AdaptError("wrapped", cause=a)

    assert build_chain(err) == [err, a, b]
    assert extract_status(err) == DEFAULT_STATUS
    assert find_in_chain(err, KeyError) is None


def test_endless_foreign_unwrap_is_capped() -> None:
    assert len(build_chain(_Endless("start"), max_depth=50)) == 50


def test_extract_status_takes_first_status_from_head() -> None:
    err = AdaptError("outer", cause=AdaptError("inner", status=3, cause=OSError(errno.EPIPE, "Broken pipe")))
    assert extract_status(err) == 3
    assert extract_status(AdaptError("x", cause=OSError(errno.EPIPE, "Broken pipe"))) == errno.EPIPE


def test_extract_status_zero_is_a_real_status() -> None:
    assert extract_status(AdaptError("ok-ish", status=0)) == 0


def test_extract_status_default() -> None:
    assert DEFAULT_STATUS == errno.EPERM
    assert extract_status(AdaptError("plain", cause=ValueError("v"))) == DEFAULT_STATUS
    assert extract_status(AdaptError("plain"), default=9) == 9
    assert extract_status(None) == DEFAULT_STATUS


def test_extract_errno_returns_typed_code() -> None:
    err = AdaptError("open", cause=FileNotFoundError(errno.ENOENT, "No such file or directory", "/nope"))
    code = extract_errno(err)
    assert code is Errno.ENOENT


def test_extract_errno_skips_unknown_codes_and_defaults() -> None:
    err = AdaptError("custom", status=100_000, cause=OSError(errno.EACCES, "Permission denied"))
    assert extract_errno(err) is Errno.EACCES
    assert extract_errno(AdaptError("none")) is Errno.EPERM
    assert extract_errno(AdaptError("none"), default=Errno.EIO) is Errno.EIO


def test_find_in_chain_by_instance_class_and_status() -> None:
    sentinel = ValueError("sentinel")
    pipe = OSError(errno.EPIPE, "Broken pipe")
    err = AdaptError("top", cause=AdaptError("mid", cause=pipe))
    other = AdaptError("top", cause=sentinel)

    assert find_in_chain(other, sentinel) == 1
    assert find_in_chain(err, OSError) == 2
    assert find_in_chain(err, errno.EPIPE) == 2
    assert find_in_chain(err, Errno.EPIPE) == 2
    assert find_in_chain(err, errno.ENOENT) is None
    assert chain_contains(err, pipe) is True
    assert chain_contains(err, sentinel) is False


def test_format_error_stops_at_foreign_link() -> None:
    err = AdaptError("a", origin=SourceLocation("x.py", 1), cause=_LowerError())
    assert format_error(err) == "x.py:1: a: lower error"
    assert format_error(ValueError("plain")) == "plain"
