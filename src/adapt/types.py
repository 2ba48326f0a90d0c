from __future__ import annotations

import errno as _errno
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


# Typed view of the platform's errno table, e.g. Errno.ENOENT.
Errno = IntEnum(  # type: ignore[misc]
    "Errno",
    {name: code for code, name in sorted(_errno.errorcode.items())},
)
Errno.__doc__ = "Platform errno values as an IntEnum."


@dataclass(frozen=True)
class SourceLocation:
    """
    File and line where an error was raised.

    Usage example
    -------------
        loc = SourceLocation(path="app/run.py", line=42)
        str(loc)  # "app/run.py:42"
    """
    path: str
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


class ChainedError(Exception):
    """
    Base for the errors raised by this package.

    Holds an already-formatted message and an optional wrapped cause. The cause
    is mirrored into ``__cause__`` so Python tracebacks show the chain too.
    Instances are read-only after construction.
    """

    def __init__(self, message: str = "", *, cause: Optional[BaseException] = None) -> None:
        self._message = message
        self._cause = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def message(self) -> str:
        return self._message

    @property
    def cause(self) -> Optional[BaseException]:
        return self._cause

    def unwrap(self) -> Optional[BaseException]:
        """Return the wrapped cause, if any."""
        return self._cause

    def format(self) -> str:
        """Render the chain with provenance, most recent first."""
        from .chain import format_error

        return format_error(self)

    def short_message(self) -> str:
        """Render the chain without provenance."""
        from .chain import short_message

        return short_message(self)

    def __str__(self) -> str:
        return self.format()


class AdaptError(ChainedError):
    """
    An ordinary error annotated at the point it was raised.

    Parameters
    ----------
    message
        Human-readable annotation; may be empty.
    cause
        The error being wrapped, if any.
    origin
        Where the error was raised. ``None`` for wrappers added by converters.
    status
        Optional numeric status/exit code. ``None`` means unset; 0 is a real code.

    Usage example
    -------------
        err = AdaptError("reading config", cause=exc, origin=SourceLocation("cfg.py", 10))
        str(err)  # "cfg.py:10: reading config: <exc>"
    """

    def __init__(
        self,
        message: str = "",
        *,
        cause: Optional[BaseException] = None,
        origin: Optional[SourceLocation] = None,
        status: Optional[int] = None,
    ) -> None:
        self._origin = origin
        self._status = status
        super().__init__(message, cause=cause)

    @property
    def origin(self) -> Optional[SourceLocation]:
        return self._origin

    @property
    def status(self) -> Optional[int]:
        return self._status

    @property
    def has_status(self) -> bool:
        return self._status is not None


class ExitSignal(ChainedError):
    """
    Request to stop the process with a status derived from the chain.

    Only an rc+message converter absorbs this signal; error-returning converters
    forward it. ``link`` is the chain link whose text was folded into the
    message when the signal came from ``raise_if_matches``.
    """

    def __init__(
        self,
        message: str = "",
        *,
        cause: Optional[BaseException] = None,
        link: Optional[BaseException] = None,
    ) -> None:
        self._link = link
        super().__init__(message, cause=cause)

    @property
    def link(self) -> Optional[BaseException]:
        return self._link
