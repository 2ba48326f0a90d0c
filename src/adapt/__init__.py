"""
adapt: annotate-and-abort error handling with boundary converters.

Key primitives
--------------
- AdaptError / ExitSignal: chained errors with provenance and optional status
- check(), assert_that(), raise_if_matches(), uerr(): raise annotated errors
- recover_to_error(), recover_to_channel(), recover_to_exit(), unpanic():
  context managers converting an in-flight error at a function boundary
- returns_error(), run_main(): decorator and entry-point wrappers
- build_chain(), extract_status(), extract_errno(), short_message(): chain traversal
- AdaptConfig, configure_logging(), info(): ambient config and logging
"""

from .boundary import (
    ErrnoOutcome,
    ErrorOutcome,
    ExitOutcome,
    recover_to_channel,
    recover_to_error,
    recover_to_exit,
    returns_error,
    run_main,
    unpanic,
)
from .chain import (
    DEFAULT_STATUS,
    MAX_CHAIN_DEPTH,
    build_chain,
    chain_contains,
    extract_errno,
    extract_status,
    find_in_chain,
    format_error,
    short_message,
    unwrap,
)
from .config import AdaptConfig, ConfigError, get_config, init_config
from .guards import assert_that, check, format_args, raise_if_matches, uerr
from .logging import configure_logging, info
from .types import AdaptError, ChainedError, Errno, ExitSignal, SourceLocation
from .version import __version__

__all__ = [
    "AdaptConfig",
    "AdaptError",
    "ChainedError",
    "ConfigError",
    "DEFAULT_STATUS",
    "Errno",
    "ErrnoOutcome",
    "ErrorOutcome",
    "ExitOutcome",
    "ExitSignal",
    "MAX_CHAIN_DEPTH",
    "SourceLocation",
    "__version__",
    "assert_that",
    "build_chain",
    "chain_contains",
    "check",
    "configure_logging",
    "extract_errno",
    "extract_status",
    "find_in_chain",
    "format_args",
    "format_error",
    "get_config",
    "info",
    "init_config",
    "raise_if_matches",
    "recover_to_channel",
    "recover_to_error",
    "recover_to_exit",
    "returns_error",
    "run_main",
    "short_message",
    "uerr",
    "unpanic",
    "unwrap",
]
