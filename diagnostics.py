"""
Out-of-band numeric diagnostics.

A square root of a negative number is a domain error.  Following the
platform math convention, the error is reported beside the return value
rather than raised: an ``errno``-style code (``EDOM``) plus an
"invalid operation" flag.

The state is thread-local, so concurrent callers never see each other's
errors and no global setup or teardown is needed.  Use ``clear()`` before a
call and ``get_errno()`` / ``test_invalid()`` after it, or wrap the calls in
``capture()``.
"""

from __future__ import annotations

import errno
import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

logger = logging.getLogger(__name__)

EDOM = errno.EDOM


class _ThreadState(threading.local):
    errno: int = 0
    invalid: bool = False


_state = _ThreadState()


@dataclass
class DiagnosticState:
    """Snapshot of one thread's diagnostic state."""

    errno: int = 0
    invalid: bool = False

    @property
    def domain_error(self) -> bool:
        return self.errno == EDOM


def get_errno() -> int:
    return _state.errno


def test_invalid() -> bool:
    """True if an invalid operation was flagged since the last clear()."""
    return _state.invalid


def clear() -> None:
    """Reset the calling thread's error code and invalid-operation flag."""
    _state.errno = 0
    _state.invalid = False


def snapshot() -> DiagnosticState:
    return DiagnosticState(errno=_state.errno, invalid=_state.invalid)


def raise_domain_error(operation: str, value: int) -> None:
    """Record a domain error for ``operation`` applied to ``value``."""
    _state.errno = EDOM
    _state.invalid = True
    logger.debug(f"Domain error: {operation}({value})")


@contextmanager
def capture() -> Iterator[DiagnosticState]:
    """
    Isolate diagnostics raised inside the block.

    The thread's state is cleared on entry.  On exit the yielded
    DiagnosticState is filled in with whatever the block recorded and the
    state from before the block is restored.
    """
    saved = snapshot()
    clear()
    result = DiagnosticState()
    try:
        yield result
    finally:
        result.errno = _state.errno
        result.invalid = _state.invalid
        _state.errno = saved.errno
        _state.invalid = saved.invalid
