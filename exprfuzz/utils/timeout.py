"""
Per-call time limits based on ``SIGALRM``.

:func:`time_limit` bounds a block to a whole number of seconds and raises
:class:`TimeoutException` when the alarm fires.  POSIX only, and only usable
from the main thread.
"""

import signal
from contextlib import contextmanager
from types import FrameType
from typing import Iterator, Optional


class TimeoutException(Exception):
    pass


def handler(signum: int, frame: Optional[FrameType]) -> None:
    """
    Signal handler for timeout.

    Args:
        signum: The signal number.
        frame: The current stack frame.

    Raises:
        TimeoutException
    """
    raise TimeoutException()


def register_timeout_handler() -> None:
    """
    Register the timeout handler for SIGALRM.
    """
    signal.signal(signal.SIGALRM, handler)


@contextmanager
def time_limit(seconds: int) -> Iterator[None]:
    """
    Raise TimeoutException if the body runs longer than *seconds*.

    A limit of 0 disables the alarm.  POSIX only, main thread only.
    """
    if seconds <= 0:
        yield
        return
    register_timeout_handler()
    signal.alarm(seconds)
    try:
        yield
    finally:
        signal.alarm(0)
