import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, Optional

from industry_matcher.logger import get_logger

logger = get_logger(__name__)


class CallTimeoutError(Exception):
    """Raised when an external call does not finish within its time budget."""


def start_in_background(func: Callable[..., Any], *args, **kwargs) -> Future:
    """
    Runs `func` on a daemon thread and returns a Future for its result.

    Daemon threads are not joined at interpreter exit, so a hung provider
    call never holds up process shutdown.
    """
    future: Future = Future()

    def _run():
        if not future.set_running_or_notify_cancel():
            return
        try:
            future.set_result(func(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)

    name = getattr(func, "__name__", "call")
    threading.Thread(target=_run, name=f"industry-matcher-{name}", daemon=True).start()
    return future


def wait_for(future: Future, timeout: Optional[float], label: str = "call") -> Any:
    """Waits at most `timeout` seconds for `future`; the underlying work keeps running on timeout."""
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        logger.warning(f"{label} timed out after {timeout}s")
        raise CallTimeoutError(f"timed out after {timeout}s")


def call_with_timeout(func: Callable[..., Any], timeout: Optional[float], *args, **kwargs) -> Any:
    """
    Runs `func` and waits at most `timeout` seconds for the result.

    The worker thread is abandoned on timeout; the caller continues with its
    fallback while the late result is discarded. `timeout=None` calls inline.
    """
    if timeout is None:
        return func(*args, **kwargs)

    future = start_in_background(func, *args, **kwargs)
    return wait_for(future, timeout, label=f"Call to {getattr(func, '__name__', func)}")
