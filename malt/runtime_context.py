from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Any, Callable

# NOTE: process-global; every interpreter in the process shares this registry.
# Each fiber runs on its own daemon thread, so a fiber blocked in `join` never
# holds up the child it is waiting for.
_fibers: set[threading.Thread] = set()
_fibers_lock = threading.Lock()
_counter = 0


def _complete(future: Future, fn: Callable[..., Any], args: tuple) -> None:
    try:
        if not future.set_running_or_notify_cancel():
            return
        try:
            result = fn(*args)
        except BaseException as exc:
            future.set_exception(exc)
        else:
            future.set_result(result)
    finally:
        with _fibers_lock:
            _fibers.discard(threading.current_thread())


def start_fiber(fn: Callable[..., Any], *args: Any) -> Future:
    """Run `fn(*args)` on a fresh worker thread; the Future holds its outcome."""
    global _counter
    future: Future = Future()
    with _fibers_lock:
        _counter += 1
        thread = threading.Thread(
            target=_complete,
            args=(future, fn, args),
            name=f"malt-fiber-{_counter}",
            daemon=True,
        )
        _fibers.add(thread)
    thread.start()
    return future


def running_fibers() -> int:
    with _fibers_lock:
        return len(_fibers)


def wait_for_fibers(timeout: float | None = None) -> None:
    """Join every fiber thread still running."""
    with _fibers_lock:
        pending = list(_fibers)
    for thread in pending:
        thread.join(timeout)
