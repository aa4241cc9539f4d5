"""
Actor proxies - bounded, ordered calls into untrusted players.

Each player gets a mailbox: a queue drained by one daemon worker thread.
Calls to the same player run one after the other in submission order;
calls to different players never share a worker.

- ask() waits for the answer and turns timeouts and exceptions into
  ActorTimeoutError / ActorError
- tell() queues a notice and returns immediately

The time limit of ask() starts when the player method starts running, not
while it waits behind earlier notices. Notices ahead of it get
notice_timeout each to finish.

A call that times out keeps running on its daemon worker. Its result stays
in the abandoned future and is never read, and the worker never holds the
interpreter open at exit.
"""

from __future__ import annotations
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable
import logging
import queue
import threading

from ..config import HEXFISH_NOTIFICATION_TIMEOUT
from ..errors import ActorError, ActorTimeoutError
from .player import Player

logger = logging.getLogger(__name__)


class _Call:
    """One queued player call and the future its outcome lands in."""

    def __init__(self, fn: Callable[..., Any], args: tuple):
        self.fn = fn
        self.args = args
        self.future: Future = Future()
        self.started = threading.Event()

    def run(self) -> None:
        if not self.future.set_running_or_notify_cancel():
            return
        self.started.set()
        try:
            result = self.fn(*self.args)
        except Exception as e:
            self.future.set_exception(e)
        else:
            self.future.set_result(result)


def run_detached(fn: Callable[..., Any], *args: Any, name: str = "hexfish-call") -> Future:
    """Run fn(*args) on a fresh daemon thread and return its future."""
    call = _Call(fn, args)
    threading.Thread(target=call.run, name=name, daemon=True).start()
    return call.future


class ActorProxy:
    """
    Mailbox around a single Player.

    Usage:
        proxy = ActorProxy(player, notice_timeout=1.0)
        position = proxy.ask("get_penguin_placement", state, timeout=5.0)
        proxy.tell("some_player_changed_state", state)
        proxy.close(timeout=1.0)
    """

    def __init__(self, player: Player, notice_timeout: float = HEXFISH_NOTIFICATION_TIMEOUT):
        self.player = player
        self.notice_timeout = notice_timeout
        self._mailbox: queue.SimpleQueue = queue.SimpleQueue()
        self._lock = threading.Lock()
        self._pending = 0
        self._last: _Call | None = None
        self._closed = False
        self._worker = threading.Thread(
            target=self._drain,
            name=f"hexfish-actor-{player.name}",
            daemon=True,
        )
        self._worker.start()

    @property
    def name(self) -> str:
        return self.player.name

    def _drain(self) -> None:
        while True:
            call = self._mailbox.get()
            if call is None:
                return
            call.run()
            with self._lock:
                self._pending -= 1

    def _submit(self, method: str, args: tuple) -> tuple[_Call, int]:
        if self._closed:
            raise ActorError("Actor mailbox is closed", context={"player": self.name})
        call = _Call(getattr(self.player, method), args)
        with self._lock:
            ahead = self._pending
            self._pending += 1
        self._last = call
        self._mailbox.put(call)
        return call, ahead

    def ask(self, method: str, *args: Any, timeout: float) -> Any:
        """
        Call a player method and wait at most timeout seconds once it runs.

        Raises:
            ActorTimeoutError: no answer in time, or the calls queued ahead
                of it overran their notice_timeout
            ActorError: the player raised (original exception as __cause__)
        """
        call, ahead = self._submit(method, args)
        if not call.started.wait(self.notice_timeout * max(ahead, 1)):
            call.future.cancel()
            logger.debug("%s never started %s; %d call(s) were ahead", self.name, method, ahead)
            raise ActorTimeoutError(
                f"{self.name} was still busy when {method} was due", timeout=timeout
            )
        try:
            return call.future.result(timeout=timeout)
        except FutureTimeoutError as e:
            logger.debug("Abandoning %s call to %s after %.3fs", method, self.name, timeout)
            raise ActorTimeoutError(
                f"{self.name} did not answer {method} in time", timeout=timeout
            ) from e
        except Exception as e:
            raise ActorError(
                f"{self.name} raised from {method}",
                context={"error": type(e).__name__},
            ) from e

    def tell(self, method: str, *args: Any) -> None:
        """Send a notice without waiting; failures are logged and dropped."""
        if self._closed:
            return
        call, _ = self._submit(method, args)
        call.future.add_done_callback(lambda f: self._log_notice_failure(method, f))

    def _log_notice_failure(self, method: str, future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.debug("Notice %s to %s failed: %r", method, self.name, error)

    def close(self, timeout: float) -> None:
        """
        Wait up to timeout for queued notices, then shut the mailbox down.

        Calls still queued after timeout are cancelled. Never blocks on a
        hung call beyond timeout.
        """
        if self._closed:
            return
        self._closed = True
        if self._last is not None:
            try:
                self._last.future.result(timeout=timeout)
            except FutureTimeoutError:
                logger.debug("Closing %s with a call still running", self.name)
            except Exception as e:
                logger.debug("Last call to %s failed before close: %r", self.name, e)
        while True:
            try:
                call = self._mailbox.get_nowait()
            except queue.Empty:
                break
            if call is not None:
                call.future.cancel()
                with self._lock:
                    self._pending -= 1
        self._mailbox.put(None)


def call_with_timeout(fn: Callable[..., Any], *args: Any, timeout: float) -> Any:
    """
    Run a single call on its own daemon thread and wait at most timeout seconds.

    Raises ActorTimeoutError or ActorError like ActorProxy.ask().
    """
    future = run_detached(fn, *args)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as e:
        raise ActorTimeoutError(
            f"{getattr(fn, '__qualname__', fn)!s} did not return in time", timeout=timeout
        ) from e
    except Exception as e:
        raise ActorError(
            f"{getattr(fn, '__qualname__', fn)!s} raised",
            context={"error": type(e).__name__},
        ) from e
