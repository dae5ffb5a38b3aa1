"""
Background refresh of the client's access token.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from .auth import CredentialExchanger, TokenHolder
from .config import DEFAULT_REFRESH_INTERVAL_SECONDS, DEFAULT_RETRY_INTERVAL_SECONDS
from .errors import ReddioPayError

__all__ = ["RefreshScheduler"]

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Periodically re-runs the credential exchange and installs the new token.

    Refreshes are due on a fixed grid: one ``interval`` after :meth:`start`,
    then every ``interval`` after that, measured on ``clock`` rather than from
    the moment the previous refresh landed. A failed exchange is retried
    every ``retry_interval`` until it succeeds or the scheduler is stopped;
    when retries run past the next slot, that slot is skipped. Failures are
    logged and never raised.

    ``wait`` is the timer primitive: it blocks for the given number of
    seconds and returns ``True`` when the scheduler has been cancelled. It
    defaults to :meth:`threading.Event.wait` on the stop event.
    ``clock`` returns the current time in seconds and defaults to
    :func:`time.monotonic`.
    """

    def __init__(
        self,
        exchanger: CredentialExchanger,
        holder: TokenHolder,
        *,
        interval: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
        retry_interval: float = DEFAULT_RETRY_INTERVAL_SECONDS,
        wait: Optional[Callable[[float], bool]] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.exchanger = exchanger
        self.holder = holder
        self.interval = interval
        self.retry_interval = retry_interval
        self._stopped = threading.Event()
        self._install_lock = threading.Lock()
        self._wait = wait or self._stopped.wait
        self._clock = clock
        self._thread: Optional[threading.Thread] = None

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Refresh scheduler already started")
        if self.stopped:
            raise RuntimeError("Refresh scheduler has been stopped")
        self._thread = threading.Thread(
            target=self.run,
            name="reddio-pay-token-refresh",
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Cancel the scheduler. No token is installed after this returns.

        An exchange already on the wire is not interrupted; ``timeout`` bounds
        how long to wait for the thread to notice.
        """
        with self._install_lock:
            self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def run(self) -> None:
        logger.debug("Token refresh loop started (every %ss)", self.interval)
        deadline = self._clock() + self.interval
        while not self._wait(max(deadline - self._clock(), 0.0)):
            if not self.refresh_once():
                break
            deadline = self._next_deadline(deadline)
        logger.debug("Token refresh loop stopped")

    def _next_deadline(self, deadline: float) -> float:
        now = self._clock()
        deadline += self.interval
        if deadline <= now:
            missed = (now - deadline) // self.interval + 1
            deadline += missed * self.interval
        return deadline

    def refresh_once(self) -> bool:
        """
        Exchange credentials until one attempt succeeds.

        Returns ``False`` when cancelled before a token could be installed.
        """
        while not self.stopped:
            try:
                credentials = self.exchanger.exchange()
            except ReddioPayError as exc:
                logger.error("Failed to refresh access token: %s", exc)
                if self._wait(self.retry_interval):
                    return False
                continue
            except Exception:
                logger.exception("Unexpected error while refreshing access token")
                if self._wait(self.retry_interval):
                    return False
                continue

            with self._install_lock:
                if self.stopped:
                    return False
                self.holder.set(credentials.access_token)
            logger.info("Access token refreshed")
            return True
        return False
