# ================================================================================
# Wait Engine
# ================================================================================
#
# Blocks until a condition holds or a deadline passes.
#
# Two failure kinds are kept apart:
#   - WaitTimeoutError: the condition never became true within the budget.
#     Terminal, never retried.
#   - TransientDriverFault: the automation channel hiccuped while polling
#     (e.g. a script execution error). Retried after a throttle delay with
#     whatever is left of the original budget; re-raised as-is once the
#     budget is spent.
#
# Usage:
#   engine.wait_until("waiting for results", lambda: results_loaded(), 5)
#
# ================================================================================

import time
from typing import Callable, Optional

from loguru import logger

from .errors import ElementNotFoundError, TransientDriverFault, WaitTimeoutError
from .settings import WebSettings


DEFAULT_POLL_INTERVAL = 0.5


class _PollTimeout(Exception):
    """The condition stayed false for the whole attempt window."""


class WaitEngine:
    """Polls boolean conditions with a hard deadline."""

    def __init__(self, settings: WebSettings, poll_interval: float = DEFAULT_POLL_INTERVAL):
        """
        Initialize wait engine.

        Args:
            settings: Web settings (default timeout and throttle)
            poll_interval: Seconds between condition evaluations
        """
        self.settings = settings
        self.poll_interval = poll_interval

    def wait_until(
        self,
        reason: str,
        condition: Callable[[], bool],
        timeout_secs: Optional[float] = None,
    ) -> None:
        """
        Wait for a condition to become true.

        Args:
            reason: Human-readable reason, reported on timeout
            condition: Side-effect free predicate
            timeout_secs: Budget in seconds (web.wait.seconds if None)

        Raises:
            WaitTimeoutError: If the condition never became true in time
            TransientDriverFault: If driver faults kept recurring until the budget ran out
        """
        if timeout_secs is None:
            timeout_secs = self.settings.wait_seconds

        start = time.monotonic()
        remaining = timeout_secs

        while True:
            try:
                self._poll(condition, remaining)
                return
            except _PollTimeout:
                logger.error(f"Timed out {reason} (after {timeout_secs}s)")
                raise WaitTimeoutError(reason) from None
            except TransientDriverFault as e:
                time.sleep(self.settings.throttle_seconds)
                remaining = timeout_secs - (time.monotonic() - start)
                if remaining <= 0:
                    logger.error(f"Driver fault while {reason}, no time left to retry: {e}")
                    raise
                logger.warning(
                    f"Driver fault while {reason}: {e}. "
                    f"Retrying with {remaining:.1f}s left..."
                )

    def _poll(self, condition: Callable[[], bool], timeout: float) -> None:
        deadline = time.monotonic() + timeout
        attempt = 0

        while True:
            attempt += 1
            try:
                if condition():
                    logger.debug(f"Condition met after {attempt} attempt(s)")
                    return
            except ElementNotFoundError:
                # Not there yet
                pass

            if time.monotonic() >= deadline:
                raise _PollTimeout()
            time.sleep(self.poll_interval)


__all__ = [
    "WaitEngine",
    "DEFAULT_POLL_INTERVAL",
]
