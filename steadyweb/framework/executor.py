# ================================================================================
# Interaction Executor
# ================================================================================
#
# Performs an operation on a located element with:
#   - Window context save/restore around container (frame) lookups
#   - Transparent re-location and retry when the element goes stale
#     (at most MAX_STALE_RETRIES retries, throttled)
#   - Optional post-action screenshot capture
#
# Any failure other than staleness propagates immediately.
#
# ================================================================================

import time
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, TypeVar

from loguru import logger

from .binding import LocatorBinding
from .driver import WebElementHandle
from .errors import StaleElementError
from .locator import ElementLocator, ResolvedElement
from .screenshot_gate import ScreenshotGate
from .session_manager import SessionManager
from .settings import WebSettings


T = TypeVar("T")

MAX_STALE_RETRIES = 2

# Log verbs for the named actions
ACTION_VERBS = {
    "click": "Clicking",
    "right click": "Right clicking",
    "submit": "Submitting",
    "check": "Checking",
    "tick": "Ticking",
    "uncheck": "Unchecking",
    "untick": "Unticking",
    "clear": "Clearing",
    "send keys": "Sending keys to",
    "send value": "Sending value to",
    "select": "Selecting in",
}


def normalize_action(action: str) -> str:
    """'Right-Click' -> 'right click'."""
    return " ".join(action.strip().lower().replace("-", " ").replace("_", " ").split())


class InteractionExecutor:
    """
    Wraps element operations with stale-element recovery.

    Example:
        executor = InteractionExecutor(sessions, locator, gate, settings)
        executor.perform("click", binding, lambda element: element.click())
    """

    def __init__(
        self,
        sessions: SessionManager,
        locator: ElementLocator,
        gate: ScreenshotGate,
        settings: WebSettings,
    ):
        self.sessions = sessions
        self.locator = locator
        self.gate = gate
        self.settings = settings

    def perform(
        self,
        action: Optional[str],
        binding: LocatorBinding,
        operation: Callable[[WebElementHandle], T],
    ) -> T:
        """
        Locate an element and perform an operation on it.

        Args:
            action: Action name for logging (None for reads and internal operations)
            binding: Locator binding of the element
            operation: Function applied to the live element

        Returns:
            Whatever the operation returns

        Raises:
            StaleElementError: If the element was still stale on the final attempt
            ElementNotFoundError: If the element (or a re-location) cannot be found
        """
        with self._window_context(binding) as restore:
            resolved = self.locator.resolve(binding)
            _remember_origin(restore, resolved)

            if action:
                verb = ACTION_VERBS.get(normalize_action(action), action.capitalize())
                logger.debug(f"{verb} {binding.element}")

            result = self._attempt(binding, resolved, operation, restore)

            if self.settings.capture_screenshots:
                self.gate.maybe_capture(self.sessions.driver, unconditional=False)
            return result

    def _attempt(
        self,
        binding: LocatorBinding,
        resolved: ResolvedElement,
        operation: Callable[[WebElementHandle], T],
        restore: List[str],
    ) -> T:
        attempts = MAX_STALE_RETRIES + 1
        attempt = 1
        while True:
            try:
                return operation(resolved.handle)
            except StaleElementError:
                if attempt >= attempts:
                    logger.error(
                        f"Element '{binding.element}' still stale after {attempts} attempts"
                    )
                    raise
                logger.warning(
                    f"Element '{binding.element}' went stale "
                    f"(attempt {attempt}/{attempts}). Re-locating..."
                )
            time.sleep(self.settings.throttle_seconds)
            if restore:
                # Re-locate from the top document, not from inside the frame
                self.sessions.driver.switch_to_window(restore[0])
            resolved = self.locator.resolve(binding)
            _remember_origin(restore, resolved)
            attempt += 1

    @contextmanager
    def _window_context(self, binding: LocatorBinding) -> Iterator[List[str]]:
        """
        Restore the window that was active before the action, on every exit path.

        The captured handle is held in a one-slot list so the origin window
        recorded by a frame switch during location can fill it in later.
        """
        restore: List[str] = []
        if binding.primary.container:
            restore.append(self.sessions.driver.current_window_handle())
        try:
            yield restore
        finally:
            if restore:
                self.sessions.driver.switch_to_window(restore[0])


def _remember_origin(restore: List[str], resolved: ResolvedElement) -> None:
    if not restore and resolved.origin_window is not None:
        restore.append(resolved.origin_window)


__all__ = [
    "InteractionExecutor",
    "ACTION_VERBS",
    "MAX_STALE_RETRIES",
    "normalize_action",
]
