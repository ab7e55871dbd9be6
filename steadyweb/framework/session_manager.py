"""
================================================================================
Session Manager
================================================================================

Browser session lifecycle management.

Features:
    - Multiple named browser sessions, created lazily on first reference
    - One "current" session at a time; switching is a name swap
    - Per-session window stack for parent/child window tracking
    - Idempotent teardown of one or all sessions

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, TypeVar

from loguru import logger

from .driver import WebDriverCapability
from .errors import NoSuchWindowError


T = TypeVar("T")

DriverFactory = Callable[[str], WebDriverCapability]


@dataclass
class Session:
    """
    One named browser session.

    Attributes:
        name: Session name
        driver: The live automation session
        window_stack: Window handles from outermost parent to innermost child
    """
    name: str
    driver: WebDriverCapability
    window_stack: List[str] = field(default_factory=list)


class SessionManager:
    """
    Owns zero or more named browser sessions.

    Usage:
        >>> sessions = SessionManager(PlaywrightDriverFactory(settings))
        >>> sessions.with_driver(lambda driver: driver.navigate("https://example.com"))
        >>> sessions.switch_to("admin")     # second browser, created now
        >>> sessions.quit()                  # tears down both
    """

    DEFAULT_SESSION = "primary"

    def __init__(self, driver_factory: DriverFactory):
        """
        Args:
            driver_factory: Creates the automation session for a session name
        """
        self._driver_factory = driver_factory
        self._sessions: Dict[str, Session] = {}
        self._current = self.DEFAULT_SESSION

    @property
    def current_session(self) -> str:
        return self._current

    def session_names(self) -> List[str]:
        return list(self._sessions)

    def has_session(self, name: str) -> bool:
        return name in self._sessions

    def session(self, name: Optional[str] = None) -> Session:
        """Get a session by name (current if None), creating it on first reference."""
        name = name or self._current
        session = self._sessions.get(name)
        if session is None:
            logger.info(f"Starting browser session: {name}")
            driver = self._driver_factory(name)
            session = Session(name=name, driver=driver)
            session.window_stack.append(driver.current_window_handle())
            self._sessions[name] = session
        return session

    def with_session(self, name: Optional[str], fn: Callable[[WebDriverCapability], T]) -> T:
        """
        Invoke a function on the driver of a named session.

        Args:
            name: Session name (current session if None)
            fn: Function receiving the driver

        Returns:
            Whatever fn returns
        """
        return fn(self.session(name).driver)

    def with_driver(self, fn: Callable[[WebDriverCapability], T]) -> T:
        """Invoke a function on the driver of the current session."""
        return self.with_session(None, fn)

    @property
    def driver(self) -> WebDriverCapability:
        return self.session().driver

    def switch_to(self, name: str) -> None:
        """Make a session current, creating it if it has not been referenced yet."""
        logger.info(f"Switching to browser session: {name}")
        self.session(name)
        self._current = name

    def switch_to_child(self) -> str:
        """
        Switch to the window opened by the last action.

        Picks the newest window that is not already on the window stack.

        Returns:
            The child window handle

        Raises:
            NoSuchWindowError: When no new window is open
        """
        session = self.session()
        driver = session.driver
        children = [h for h in driver.window_handles() if h not in session.window_stack]
        if not children:
            raise NoSuchWindowError("Cannot switch to child window: no child window was opened")
        child = children[-1]
        logger.info(f"Switching to child window ({child})")
        driver.switch_to_window(child)
        session.window_stack.append(child)
        return child

    def close_child(self) -> None:
        """Close the current child window and return to its parent."""
        self.switch_to_parent(child_was_closed=False)

    def switch_to_parent(self, child_was_closed: bool) -> str:
        """
        Pop the current child window and switch back to its parent.

        Args:
            child_was_closed: True if the child already closed itself;
                              otherwise it is closed here first

        Returns:
            The parent window handle

        Raises:
            NoSuchWindowError: When there is no parent window to return to
        """
        session = self.session()
        driver = session.driver
        if len(session.window_stack) < 2:
            raise NoSuchWindowError("Cannot switch to parent window: no parent window found")

        child = session.window_stack.pop()
        parent = session.window_stack[-1]
        if not child_was_closed:
            logger.info(f"Closing child window ({child})")
            driver.switch_to_window(child)
            driver.close_window()
        logger.info(f"Switching to parent window ({parent})")
        driver.switch_to_window(parent)
        return parent

    def quit(self, name: Optional[str] = None) -> None:
        """
        Tear down one session, or every session when name is None.

        A no-op for sessions that were never created.
        """
        names = [name] if name is not None else list(self._sessions)
        for session_name in names:
            session = self._sessions.pop(session_name, None)
            if session is None:
                continue
            logger.info(f"Closing browser session: {session_name}")
            session.driver.quit()
        if name is None or name == self._current:
            self._current = self.DEFAULT_SESSION

    def reset(self) -> None:
        """Tear down all sessions and return to the default session."""
        self.quit()
        self._current = self.DEFAULT_SESSION


__all__ = [
    "Session",
    "SessionManager",
    "DriverFactory",
]
