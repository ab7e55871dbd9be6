"""
================================================================================
Driver Capability
================================================================================

The opaque automation surface the core is written against. A backend adapter
(see playwright_driver.py) implements these two classes; tests use fakes.

Failures are reported with the errors in errors.py:
    - StaleElementError when an element handle is no longer attached
    - TransientDriverFault for any other backend failure

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence

from .binding import LocatorStrategy


class WebElementHandle(ABC):
    """A live element reference. May go stale when the page re-renders."""

    @property
    @abstractmethod
    def tag_name(self) -> str:
        """Lower-case tag name."""

    @property
    @abstractmethod
    def text(self) -> str:
        """Rendered text of the element."""

    @abstractmethod
    def get_attribute(self, name: str) -> Optional[str]: ...

    @abstractmethod
    def is_displayed(self) -> bool: ...

    @abstractmethod
    def is_selected(self) -> bool: ...

    @abstractmethod
    def is_enabled(self) -> bool: ...

    @abstractmethod
    def click(self) -> None: ...

    @abstractmethod
    def context_click(self) -> None: ...

    @abstractmethod
    def submit(self) -> None: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def send_keys(self, text: str) -> None:
        """Type text into the element."""

    @abstractmethod
    def press(self, key: str) -> None:
        """Press a single named key while the element has focus."""

    @abstractmethod
    def hover(self) -> None:
        """Move the pointer over the element."""

    @abstractmethod
    def click_with_modifiers(self, modifiers: Sequence[str], button: str = "left") -> None:
        """Click while holding the given (backend-named) modifier keys."""

    @abstractmethod
    def select_by_visible_text(self, text: str) -> None: ...

    @abstractmethod
    def select_by_value(self, value: str) -> None: ...

    @abstractmethod
    def select_by_index(self, index: int) -> None: ...

    @abstractmethod
    def selected_options(self) -> List["WebElementHandle"]:
        """Selected option elements of a select control."""


class WebDriverCapability(ABC):
    """One browser session as seen by the core."""

    @abstractmethod
    def find_element(
        self,
        strategy: LocatorStrategy,
        lookup: str,
        root: Optional[WebElementHandle] = None,
    ) -> Optional[WebElementHandle]:
        """Find the first match, or None. Not used for javascript lookups."""

    @abstractmethod
    def find_elements(
        self,
        strategy: LocatorStrategy,
        lookup: str,
        root: Optional[WebElementHandle] = None,
    ) -> List[WebElementHandle]:
        """Find all matches (empty list on no match)."""

    @abstractmethod
    def execute_script(self, source: str, *args: Any) -> Any:
        """
        Run a script in the current frame.

        The script body sees its arguments as `arguments[n]` and uses
        `return` to produce a value, as with WebDriver's executeScript.
        """

    @abstractmethod
    def switch_to_frame(self, element: WebElementHandle) -> None: ...

    @abstractmethod
    def switch_to_window(self, handle: str) -> None:
        """Focus a window; also resets the frame context to its top document."""

    @abstractmethod
    def current_window_handle(self) -> str: ...

    @abstractmethod
    def window_handles(self) -> List[str]:
        """All open window handles, oldest first."""

    @abstractmethod
    def close_window(self) -> None:
        """Close the currently focused window."""

    @abstractmethod
    def capture_screenshot(self) -> bytes:
        """PNG bytes of the current viewport."""

    @abstractmethod
    def current_url(self) -> str: ...

    @abstractmethod
    def title(self) -> str: ...

    @abstractmethod
    def navigate(self, url: str) -> None: ...

    @abstractmethod
    def refresh(self) -> None: ...

    @abstractmethod
    def resize_window(self, width: int, height: int) -> None: ...

    @abstractmethod
    def maximize_window(self) -> None: ...

    @abstractmethod
    def expect_alert(self, accept: bool) -> None:
        """Arm the answer for the next dialog the page opens."""

    @abstractmethod
    def handle_alert(self, accept: bool) -> None:
        """
        Accept or dismiss the open alert.

        Raises:
            NoAlertPresentError: If no alert is open
        """

    @abstractmethod
    def quit(self) -> None:
        """Tear down the browser session."""


__all__ = [
    "WebElementHandle",
    "WebDriverCapability",
]
