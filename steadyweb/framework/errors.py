"""
================================================================================
Web Automation Errors
================================================================================

Distinguishable error kinds raised by the element locator, interaction
executor, wait engine and session manager.

    SteadyWebError
    ├── LocatorBindingError
    │   ├── ElementNotFoundError
    │   ├── UnsupportedLocatorStrategyError
    │   └── ContainerCycleError
    ├── TransientDriverFault
    │   ├── StaleElementError
    │   ├── NoAlertPresentError
    │   └── ScriptTimeoutError
    ├── WaitTimeoutError
    ├── UnsupportedModifierKeyError
    └── NoSuchWindowError

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import List, Sequence, Tuple


class SteadyWebError(Exception):
    """Base exception for all web automation errors."""
    pass


class LocatorBindingError(SteadyWebError):
    """Raised when no locator binding can be found for an element name."""
    pass


class ElementNotFoundError(LocatorBindingError):
    """
    Raised when every candidate locator of a binding failed to find an element.

    Attributes:
        element: Symbolic element name
        attempts: (strategy, lookup) pairs tried, in order
    """

    def __init__(
        self,
        element: str,
        attempts: Sequence[Tuple[str, str]] = (),
        message: str = "",
    ):
        self.element = element
        self.attempts: List[Tuple[str, str]] = list(attempts)
        if not message:
            tried = ", ".join(f"({strategy}: {lookup})" for strategy, lookup in self.attempts)
            message = f"Could not locate {element} by {tried}" if tried else f"Could not locate {element}"
        super().__init__(message)


class UnsupportedLocatorStrategyError(LocatorBindingError):
    """Raised when a binding names a locator strategy that is not supported."""

    def __init__(self, element: str, strategy: str, lookup: str):
        self.element = element
        self.strategy = strategy
        self.lookup = lookup
        super().__init__(
            f"Could not locate {element}: unsupported locator: ({strategy}: {lookup})"
        )


class ContainerCycleError(LocatorBindingError):
    """Raised when a binding's container chain leads back to an element already in it."""

    def __init__(self, chain: Sequence[str]):
        self.chain: List[str] = list(chain)
        super().__init__(f"Circular container reference: {' -> '.join(self.chain)}")


class TransientDriverFault(SteadyWebError):
    """Raised when the automation driver reports an intermittent failure."""
    pass


class StaleElementError(TransientDriverFault):
    """Raised when a located element is no longer attached to the page."""
    pass


class NoAlertPresentError(TransientDriverFault):
    """Raised when an alert is handled but none is open."""
    pass


class ScriptTimeoutError(TransientDriverFault):
    """Raised when the driver times out running a script or lookup."""
    pass


class WaitTimeoutError(SteadyWebError):
    """Raised when a waited-for condition never became true in time."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Timed out {reason}")


class UnsupportedModifierKeyError(SteadyWebError):
    """Raised when a modifier key name has no known mapping."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Unsupported modifier key: {key}")


class NoSuchWindowError(SteadyWebError):
    """Raised when there is no child or parent window to switch to."""
    pass


__all__ = [
    "SteadyWebError",
    "LocatorBindingError",
    "ElementNotFoundError",
    "UnsupportedLocatorStrategyError",
    "ContainerCycleError",
    "TransientDriverFault",
    "StaleElementError",
    "NoAlertPresentError",
    "ScriptTimeoutError",
    "WaitTimeoutError",
    "UnsupportedModifierKeyError",
    "NoSuchWindowError",
]
