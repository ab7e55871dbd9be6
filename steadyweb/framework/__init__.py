"""
================================================================================
Web Automation Framework
================================================================================

Resilient browser automation driven by symbolic element bindings.

Components:
    - binding: Locator bindings and the binding registry
    - locator: Element location with ordered fallback locators and frames
    - executor: Element interactions with stale element recovery
    - wait_engine: Condition polling with a hard deadline
    - session_manager: Named browser sessions and child/parent windows
    - screenshot_gate: Post-action screenshots with duplicate suppression
    - playwright_driver: Playwright implementation of the driver capability
    - web_context: Facade the step layer calls into

Author: Automation Team
License: MIT
================================================================================
"""

from .binding import BindingRegistry, Locator, LocatorBinding, LocatorStrategy
from .errors import (
    ElementNotFoundError,
    LocatorBindingError,
    NoSuchWindowError,
    StaleElementError,
    SteadyWebError,
    TransientDriverFault,
    UnsupportedLocatorStrategyError,
    UnsupportedModifierKeyError,
    WaitTimeoutError,
)
from .executor import InteractionExecutor
from .locator import ElementLocator
from .playwright_driver import PlaywrightDriver, PlaywrightDriverFactory
from .screenshot_gate import ScreenshotGate
from .session_manager import SessionManager
from .settings import WebSettings
from .wait_engine import WaitEngine
from .web_context import WebContext

__all__ = [
    "BindingRegistry",
    "Locator",
    "LocatorBinding",
    "LocatorStrategy",
    "SteadyWebError",
    "LocatorBindingError",
    "ElementNotFoundError",
    "UnsupportedLocatorStrategyError",
    "TransientDriverFault",
    "StaleElementError",
    "WaitTimeoutError",
    "UnsupportedModifierKeyError",
    "NoSuchWindowError",
    "InteractionExecutor",
    "ElementLocator",
    "PlaywrightDriver",
    "PlaywrightDriverFactory",
    "ScreenshotGate",
    "SessionManager",
    "WebSettings",
    "WaitEngine",
    "WebContext",
]
