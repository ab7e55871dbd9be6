"""
================================================================================
Playwright Driver
================================================================================

Playwright (sync API) implementation of the driver capability.

Features:
    - Locator strategy to Playwright selector translation
    - WebDriver-style script execution (arguments[n], return)
    - Stable window handles for the pages of a browser context
    - Frame switching through frame/iframe element handles
    - Dialogs answered as they open, with the answer armed beforehand
    - Playwright errors translated to stale/transient driver faults

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar
from uuid import uuid4

from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    Dialog,
    ElementHandle,
    Error as PlaywrightError,
    Frame,
    JSHandle,
    Page,
    Playwright,
    TimeoutError as PlaywrightTimeoutError,
    sync_playwright,
)

from .binding import LocatorStrategy
from .driver import WebDriverCapability, WebElementHandle
from .errors import (
    NoAlertPresentError,
    ScriptTimeoutError,
    StaleElementError,
    TransientDriverFault,
)
from .settings import WebSettings


F = TypeVar("F", bound=Callable[..., Any])

# Playwright error messages that mean the element reference went stale
STALE_MARKERS = (
    "not attached",
    "detached",
    "handle is disposed",
    "execution context was destroyed",
)

# Runs a WebDriver-style script body: arguments[n] and return are available
SCRIPT_WRAPPER = (
    "(args) => {\n"
    "  const result = (function() {\n%s\n  }).apply(null, args);\n"
    "  if (result instanceof NodeList || result instanceof HTMLCollection) {\n"
    "    return Array.from(result);\n"
    "  }\n"
    "  return result;\n"
    "}"
)

SUBMIT_SCRIPT = """e => {
  const form = e.tagName === 'FORM' ? e : (e.form || e.closest('form'));
  if (!form) { throw new Error('Element is not in a form'); }
  if (form.requestSubmit) { form.requestSubmit(); } else { form.submit(); }
}"""


def translate_errors(fn: F) -> F:
    """Translate Playwright errors into driver faults."""

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return fn(*args, **kwargs)
        except PlaywrightTimeoutError as e:
            raise ScriptTimeoutError(str(e)) from e
        except PlaywrightError as e:
            message = str(e)
            if any(marker in message.lower() for marker in STALE_MARKERS):
                raise StaleElementError(message) from e
            raise TransientDriverFault(message) from e

    return wrapper  # type: ignore[return-value]


def to_selector(strategy: LocatorStrategy, lookup: str) -> str:
    """
    Translate a locator strategy and lookup into a Playwright selector.

    Raises:
        ValueError: For the javascript strategy, which has no selector form
    """
    if strategy is LocatorStrategy.ID:
        return f"id={lookup}"
    if strategy is LocatorStrategy.NAME:
        return f"css=[name={json.dumps(lookup)}]"
    if strategy in (LocatorStrategy.TAG_NAME, LocatorStrategy.CSS):
        return f"css={lookup}"
    if strategy is LocatorStrategy.XPATH:
        return f"xpath={lookup}"
    if strategy is LocatorStrategy.CLASS_NAME:
        return "css=" + "".join(f".{name}" for name in lookup.replace(".", " ").split())
    if strategy is LocatorStrategy.LINK_TEXT:
        return f"css=a:text-is({json.dumps(lookup)})"
    if strategy is LocatorStrategy.PARTIAL_LINK_TEXT:
        return f"css=a:has-text({json.dumps(lookup)})"
    raise ValueError(f"No selector form for locator strategy: {strategy.value}")


class PlaywrightElement(WebElementHandle):
    """Element handle backed by a Playwright ElementHandle."""

    def __init__(self, handle: ElementHandle):
        self.handle = handle

    def __repr__(self) -> str:
        return f"PlaywrightElement({self.handle!r})"

    @property
    @translate_errors
    def tag_name(self) -> str:
        return self.handle.evaluate("e => e.tagName.toLowerCase()")

    @property
    @translate_errors
    def text(self) -> str:
        return self.handle.inner_text()

    @translate_errors
    def get_attribute(self, name: str) -> Optional[str]:
        # Properties first (value, text, checked), as WebDriver does
        value = self.handle.evaluate(
            "(e, name) => (name in e && e[name] !== null && typeof e[name] !== 'object')"
            " ? String(e[name]) : e.getAttribute(name)",
            name,
        )
        return value

    @translate_errors
    def is_displayed(self) -> bool:
        return self.handle.is_visible()

    @translate_errors
    def is_selected(self) -> bool:
        return bool(self.handle.evaluate("e => !!(e.checked || e.selected)"))

    @translate_errors
    def is_enabled(self) -> bool:
        return self.handle.is_enabled()

    @translate_errors
    def click(self) -> None:
        self.handle.click()

    @translate_errors
    def context_click(self) -> None:
        self.handle.click(button="right")

    @translate_errors
    def submit(self) -> None:
        self.handle.evaluate(SUBMIT_SCRIPT)

    @translate_errors
    def clear(self) -> None:
        self.handle.fill("")

    @translate_errors
    def send_keys(self, text: str) -> None:
        self.handle.type(text)

    @translate_errors
    def press(self, key: str) -> None:
        self.handle.press(key)

    @translate_errors
    def hover(self) -> None:
        self.handle.hover()

    @translate_errors
    def click_with_modifiers(self, modifiers: Sequence[str], button: str = "left") -> None:
        self.handle.click(modifiers=list(modifiers), button=button)

    @translate_errors
    def select_by_visible_text(self, text: str) -> None:
        self.handle.select_option(label=text)

    @translate_errors
    def select_by_value(self, value: str) -> None:
        self.handle.select_option(value=value)

    @translate_errors
    def select_by_index(self, index: int) -> None:
        self.handle.select_option(index=index)

    @translate_errors
    def selected_options(self) -> List[WebElementHandle]:
        return [PlaywrightElement(option) for option in self.handle.query_selector_all("option:checked")]


class PlaywrightDriver(WebDriverCapability):
    """
    One browser session (browser + context) driven through Playwright.

    The current window is a page of the context and the current frame is
    a frame of that page. Switching window resets the frame to the page's
    main frame.
    """

    def __init__(
        self,
        browser: Browser,
        context: BrowserContext,
        page: Page,
        accept_alerts: bool = True,
    ):
        """
        Args:
            browser: Browser the context belongs to
            context: Context whose pages are the session's windows
            page: Initially focused page
            accept_alerts: Answer to dialogs nobody called expect_alert() for
        """
        self.browser = browser
        self.context = context
        self.accept_alerts = accept_alerts
        self._page = page
        self._frame: Frame = page.main_frame
        self._handles: Dict[Page, str] = {}
        self._alert_answers: List[bool] = []
        # (message, accepted) of dialogs answered but not yet handled
        self._answered: List[Tuple[str, bool]] = []

        for existing in context.pages:
            self._track_page(existing)
        context.on("page", self._track_page)

    def _track_page(self, page: Page) -> None:
        if page not in self._handles:
            self._handles[page] = f"window-{uuid4().hex[:8]}"
            page.on("dialog", self._on_dialog)

    def _on_dialog(self, dialog: Dialog) -> None:
        # The page stays blocked until the dialog is answered
        accept = self._alert_answers.pop(0) if self._alert_answers else self.accept_alerts
        logger.debug(f"{'Accepting' if accept else 'Dismissing'} {dialog.type}: {dialog.message}")
        self._answered.append((dialog.message, accept))
        if accept:
            dialog.accept()
        else:
            dialog.dismiss()

    def _handle_for(self, page: Page) -> str:
        self._track_page(page)
        return self._handles[page]

    # =========================================================================
    # Element Lookup
    # =========================================================================

    @translate_errors
    def find_element(
        self,
        strategy: LocatorStrategy,
        lookup: str,
        root: Optional[WebElementHandle] = None,
    ) -> Optional[WebElementHandle]:
        selector = to_selector(strategy, lookup)
        scope = root.handle if isinstance(root, PlaywrightElement) else self._frame
        handle = scope.query_selector(selector)
        return PlaywrightElement(handle) if handle is not None else None

    @translate_errors
    def find_elements(
        self,
        strategy: LocatorStrategy,
        lookup: str,
        root: Optional[WebElementHandle] = None,
    ) -> List[WebElementHandle]:
        selector = to_selector(strategy, lookup)
        scope = root.handle if isinstance(root, PlaywrightElement) else self._frame
        return [PlaywrightElement(handle) for handle in scope.query_selector_all(selector)]

    @translate_errors
    def execute_script(self, source: str, *args: Any) -> Any:
        arguments = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        result = self._frame.evaluate_handle(SCRIPT_WRAPPER % source, arguments)
        return self._unwrap(result)

    def _unwrap(self, handle: JSHandle) -> Any:
        element = handle.as_element()
        if element is not None:
            return PlaywrightElement(element)
        if handle.evaluate("value => Array.isArray(value)"):
            properties = handle.get_properties()
            indexes = sorted(int(key) for key in properties if key.isdigit())
            items = [self._unwrap(properties[str(index)]) for index in indexes]
            for key, prop in properties.items():
                if not key.isdigit():
                    prop.dispose()
            handle.dispose()
            return items
        value = handle.json_value()
        handle.dispose()
        return value

    # =========================================================================
    # Frames and Windows
    # =========================================================================

    @translate_errors
    def switch_to_frame(self, element: WebElementHandle) -> None:
        frame = element.handle.content_frame() if isinstance(element, PlaywrightElement) else None
        if frame is None:
            raise TransientDriverFault(f"Element is not a frame: {element!r}")
        self._frame = frame

    @translate_errors
    def switch_to_window(self, handle: str) -> None:
        for page, page_handle in self._handles.items():
            if page_handle == handle and not page.is_closed():
                page.bring_to_front()
                self._page = page
                self._frame = page.main_frame
                return
        raise TransientDriverFault(f"No such window: {handle}")

    def current_window_handle(self) -> str:
        return self._handle_for(self._page)

    def window_handles(self) -> List[str]:
        return [self._handle_for(page) for page in self.context.pages]

    @translate_errors
    def close_window(self) -> None:
        self._page.close()

    # =========================================================================
    # Page Operations
    # =========================================================================

    @translate_errors
    def capture_screenshot(self) -> bytes:
        return self._page.screenshot()

    def current_url(self) -> str:
        return self._page.url

    @translate_errors
    def title(self) -> str:
        return self._page.title()

    @translate_errors
    def navigate(self, url: str) -> None:
        self._page.goto(url)
        self._frame = self._page.main_frame

    @translate_errors
    def refresh(self) -> None:
        self._page.reload()
        self._frame = self._page.main_frame

    @translate_errors
    def resize_window(self, width: int, height: int) -> None:
        self._page.set_viewport_size({"width": width, "height": height})

    @translate_errors
    def maximize_window(self) -> None:
        size = self._page.evaluate(
            "() => ({width: window.screen.availWidth, height: window.screen.availHeight})"
        )
        self._page.set_viewport_size(size)

    def expect_alert(self, accept: bool) -> None:
        self._alert_answers.append(accept)

    def handle_alert(self, accept: bool) -> None:
        """
        Confirm that the oldest unhandled dialog was answered this way.

        Dialogs are answered as soon as they open, with the answer given to
        expect_alert() or else the accept_alerts default.
        """
        if not self._answered:
            raise NoAlertPresentError("No alert is open")
        message, accepted = self._answered.pop(0)
        if accepted != accept:
            raise NoAlertPresentError(
                f"Alert '{message}' was already {'accepted' if accepted else 'dismissed'}, "
                f"expect_alert({accept}) must be called before the action that opens it"
            )

    def quit(self) -> None:
        try:
            self.context.close()
        finally:
            self.browser.close()


class PlaywrightDriverFactory:
    """
    Launches one Playwright browser per session name.

    Usage:
        factory = PlaywrightDriverFactory(WebSettings())
        sessions = SessionManager(factory)
        ...
        sessions.quit()
        factory.stop()
    """

    # Default browser launch options (chromium only)
    CHROMIUM_ARGS: List[str] = [
        "--ignore-certificate-errors",
        "--test-type",
    ]

    # Default context options
    DEFAULT_CONTEXT_OPTIONS: Dict[str, Any] = {
        "viewport": {"width": 1920, "height": 1080},
        "ignore_https_errors": True,
    }

    def __init__(self, settings: WebSettings):
        self.settings = settings
        self._playwright: Optional[Playwright] = None

    def __call__(self, name: str) -> PlaywrightDriver:
        if self._playwright is None:
            self._playwright = sync_playwright().start()

        browser_type = self.settings.browser
        headless = self.settings.headless
        logger.info(f"Loading {browser_type} browser for session '{name}' (headless={headless})")

        launch_options: Dict[str, Any] = {"headless": headless}
        if browser_type == "chromium":
            launch_options["args"] = list(self.CHROMIUM_ARGS)
        browser = getattr(self._playwright, browser_type).launch(**launch_options)

        context_options = dict(self.DEFAULT_CONTEXT_OPTIONS)
        if self.settings.user_agent:
            context_options["user_agent"] = self.settings.user_agent
        context = browser.new_context(**context_options)

        driver = PlaywrightDriver(
            browser, context, context.new_page(), accept_alerts=self.settings.accept_alerts
        )
        if self.settings.maximize:
            driver.maximize_window()
        return driver

    def stop(self) -> None:
        """Stop Playwright."""
        if self._playwright:
            self._playwright.stop()
            self._playwright = None
            logger.debug("Playwright stopped")


__all__ = [
    "PlaywrightDriver",
    "PlaywrightDriverFactory",
    "PlaywrightElement",
    "to_selector",
    "translate_errors",
]
