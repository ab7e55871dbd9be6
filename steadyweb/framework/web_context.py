"""
================================================================================
Web Context
================================================================================

Facade the step layer calls into. Composes the session manager, element
locator, interaction executor, wait engine and screenshot gate, and exposes
the named element actions and page utilities built on them.

Provides:
    - Named actions (click, right click, submit, check/tick, uncheck/untick,
      clear) with bound javascript actions taking precedence
    - Actions performed in the context of another element (hover anchor)
    - Modifier-key clicks, key sequences, values and dropdown selection
    - Element state assertions and text/selection reads
    - Page utilities (screenshots, URL capture, resize, alerts, navigation)
    - Session and child/parent window switching

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import allure
from loguru import logger

from steadyweb.report_tools.allure_utils import attach_screenshot, attach_text

from .binding import BindingRegistry, LocatorBinding
from .driver import WebElementHandle
from .errors import (
    ContainerCycleError,
    ElementNotFoundError,
    LocatorBindingError,
    UnsupportedLocatorStrategyError,
)
from .executor import InteractionExecutor, normalize_action
from .keys import KEYS, modifier_key, named_key
from .locator import ElementLocator
from .playwright_driver import PlaywrightDriverFactory
from .screenshot_gate import ScreenshotGate
from .session_manager import DriverFactory, SessionManager
from .settings import WebSettings
from .wait_engine import WaitEngine


BindingRef = Union[str, LocatorBinding]

# Actions perform_action understands without a bound script
ELEMENT_ACTIONS = ("click", "right click", "submit", "check", "tick", "uncheck", "untick", "clear")

# Actions perform_action_in_context understands
CONTEXT_ACTIONS = ("click", "right click", "check", "tick", "uncheck", "untick")

CLICK_BUTTONS = {"click": "left", "right click": "right"}

ELEMENT_STATES = ("displayed", "hidden", "checked", "ticked", "unchecked", "unticked", "enabled", "disabled")

FOCUS_SCRIPT = "(function(element){element.focus();})(arguments[0]);"

TEXT_SCRIPT = "return (function(element){return element.innerText || element.textContent || ''})(arguments[0]);"

SCROLL_SCRIPT = "arguments[0].scrollIntoView(arguments[1]);"

HIGHLIGHT_SCRIPT = (
    "var element = arguments[0]; var type = element.getAttribute('type'); "
    "if (('radio' == type || 'checkbox' == type) "
    "&& element.parentElement.getElementsByTagName('input').length == 1) "
    "{ element = element.parentElement; } "
    "var original_style = element.getAttribute('style'); "
    "element.setAttribute('style', original_style + '; ' + arguments[1]); "
    "setTimeout(function() { element.setAttribute('style', original_style); }, arguments[2]);"
)


class WebContext:
    """
    Entry point for driving a browser through symbolic element bindings.

    Usage:
        >>> registry = BindingRegistry.from_yaml("bindings/login.yaml")
        >>> web = WebContext(registry=registry)
        >>> web.navigate_to("https://example.com/login")
        >>> web.send_value("username", "gwen", clear_first=True)
        >>> web.perform_action("click", "login button")
        >>> web.wait_until("waiting for dashboard", lambda: web.wait_for_text("welcome banner"))
        >>> web.close()
    """

    def __init__(
        self,
        settings: Optional[WebSettings] = None,
        registry: Optional[BindingRegistry] = None,
        driver_factory: Optional[DriverFactory] = None,
        attach: Optional[Callable[[bytes], None]] = None,
    ):
        """
        Args:
            settings: Web settings (ConfigLoader backed if None)
            registry: Locator bindings and bound action scripts
            driver_factory: Creates a driver per session name
                            (launches Playwright browsers if None)
            attach: Receives retained screenshots (allure if None)
        """
        self.settings = settings or WebSettings()
        self.registry = registry if registry is not None else BindingRegistry()

        if driver_factory is None:
            driver_factory = PlaywrightDriverFactory(self.settings)
        self.driver_factory = driver_factory

        self.sessions = SessionManager(driver_factory)
        self.gate = ScreenshotGate(self.settings, attach or attach_screenshot)
        self.locator = ElementLocator(self.sessions, self.registry, highlighter=self.highlight_element)
        self.executor = InteractionExecutor(self.sessions, self.locator, self.gate, self.settings)
        self.waits = WaitEngine(self.settings)

        # Captured values (e.g. the current URL) by name
        self.values: Dict[str, str] = {}
        self._selected: Optional[Tuple[str, WebElementHandle]] = None

    # =========================================================================
    # Bindings and Location
    # =========================================================================

    def get_locator_binding(self, element: str) -> LocatorBinding:
        return self.registry.get(element)

    def _binding(self, ref: BindingRef) -> LocatorBinding:
        return ref if isinstance(ref, LocatorBinding) else self.registry.get(ref)

    def locate(self, ref: BindingRef) -> WebElementHandle:
        return self.locator.locate(self._binding(ref))

    def locate_all(self, ref: BindingRef) -> List[WebElementHandle]:
        return self.locator.locate_all(self._binding(ref))

    def select_element(self, element: str) -> WebElementHandle:
        """Locate an element and keep it as the last selected element."""
        handle = self.locate(element)
        self._selected = (element, handle)
        return handle

    def get_cached_element(self, element: str) -> Optional[WebElementHandle]:
        """Return the last selected element if it was selected under this name."""
        if self._selected is not None and self._selected[0] == element:
            return self._selected[1]
        return None

    # =========================================================================
    # Element Actions
    # =========================================================================

    def perform_action(self, action: str, ref: BindingRef) -> None:
        """
        Perform a named action on an element.

        A javascript bound to the element and action
        (<element>/action/<action>/javascript) takes precedence over the
        built-in action.

        Args:
            action: click, right click, submit, check, tick, uncheck, untick, clear
            ref: Element binding or name

        Raises:
            ValueError: If the action is unknown and no script is bound to it
        """
        binding = self._binding(ref)
        script = self.registry.action_script(binding.element, action.strip())
        name = normalize_action(action)
        if script is None:
            script = self.registry.action_script(binding.element, name)

        with allure.step(f"{action} {binding.element}"):
            if script is not None:
                self.executor.perform(
                    action,
                    binding,
                    lambda element: self.execute_js(
                        f"(function(element) {{ {script} }})(arguments[0])", element
                    ),
                )
                return

            if name not in ELEMENT_ACTIONS:
                raise ValueError(f"Unsupported action: {action}")
            self.executor.perform(name, binding, lambda element: self._act(name, element))

    def _act(self, action: str, element: WebElementHandle) -> None:
        if action == "click":
            self._focus(element)
            element.click()
        elif action == "right click":
            self._focus(element)
            element.context_click()
        elif action == "submit":
            element.submit()
        elif action in ("check", "tick"):
            if not element.is_selected():
                element.press(KEYS["SPACE"])
            if not element.is_selected():
                element.click()
        elif action in ("uncheck", "untick"):
            if element.is_selected():
                element.press(KEYS["SPACE"])
            if element.is_selected():
                element.click()
        elif action == "clear":
            element.clear()

    def _focus(self, element: WebElementHandle) -> None:
        self.sessions.driver.execute_script(FOCUS_SCRIPT, element)

    def perform_action_in_context(self, action: str, element: str, context: str) -> None:
        """
        Perform an action on an element in the context of another element.

        The pointer is moved to the context element and then to the element
        before acting. When either name has no usable binding, the compound
        binding "<element> of <context>" is used instead.

        Raises:
            ElementNotFoundError: If neither the pair nor the compound binding
                                  could be resolved
        """
        name = normalize_action(action)
        if name not in CONTEXT_ACTIONS:
            raise ValueError(f"Unsupported action in context: {action}")

        with allure.step(f"{action} {element} of {context}"):
            try:
                context_binding = self.registry.get(context)
                element_binding = self.registry.get(element)
                self._perform_in(name, element_binding, context_binding)
            except (UnsupportedLocatorStrategyError, ContainerCycleError):
                raise
            except LocatorBindingError as e1:
                compound = f"{element} of {context}"
                logger.debug(f"Could not {name} {element} in {context} ({e1}), trying '{compound}'")
                try:
                    self.perform_action(name, self.registry.get(compound))
                except (UnsupportedLocatorStrategyError, ContainerCycleError):
                    raise
                except LocatorBindingError as e2:
                    names = f"'{element}', '{context}', or '{compound}'"
                    raise ElementNotFoundError(
                        names, message=f"Could not locate {names}: {e1}, {e2}"
                    ) from e2

    def _perform_in(
        self,
        action: str,
        element_binding: LocatorBinding,
        context_binding: LocatorBinding,
    ) -> None:
        def act(anchor: WebElementHandle, element: WebElementHandle) -> None:
            anchor.hover()
            element.hover()
            if action == "click":
                element.click()
            elif action == "right click":
                element.context_click()
            elif action in ("check", "tick"):
                if not element.is_selected():
                    element.press(KEYS["SPACE"])
                if not element.is_selected():
                    element.click()
            else:
                if element.is_selected():
                    element.press(KEYS["SPACE"])
                if element.is_selected():
                    element.click()

        # The anchor is located afresh on every attempt, inside the element's retry
        self.executor.perform(
            action,
            element_binding,
            lambda element: act(self.locator.locate(context_binding), element),
        )

    def hold_and_click(self, modifier_keys: Sequence[str], action: str, ref: BindingRef) -> None:
        """
        Click or right click an element while holding modifier keys.

        Raises:
            UnsupportedModifierKeyError: If a key is not SHIFT, CONTROL, ALT or META
        """
        modifiers = [modifier_key(key) for key in modifier_keys]
        name = normalize_action(action)
        button = CLICK_BUTTONS.get(name)
        if button is None:
            raise ValueError(f"Unsupported click action: {action}")
        binding = self._binding(ref)

        def click(element: WebElementHandle) -> None:
            self._focus(element)
            element.click_with_modifiers(modifiers, button)

        with allure.step(f"{'+'.join(modifiers)} {action} {binding.element}"):
            self.executor.perform(name, binding, click)

    def send_keys(self, ref: BindingRef, keys: Sequence[str]) -> None:
        """
        Send a sequence of keys to an element.

        Named keys (RETURN, TAB, ARROW_DOWN, ...) are pressed, anything
        else is typed as literal text.
        """
        binding = self._binding(ref)

        def send(element: WebElementHandle) -> None:
            self._focus(element)
            for key in keys:
                named = named_key(key)
                if named is not None:
                    element.press(named)
                else:
                    element.send_keys(key.strip())

        with allure.step(f"Send keys to {binding.element}"):
            self.executor.perform("send keys", binding, send)

    def send_value(
        self,
        ref: BindingRef,
        value: str,
        clear_first: bool = False,
        send_enter_key: bool = False,
    ) -> None:
        """
        Type a value into an element.

        Args:
            ref: Element binding or name
            value: Text to type
            clear_first: Clear the field before typing
            send_enter_key: Press Enter after typing
        """
        binding = self._binding(ref)

        def send(element: WebElementHandle) -> None:
            if clear_first:
                element.clear()
            element.send_keys(value)
            if send_enter_key:
                element.press(KEYS["RETURN"])

        with allure.step(f"Enter '{value}' in {binding.element}"):
            self.executor.perform("send value", binding, send)

    def select_by_visible_text(self, ref: BindingRef, text: str) -> None:
        binding = self._binding(ref)
        logger.debug(f"Selecting '{text}' in {binding.element} by text")
        with allure.step(f"Select '{text}' in {binding.element}"):
            self.executor.perform("select", binding, lambda e: e.select_by_visible_text(text))

    def select_by_value(self, ref: BindingRef, value: str) -> None:
        binding = self._binding(ref)
        logger.debug(f"Selecting '{value}' in {binding.element} by value")
        with allure.step(f"Select '{value}' in {binding.element}"):
            self.executor.perform("select", binding, lambda e: e.select_by_value(value))

    def select_by_index(self, ref: BindingRef, index: int) -> None:
        """Select an option by its zero based index."""
        binding = self._binding(ref)
        logger.debug(f"Selecting option in {binding.element} by index: {index}")
        with allure.step(f"Select option {index} in {binding.element}"):
            self.executor.perform("select", binding, lambda e: e.select_by_index(index))

    # =========================================================================
    # Element State and Reads
    # =========================================================================

    def check_element_state(self, ref: BindingRef, state: str, negate: bool = False) -> None:
        """
        Assert that an element is (or is not) in a given state.

        A missing element counts as hidden and not displayed.

        Args:
            ref: Element binding or name
            state: displayed, hidden, checked, ticked, unchecked, unticked,
                   enabled or disabled
            negate: Assert the element is not in the state

        Raises:
            AssertionError: If the check fails
            ElementNotFoundError: If the element is missing and the state is
                                  not displayed/hidden
        """
        binding = self._binding(ref)
        state = state.strip().lower()
        if state not in ELEMENT_STATES:
            raise ValueError(f"Unsupported element state: {state}")

        with allure.step(f"Check {binding.element} is {'not ' if negate else ''}{state}"):
            try:
                result = self.executor.perform(None, binding, lambda e: _in_state(e, state))
            except ElementNotFoundError:
                if state not in ("displayed", "hidden"):
                    raise
                result = state == "hidden"

            if negate and result:
                raise AssertionError(f"{binding.element} should not be {state}")
            if not negate and not result:
                raise AssertionError(f"{binding.element} should be {state}")

    def get_element_text(self, ref: BindingRef) -> str:
        """
        Get the text of an element.

        The first non-empty of: rendered text, text attribute, value
        attribute, innerText/textContent.
        """
        binding = self._binding(ref)

        def read(element: WebElementHandle) -> str:
            for value in (element.text, element.get_attribute("text"), element.get_attribute("value")):
                if value:
                    return value
            return self.sessions.driver.execute_script(TEXT_SCRIPT, element) or ""

        text = self.executor.perform(None, binding, read)
        logger.debug(f"get_element_text({binding.element})='{text}'")
        return text

    def get_element_selection(self, element: str, selection: str) -> str:
        """
        Get the selected option(s) of a dropdown.

        Args:
            element: Element name
            selection: "text" for option text, anything else for option values

        Returns:
            Comma separated selection
        """
        binding = self.registry.get(element)

        def selected_text(select: WebElementHandle) -> str:
            options = select.selected_options()
            text = ",".join(option.text for option in options)
            return text or ",".join(option.get_attribute("text") or "" for option in options)

        def selected_value(select: WebElementHandle) -> str:
            return ",".join(option.get_attribute("value") or "" for option in select.selected_options())

        read = selected_text if selection.strip() == "text" else selected_value
        value = self.executor.perform(None, binding, read)
        logger.debug(f"get_element_selection({element}, {selection.strip()})='{value}'")
        return value

    def wait_for_text(self, ref: BindingRef) -> bool:
        """True if the element currently has any text."""
        return len(self.get_element_text(ref)) > 0

    def wait_until(
        self,
        reason: str,
        condition: Callable[[], bool],
        timeout_secs: Optional[float] = None,
    ) -> None:
        """Block until condition holds (web.wait.seconds if no timeout is given)."""
        self.waits.wait_until(reason, condition, timeout_secs)

    # =========================================================================
    # Page Utilities
    # =========================================================================

    def scroll_into_view(self, ref: BindingRef, to_top: bool = True) -> None:
        binding = self._binding(ref)
        self.executor.perform(
            None,
            binding,
            lambda element: self.sessions.driver.execute_script(SCROLL_SCRIPT, element, to_top),
        )

    def highlight_element(self, element: WebElementHandle) -> None:
        """
        Highlight an element for web.throttle.msecs using web.highlight.style.

        Radio buttons and checkboxes highlight their parent when it wraps
        only that input.
        """
        msecs = self.settings.throttle_msecs
        if msecs <= 0:
            return
        self.execute_js(
            HIGHLIGHT_SCRIPT,
            element,
            self.settings.highlight_style,
            msecs,
            take_screenshot=self.settings.capture_screenshot_highlighting,
        )
        time.sleep(msecs / 1000.0)

    def execute_js(self, javascript: str, *args: Any, take_screenshot: bool = False) -> Any:
        """
        Execute javascript in the current page.

        A result of True pauses for one throttle interval so the page can
        react before the next step.
        """
        driver = self.sessions.driver
        result = driver.execute_script(javascript, *args)
        if take_screenshot and self.settings.capture_screenshots:
            self.gate.maybe_capture(driver, unconditional=False)
        logger.debug(f"Evaluated javascript: {javascript}, result='{result}'")
        if result is True:
            time.sleep(self.settings.throttle_seconds)
        return result

    def capture_screenshot(self, unconditional: bool = False) -> bool:
        return self.gate.maybe_capture(self.sessions.driver, unconditional)

    def capture_current_url(self, as_name: Optional[str] = None) -> str:
        """Capture the current URL, store it by name and attach it to the report."""
        name = as_name or "the current URL"
        url = self.sessions.driver.current_url()
        self.values[name] = url
        attach_text(url, name=name)
        return url

    def get_title(self) -> str:
        title = self.sessions.driver.title()
        logger.debug(f"Page title: {title}")
        return title

    def resize_window(self, width: int, height: int) -> None:
        logger.info(f"Resizing browser window to width {width} and height {height}")
        self.sessions.driver.resize_window(width, height)

    def maximize_window(self) -> None:
        logger.info("Maximising browser window")
        self.sessions.driver.maximize_window()

    def refresh_page(self) -> None:
        self.sessions.driver.refresh()

    def expect_alert(self, accept: bool) -> None:
        """
        Decide how the next alert is answered, before the action that opens it.

        Alerts nobody expected are answered with web.alerts.accept.
        """
        logger.debug(f"Next alert will be {'accepted' if accept else 'dismissed'}")
        self.sessions.driver.expect_alert(accept)

    def handle_alert(self, accept: bool) -> None:
        with allure.step(f"{'Accept' if accept else 'Dismiss'} alert"):
            self.sessions.driver.handle_alert(accept)

    def navigate_to(self, url: str) -> None:
        with allure.step(f"Navigate to {url}"):
            driver = self.sessions.driver
            driver.navigate(url)
            logger.debug(f"Navigated to: {url}")
            if self.settings.capture_screenshots:
                self.gate.maybe_capture(driver, unconditional=False)

    # =========================================================================
    # Sessions and Windows
    # =========================================================================

    def switch_to_session(self, name: str) -> None:
        self.sessions.switch_to(name)

    def switch_to_child(self) -> str:
        return self.sessions.switch_to_child()

    def close_child(self) -> None:
        self.sessions.close_child()

    def switch_to_parent(self, child_was_closed: bool) -> str:
        return self.sessions.switch_to_parent(child_was_closed)

    def close(self, name: Optional[str] = None) -> None:
        """
        Close one browser session, or all of them when name is None.

        Closing all sessions also stops the driver factory if it can be stopped.
        """
        self.sessions.quit(name)
        if name is None:
            stop = getattr(self.driver_factory, "stop", None)
            if stop is not None:
                stop()

    def reset(self) -> None:
        """Close all sessions and forget the screenshot fingerprint and selected element."""
        self.sessions.reset()
        self.gate.reset()
        self._selected = None


def _in_state(element: WebElementHandle, state: str) -> bool:
    if state == "displayed":
        return element.is_displayed()
    if state == "hidden":
        return not element.is_displayed()
    if state in ("checked", "ticked"):
        return element.is_selected()
    if state in ("unchecked", "unticked"):
        return not element.is_selected()
    if state == "enabled":
        return element.is_enabled()
    return not element.is_enabled()


__all__ = [
    "WebContext",
    "ELEMENT_ACTIONS",
    "CONTEXT_ACTIONS",
    "ELEMENT_STATES",
]
