"""
================================================================================
Element Locator with Fallback Strategies
================================================================================

Resolves a symbolic locator binding to a live element:
    - Candidate locators tried in declared order, first hit wins
    - Container scoping, with a frame switch for frame/iframe containers
    - Nested containers resolved recursively, refusing circular chains
    - Self-describing failures listing every (strategy: lookup) tried

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Tuple

from loguru import logger

from .binding import BindingRegistry, Locator, LocatorBinding, LocatorStrategy
from .driver import WebDriverCapability, WebElementHandle
from .errors import (
    ContainerCycleError,
    ElementNotFoundError,
    LocatorBindingError,
    ScriptTimeoutError,
    UnsupportedLocatorStrategyError,
    WaitTimeoutError,
)
from .session_manager import SessionManager


FRAME_TAGS = ("iframe", "frame")


@dataclass
class ResolvedElement:
    """
    A freshly located element. Never cached across actions.

    Attributes:
        handle: The live element
        binding: Binding it was resolved from
        origin_window: Window active before a container frame switch (if any)
    """
    handle: WebElementHandle
    binding: LocatorBinding
    origin_window: Optional[str] = None


class ElementLocator:
    """
    Locates elements described by locator bindings.

    Locator Priority Order:
        Exactly the order of the binding's locators. No scoring.

    Usage:
        >>> locator = ElementLocator(sessions, registry)
        >>> element = locator.locate(registry.get("username"))
        >>> rows = locator.locate_all(registry.get("result rows"))
    """

    def __init__(
        self,
        sessions: SessionManager,
        registry: BindingRegistry,
        highlighter: Optional[Callable[[WebElementHandle], None]] = None,
    ):
        """
        Args:
            sessions: Session manager supplying the current driver
            registry: Bindings used to resolve container names
            highlighter: Called with each element found by locate()
        """
        self.sessions = sessions
        self.registry = registry
        self.highlighter = highlighter

    def locate(self, binding: LocatorBinding) -> WebElementHandle:
        """
        Locate a single element.

        A frame entered to reach the element is left again before returning.

        Raises:
            ElementNotFoundError: When every candidate locator fails
            UnsupportedLocatorStrategyError: When any candidate has an unknown strategy
            ContainerCycleError: When the container chain refers back to itself
        """
        resolved = self.resolve(binding)
        if resolved.origin_window is not None:
            self.sessions.driver.switch_to_window(resolved.origin_window)
        return resolved.handle

    def resolve(self, binding: LocatorBinding, chain: Tuple[str, ...] = ()) -> ResolvedElement:
        """
        Locate a single element, keeping track of any frame switch made.

        The driver is left inside the container frame, if any. Callers
        switch back to origin_window when they are done with the element.
        """
        strategies = self._validate(binding)
        driver = self.sessions.driver
        chain = chain + (binding.element,)

        for locator, strategy in zip(binding.locators, strategies):
            found = self._find(driver, binding, locator, strategy, chain, find_all=False)
            if found is None:
                continue
            element, origin_window = found
            if element is None:
                continue

            if locator is not binding.primary:
                logger.warning(
                    f"Element '{binding.element}' used fallback locator: {locator}"
                )
            else:
                logger.debug(f"Element '{binding.element}' found by {locator}")

            if not element.is_displayed():
                _scroll_into_view(driver, element)
            if self.highlighter is not None:
                self.highlighter(element)
            return ResolvedElement(element, binding, origin_window)

        raise self._not_found(binding)

    def locate_all(self, binding: LocatorBinding) -> List[WebElementHandle]:
        """
        Locate all matching elements.

        Returns:
            Elements found by the first candidate with any match,
            or an empty list when no candidate matches

        Raises:
            UnsupportedLocatorStrategyError: When any candidate has an unknown strategy
            ContainerCycleError: When the container chain refers back to itself
        """
        strategies = self._validate(binding)
        driver = self.sessions.driver
        chain = (binding.element,)

        for locator, strategy in zip(binding.locators, strategies):
            found = self._find(driver, binding, locator, strategy, chain, find_all=True)
            if found is None:
                continue
            elements, origin_window = found
            if origin_window is not None:
                driver.switch_to_window(origin_window)
            if elements:
                logger.debug(
                    f"Found {len(elements)} '{binding.element}' element(s) by {locator}"
                )
                return elements

        logger.debug(f"No '{binding.element}' elements found by {binding.describe()}")
        return []

    def _validate(self, binding: LocatorBinding) -> List[LocatorStrategy]:
        strategies = []
        for locator in binding.locators:
            strategy = LocatorStrategy.parse(locator.strategy)
            if strategy is None:
                raise UnsupportedLocatorStrategyError(
                    binding.element, locator.strategy, locator.lookup
                )
            strategies.append(strategy)
        return strategies

    def _find(
        self,
        driver: WebDriverCapability,
        binding: LocatorBinding,
        locator: Locator,
        strategy: LocatorStrategy,
        chain: Tuple[str, ...],
        find_all: bool,
    ) -> Optional[Tuple[Any, Optional[str]]]:
        """Try one candidate. Returns None when its container cannot be found."""
        root: Optional[WebElementHandle] = None
        origin_window: Optional[str] = None

        if locator.container:
            if locator.container in chain:
                raise ContainerCycleError(chain + (locator.container,))
            try:
                container = self.resolve(self.registry.get(locator.container), chain)
            except (UnsupportedLocatorStrategyError, ContainerCycleError):
                raise
            except LocatorBindingError as e:
                logger.debug(
                    f"Container '{locator.container}' of '{binding.element}' not found: {e}"
                )
                return None
            origin_window = container.origin_window
            if container.handle.tag_name.lower() in FRAME_TAGS:
                if origin_window is None:
                    origin_window = driver.current_window_handle()
                logger.debug(f"Switching to frame '{locator.container}'")
                driver.switch_to_frame(container.handle)
            else:
                root = container.handle

        result: Any = None
        try:
            if strategy is LocatorStrategy.JAVASCRIPT:
                found = _as_list(self._find_by_javascript(driver, binding, locator))
                result = found if find_all else next(iter(found), None)
            elif find_all:
                result = driver.find_elements(strategy, locator.lookup, root) or []
            else:
                result = driver.find_element(strategy, locator.lookup, root)
        finally:
            empty = result is None or (find_all and not result)
            if empty and origin_window is not None:
                # Leave the frame again so the next candidate searches the top document
                driver.switch_to_window(origin_window)
                origin_window = None
        return result, origin_window

    def _find_by_javascript(
        self,
        driver: WebDriverCapability,
        binding: LocatorBinding,
        locator: Locator,
    ) -> Any:
        try:
            return driver.execute_script(f"return {locator.lookup}")
        except ScriptTimeoutError as e:
            raise WaitTimeoutError(
                f"locating {binding.element} by {locator}"
            ) from e

    def _not_found(self, binding: LocatorBinding) -> ElementNotFoundError:
        error = ElementNotFoundError(
            binding.element,
            [(locator.strategy, locator.lookup) for locator in binding.locators],
        )
        logger.error(str(error))
        return error


def _as_list(result: Any) -> List[Any]:
    if result is None:
        return []
    if isinstance(result, (list, tuple)):
        return list(result)
    return [result]


def _scroll_into_view(driver: WebDriverCapability, element: WebElementHandle) -> None:
    driver.execute_script(
        "var elem = arguments[0]; "
        "if (typeof elem !== 'undefined' && elem != null) { elem.scrollIntoView(true); }",
        element,
    )


__all__ = [
    "ElementLocator",
    "ResolvedElement",
    "FRAME_TAGS",
]
