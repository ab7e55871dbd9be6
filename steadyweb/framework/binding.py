"""
================================================================================
Locator Bindings
================================================================================

Immutable descriptions of how to find a named element, and the registry that
maps symbolic element names to them.

A binding holds an ordered list of candidate locators. Each candidate is a
(strategy, lookup) pair with an optional container element name that scopes
the search (or names a frame to switch into first).

Declarative format (YAML or any flat mapping):

    username/locator: id,css selector
    username/locator/id: uname
    username/locator/css selector: input[name='username']
    username/locator/css selector/container: login form
    username/action/click/javascript: element.click();

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml
from loguru import logger

from .errors import LocatorBindingError


class LocatorStrategy(Enum):
    """Supported element lookup strategies."""

    ID = "id"
    NAME = "name"
    TAG_NAME = "tag name"
    CSS = "css selector"
    XPATH = "xpath"
    CLASS_NAME = "class name"
    LINK_TEXT = "link text"
    PARTIAL_LINK_TEXT = "partial link text"
    JAVASCRIPT = "javascript"

    @classmethod
    def parse(cls, text: str) -> Optional["LocatorStrategy"]:
        """
        Parse a strategy name.

        Accepts the canonical names plus the short aliases (tag, css, class),
        ignoring case and treating '-' and '_' as spaces.

        Returns:
            The strategy, or None if the name is not recognised
        """
        normalized = " ".join(text.strip().lower().replace("-", " ").replace("_", " ").split())
        return _STRATEGY_ALIASES.get(normalized)


_STRATEGY_ALIASES: Dict[str, LocatorStrategy] = {
    **{strategy.value: strategy for strategy in LocatorStrategy},
    "tag": LocatorStrategy.TAG_NAME,
    "css": LocatorStrategy.CSS,
    "class": LocatorStrategy.CLASS_NAME,
    "js": LocatorStrategy.JAVASCRIPT,
}


@dataclass(frozen=True)
class Locator:
    """
    One candidate lookup for an element.

    Attributes:
        strategy: Strategy name as declared (validated at resolution time)
        lookup: Lookup expression for the strategy
        container: Optional name of the binding that scopes the search
    """
    strategy: str
    lookup: str
    container: Optional[str] = None

    def __str__(self) -> str:
        return f"({self.strategy}: {self.lookup})"


@dataclass(frozen=True)
class LocatorBinding:
    """
    Symbolic element name plus its ordered candidate locators.

    The first candidate that yields an element wins.
    """
    element: str
    locators: Tuple[Locator, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        locators = tuple(self.locators)
        if not locators:
            raise ValueError(f"Locator binding for '{self.element}' has no locators")
        object.__setattr__(self, "locators", locators)

    @classmethod
    def single(
        cls,
        element: str,
        strategy: str,
        lookup: str,
        container: Optional[str] = None,
    ) -> "LocatorBinding":
        """Build a binding with a single candidate locator."""
        return cls(element, (Locator(strategy, lookup, container),))

    @property
    def primary(self) -> Locator:
        return self.locators[0]

    def describe(self) -> str:
        return ", ".join(str(locator) for locator in self.locators)


class BindingRegistry:
    """
    Symbolic element name -> LocatorBinding cache.

    Also holds scripts bound to element actions, which take precedence
    over the built-in action when present.

    Usage:
        >>> registry = BindingRegistry()
        >>> registry.register(LocatorBinding.single("username", "id", "uname"))
        >>> registry.get("username").primary.lookup
        'uname'
    """

    def __init__(self) -> None:
        self._bindings: Dict[str, LocatorBinding] = {}
        self._action_scripts: Dict[Tuple[str, str], str] = {}

    def register(self, binding: LocatorBinding) -> None:
        self._bindings[binding.element] = binding
        logger.debug(f"Registered locator binding: {binding.element} -> {binding.describe()}")

    def register_action_script(self, element: str, action: str, javascript: str) -> None:
        self._action_scripts[(element, action)] = javascript

    def find(self, element: str) -> Optional[LocatorBinding]:
        return self._bindings.get(element)

    def get(self, element: str) -> LocatorBinding:
        """
        Get the binding for an element name.

        Raises:
            LocatorBindingError: When no binding is registered for the name
        """
        binding = self._bindings.get(element)
        if binding is None:
            raise LocatorBindingError(f"Undefined locator binding for element: {element}")
        return binding

    def action_script(self, element: str, action: str) -> Optional[str]:
        return self._action_scripts.get((element, action))

    def __contains__(self, element: object) -> bool:
        return element in self._bindings

    def __len__(self) -> int:
        return len(self._bindings)

    @classmethod
    def from_properties(cls, properties: Mapping[str, Any]) -> "BindingRegistry":
        """
        Build a registry from a flat mapping in the declarative format.

        Args:
            properties: Mapping of 'name/locator...' and 'name/action...' keys

        Returns:
            Populated BindingRegistry

        Raises:
            LocatorBindingError: When a declared strategy has no lookup
        """
        registry = cls()
        props = {str(key).strip(): value for key, value in properties.items()}

        for key, value in props.items():
            if key.endswith("/locator"):
                element = key[: -len("/locator")]
                registry.register(_binding_from_properties(element, str(value), props))
            elif "/action/" in key and key.endswith("/javascript"):
                element, _, rest = key.partition("/action/")
                action = rest[: -len("/javascript")]
                registry.register_action_script(element, action, str(value))

        return registry

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "BindingRegistry":
        """Load a registry from a YAML file of declarative properties."""
        with open(path, "r", encoding="utf-8") as f:
            properties = yaml.safe_load(f) or {}
        logger.debug(f"Loaded locator bindings from: {path}")
        return cls.from_properties(properties)


def _binding_from_properties(
    element: str,
    strategies: str,
    props: Mapping[str, Any],
) -> LocatorBinding:
    locators = []
    for strategy in _split(strategies):
        lookup = props.get(f"{element}/locator/{strategy}")
        if lookup is None:
            raise LocatorBindingError(
                f"Undefined locator lookup binding for {element}: {element}/locator/{strategy}"
            )
        container = props.get(f"{element}/locator/{strategy}/container")
        locators.append(Locator(strategy, str(lookup), str(container) if container else None))
    return LocatorBinding(element, tuple(locators))


def _split(values: str) -> Iterable[str]:
    return [value.strip() for value in values.split(",") if value.strip()]


__all__ = [
    "LocatorStrategy",
    "Locator",
    "LocatorBinding",
    "BindingRegistry",
]
