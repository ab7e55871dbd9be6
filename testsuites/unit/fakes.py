"""
Hand-written fakes for the driver capability.

FakeDriver serves elements from a lookup table keyed by
(strategy value, lookup) and records every call so tests can assert on
exactly which lookups, scripts and window switches happened.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

from steadyweb.framework.binding import LocatorStrategy
from steadyweb.framework.driver import WebDriverCapability, WebElementHandle
from steadyweb.framework.settings import WebSettings


class DummyConfig:
    def __init__(self, data):
        self.data = data

    def get(self, key, default=None):
        return self.data.get(key, default)


def make_settings(**overrides) -> WebSettings:
    """Settings with no throttle delay, so tests never sleep."""
    data = {"web.throttle.msecs": 0, "web.wait.seconds": 5}
    data.update({f"web.{key.replace('_', '.')}": value for key, value in overrides.items()})
    return WebSettings(DummyConfig(data))


class FakeElement(WebElementHandle):
    def __init__(
        self,
        name: str,
        tag: str = "div",
        text: str = "",
        attributes: Optional[Dict[str, str]] = None,
        displayed: bool = True,
        selected: bool = False,
        enabled: bool = True,
        options: Optional[List["FakeElement"]] = None,
    ):
        self.name = name
        self.tag = tag
        self._text = text
        self.attributes = attributes or {}
        self.displayed = displayed
        self.selected = selected
        self.enabled = enabled
        self.options = options or []
        self.calls: List[Tuple[Any, ...]] = []

    def __repr__(self) -> str:
        return f"FakeElement({self.name!r})"

    @property
    def tag_name(self) -> str:
        return self.tag

    @property
    def text(self) -> str:
        return self._text

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def is_displayed(self) -> bool:
        return self.displayed

    def is_selected(self) -> bool:
        return self.selected

    def is_enabled(self) -> bool:
        return self.enabled

    def click(self) -> None:
        self.calls.append(("click",))
        if self.tag == "input" and self.attributes.get("type") == "checkbox":
            self.selected = not self.selected

    def context_click(self) -> None:
        self.calls.append(("context_click",))

    def submit(self) -> None:
        self.calls.append(("submit",))

    def clear(self) -> None:
        self.calls.append(("clear",))

    def send_keys(self, text: str) -> None:
        self.calls.append(("send_keys", text))

    def press(self, key: str) -> None:
        self.calls.append(("press", key))

    def hover(self) -> None:
        self.calls.append(("hover",))

    def click_with_modifiers(self, modifiers: Sequence[str], button: str = "left") -> None:
        self.calls.append(("click_with_modifiers", tuple(modifiers), button))

    def select_by_visible_text(self, text: str) -> None:
        self.calls.append(("select_by_visible_text", text))

    def select_by_value(self, value: str) -> None:
        self.calls.append(("select_by_value", value))

    def select_by_index(self, index: int) -> None:
        self.calls.append(("select_by_index", index))

    def selected_options(self) -> List[WebElementHandle]:
        return [option for option in self.options if option.selected]


class FakeDriver(WebDriverCapability):
    def __init__(self, elements: Optional[Dict[Tuple[str, str], Any]] = None):
        self.elements: Dict[Tuple[str, str], Any] = dict(elements or {})
        self.scripts: Dict[str, Any] = {}
        self.lookups: List[Tuple[str, str, Optional[WebElementHandle]]] = []
        self.executed: List[Tuple[str, Tuple[Any, ...]]] = []
        self.handles: List[str] = ["main"]
        self.current = "main"
        self.frame: Optional[WebElementHandle] = None
        self.switches: List[Tuple[str, Any]] = []
        self.screenshots: List[bytes] = []
        self.url = "about:blank"
        self.page_title = ""
        self.navigated: List[str] = []
        self.alerts: List[bool] = []
        self.expected_alerts: List[bool] = []
        self.window_size: Optional[Tuple[int, int]] = None
        self.closed: List[str] = []
        self.quit_count = 0

    def add(self, strategy: str, lookup: str, element: Any) -> Any:
        self.elements[(strategy, lookup)] = element
        return element

    def _visible_elements(self) -> Dict[Tuple[str, str], Any]:
        return self.elements

    def find_element(
        self,
        strategy: LocatorStrategy,
        lookup: str,
        root: Optional[WebElementHandle] = None,
    ) -> Optional[WebElementHandle]:
        self.lookups.append((strategy.value, lookup, root))
        found = self._visible_elements().get((strategy.value, lookup))
        if isinstance(found, list):
            return found[0] if found else None
        return found

    def find_elements(
        self,
        strategy: LocatorStrategy,
        lookup: str,
        root: Optional[WebElementHandle] = None,
    ) -> List[WebElementHandle]:
        self.lookups.append((strategy.value, lookup, root))
        found = self._visible_elements().get((strategy.value, lookup))
        if found is None:
            return []
        return list(found) if isinstance(found, list) else [found]

    def execute_script(self, source: str, *args: Any) -> Any:
        self.executed.append((source, args))
        result = self.scripts.get(source)
        if isinstance(result, Exception):
            raise result
        return result

    def switch_to_frame(self, element: WebElementHandle) -> None:
        self.frame = element
        self.switches.append(("frame", element))

    def switch_to_window(self, handle: str) -> None:
        self.current = handle
        self.frame = None
        self.switches.append(("window", handle))

    def current_window_handle(self) -> str:
        return self.current

    def window_handles(self) -> List[str]:
        return list(self.handles)

    def open_window(self, handle: str) -> None:
        self.handles.append(handle)

    def close_window(self) -> None:
        self.handles.remove(self.current)
        self.closed.append(self.current)

    def capture_screenshot(self) -> bytes:
        return self.screenshots.pop(0) if self.screenshots else b"png"

    def current_url(self) -> str:
        return self.url

    def title(self) -> str:
        return self.page_title

    def navigate(self, url: str) -> None:
        self.url = url
        self.navigated.append(url)

    def refresh(self) -> None:
        self.navigated.append(self.url)

    def resize_window(self, width: int, height: int) -> None:
        self.window_size = (width, height)

    def maximize_window(self) -> None:
        self.window_size = (1920, 1080)

    def expect_alert(self, accept: bool) -> None:
        self.expected_alerts.append(accept)

    def handle_alert(self, accept: bool) -> None:
        self.alerts.append(accept)

    def quit(self) -> None:
        self.quit_count += 1


class FrameScopedDriver(FakeDriver):
    """
    FakeDriver whose frames have their own documents.

    While a frame is entered, only `frame_elements` can be found; the top
    document's `elements` are out of reach, as with a real browser.
    """

    def __init__(self, elements: Optional[Dict[Tuple[str, str], Any]] = None):
        super().__init__(elements)
        self.frame_elements: Dict[Tuple[str, str], Any] = {}

    def add_in_frame(self, strategy: str, lookup: str, element: Any) -> Any:
        self.frame_elements[(strategy, lookup)] = element
        return element

    def _visible_elements(self) -> Dict[Tuple[str, str], Any]:
        return self.frame_elements if self.frame is not None else self.elements
