import pytest

from steadyweb.framework.binding import BindingRegistry, Locator, LocatorBinding
from steadyweb.framework.errors import StaleElementError, TransientDriverFault
from steadyweb.framework.executor import InteractionExecutor, normalize_action
from steadyweb.framework.locator import ElementLocator
from steadyweb.framework.screenshot_gate import ScreenshotGate
from steadyweb.framework.session_manager import SessionManager

from testsuites.unit.fakes import FakeDriver, FakeElement, FrameScopedDriver, make_settings


pytestmark = [pytest.mark.unit, pytest.mark.executor]


def make_executor(driver, registry=None, **settings_overrides):
    settings = make_settings(**settings_overrides)
    sessions = SessionManager(lambda name: driver)
    locator = ElementLocator(sessions, registry or BindingRegistry())
    attached = []
    gate = ScreenshotGate(settings, attach=attached.append)
    return InteractionExecutor(sessions, locator, gate, settings), attached


class FlakyOperation:
    """Raises StaleElementError for the first `stale_times` calls."""

    def __init__(self, stale_times):
        self.stale_times = stale_times
        self.elements = []

    def __call__(self, element):
        self.elements.append(element)
        if len(self.elements) <= self.stale_times:
            raise StaleElementError("element is not attached to the DOM")
        return "done"


@pytest.mark.parametrize("stale_times, attempts", [(0, 1), (1, 2), (2, 3)])
def test_stale_element_relocated_and_retried(stale_times, attempts):
    driver = FakeDriver()
    driver.add("id", "go", FakeElement("go"))
    executor, _ = make_executor(driver)
    operation = FlakyOperation(stale_times)

    assert executor.perform("click", LocatorBinding.single("go", "id", "go"), operation) == "done"
    assert len(operation.elements) == attempts
    assert len(driver.lookups) == attempts


def test_third_stale_attempt_propagates_and_no_fourth():
    driver = FakeDriver()
    driver.add("id", "go", FakeElement("go"))
    executor, _ = make_executor(driver)
    operation = FlakyOperation(stale_times=10)

    with pytest.raises(StaleElementError):
        executor.perform("click", LocatorBinding.single("go", "id", "go"), operation)
    assert len(operation.elements) == 3


@pytest.mark.parametrize("error", [ValueError("bad"), TransientDriverFault("hiccup")])
def test_other_failures_are_not_retried(error):
    driver = FakeDriver()
    driver.add("id", "go", FakeElement("go"))
    executor, _ = make_executor(driver)
    calls = []

    def operation(element):
        calls.append(element)
        raise error

    with pytest.raises(type(error)):
        executor.perform("click", LocatorBinding.single("go", "id", "go"), operation)
    assert len(calls) == 1


def frame_setup():
    driver = FakeDriver()
    driver.add("id", "editor", FakeElement("frame", tag="iframe"))
    driver.add("id", "body", FakeElement("body"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("editor", "id", "editor"))
    return driver, registry


def test_window_restored_after_frame_action():
    driver, registry = frame_setup()
    executor, _ = make_executor(driver, registry)

    executor.perform(
        "click",
        LocatorBinding.single("editor body", "id", "body", container="editor"),
        lambda element: element.click(),
    )

    assert driver.switches[-1] == ("window", "main")
    assert driver.frame is None


def test_window_restored_when_action_fails():
    driver, registry = frame_setup()
    executor, _ = make_executor(driver, registry)

    def operation(element):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        executor.perform(
            "click",
            LocatorBinding.single("editor body", "id", "body", container="editor"),
            operation,
        )

    assert driver.switches[-1] == ("window", "main")
    assert driver.frame is None


def test_window_restored_when_fallback_locator_switched_frames():
    driver, registry = frame_setup()
    executor, _ = make_executor(driver, registry)
    binding = LocatorBinding(
        "editor body",
        (Locator("id", "gone"), Locator("id", "body", "editor")),
    )

    executor.perform("click", binding, lambda element: element.click())

    assert driver.switches[-1] == ("window", "main")
    assert driver.frame is None


def test_stale_element_in_frame_relocated_from_top_document():
    driver = FrameScopedDriver()
    frame = driver.add("id", "editor", FakeElement("frame", tag="iframe"))
    body = driver.add_in_frame("id", "body", FakeElement("body"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("editor", "id", "editor"))
    executor, _ = make_executor(driver, registry)
    operation = FlakyOperation(stale_times=1)

    result = executor.perform(
        "click",
        LocatorBinding.single("editor body", "id", "body", container="editor"),
        operation,
    )

    assert result == "done"
    assert operation.elements == [body, body]
    assert driver.switches == [
        ("frame", frame),
        ("window", "main"),
        ("frame", frame),
        ("window", "main"),
    ]
    assert driver.frame is None


def test_stale_element_behind_fallback_frame_candidate_recovers():
    driver = FrameScopedDriver()
    driver.add("id", "editor", FakeElement("frame", tag="iframe"))
    body = driver.add_in_frame("id", "body", FakeElement("body"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("editor", "id", "editor"))
    executor, _ = make_executor(driver, registry)
    operation = FlakyOperation(stale_times=2)
    binding = LocatorBinding(
        "editor body",
        (Locator("id", "gone"), Locator("id", "body", "editor")),
    )

    assert executor.perform("click", binding, operation) == "done"
    assert operation.elements == [body, body, body]
    assert driver.frame is None


def test_screenshot_after_successful_action_only():
    driver = FakeDriver()
    driver.add("id", "go", FakeElement("go"))
    executor, attached = make_executor(driver, capture_screenshots=True)
    binding = LocatorBinding.single("go", "id", "go")

    executor.perform("click", binding, lambda element: element.click())
    assert attached == [b"png"]

    def operation(element):
        raise RuntimeError("boom")

    driver.screenshots.append(b"different")
    with pytest.raises(RuntimeError):
        executor.perform("click", binding, operation)
    assert attached == [b"png"]


def test_no_screenshot_when_capture_disabled():
    driver = FakeDriver()
    driver.add("id", "go", FakeElement("go"))
    executor, attached = make_executor(driver)

    executor.perform("click", LocatorBinding.single("go", "id", "go"), lambda element: element.click())
    assert attached == []


def test_normalize_action():
    assert normalize_action(" Right-Click ") == "right click"
    assert normalize_action("send_keys") == "send keys"
