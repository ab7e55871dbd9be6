import pytest

from steadyweb.framework.binding import BindingRegistry, Locator, LocatorBinding
from steadyweb.framework.errors import (
    ContainerCycleError,
    ElementNotFoundError,
    LocatorBindingError,
    ScriptTimeoutError,
    UnsupportedLocatorStrategyError,
    WaitTimeoutError,
)
from steadyweb.framework.locator import ElementLocator
from steadyweb.framework.session_manager import SessionManager

from testsuites.unit.fakes import FakeDriver, FakeElement, FrameScopedDriver


pytestmark = [pytest.mark.unit, pytest.mark.locator]


def make_locator(driver, registry=None, highlighter=None):
    sessions = SessionManager(lambda name: driver)
    return ElementLocator(sessions, registry or BindingRegistry(), highlighter)


def three_way(element="username"):
    return LocatorBinding(
        element,
        (Locator("id", "uname"), Locator("name", "username"), Locator("css selector", "#user")),
    )


def test_first_hit_stops_the_search():
    driver = FakeDriver()
    field = driver.add("id", "uname", FakeElement("field"))

    assert make_locator(driver).locate(three_way()) is field
    assert [(s, l) for s, l, _ in driver.lookups] == [("id", "uname")]


def test_each_candidate_tried_once_in_order():
    driver = FakeDriver()
    field = driver.add("css selector", "#user", FakeElement("field"))

    assert make_locator(driver).locate(three_way()) is field
    assert [(s, l) for s, l, _ in driver.lookups] == [
        ("id", "uname"),
        ("name", "username"),
        ("css selector", "#user"),
    ]


def test_not_found_lists_every_attempt():
    driver = FakeDriver()
    with pytest.raises(ElementNotFoundError) as exc_info:
        make_locator(driver).locate(three_way())

    error = exc_info.value
    assert str(error) == "Could not locate username by (id: uname), (name: username), (css selector: #user)"
    assert error.attempts == [("id", "uname"), ("name", "username"), ("css selector", "#user")]


@pytest.mark.parametrize("position", [0, 1, 2])
def test_unsupported_strategy_in_any_position(position):
    locators = [Locator("id", "a"), Locator("name", "b"), Locator("css", "c")]
    locators[position] = Locator("funkiness", "x")
    driver = FakeDriver()
    driver.add("id", "a", FakeElement("a"))

    with pytest.raises(UnsupportedLocatorStrategyError) as exc_info:
        make_locator(driver).locate(LocatorBinding("thing", tuple(locators)))

    assert str(exc_info.value) == "Could not locate thing: unsupported locator: (funkiness: x)"
    assert driver.lookups == []


def test_locate_all_empty_when_nothing_matches():
    driver = FakeDriver()
    driver.scripts["return document.querySelectorAll('.row')"] = None
    binding = LocatorBinding(
        "rows",
        (Locator("class name", "row"), Locator("javascript", "document.querySelectorAll('.row')")),
    )

    assert make_locator(driver).locate_all(binding) == []


def test_locate_all_returns_first_non_empty_candidate():
    driver = FakeDriver()
    rows = driver.add("css selector", "tr", [FakeElement("r1"), FakeElement("r2")])
    driver.add("tag name", "tr", [FakeElement("other")])
    binding = LocatorBinding("rows", (Locator("id", "rows"), Locator("css", "tr"), Locator("tag", "tr")))

    assert make_locator(driver).locate_all(binding) == rows


def test_javascript_lookup():
    driver = FakeDriver()
    button = FakeElement("button")
    driver.scripts["return document.getElementById('go')"] = button

    binding = LocatorBinding.single("go", "javascript", "document.getElementById('go')")
    assert make_locator(driver).locate(binding) is button


def test_javascript_null_is_not_found():
    driver = FakeDriver()
    binding = LocatorBinding.single("go", "javascript", "null")
    with pytest.raises(ElementNotFoundError, match=r"Could not locate go by \(javascript: null\)"):
        make_locator(driver).locate(binding)


def test_javascript_timeout_names_the_element():
    driver = FakeDriver()
    driver.scripts["return slowLookup()"] = ScriptTimeoutError("script timeout")
    binding = LocatorBinding.single("slow", "javascript", "slowLookup()")

    with pytest.raises(WaitTimeoutError, match="Timed out locating slow by"):
        make_locator(driver).locate(binding)


def test_container_scopes_the_search():
    driver = FakeDriver()
    form = driver.add("tag name", "form", FakeElement("form", tag="form"))
    field = driver.add("name", "q", FakeElement("field"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("search form", "tag name", "form"))

    binding = LocatorBinding.single("query", "name", "q", container="search form")
    assert make_locator(driver, registry).locate(binding) is field
    assert driver.lookups[-1] == ("name", "q", form)
    assert driver.switches == []


def test_frame_container_switches_into_frame():
    driver = FakeDriver()
    frame = driver.add("id", "editor", FakeElement("frame", tag="iframe"))
    field = driver.add("id", "body", FakeElement("body"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("editor", "id", "editor"))

    resolved = make_locator(driver, registry).resolve(
        LocatorBinding.single("editor body", "id", "body", container="editor")
    )

    assert resolved.handle is field
    assert resolved.origin_window == "main"
    assert driver.switches == [("frame", frame)]
    assert driver.lookups[-1] == ("id", "body", None)


def test_frame_left_when_candidate_misses():
    driver = FakeDriver()
    frame = driver.add("id", "editor", FakeElement("frame", tag="iframe"))
    field = driver.add("css selector", "#body", FakeElement("body"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("editor", "id", "editor"))
    binding = LocatorBinding(
        "editor body",
        (Locator("id", "missing", "editor"), Locator("css selector", "#body")),
    )

    resolved = make_locator(driver, registry).resolve(binding)

    assert resolved.handle is field
    assert resolved.origin_window is None
    assert driver.switches == [("frame", frame), ("window", "main")]


def frame_scoped_setup():
    driver = FrameScopedDriver()
    frame = driver.add("id", "editor", FakeElement("frame", tag="iframe"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("editor", "id", "editor"))
    return driver, frame, registry


def test_locate_leaves_the_frame_it_entered():
    driver, frame, registry = frame_scoped_setup()
    body = driver.add_in_frame("id", "body", FakeElement("body"))

    binding = LocatorBinding.single("editor body", "id", "body", container="editor")
    assert make_locator(driver, registry).locate(binding) is body

    assert driver.switches == [("frame", frame), ("window", "main")]
    assert driver.frame is None


def test_locate_all_leaves_the_frame_it_entered():
    driver, _, registry = frame_scoped_setup()
    paragraphs = driver.add_in_frame("tag name", "p", [FakeElement("p1"), FakeElement("p2")])
    driver.add("tag name", "h1", FakeElement("heading"))
    locator = make_locator(driver, registry)

    binding = LocatorBinding.single("paragraphs", "tag name", "p", container="editor")
    assert locator.locate_all(binding) == paragraphs
    assert driver.frame is None

    # Top level bindings are searched in the top document again
    heading = LocatorBinding.single("heading", "tag name", "h1")
    assert locator.locate_all(heading) == [driver.elements[("tag name", "h1")]]


def test_locate_all_in_frame_with_no_match_leaves_the_frame():
    driver, frame, registry = frame_scoped_setup()

    binding = LocatorBinding.single("paragraphs", "tag name", "p", container="editor")
    assert make_locator(driver, registry).locate_all(binding) == []
    assert driver.switches == [("frame", frame), ("window", "main")]


@pytest.mark.parametrize(
    "bindings, cycle",
    [
        ([("a", "b"), ("b", "a")], "a -> b -> a"),
        ([("a", "a")], "a -> a"),
        ([("a", "b"), ("b", "c"), ("c", "b")], "a -> b -> c -> b"),
    ],
)
def test_circular_containers_are_reported(bindings, cycle):
    driver = FakeDriver()
    registry = BindingRegistry()
    for name, container in bindings:
        registry.register(LocatorBinding.single(name, "id", name, container=container))

    with pytest.raises(ContainerCycleError, match=f"Circular container reference: {cycle}$") as exc_info:
        make_locator(driver, registry).locate(registry.get("a"))
    assert isinstance(exc_info.value, LocatorBindingError)


def test_missing_container_tries_next_candidate():
    driver = FakeDriver()
    field = driver.add("id", "q", FakeElement("field"))
    registry = BindingRegistry()
    registry.register(LocatorBinding.single("search form", "id", "nowhere"))
    binding = LocatorBinding(
        "query",
        (Locator("name", "q", "search form"), Locator("id", "q")),
    )

    assert make_locator(driver, registry).locate(binding) is field
    assert ("name", "q", None) not in driver.lookups


def test_hidden_element_scrolled_into_view_and_highlighted():
    driver = FakeDriver()
    field = driver.add("id", "far", FakeElement("far", displayed=False))
    highlighted = []

    locator = make_locator(driver, highlighter=highlighted.append)
    assert locator.locate(LocatorBinding.single("far away", "id", "far")) is field

    assert len(driver.executed) == 1
    source, args = driver.executed[0]
    assert "scrollIntoView" in source
    assert args == (field,)
    assert highlighted == [field]
