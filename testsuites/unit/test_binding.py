import pytest
import yaml

from steadyweb.framework.binding import BindingRegistry, Locator, LocatorBinding, LocatorStrategy
from steadyweb.framework.errors import LocatorBindingError


@pytest.mark.parametrize(
    "text, expected",
    [
        ("id", LocatorStrategy.ID),
        ("CSS", LocatorStrategy.CSS),
        ("css selector", LocatorStrategy.CSS),
        ("tag", LocatorStrategy.TAG_NAME),
        ("class_name", LocatorStrategy.CLASS_NAME),
        ("partial-link-text", LocatorStrategy.PARTIAL_LINK_TEXT),
        ("js", LocatorStrategy.JAVASCRIPT),
        ("funkiness", None),
    ],
)
def test_strategy_parse(text, expected):
    assert LocatorStrategy.parse(text) is expected


def test_binding_requires_locators():
    with pytest.raises(ValueError):
        LocatorBinding("nothing", ())


def test_single_binding_is_one_locator_list():
    binding = LocatorBinding.single("username", "id", "uname", container="login form")
    assert binding.locators == (Locator("id", "uname", "login form"),)
    assert binding.primary.container == "login form"
    assert binding.describe() == "(id: uname)"


def test_registry_get_unknown_element():
    registry = BindingRegistry()
    with pytest.raises(LocatorBindingError, match="Undefined locator binding for element: ghost"):
        registry.get("ghost")
    assert registry.find("ghost") is None


def test_from_properties_keeps_declared_order():
    registry = BindingRegistry.from_properties(
        {
            "username/locator": "css selector, id",
            "username/locator/id": "uname",
            "username/locator/css selector": "input[name='username']",
            "username/locator/css selector/container": "login form",
            "login form/locator": "tag name",
            "login form/locator/tag name": "form",
            "login/action/click/javascript": "element.click();",
        }
    )

    binding = registry.get("username")
    assert [locator.strategy for locator in binding.locators] == ["css selector", "id"]
    assert binding.locators[0].container == "login form"
    assert binding.locators[1].container is None
    assert "login form" in registry
    assert len(registry) == 2
    assert registry.action_script("login", "click") == "element.click();"
    assert registry.action_script("login", "submit") is None


def test_from_properties_missing_lookup():
    with pytest.raises(LocatorBindingError, match="username/locator/xpath"):
        BindingRegistry.from_properties({"username/locator": "xpath"})


def test_from_yaml(tmp_path):
    path = tmp_path / "bindings.yaml"
    path.write_text(
        yaml.dump({"search/locator": "name", "search/locator/name": "q"}),
        encoding="utf-8",
    )

    registry = BindingRegistry.from_yaml(path)
    assert registry.get("search").primary == Locator("name", "q")
