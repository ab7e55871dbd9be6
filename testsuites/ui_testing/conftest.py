"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for tests that drive a real browser through Playwright.

Key Features:
- WebContext fixture backed by a headless Chromium session
- Tests are skipped when no Chromium build can be launched
- Screenshot capture on failure

================================================================================
"""

from typing import Generator

import pytest
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from steadyweb.framework.binding import BindingRegistry
from steadyweb.framework.errors import SteadyWebError
from steadyweb.framework.playwright_driver import PlaywrightDriverFactory
from steadyweb.framework.web_context import WebContext

from testsuites.unit.fakes import make_settings


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
def registry() -> BindingRegistry:
    """Empty binding registry, populated by each test."""
    return BindingRegistry()


@pytest.fixture
def web(registry: BindingRegistry) -> Generator[WebContext, None, None]:
    """
    WebContext driving a headless Chromium session.

    Skips the test when Playwright or its Chromium build is not available.
    """
    settings = make_settings(browser="chromium", headless=True)
    factory = PlaywrightDriverFactory(settings)
    context = WebContext(settings=settings, registry=registry, driver_factory=factory)
    try:
        context.sessions.driver
    except PlaywrightError as e:
        factory.stop()
        pytest.skip(f"Chromium cannot be launched: {e}")
    yield context
    context.close()


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """
    Hook to capture screenshots on test failure.

    Attaches a screenshot of the current page to the Allure report when a
    test using the `web` fixture fails.
    """
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed and "web" in getattr(item, "funcargs", {}):
        try:
            item.funcargs["web"].capture_screenshot(unconditional=True)
        except SteadyWebError as e:
            # Log but don't fail if screenshot capture fails
            logger.warning(f"Failed to capture screenshot on failure: {e}")
