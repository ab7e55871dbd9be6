"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and tags tests by directory.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Test type markers
    config.addinivalue_line(
        "markers", "unit: Fast tests against fake drivers, no browser needed"
    )
    config.addinivalue_line(
        "markers", "ui: Tests that drive a real browser through Playwright"
    )

    # Component markers
    config.addinivalue_line(
        "markers", "locator: Element location and fallback locators"
    )
    config.addinivalue_line(
        "markers", "executor: Element interactions and stale element recovery"
    )
    config.addinivalue_line(
        "markers", "wait: Condition polling and timeouts"
    )
    config.addinivalue_line(
        "markers", "session: Browser sessions and child/parent windows"
    )
    config.addinivalue_line(
        "markers", "screenshot: Screenshot capture and duplicate suppression"
    )


def pytest_collection_modifyitems(config, items):
    """
    Modify collected test items.

    Adds the test type marker from the directory a test lives in.
    """
    for item in items:
        # Auto-add 'unit' marker to tests in unit directory
        if "unit" in item.path.parts:
            item.add_marker(pytest.mark.unit)

        # Auto-add 'ui' marker to tests in ui_testing directory
        if "ui_testing" in item.path.parts:
            item.add_marker(pytest.mark.ui)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "steadyweb - resilient browser automation",
        "=" * 60,
        "",
    ]
