"""
================================================================================
steadyweb
================================================================================

Resilience layer for browser automation: symbolic element bindings, fallback
locators, stale element recovery, deadline-bound waits and session/window
management on top of Playwright.

Example:
    from steadyweb import BindingRegistry, WebContext

    web = WebContext(registry=BindingRegistry.from_yaml("bindings.yaml"))
    web.navigate_to("https://example.com")
    web.perform_action("click", "search button")
    web.close()

================================================================================
"""

from .framework import BindingRegistry, LocatorBinding, WebContext, WebSettings

__version__ = "1.0.0"

__all__ = [
    "BindingRegistry",
    "LocatorBinding",
    "WebContext",
    "WebSettings",
]
