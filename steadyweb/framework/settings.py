"""
================================================================================
Web Settings
================================================================================

Typed accessors for the recognised web automation options.

    web.wait.seconds                       default wait_until timeout
    web.throttle.msecs                     delay between recovery attempts
    web.capture.screenshots                capture after each action
    web.capture.screenshots.duplicates     keep consecutive duplicate captures
    web.capture.screenshots.highlighting   capture while highlighting
    web.highlight.style                    css applied when highlighting
    web.browser                            chromium | firefox | webkit
    web.headless                           launch headless
    web.maximize                           maximise new sessions
    web.useragent                          user agent override
    web.alerts.accept                      answer to dialogs not armed beforehand

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional

from steadyweb.common.config_loader import ConfigLoader, ConfigurationError


SUPPORTED_BROWSERS = ("chromium", "firefox", "webkit")

DEFAULT_HIGHLIGHT_STYLE = "background: yellow; border: 2px solid gold;"


class WebSettings:
    """
    Read-through view of the web options.

    Values are read on every access so configuration reloads and
    environment overrides take effect immediately.

    Usage:
        >>> settings = WebSettings()
        >>> settings.wait_seconds
        10
    """

    def __init__(self, config: Optional[Any] = None):
        """
        Args:
            config: Object with a `get(key, default)` method.
                    Defaults to the ConfigLoader singleton.
        """
        self.config = config if config is not None else ConfigLoader()

    @property
    def wait_seconds(self) -> int:
        return int(self.config.get("web.wait.seconds", 10))

    @property
    def throttle_msecs(self) -> int:
        return int(self.config.get("web.throttle.msecs", 100))

    @property
    def throttle_seconds(self) -> float:
        return self.throttle_msecs / 1000.0

    @property
    def capture_screenshots(self) -> bool:
        return _as_bool(self.config.get("web.capture.screenshots", False))

    @property
    def capture_screenshot_duplicates(self) -> bool:
        return _as_bool(self.config.get("web.capture.screenshots.duplicates", False))

    @property
    def capture_screenshot_highlighting(self) -> bool:
        return _as_bool(self.config.get("web.capture.screenshots.highlighting", False))

    @property
    def highlight_style(self) -> str:
        return str(self.config.get("web.highlight.style", DEFAULT_HIGHLIGHT_STYLE))

    @property
    def browser(self) -> str:
        browser = str(self.config.get("web.browser", "chromium")).lower()
        if browser not in SUPPORTED_BROWSERS:
            raise ConfigurationError(f"Unsupported browser: {browser}")
        return browser

    @property
    def headless(self) -> bool:
        return _as_bool(self.config.get("web.headless", True))

    @property
    def maximize(self) -> bool:
        return _as_bool(self.config.get("web.maximize", False))

    @property
    def user_agent(self) -> Optional[str]:
        return self.config.get("web.useragent", None)

    @property
    def accept_alerts(self) -> bool:
        return _as_bool(self.config.get("web.alerts.accept", True))


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "on")
    return bool(value)


__all__ = [
    "WebSettings",
    "SUPPORTED_BROWSERS",
    "DEFAULT_HIGHLIGHT_STYLE",
]
