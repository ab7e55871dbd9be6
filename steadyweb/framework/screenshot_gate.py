"""
================================================================================
Screenshot Gate
================================================================================

Decides whether a freshly captured screenshot is worth keeping.

Consecutive captures with the same byte length are treated as duplicates and
dropped unless duplicates are enabled (web.capture.screenshots.duplicates) or
the capture was requested unconditionally. The byte length is a cheap
fingerprint, not a content hash.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from loguru import logger

from steadyweb.report_tools.allure_utils import attach_screenshot

from .driver import WebDriverCapability
from .settings import WebSettings


class ScreenshotGate:
    """
    Captures screenshots and forwards the ones worth keeping.

    Usage:
        >>> gate = ScreenshotGate(settings)
        >>> gate.maybe_capture(driver, unconditional=False)
        True
    """

    def __init__(
        self,
        settings: WebSettings,
        attach: Callable[[bytes], None] = attach_screenshot,
    ):
        """
        Args:
            settings: Web settings (duplicates flag and throttle)
            attach: Receives every retained screenshot
        """
        self.settings = settings
        self.attach = attach
        self.last_size: Optional[int] = None

    def maybe_capture(self, driver: WebDriverCapability, unconditional: bool) -> bool:
        """
        Capture the current page and retain it unless it duplicates the last one.

        Args:
            driver: Session to capture
            unconditional: Retain even if it looks like a duplicate

        Returns:
            True if the capture was retained
        """
        time.sleep(self.settings.throttle_seconds / 2)
        screenshot = driver.capture_screenshot()
        size = len(screenshot)

        duplicates = self.settings.capture_screenshot_duplicates
        keep = unconditional or duplicates or self.last_size != size
        if not keep:
            logger.debug(f"Dropped duplicate screenshot ({size} bytes)")
            return False

        if not duplicates:
            self.last_size = size
        self.attach(screenshot)
        logger.debug(f"Captured screenshot ({size} bytes)")
        return True

    def reset(self) -> None:
        self.last_size = None


__all__ = [
    "ScreenshotGate",
]
