"""
================================================================================
Allure Report Utilities
================================================================================

Attachment helpers used as the reporting collaborator of the web automation
core: screenshots retained by the screenshot gate and captured values such
as the current URL.

================================================================================
"""

import allure


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_screenshot(png: bytes, name: str = "Screenshot"):
    """
    Attach a PNG screenshot to the Allure report.

    Args:
        png: Screenshot bytes
        name: Attachment name
    """
    allure.attach(
        png,
        name=name,
        attachment_type=allure.attachment_type.PNG
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


__all__ = [
    "attach_screenshot",
    "attach_text",
]
