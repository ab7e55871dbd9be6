from .allure_utils import attach_screenshot, attach_text

__all__ = [
    "attach_screenshot",
    "attach_text",
]
