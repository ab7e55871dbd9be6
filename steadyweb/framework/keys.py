# ================================================================================
# Keyboard Keys
# ================================================================================
#
# Maps WebDriver-style key names (RETURN, SHIFT, ARROW_DOWN, ...) to the key
# names understood by the Playwright keyboard API.
#
# ================================================================================

from typing import Dict, Optional

from .errors import UnsupportedModifierKeyError


KEYS: Dict[str, str] = {
    "CANCEL": "Cancel",
    "HELP": "Help",
    "BACK_SPACE": "Backspace",
    "BACKSPACE": "Backspace",
    "TAB": "Tab",
    "CLEAR": "Clear",
    "RETURN": "Enter",
    "ENTER": "Enter",
    "SHIFT": "Shift",
    "LEFT_SHIFT": "Shift",
    "CONTROL": "Control",
    "LEFT_CONTROL": "Control",
    "ALT": "Alt",
    "LEFT_ALT": "Alt",
    "PAUSE": "Pause",
    "ESCAPE": "Escape",
    "SPACE": "Space",
    "PAGE_UP": "PageUp",
    "PAGE_DOWN": "PageDown",
    "END": "End",
    "HOME": "Home",
    "LEFT": "ArrowLeft",
    "ARROW_LEFT": "ArrowLeft",
    "UP": "ArrowUp",
    "ARROW_UP": "ArrowUp",
    "RIGHT": "ArrowRight",
    "ARROW_RIGHT": "ArrowRight",
    "DOWN": "ArrowDown",
    "ARROW_DOWN": "ArrowDown",
    "INSERT": "Insert",
    "DELETE": "Delete",
    "SEMICOLON": ";",
    "EQUALS": "=",
    "MULTIPLY": "*",
    "ADD": "+",
    "SEPARATOR": ",",
    "SUBTRACT": "-",
    "DECIMAL": ".",
    "DIVIDE": "/",
    "META": "Meta",
    "COMMAND": "Meta",
    **{f"F{n}": f"F{n}" for n in range(1, 13)},
    **{f"NUMPAD{n}": f"Numpad{n}" for n in range(10)},
}

MODIFIER_KEYS: Dict[str, str] = {
    "SHIFT": "Shift",
    "LEFT_SHIFT": "Shift",
    "CONTROL": "Control",
    "LEFT_CONTROL": "Control",
    "CTRL": "Control",
    "ALT": "Alt",
    "LEFT_ALT": "Alt",
    "OPTION": "Alt",
    "META": "Meta",
    "COMMAND": "Meta",
    "CMD": "Meta",
}


def modifier_key(name: str) -> str:
    """
    Resolve a modifier key name.

    Raises:
        UnsupportedModifierKeyError: When the name is not a known modifier
    """
    key = MODIFIER_KEYS.get(name.strip().upper())
    if key is None:
        raise UnsupportedModifierKeyError(name.strip())
    return key


def named_key(name: str) -> Optional[str]:
    """Return the mapped key for a key name, or None if it is plain text."""
    return KEYS.get(name.strip().upper())
