NAMED_KEYS = {
    "Arrow Down": "Down",
    "Arrow Up": "Up",
    "Enter": "Enter",
    "Numpad Enter": "Enter",
    "Escape": "Esc",
    "Tab": "Tab",
    "Backspace": "Backspace",
    "Space": " ",
    " ": " ",
}


def normalize_key(key, shift=False, ctrl=False, alt=False, meta=False):
    """Translate a flet keyboard event into the controller's key names.

    Letters come back lower case unless shift is held. Returns None for keys
    the dashboard does not use, including any ctrl/alt/meta chord.
    """
    if ctrl or alt or meta or not key:
        return None
    if key in NAMED_KEYS:
        return NAMED_KEYS[key]
    if len(key) != 1:
        return None
    if key.isalpha():
        return key.upper() if shift else key.lower()
    return key


def normalize_event(e):
    return normalize_key(e.key, shift=e.shift, ctrl=e.ctrl, alt=e.alt, meta=e.meta)
