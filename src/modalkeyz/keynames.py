# evdev key code => X11 style key name, for a US layout.
# Each entry is (plain, shifted); shifted is None when Shift does not
# change the name. Printable keys map to the character they produce.

from evdev import ecodes

_LETTERS = "abcdefghijklmnopqrstuvwxyz"
_LETTER_CODES = {getattr(ecodes, f"KEY_{ch.upper()}"): ch for ch in _LETTERS}

_PRINTABLE = {
    ecodes.KEY_1:           ("1", "!"),
    ecodes.KEY_2:           ("2", "@"),
    ecodes.KEY_3:           ("3", "#"),
    ecodes.KEY_4:           ("4", "$"),
    ecodes.KEY_5:           ("5", "%"),
    ecodes.KEY_6:           ("6", "^"),
    ecodes.KEY_7:           ("7", "&"),
    ecodes.KEY_8:           ("8", "*"),
    ecodes.KEY_9:           ("9", "("),
    ecodes.KEY_0:           ("0", ")"),
    ecodes.KEY_GRAVE:       ("`", "~"),
    ecodes.KEY_MINUS:       ("-", "_"),
    ecodes.KEY_EQUAL:       ("=", "+"),
    ecodes.KEY_LEFTBRACE:   ("[", "{"),
    ecodes.KEY_RIGHTBRACE:  ("]", "}"),
    ecodes.KEY_BACKSLASH:   ("\\", "|"),
    ecodes.KEY_SEMICOLON:   (";", ":"),
    ecodes.KEY_APOSTROPHE:  ("'", '"'),
    ecodes.KEY_COMMA:       (",", "<"),
    ecodes.KEY_DOT:         (".", ">"),
    ecodes.KEY_SLASH:       ("/", "?"),
    ecodes.KEY_SPACE:       (" ", None),
}

_NAMED = {
    ecodes.KEY_ENTER:       "Return",
    ecodes.KEY_ESC:         "Escape",
    ecodes.KEY_TAB:         "Tab",
    ecodes.KEY_BACKSPACE:   "BackSpace",
    ecodes.KEY_DELETE:      "Delete",
    ecodes.KEY_INSERT:      "Insert",
    ecodes.KEY_HOME:        "Home",
    ecodes.KEY_END:         "End",
    ecodes.KEY_PAGEUP:      "Prior",
    ecodes.KEY_PAGEDOWN:    "Next",
    ecodes.KEY_LEFT:        "Left",
    ecodes.KEY_RIGHT:       "Right",
    ecodes.KEY_UP:          "Up",
    ecodes.KEY_DOWN:        "Down",
    ecodes.KEY_LEFTCTRL:    "Control_L",
    ecodes.KEY_RIGHTCTRL:   "Control_R",
    ecodes.KEY_LEFTSHIFT:   "Shift_L",
    ecodes.KEY_RIGHTSHIFT:  "Shift_R",
    ecodes.KEY_LEFTALT:     "Alt_L",
    ecodes.KEY_RIGHTALT:    "ISO_Level3_Shift",
    ecodes.KEY_LEFTMETA:    "Super_L",
    ecodes.KEY_RIGHTMETA:   "Super_R",
    ecodes.KEY_CAPSLOCK:    "Caps_Lock",
    ecodes.KEY_NUMLOCK:     "Num_Lock",
    ecodes.KEY_SCROLLLOCK:  "Scroll_Lock",
    ecodes.KEY_COMPOSE:     "Menu",
    ecodes.KEY_SYSRQ:       "Print",
    ecodes.KEY_PAUSE:       "Pause",
    ecodes.KEY_KPENTER:     "KP_Enter",
    ecodes.KEY_KPPLUS:      "KP_Add",
    ecodes.KEY_KPMINUS:     "KP_Subtract",
    ecodes.KEY_KPASTERISK:  "KP_Multiply",
    ecodes.KEY_KPSLASH:     "KP_Divide",
    ecodes.KEY_KPDOT:       "KP_Decimal",
}

for _idx in range(10):
    _NAMED[getattr(ecodes, f"KEY_KP{_idx}")] = f"KP_{_idx}"

for _idx in range(1, 13):
    _NAMED[getattr(ecodes, f"KEY_F{_idx}")] = f"F{_idx}"


def key_name(code, shift=False, capslock=False):
    """
    Name of the key as a keygrabber would report it: the produced
    character for printable keys, the keysym name otherwise. Returns
    None for codes without a name.
    """
    name = _NAMED.get(code)
    if name is not None:
        return name

    letter = _LETTER_CODES.get(code)
    if letter is not None:
        # caps lock only affects letters, and shift cancels it
        return letter.upper() if shift != capslock else letter

    pair = _PRINTABLE.get(code)
    if pair is None:
        return None
    plain, shifted = pair
    if shift and shifted is not None:
        return shifted
    return plain


def code_for_name(name):
    """Reverse lookup, used for the activation key and for tests"""
    for code, known in _NAMED.items():
        if known == name:
            return code
    for code, letter in _LETTER_CODES.items():
        if letter == name.lower():
            return code
    for code, (plain, shifted) in _PRINTABLE.items():
        if name in (plain, shifted):
            return code
    return None

