from typing import Iterable, Optional

MODIFIER_SEPARATOR  = "-"

# NumLock is reported as a modifier but never takes part in a binding
LOCK_MODIFIER       = "Mod2"


def key_to_string(modifiers: Optional[Iterable], key: str, ignored_mod=None) -> str:
    """
    Turn a modifier set and a key name into the canonical identifier
    used as a binding key, e.g. ``({"Shift", "Control"}, "A")`` gives
    ``"control-shift-a"``.

    Modifiers may be strings or ``Modifier`` members. ``ignored_mod``
    is dropped from the set (it is usually the modifier that keeps the
    activation key held down), as is the lock modifier.
    """
    if key == " ":
        key = "space"

    ignored = {LOCK_MODIFIER.lower()}
    if ignored_mod is not None:
        ignored.add(str(ignored_mod).lower())

    mods = sorted(str(mod).lower() for mod in (modifiers or ()) if str(mod).lower() not in ignored)
    if mods:
        key = MODIFIER_SEPARATOR.join(mods) + MODIFIER_SEPARATOR + (key or "")

    return (key or "").lower()


def split_identifier(identifier: str):
    """
    Split a hand written identifier such as ``"Mod4-Space"`` into its
    modifier names and its key. A trailing separator is the minus key.
    """
    head, sep, key = identifier.rpartition(MODIFIER_SEPARATOR)
    if sep and not key:
        head, key = head[:-1], MODIFIER_SEPARATOR
    mods = head.split(MODIFIER_SEPARATOR) if head else []
    return mods, key


def normalize_identifier(identifier: str) -> str:
    mods, key = split_identifier(identifier)
    return key_to_string(mods, key)
