# Functions and values available to modalkeyz config files.
#
# A config file is plain Python executed in this module's namespace:
#
#     modal(activation_key="Super_L", trigger="mod4-space", ignored_mod="Mod4",
#           config={
#               "t": ["terminal", lambda: launch("xterm")],
#               "w": ["window", {
#                   "f": ["fullscreen", toggle_fullscreen],
#                   "x": [HIDDEN, kill_window],
#               }],
#           })

import subprocess

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .controller import check_start_args
from .errors import ConfigError
from .keyid import normalize_identifier, split_identifier
from .lib.logger import debug
from .models.binding import HIDDEN, build_binding_map  # noqa: F401
from .models.modifier import Modifier

__all__ = [
    "HIDDEN", "modal", "devices_api", "dpi_scale", "launch",
]


@dataclass
class ModalConfig:
    activation_key: str
    config: dict
    # identifier that opens the session while idle, None means
    # pressing the activation key itself
    trigger: Optional[str]              = None
    ignored_mod: Optional[str]          = None
    hide_first_level: bool              = False
    style: Dict[str, Optional[str]]     = field(default_factory=dict)

    @property
    def trigger_key(self):
        return self.trigger or normalize_identifier(self.activation_key)

    def start_kwargs(self):
        return dict(activation_key=self.activation_key,
                    config=self.config,
                    ignored_mod=self.ignored_mod,
                    hide_first_level=self.hide_first_level,
                    **self.style)


_MODALS: List[ModalConfig] = []
_DEVICES = {"only_devices": None}
_DPI = {"scale": 1.0}


def reset_configuration():
    global _MODALS
    _MODALS = []
    _DEVICES["only_devices"] = None
    _DPI["scale"] = 1.0


def get_configuration():
    return _MODALS, _DEVICES["only_devices"], _DPI["scale"]


def load_config(path):
    """Execute a config file in the namespace of this module"""
    with open(path, "rb") as file:
        code = compile(file.read(), path, "exec")
    exec(code, globals())
    debug(f"Loaded config '{path}' with {len(_MODALS)} modal(s)")
    return get_configuration()


# ─── CONFIG API ─────────────────────────────────────────────────────────────────


def modal(activation_key=None, config=None, trigger=None, ignored_mod=None,
          hide_first_level=False, **style):
    """
    Register a modal session. The session opens when ``trigger`` is
    pressed and lasts as long as ``activation_key`` is held.
    """
    check_start_args(activation_key, config, style)
    # fail at load time rather than at the first activation
    build_binding_map(config)
    if trigger is not None:
        trigger = _check_trigger(trigger)

    for existing in _MODALS:
        if existing.trigger_key == (trigger or normalize_identifier(activation_key)):
            raise ConfigError(f"Trigger '{existing.trigger_key}' registered twice")

    modal_config = ModalConfig(activation_key, config, trigger, ignored_mod,
                               hide_first_level, dict(style))
    _MODALS.append(modal_config)
    return modal_config


def _check_trigger(trigger):
    if not isinstance(trigger, str) or not trigger:
        raise ConfigError("trigger must be a non-empty key identifier")
    # CapsLock state is not looked at when matching triggers
    known = {str(mod).lower() for mod in Modifier if mod is not Modifier.CAPSLOCK}
    mods, key = split_identifier(trigger)
    for mod in mods:
        if mod.lower() not in known:
            raise ConfigError(f"Modifier '{mod}' can't be part of trigger '{trigger}'")
    if not key:
        raise ConfigError(f"Trigger '{trigger}' names no key")
    return normalize_identifier(trigger)


def devices_api(only_devices=None):
    """Only use the named input devices (by path or name)"""
    if only_devices is not None and not isinstance(only_devices, (list, tuple)):
        raise ConfigError("only_devices must be a list of device names or paths")
    _DEVICES["only_devices"] = list(only_devices) if only_devices else None


def dpi_scale(factor):
    """Scale the overlay metrics, for high DPI screens"""
    if factor <= 0:
        raise ConfigError("dpi_scale factor must be positive")
    _DPI["scale"] = float(factor)


def launch(cmd):
    """Start a program without waiting for it, for use as a binding action"""
    debug(f"launch: {cmd}")
    return subprocess.Popen(cmd, shell=isinstance(cmd, str),
                            stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
