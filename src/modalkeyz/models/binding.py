from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Callable, Dict, Union

from ..errors import ConfigError


class _Hidden:
    """Description marker: the binding works but is left out of the hints"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "HIDDEN"


HIDDEN = _Hidden()


@dataclass(frozen=True)
class Binding:
    description: Union[str, _Hidden]

    @property
    def is_hidden(self):
        return self.description is HIDDEN


@dataclass(frozen=True)
class ActionBinding(Binding):
    action: Callable[[], object] = field(default=None, compare=False)


@dataclass(frozen=True)
class SubTreeBinding(Binding):
    children: Dict[str, Binding] = field(default_factory=dict, compare=False)


BindingMap = Dict[str, Binding]


def build_binding_map(config, _path=(), _seen=None) -> BindingMap:
    """
    Build a validated binding map from a config literal.

    Every entry maps a key identifier to a ``[description, target]`` pair,
    where target is a callable (a leaf action) or another mapping of the
    same shape (a nested level). Already built ``Binding`` objects go
    through the same checks.
    """
    if not isinstance(config, Mapping):
        raise ConfigError(f"Binding map at '{_fmt_path(_path)}' must be a mapping, "
                          f"got {type(config).__name__}")

    _seen = _seen or set()
    if id(config) in _seen:
        raise ConfigError(f"Binding map at '{_fmt_path(_path)}' contains itself")
    _seen = _seen | {id(config)}

    bindings = {}
    for key, entry in config.items():
        path = _path + (key,)
        if not isinstance(key, str) or not key:
            raise ConfigError(f"Binding key at '{_fmt_path(path)}' must be a non-empty string")
        bindings[key] = _build_binding(entry, path, _seen)
    return bindings


def _build_binding(entry, path, seen) -> Binding:
    if isinstance(entry, ActionBinding):
        description, target = entry.description, entry.action
    elif isinstance(entry, SubTreeBinding):
        description, target = entry.description, entry.children
    elif isinstance(entry, (list, tuple)) and len(entry) == 2:
        description, target = entry
    else:
        raise ConfigError(f"Binding '{_fmt_path(path)}' must be a [description, target] pair")

    if not (isinstance(description, str) or description is HIDDEN):
        raise ConfigError(f"Description of '{_fmt_path(path)}' must be a string or HIDDEN")

    if isinstance(target, Mapping) and not isinstance(entry, ActionBinding):
        return SubTreeBinding(description, build_binding_map(target, path, seen))
    if callable(target):
        if isinstance(entry, ActionBinding):
            return entry
        return ActionBinding(description, target)
    raise ConfigError(f"Target of '{_fmt_path(path)}' must be callable or a mapping, "
                      f"got {type(target).__name__}")


def _fmt_path(path):
    return " ".join(str(part) for part in path) or "<root>"
