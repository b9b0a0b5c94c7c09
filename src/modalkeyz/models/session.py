from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional

from .binding import BindingMap


class Breadcrumb(NamedTuple):
    # raw key name pressed to descend, not its identifier
    key: str
    description: object


@dataclass
class Session:
    # The caller's top level map; never mutated
    root: BindingMap
    # The map at the level currently walked to
    current_node: BindingMap            = None
    # One entry per descent since activation
    breadcrumbs: List[Breadcrumb]       = field(default_factory=list)
    # Identifiers followed from root, parallel to breadcrumbs
    path: List[str]                     = field(default_factory=list)
    # Identifier of the last action run at this level
    focused_key: Optional[str]          = None

    def __post_init__(self):
        if self.current_node is None:
            self.current_node = self.root

    @property
    def depth(self):
        return len(self.breadcrumbs)

    def node_at_path(self):
        node = self.root
        for identifier in self.path:
            node = node[identifier].children
        return node
