from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import SessionActiveError
from .lib.logger import debug
from .models.action import Action
from .models.binding import ActionBinding, Binding, BindingMap, SubTreeBinding
from .models.session import Breadcrumb, Session


class Transition(Enum):
    IDLE            = "idle"            # event arrived with no session
    IGNORED         = "ignored"         # no binding, or an uninteresting release
    INVOKED         = "invoked"         # leaf action ran (maybe failed)
    DESCENDED       = "descended"       # walked into a nested level
    TERMINATED      = "terminated"      # activation key released


@dataclass(frozen=True)
class Step:
    transition: Transition
    identifier: Optional[str]           = None
    binding: Optional[Binding]          = None
    # exception raised by the action, captured instead of propagated
    error: Optional[BaseException]      = None

    @property
    def needs_render(self):
        return self.transition in (Transition.INVOKED, Transition.DESCENDED)


class Navigator:
    """
    Key sequence state machine.

    Idle until ``start()``. While active, every key press either runs a
    leaf action, descends into a nested level, or is ignored. Only the
    release of the activation key goes back to Idle; the tree is only
    ever walked downwards.
    """

    def __init__(self, activation_key: str):
        self.activation_key = activation_key
        self.session: Optional[Session] = None

    @property
    def is_active(self):
        return self.session is not None

    def start(self, root: BindingMap):
        if self.session is not None:
            raise SessionActiveError(f"Session for '{self.activation_key}' already active")
        self.session = Session(root=root)
        debug(f"Session started on '{self.activation_key}'", ctx="NV")
        return self.session

    def stop(self):
        if self.session is not None:
            debug(f"Session ended at depth {self.session.depth}", ctx="NV")
        self.session = None

    def handle(self, identifier: str, key: str, action: Action) -> Step:
        session = self.session
        if session is None:
            return Step(Transition.IDLE, identifier)

        if action.is_released:
            if key == self.activation_key:
                self.stop()
                return Step(Transition.TERMINATED, identifier)
            return Step(Transition.IGNORED, identifier)

        binding = session.current_node.get(identifier)
        if binding is None:
            debug(f"No binding for '{identifier}'", ctx="NV")
            return Step(Transition.IGNORED, identifier)

        if isinstance(binding, ActionBinding):
            return self._invoke(session, identifier, binding)
        if isinstance(binding, SubTreeBinding):
            return self._descend(session, identifier, key, binding)
        raise TypeError(f"Unknown binding type {type(binding).__name__}")

    def _invoke(self, session, identifier, binding):
        debug(f"INVOKE: {identifier} => {binding.description!r}", ctx="NV")
        err = None
        try:
            binding.action()
        except Exception as exc:
            err = exc
        session.focused_key = identifier
        return Step(Transition.INVOKED, identifier, binding, err)

    def _descend(self, session, identifier, key, binding):
        debug(f"DESCEND: {identifier} => {binding.description!r}", ctx="NV")
        session.breadcrumbs.append(Breadcrumb(key, binding.description))
        session.path.append(identifier)
        session.current_node = binding.children
        session.focused_key = None
        return Step(Transition.DESCENDED, identifier, binding)
