from dataclasses import dataclass, field
from typing import Optional

from .errors import ConfigError, SessionActiveError
from .hints import NUM_COLUMNS, HintStyle, build_hint_model
from .keyid import key_to_string
from .lib.logger import debug, info
from .models.binding import HIDDEN, BindingMap, build_binding_map
from .models.key_event import KeyEvent
from .navigator import Navigator, Step, Transition


@dataclass(frozen=True)
class SessionOptions:
    activation_key: str
    ignored_mod: Optional[str]          = None
    hide_first_level: bool              = False
    style: HintStyle                    = field(default_factory=HintStyle)


def check_start_args(activation_key, config, style_options):
    """Raise ConfigError for anything that would make a start fail"""
    if config is None:
        raise ConfigError("config not given")
    if not activation_key:
        raise ConfigError("activation_key not given")
    unknown = set(style_options) - set(HintStyle.option_names())
    if unknown:
        raise ConfigError(f"Unknown style option(s): {', '.join(sorted(unknown))}")


class SessionController:
    """
    Runs one modal session at a time.

    ``start()`` takes the key grab, opens a session and draws the first
    hint. Every key event is then fed to ``on_key_event()`` until the
    activation key is released, which hides the overlay and gives the
    grab back.
    """

    def __init__(self, presenter, notifier, key_grab=None, columns=NUM_COLUMNS):
        self._presenter = presenter
        self._notifier = notifier
        self._key_grab = key_grab
        self._columns = columns
        self._navigator: Optional[Navigator] = None
        self._options: Optional[SessionOptions] = None

    @property
    def is_active(self):
        return self._navigator is not None and self._navigator.is_active

    @property
    def session(self):
        return self._navigator.session if self._navigator else None

    @property
    def options(self):
        return self._options

    def start(self, activation_key=None, config=None, ignored_mod=None,
              hide_first_level=False, **style):
        check_start_args(activation_key, config, style)
        if self.is_active:
            raise SessionActiveError(
                f"Session for '{self._options.activation_key}' already active")

        root: BindingMap = build_binding_map(config)
        options = SessionOptions(activation_key, ignored_mod, hide_first_level,
                                 HintStyle().updated(**style))

        if self._key_grab is not None:
            self._key_grab.grab()
        navigator = Navigator(activation_key)
        navigator.start(root)
        self._navigator = navigator
        self._options = options
        info(f"Modal session started on '{activation_key}'")
        self.render()

    def on_key_event(self, event: KeyEvent) -> Step:
        if not self.is_active:
            return Step(Transition.IDLE)

        identifier = key_to_string(event.modifiers, event.key, self._options.ignored_mod)
        debug(f"in {event.key} ({event.action}) => '{identifier}'", ctx="II")
        step = self._navigator.handle(identifier, event.key, event.action)

        if step.error is not None:
            self._notifier.notify_error(f"Error: {step.error}")

        if step.transition is Transition.TERMINATED:
            self._teardown()
        elif step.needs_render:
            self.render()
        return step

    def render(self):
        session = self.session
        if session is None:
            return None
        if self._options.hide_first_level and not session.breadcrumbs:
            return None
        model = build_hint_model(self._options.activation_key, session.breadcrumbs,
                                 session.current_node, session.focused_key,
                                 columns=self._columns, hidden=HIDDEN,
                                 style=self._options.style)
        self._presenter.show(model)
        return model

    def stop(self):
        if self._navigator is not None:
            self._navigator.stop()
            self._teardown()

    def _teardown(self):
        activation_key = self._options.activation_key if self._options else None
        self._navigator = None
        self._options = None
        try:
            self._presenter.hide()
        finally:
            if self._key_grab is not None:
                self._key_grab.ungrab()
        info(f"Modal session on '{activation_key}' ended")
