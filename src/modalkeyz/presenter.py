import abc
import re

from dataclasses import dataclass, field
from html import unescape
from typing import List, Optional

from .hints import (DEFAULT_WORKAREA, Geometry, HintModel, OverlayMetrics,
                    overlay_geometry)
from .lib.logger import info

_MARKUP_TAG = re.compile(r"<[^>]+>")


def strip_markup(markup):
    return unescape(_MARKUP_TAG.sub("", markup))


class Presenter(abc.ABC):
    """Draws hint models. Owns its overlay surface."""

    @abc.abstractmethod
    def show(self, model: HintModel):
        """Draw (or redraw) the overlay for ``model`` and make it visible"""

    @abc.abstractmethod
    def hide(self):
        """Hide the overlay if there is one"""


@dataclass
class Overlay:
    geometry: Geometry
    title: str                          = ""
    columns: List[List[str]]            = field(default_factory=list)
    visible: bool                       = False


class ConsolePresenter(Presenter):
    """
    Presenter that lays the overlay out as plain text on the console.

    The overlay is created on the first ``show()`` and only hidden
    afterwards, so one presenter keeps a single surface for its lifetime.
    """

    def __init__(self, screen_context=None, metrics: OverlayMetrics = OverlayMetrics(),
                 column_width=32):
        self._screen_context = screen_context
        self._metrics = metrics
        self._column_width = column_width
        self.overlay: Optional[Overlay] = None

    def _workarea(self):
        if self._screen_context is None:
            return DEFAULT_WORKAREA
        return self._screen_context.get_workarea()

    def show(self, model: HintModel):
        # geometry is recomputed every time, the screen might have changed
        geometry = overlay_geometry(model, self._workarea(), self._metrics)
        if self.overlay is None:
            self.overlay = Overlay(geometry)
        overlay = self.overlay
        overlay.geometry = geometry
        overlay.title = strip_markup(model.title_markup)
        overlay.columns = [[strip_markup(row.markup) for row in column]
                           for column in model.columns]
        overlay.visible = True
        for line in self.render_lines():
            info(line, ctx="HH")

    def hide(self):
        if self.overlay is not None and self.overlay.visible:
            self.overlay.visible = False
            info("overlay hidden", ctx="HH")

    def render_lines(self):
        overlay = self.overlay
        if overlay is None:
            return []
        width = self._column_width
        height = max((len(col) for col in overlay.columns), default=0)
        lines = []
        for idx in range(height):
            cells = [col[idx] if idx < len(col) else "" for col in overlay.columns]
            lines.append("".join(f"{cell[:width - 1]:<{width}}" for cell in cells).rstrip())
        lines.append(overlay.title.strip())
        return lines
