import math

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Optional, Tuple

from .models.binding import HIDDEN, SubTreeBinding

NUM_COLUMNS = 3


# ─── STYLING ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class HintStyle:
    """Colors for the hint overlay. ``None`` leaves the attribute unset."""

    key_fg: Optional[str]               = None
    key_bg: Optional[str]               = "#eeeeee"
    key_control_fg: Optional[str]       = "#00bb00"
    key_shift_fg: Optional[str]         = "#4488ff"
    # alt, super and mod3 labels
    key_modifier_fg: Optional[str]      = "#aa4444"
    activation_fg: Optional[str]        = "#44aaff"
    nested_fg: Optional[str]            = "#4488aa"
    nested_bg: Optional[str]            = None
    focused_fg: Optional[str]           = None
    focused_bg: Optional[str]           = "#dddddd"

    @classmethod
    def option_names(cls):
        return tuple(f.name for f in fields(cls))

    def updated(self, **options):
        return replace(self, **options)


class SegmentStyle(Enum):
    ACTIVATION  = "activation"
    KEY         = "key"
    NESTED      = "nested"


class RowStyle(Enum):
    PLAIN       = "plain"
    NESTED      = "nested"
    FOCUSED     = "focused"


def colorize(text, fg=None, bg=None):
    fg = f' foreground="{fg}"' if fg is not None else ""
    bg = f' background="{bg}"' if bg is not None else ""
    return f"<span{fg}{bg}>{text}</span>"


def bold(text):
    return f"<b>{text}</b>"


def escape_markup(text):
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# identifier word, short label, style attribute for its color
_MODIFIER_LABELS = (
    ("control",     "C",        "key_control_fg"),
    ("shift",       "S",        "key_shift_fg"),
    ("mod1",        "A",        "key_modifier_fg"),
    ("mod4",        "Super",    "key_modifier_fg"),
    ("mod3",        "Mod3",     "key_modifier_fg"),
)


def key_label(key_string, style: HintStyle = HintStyle()):
    """Markup for a key identifier (or raw key name) as shown in the overlay"""
    for word, label, color_attr in _MODIFIER_LABELS:
        key_string = key_string.replace(word, colorize(label, getattr(style, color_attr)))
    return colorize(bold(f" {key_string} "), style.key_fg, style.key_bg)


def stylize_nested(description, style: HintStyle = HintStyle()):
    return colorize(bold(description), style.nested_fg, style.nested_bg)


def _description_text(description):
    # a hidden level can still be entered, its crumb just has no text
    if description is HIDDEN:
        return ""
    return escape_markup(str(description))


# ─── HINT MODEL ─────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TitleSegment:
    text: str
    style: SegmentStyle
    markup: str


@dataclass(frozen=True)
class HintRow:
    identifier: str
    label: str
    description: str
    style: RowStyle
    markup: str


@dataclass(frozen=True)
class HintModel:
    title: Tuple[TitleSegment, ...]
    title_markup: str
    # visible rows in display order
    rows: Tuple[HintRow, ...]
    columns: Tuple[Tuple[HintRow, ...], ...]

    @property
    def column_height(self):
        return max((len(column) for column in self.columns), default=0)


def build_title(activation_label, breadcrumbs, style: HintStyle = HintStyle()):
    segments = [TitleSegment(activation_label, SegmentStyle.ACTIVATION,
                             colorize(bold(escape_markup(activation_label)),
                                      style.activation_fg))]
    for crumb in breadcrumbs:
        segments.append(TitleSegment(crumb.key, SegmentStyle.KEY,
                                     key_label(escape_markup(crumb.key), style)))
    if breadcrumbs:
        description = _description_text(breadcrumbs[-1].description)
        segments.append(TitleSegment(description, SegmentStyle.NESTED,
                                     stylize_nested(description, style)))

    markup = segments[0].markup
    for segment in segments[1:]:
        sep = " - " if segment.style is SegmentStyle.NESTED else " "
        markup += sep + segment.markup
    return tuple(segments), markup


def build_row(identifier, binding, focused_key, style: HintStyle = HintStyle()):
    label = key_label(escape_markup(identifier), style)
    description = _description_text(binding.description)
    row_style = RowStyle.PLAIN
    shown = description
    if isinstance(binding, SubTreeBinding):
        row_style = RowStyle.NESTED
        shown = stylize_nested(description + "...", style)
    markup = f"{label} - {shown}"
    if identifier == focused_key:
        row_style = RowStyle.FOCUSED
        markup = colorize(markup, style.focused_fg, style.focused_bg)
    return HintRow(identifier, label, description, row_style, markup)


def build_hint_model(activation_label, breadcrumbs, current_node, focused_key=None,
                     columns=NUM_COLUMNS, hidden=HIDDEN,
                     style: HintStyle = HintStyle()) -> HintModel:
    """
    Project the navigation state onto something an overlay can draw.

    Rows are ordered by their rendered label markup, then dealt out
    round-robin over ``columns`` columns.
    """
    title, title_markup = build_title(activation_label, breadcrumbs, style)

    rows = [
        build_row(identifier, binding, focused_key, style)
        for identifier, binding in current_node.items()
        if binding.description is not hidden
    ]
    # NOTE: ordering follows the markup, so colors can change the order
    rows.sort(key=lambda row: (row.label, row.identifier))

    dealt = [[] for _ in range(columns)]
    for idx, row in enumerate(rows):
        dealt[idx % columns].append(row)

    return HintModel(title, title_markup, tuple(rows), tuple(tuple(col) for col in dealt))


# ─── OVERLAY GEOMETRY ───────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Workarea:
    x: int
    y: int
    width: int
    height: int


DEFAULT_WORKAREA = Workarea(0, 0, 1920, 1080)


@dataclass(frozen=True)
class OverlayMetrics:
    margin: float                       = 6
    title_height: float                 = 22
    row_height: float                   = 15
    width: float                        = 800
    # fraction of the workarea height where the overlay bottom sits
    y_anchor: float                     = 0.75

    def scaled(self, factor):
        return replace(self,
                       margin=self.margin * factor,
                       title_height=self.title_height * factor,
                       row_height=self.row_height * factor,
                       width=self.width * factor)


@dataclass(frozen=True)
class Geometry:
    x: int
    y: int
    width: int
    height: int


def overlay_geometry(model: HintModel, workarea: Workarea = DEFAULT_WORKAREA,
                     metrics: OverlayMetrics = OverlayMetrics()) -> Geometry:
    x = math.ceil(workarea.x + workarea.width / 2 - metrics.width / 2)
    height = (metrics.title_height
              + metrics.row_height * model.column_height
              + metrics.margin * 2)
    y = workarea.y + workarea.height * metrics.y_anchor - height
    return Geometry(x, int(y), int(math.ceil(metrics.width)), int(math.ceil(height)))
