from modalkeyz.hints import Workarea, build_hint_model
from modalkeyz.models.binding import build_binding_map
from modalkeyz.models.session import Breadcrumb
from modalkeyz.presenter import ConsolePresenter, strip_markup


def noop():
    pass


class ScreenStub:
    def __init__(self, workarea):
        self.workarea = workarea

    def get_workarea(self):
        return self.workarea


def sample_model(focused_key=None):
    bindings = build_binding_map({
        "a": ["apps & more", noop],
        "b": ["browser", noop],
        "w": ["window", {}],
        "control-q": ["quit", noop],
    })
    return build_hint_model("Super_L", [Breadcrumb("m", "menu")], bindings, focused_key)


def test_strip_markup():
    assert "S-a - x & y" == strip_markup('<span foreground="#fff"><b>S-a</b></span> - x &amp; y')

def test_overlay_created_on_first_show():
    presenter = ConsolePresenter()
    assert presenter.overlay is None
    presenter.hide()
    assert presenter.overlay is None

    presenter.show(sample_model())
    overlay = presenter.overlay
    assert overlay.visible
    assert "Super_L  m  - menu" == overlay.title
    assert 3 == len(overlay.columns)

    presenter.show(sample_model("a"))
    assert overlay is presenter.overlay

def test_hide_keeps_overlay():
    presenter = ConsolePresenter()
    presenter.show(sample_model())
    presenter.hide()
    assert presenter.overlay is not None
    assert not presenter.overlay.visible

def test_geometry_follows_screen():
    screen = ScreenStub(Workarea(0, 0, 1000, 1000))
    presenter = ConsolePresenter(screen)
    presenter.show(sample_model())
    assert 100 == presenter.overlay.geometry.x

    screen.workarea = Workarea(1000, 0, 1000, 1000)
    presenter.show(sample_model())
    assert 1100 == presenter.overlay.geometry.x

def test_render_lines():
    presenter = ConsolePresenter(column_width=20)
    assert [] == presenter.render_lines()
    presenter.show(sample_model())
    lines = presenter.render_lines()
    assert 3 == len(lines)
    assert lines[0].startswith(" C-q  - quit")
    assert "apps & more" in lines[0]
    assert "Super_L  m  - menu" == lines[-1]
