import pytest

from aionland.compositor import (
    BORDER_COLOR,
    CURSOR_COLOR,
    FOCUSED_COLOR,
    TITLE_COLOR,
    Compositor,
    Surface,
)


def _mapped(compositor, x, y, width, height, app_id=""):
    surface = compositor.create_surface(app_id)
    surface.x, surface.y, surface.width, surface.height = x, y, width, height
    surface.mapped = True
    return surface


def test_init_sets_output_and_cursor():
    comp = Compositor(640, 480)
    assert comp.output.name == "HDMI-1"
    assert comp.output.refresh_rate == 60
    assert comp.output.fb_stride == 640 * 4
    assert len(comp.output.framebuffer) == 640 * 480
    assert (comp.cursor_x, comp.cursor_y) == (320, 240)
    assert comp.workspaces[0].active


@pytest.mark.parametrize("args", [(0, 10), (10, -1), (10, 10, 20), (10, 10, 42)])
def test_invalid_geometry_raises(args):
    with pytest.raises(ValueError):
        Compositor(*args)


def test_surface_ids_and_default_size():
    comp = Compositor()
    first = comp.create_surface()
    second = comp.create_surface()
    assert (first.id, second.id) == (1, 2)
    assert (first.width, first.height) == (800, 600)
    assert comp.workspaces[0].surfaces == [first, second]


def test_predicted_size_is_clamped_to_output():
    comp = Compositor(640, 480)
    surface = comp.create_surface("terminal")
    assert (surface.width, surface.height) == (640, 480)


def test_browser_is_wider_than_editor_but_fits():
    comp = Compositor(1920, 1080)
    browser = comp.create_surface("browser")
    editor = comp.create_surface("editor")
    assert editor.width < browser.width < comp.output.width
    assert editor.height < browser.height < comp.output.height


def test_smart_placement_avoids_mapped_window():
    comp = Compositor(1920, 1080)
    blocker = _mapped(comp, 0, 0, 960, 1080)
    new = Surface(id=99, width=200, height=200)
    x, y = comp.smart_placement(new)
    assert (new.x, new.y) == (x, y)
    assert x % 50 == 0 and y % 50 == 0
    assert x + new.width <= comp.output.width
    assert not (x < blocker.x + blocker.width and x + new.width > blocker.x
                and y < blocker.y + blocker.height and y + new.height > blocker.y)


def test_surface_at_picks_topmost_mapped():
    comp = Compositor()
    lower = _mapped(comp, 100, 100, 200, 200)
    upper = _mapped(comp, 150, 150, 200, 200)
    hidden = comp.create_surface()
    hidden.x, hidden.y, hidden.width, hidden.height = 0, 0, 1000, 700
    assert comp.surface_at(160, 160) is upper
    assert comp.surface_at(110, 110) is lower
    assert comp.surface_at(5, 5) is None


def test_pointer_motion_moves_cursor_and_reports_surface():
    comp = Compositor()
    surface = _mapped(comp, 10, 10, 50, 50)
    assert comp.handle_pointer_motion(20, 20) is surface
    assert (comp.cursor_x, comp.cursor_y) == (20, 20)
    assert comp.handle_pointer_motion(500, 500) is None


def test_focus_moves_between_surfaces():
    comp = Compositor()
    a = comp.create_surface()
    b = comp.create_surface()
    comp.focus_surface(a)
    comp.focus_surface(b)
    assert b.focused and not a.focused
    assert comp.focused_surface is b
    assert set(comp.usage_stats) == {a.id, b.id}
    comp.focus_surface(None)
    assert comp.focused_surface is b


def test_render_frame_draws_background_surface_and_cursor():
    comp = Compositor(640, 480)
    surface = _mapped(comp, 100, 100, 50, 40)
    surface.buffer = [0x123456] * 100
    surface.buffer_width = surface.buffer_height = 10
    surface.buffer_stride = 40
    comp.render_frame()
    out = comp.output

    assert (out.get(0, 0) >> 16) & 0xFF == 20
    assert out.get(105, 105) == 0x123456
    assert out.get(110, 90) == TITLE_COLOR
    assert out.get(149, 120) == BORDER_COLOR
    assert out.get(comp.cursor_x, comp.cursor_y) == CURSOR_COLOR
    assert out.get(comp.cursor_x + 15, comp.cursor_y + 1) == out.get(0, comp.cursor_y + 1)
    assert comp.frame_count == 1
    assert comp.fps > 0


def test_focused_surface_uses_focus_color():
    comp = Compositor(640, 480)
    surface = _mapped(comp, 100, 100, 50, 40)
    surface.buffer = [0]
    surface.buffer_width = surface.buffer_height = 1
    surface.buffer_stride = 4
    comp.focus_surface(surface)
    comp.cursor_visible = False
    comp.render_frame()
    assert comp.output.get(110, 90) == FOCUSED_COLOR
    assert comp.output.get(149, 120) == FOCUSED_COLOR


def test_unmapped_or_bufferless_surface_is_not_drawn():
    comp = Compositor(640, 480)
    comp.cursor_visible = False
    hidden = comp.create_surface()
    hidden.x, hidden.y, hidden.width, hidden.height = 100, 100, 50, 40
    hidden.buffer = [0x123456]
    hidden.buffer_width = hidden.buffer_height = 1
    hidden.buffer_stride = 4
    bare = _mapped(comp, 300, 300, 50, 40)
    comp.render_frame()
    assert comp.output.get(100, 100) == comp.output.get(0, 100)
    assert comp.output.get(bare.x + 49, bare.y + 20) == comp.output.get(0, bare.y + 20)


def test_surface_near_edge_is_clipped():
    comp = Compositor(320, 240)
    comp.cursor_visible = False
    surface = _mapped(comp, 315, 50, 50, 40)
    surface.buffer = [0]
    surface.buffer_width = surface.buffer_height = 1
    surface.buffer_stride = 4
    comp.render_frame()
    assert len(comp.output.framebuffer) == 320 * 240
    assert comp.output.get(315, 60) == BORDER_COLOR
    assert comp.output.get(319, 30) == TITLE_COLOR


def test_optimize_rendering_flags_low_fps():
    comp = Compositor()
    comp.fps = 30.0
    assert comp.optimize_rendering() is True
    comp.fps = 60.0
    assert comp.optimize_rendering() is False


def test_workspace_surface_limit():
    comp = Compositor(200, 200)
    for _ in range(64):
        comp.create_surface()
    with pytest.raises(RuntimeError):
        comp.create_surface()
    assert len(comp.surfaces) == 64