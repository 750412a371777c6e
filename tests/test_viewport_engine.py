import pytest

from zoompicture.services import viewport_engine as engine
from zoompicture.services.viewport_engine import InvalidImageError
from zoompicture.ui.state import (
    AnchorMode,
    LayoutMode,
    Point,
    Rect,
    Size,
    ViewportState,
    ZoomLimits,
    round_px,
)


def attached(source=(400, 300), container=(400, 400), limits=None) -> ViewportState:
    state = ViewportState(container_size=Size(*container))
    return engine.attach_image(state, Size(*source), limits or ZoomLimits())


# ----- fit / center -----

def test_fit_wide_image_into_square_container():
    zoom = engine.fit_to_container(Size(800, 600), Size(400, 400))
    assert zoom == pytest.approx(0.5)
    assert engine.center_bounds(Size(800, 600), zoom, Size(400, 400)) == Rect(0, 50, 400, 300)


def test_fit_tall_image_is_height_constrained():
    zoom = engine.fit_to_container(Size(300, 900), Size(400, 300))
    assert zoom == pytest.approx(300 / 900)


@pytest.mark.parametrize(
    "source, container",
    [
        ((800, 600), (400, 400)),
        ((333, 777), (1000, 500)),
        ((1920, 1080), (1000, 1000)),
        ((640, 480), (320, 240)),
        ((7, 3), (1024, 768)),
        ((5000, 17), (123, 456)),
    ],
)
def test_fit_never_crops_and_fills_one_axis(source, container):
    sw, sh = source
    cw, ch = container
    zoom = engine.fit_to_container(Size(sw, sh), Size(cw, ch))
    w = round_px(sw * zoom)
    h = round_px(sh * zoom)
    assert w <= cw and h <= ch
    assert w == cw or h == ch


def test_fit_degenerate_inputs_return_identity():
    assert engine.fit_to_container(None, Size(400, 400)) == 1.0
    assert engine.fit_to_container(Size(800, 600), Size(0, 400)) == 1.0
    assert engine.fit_to_container(Size(800, 600), Size(0, 0)) == 1.0


def test_center_allows_negative_origin_when_image_is_larger():
    assert engine.center_bounds(Size(400, 300), 2.0, Size(400, 400)) == Rect(-200, -100, 800, 600)


def test_center_uses_floor_division_for_odd_slack():
    assert engine.center_bounds(Size(101, 51), 1.0, Size(200, 100)) == Rect(49, 24, 101, 51)


def test_center_without_image_is_empty():
    assert engine.center_bounds(None, 2.0, Size(400, 400)) == Rect()


# ----- clamp -----

def test_clamp_applies_ceiling():
    assert engine.clamp_zoom(100.0, ZoomLimits(), Size(800, 600)) == 64.0


def test_clamp_applies_both_pixel_floors():
    zoom = engine.clamp_zoom(0.001, ZoomLimits(), Size(800, 600))
    # 너비 하한(10/800) 이후 높이 하한(10/600)이 다시 끌어올림
    assert zoom == pytest.approx(10 / 600)
    assert 800 * zoom >= 10
    assert 600 * zoom >= 10 - 1e-9


def test_clamp_floor_wins_over_ceiling():
    limits = ZoomLimits(minimum_image_width=1000, minimum_image_height=1, maximum_zoom_factor=1.0)
    assert engine.clamp_zoom(5.0, limits, Size(100, 100)) == pytest.approx(10.0)


def test_clamp_without_image_is_identity():
    assert engine.clamp_zoom(8.0, ZoomLimits(), None) == 1.0


def test_clamp_is_non_decreasing_and_capped():
    limits = ZoomLimits()
    requested = [0.02, 0.05, 0.1, 0.5, 1.0, 3.0, 10.0, 63.9, 64.0, 65.0, 500.0]
    results = [engine.clamp_zoom(z, limits, Size(800, 600)) for z in requested]
    assert results == sorted(results)
    assert max(results) == 64.0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"minimum_image_width": 0},
        {"minimum_image_height": -5},
        {"maximum_zoom_factor": 0.0},
    ],
)
def test_zoom_limits_reject_invalid_values(kwargs):
    with pytest.raises(ValueError):
        ZoomLimits(**kwargs)


# ----- anchor -----

def test_resolve_anchor_modes():
    bounds = Rect(10, 20, 100, 50)
    control = Size(200, 100)
    assert engine.resolve_anchor(AnchorMode.CONTROL_CENTER, bounds, control) == Point(90, 30)
    assert engine.resolve_anchor(AnchorMode.IMAGE_CENTER, bounds, control) == Point(50, 25)
    assert engine.resolve_anchor(AnchorMode.MOUSE_POSITION, bounds, control, Point(30, 40)) == Point(20, 20)


def test_mouse_anchor_without_pointer_uses_control_center():
    bounds = Rect(10, 20, 100, 50)
    assert engine.resolve_anchor(AnchorMode.MOUSE_POSITION, bounds, Size(200, 100)) == Point(90, 30)


# ----- apply_zoom -----

def test_zoom_around_image_center_scenario():
    state = attached()
    assert state.image_bounds == Rect(0, 50, 400, 300)
    assert state.zoom_factor == pytest.approx(1.0)

    zoomed = engine.apply_zoom(state, 2.0, AnchorMode.IMAGE_CENTER)
    assert zoomed.image_bounds == Rect(-200, -100, 800, 600)
    assert zoomed.zoom_factor == 2.0


def test_zoom_below_threshold_keeps_bounds():
    state = attached()
    same = engine.apply_zoom(state, 1.0005, AnchorMode.IMAGE_CENTER)
    assert same.image_bounds == state.image_bounds
    assert same.zoom_factor == 1.0005


@pytest.mark.parametrize("pointer", [Point(123, 77), Point(0, 0), Point(399, 399), Point(-50, 500)])
@pytest.mark.parametrize("new_zoom", [0.3, 1.7, 2.0, 7.25])
def test_zoom_keeps_pointer_anchor_in_place(pointer, new_zoom):
    state = attached()
    bounds = state.image_bounds
    anchor = Point(pointer.x - bounds.x, pointer.y - bounds.y)
    ratio = new_zoom / (bounds.width / 400)

    zoomed = engine.apply_zoom(state, new_zoom, AnchorMode.MOUSE_POSITION, pointer)
    after_x = zoomed.image_bounds.x + anchor.x * ratio
    after_y = zoomed.image_bounds.y + anchor.y * ratio
    assert abs(after_x - pointer.x) <= 1
    assert abs(after_y - pointer.y) <= 1


def test_zoom_keeps_control_center_in_place():
    state = attached(source=(640, 480), container=(300, 200))
    zoomed = engine.apply_zoom(state, state.zoom_factor * 3, AnchorMode.CONTROL_CENTER)
    b = zoomed.image_bounds
    # 컨트롤 중앙(150, 100) 아래의 이미지 비율 좌표가 유지되는지 확인
    before = ((150 - state.image_bounds.x) / state.image_bounds.width,
              (100 - state.image_bounds.y) / state.image_bounds.height)
    after = ((150 - b.x) / b.width, (100 - b.y) / b.height)
    assert after[0] == pytest.approx(before[0], abs=1.0 / b.width)
    assert after[1] == pytest.approx(before[1], abs=1.0 / b.height)


def test_zoom_keeps_size_invariant():
    state = attached(source=(333, 211))
    for z in (0.37, 1.0, 2.5, 11.1):
        state = engine.apply_zoom(state, z, AnchorMode.IMAGE_CENTER)
        assert state.image_bounds.width == round_px(333 * z)
        assert state.image_bounds.height == round_px(211 * z)


def test_zoom_without_image_is_noop():
    state = ViewportState(container_size=Size(400, 400))
    assert engine.apply_zoom(state, 3.0, AnchorMode.IMAGE_CENTER) is state
    assert engine.set_zoom(state, 3.0, ZoomLimits(), AnchorMode.IMAGE_CENTER) is state


def test_zoom_with_emptied_bounds_recenters():
    state = attached().with_bounds(Rect())
    zoomed = engine.apply_zoom(state, 0.5, AnchorMode.IMAGE_CENTER)
    assert zoomed.image_bounds == Rect(100, 125, 200, 150)


def test_set_zoom_clamps_before_applying():
    state = attached()
    zoomed = engine.set_zoom(state, 1000.0, ZoomLimits(), AnchorMode.IMAGE_CENTER)
    assert zoomed.zoom_factor == 64.0
    assert zoomed.image_bounds.width == 400 * 64


def test_wheel_zoom_factor():
    assert engine.wheel_zoom_factor(1.0, 120, 4000) == pytest.approx(1.03)
    assert engine.wheel_zoom_factor(2.0, -400, 4000) == pytest.approx(1.8)
    with pytest.raises(ValueError):
        engine.wheel_zoom_factor(1.0, 120, 0)


# ----- drag -----

def test_begin_drag_respects_enabled_flag():
    assert engine.begin_drag(Point(1, 2), enabled=False) is None
    assert engine.begin_drag(Point(1, 2)).last_pointer == Point(1, 2)


def test_drag_deltas_are_additive():
    state = attached()
    session = engine.begin_drag(Point(10, 10))
    stepwise = state
    for p in (Point(15, 12), Point(20, 30), Point(5, 5)):
        stepwise, session = engine.update_drag(stepwise, session, p)

    single, _ = engine.update_drag(state, engine.begin_drag(Point(10, 10)), Point(5, 5))
    assert stepwise.image_bounds == single.image_bounds == Rect(-5, 45, 400, 300)
    assert stepwise.zoom_factor == state.zoom_factor
    assert session.last_pointer == Point(5, 5)
    assert engine.end_drag(session) is None


def test_drag_without_image_only_advances_session():
    state = ViewportState(container_size=Size(100, 100))
    new_state, session = engine.update_drag(state, engine.begin_drag(Point(0, 0)), Point(9, 9))
    assert new_state is state
    assert session.last_pointer == Point(9, 9)


def test_move_image_sets_origin():
    state = engine.move_image(attached(), Point(-7, 13))
    assert state.image_bounds == Rect(-7, 13, 400, 300)


# ----- layout -----

def test_scrollable_layout_uses_native_size():
    assert engine.apply_layout_mode(LayoutMode.SCROLLABLE, Size(800, 600), Size(10, 10)) == Size(800, 600)


@pytest.mark.parametrize(
    "container, expected",
    [
        ((1000, 1000), (800, 600)),
        ((400, 400), (400, 300)),
        ((1000, 300), (400, 300)),
        ((300, 1000), (300, 225)),
        ((800, 500), (667, 500)),
    ],
)
def test_ratio_stretch_layout(container, expected):
    result = engine.apply_layout_mode(LayoutMode.RATIO_STRETCH, Size(800, 600), Size(*container))
    assert result == Size(*expected)
    assert result.width <= max(container[0], 800) and result.height <= max(container[1], 600)


def test_layout_without_image_keeps_container():
    assert engine.apply_layout_mode(LayoutMode.RATIO_STRETCH, None, Size(5, 6)) == Size(5, 6)
    assert engine.apply_layout_mode(LayoutMode.RATIO_STRETCH, Size(800, 600), Size(0, 0)) == Size(0, 0)


def test_layout_rejects_unknown_mode():
    with pytest.raises(ValueError):
        engine.apply_layout_mode("bogus", Size(8, 6), Size(4, 4))


# ----- attach / detach / resize -----

@pytest.mark.parametrize("size", [(0, 10), (10, 0), (-1, 5)])
def test_attach_rejects_degenerate_images(size):
    with pytest.raises(InvalidImageError):
        engine.attach_image(ViewportState(container_size=Size(10, 10)), Size(*size), ZoomLimits())


def test_attach_fits_and_centers():
    state = attached(source=(800, 600), container=(400, 400))
    assert state.zoom_factor == pytest.approx(0.5)
    assert state.image_bounds == Rect(0, 50, 400, 300)


def test_attach_in_tiny_container_honours_pixel_floors():
    state = attached(source=(800, 600), container=(4, 4))
    assert state.zoom_factor == pytest.approx(10 / 600)
    assert state.image_bounds == Rect(-5, -3, 13, 10)


def test_detach_clears_image_but_keeps_container():
    state = engine.detach_image(attached())
    assert not state.has_image
    assert state.image_bounds == Rect()
    assert state.zoom_factor == 1.0
    assert state.container_size == Size(400, 400)


def test_resize_refits_and_recenters():
    state = engine.resize_container(attached(), Size(800, 800), ZoomLimits())
    assert state.zoom_factor == pytest.approx(2.0)
    assert state.image_bounds == Rect(0, 100, 800, 600)

    empty = engine.resize_container(ViewportState(), Size(30, 40), ZoomLimits())
    assert empty.container_size == Size(30, 40)
    assert not empty.has_image


def test_smooth_scaling_threshold():
    assert engine.use_smooth_scaling(4.0)
    assert not engine.use_smooth_scaling(4.01)
