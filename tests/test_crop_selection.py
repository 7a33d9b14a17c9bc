import random

import pytest

from core.crop_selection import CropSelection, SelectionState, normalize_rect
from core.geometry import Dimension, Point, Rect

PREVIEW = Dimension(640, 360)
SOURCE = Dimension(1920, 1080)


@pytest.fixture
def selection(qtbot):
    sel = CropSelection()
    sel.set_geometry(PREVIEW, SOURCE)
    return sel


def drag(selection, start, end):
    selection.begin_drag(Point(*start))
    selection.update_drag(Point(*end))
    selection.end_drag(Point(*end))


@pytest.mark.parametrize("p1, p2", [
    ((100, 100), (300, 200)),
    ((300, 200), (100, 100)),
    ((100, 200), (300, 100)),
    ((300, 100), (100, 200)),
])
def test_normalize_rect_is_direction_independent(p1, p2):
    assert normalize_rect(Point(*p1), Point(*p2)) == Rect(100, 100, 200, 100)


def test_commit_emits_source_rect(qtbot, selection):
    with qtbot.waitSignal(selection.crop_committed) as blocker:
        drag(selection, (100, 100), (300, 200))

    assert blocker.args == [Rect(300, 300, 600, 300)]
    assert selection.state is SelectionState.IDLE
    assert selection.current_rect == Rect(100, 100, 200, 100)
    assert selection.source_rect == Rect(300, 300, 600, 300)


def test_points_outside_preview_are_clamped(selection):
    drag(selection, (-50, -20), (5000, 900))

    assert selection.current_rect == Rect(0, 0, 640, 360)
    assert selection.source_rect == Rect(0, 0, 1920, 1080)


def test_rects_stay_in_bounds_for_arbitrary_drags(qtbot):
    preview = Dimension(641, 360)
    sel = CropSelection()
    sel.set_geometry(preview, SOURCE)
    rng = random.Random(4321)

    for _ in range(300):
        start = (rng.uniform(-200, 900), rng.uniform(-200, 600))
        end = (rng.uniform(-200, 900), rng.uniform(-200, 600))
        drag(sel, start, end)

        rect = sel.current_rect
        if rect is None:
            continue
        assert 0 <= rect.x and rect.x + rect.width <= preview.width + 1e-9
        assert 0 <= rect.y and rect.y + rect.height <= preview.height + 1e-9
        assert sel.source_rect.fits_within(SOURCE)


def test_zero_area_drag_commits_nothing(qtbot, selection):
    with qtbot.assertNotEmitted(selection.crop_committed):
        with qtbot.waitSignal(selection.selection_changed) as blocker:
            selection.begin_drag(Point(50, 50))
        drag(selection, (50, 50), (50, 200))

    assert blocker.args == [None]
    assert selection.current_rect is None
    assert selection.source_rect is None


def test_update_and_end_are_ignored_when_idle(qtbot, selection):
    with qtbot.assertNotEmitted(selection.selection_changed):
        selection.update_drag(Point(10, 10))
        selection.end_drag(Point(20, 20))

    assert selection.current_rect is None


def test_new_drag_discards_previous_selection(selection):
    drag(selection, (10, 10), (100, 100))
    assert selection.source_rect is not None

    selection.begin_drag(Point(200, 200))

    assert selection.is_drawing
    assert selection.source_rect is None
    assert selection.current_rect == Rect(200, 200, 0, 0)


def test_live_rect_follows_pointer(selection):
    selection.begin_drag(Point(100, 100))
    selection.update_drag(Point(40, 150))

    assert selection.current_rect == Rect(40, 100, 60, 50)
    assert selection.source_rect is None


def test_clear_resets_to_idle(qtbot, selection):
    drag(selection, (10, 10), (100, 100))

    with qtbot.waitSignal(selection.selection_changed) as blocker:
        selection.clear()

    assert blocker.args == [None]
    assert selection.current_rect is None
    assert selection.state is SelectionState.IDLE


def test_show_source_rect_does_not_recommit(qtbot, selection):
    with qtbot.assertNotEmitted(selection.crop_committed):
        selection.show_source_rect(Rect(300, 300, 600, 300))

    rect = selection.current_rect
    assert (rect.x, rect.y, rect.width, rect.height) == pytest.approx((100, 100, 200, 100))


def test_drag_before_geometry_is_ignored(qtbot):
    sel = CropSelection()

    with qtbot.assertNotEmitted(sel.selection_changed):
        sel.begin_drag(Point(1, 1))

    assert not sel.is_drawing
