import pytest

from nenet.aabb import AABB, clip_axis_x, clip_axis_y, clip_axis_z

CLIPPERS = [(0, clip_axis_x), (1, clip_axis_y), (2, clip_axis_z)]


def _box_at(offset, size=1.0):
    lo = tuple(float(c) for c in offset)
    return AABB(lo, tuple(c + size for c in lo))


def _shift(axis, amount):
    vec = [0.0, 0.0, 0.0]
    vec[axis] = amount
    return vec


@pytest.mark.parametrize("axis,clip", CLIPPERS)
def test_positive_motion_stops_at_face(axis, clip):
    moving = _box_at((0, 0, 0))
    blocker = _box_at(_shift(axis, 3.0))
    result = clip(moving, blocker, 5.0)
    assert moving.hi[axis] + result == blocker.lo[axis]


@pytest.mark.parametrize("axis,clip", CLIPPERS)
def test_negative_motion_stops_at_face(axis, clip):
    moving = _box_at(_shift(axis, 4.0))
    blocker = _box_at((0, 0, 0))
    result = clip(moving, blocker, -10.0)
    assert moving.lo[axis] + result == blocker.hi[axis]


@pytest.mark.parametrize("axis,clip", CLIPPERS)
def test_short_motion_is_unchanged(axis, clip):
    moving = _box_at((0, 0, 0))
    blocker = _box_at(_shift(axis, 3.0))
    assert clip(moving, blocker, 0.5) == 0.5


@pytest.mark.parametrize("axis,clip", CLIPPERS)
def test_no_overlap_on_other_axes_is_unchanged(axis, clip):
    moving = _box_at((0, 0, 0))
    offset = [5.0, 5.0, 5.0]
    offset[axis] = 3.0
    blocker = _box_at(offset)
    assert clip(moving, blocker, 5.0) == 5.0


@pytest.mark.parametrize("axis,clip", CLIPPERS)
def test_blocker_behind_is_ignored(axis, clip):
    moving = _box_at(_shift(axis, 4.0))
    blocker = _box_at((0, 0, 0))
    assert clip(moving, blocker, 7.0) == 7.0


@pytest.mark.parametrize("axis,clip", CLIPPERS)
def test_zero_motion_stays_zero(axis, clip):
    moving = _box_at((0, 0, 0))
    blocker = _box_at(_shift(axis, 1.0))
    assert clip(moving, blocker, 0.0) == 0.0


def test_touching_on_side_does_not_block():
    moving = _box_at((0, 0, 0))
    blocker = _box_at((3, 1, 0))
    assert clip_axis_x(moving, blocker, 5.0) == 5.0


def test_translated_moves_both_corners():
    box = _box_at((1, 2, 3))
    moved = box.translated((1.0, -2.0, 0.5))
    assert moved.lo == (2.0, 0.0, 3.5)
    assert moved.hi == (3.0, 1.0, 4.5)