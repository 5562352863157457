"""Axis-aligned bounding boxes and per-axis sweep clipping."""

from __future__ import annotations

from dataclasses import dataclass

Vec3 = tuple[float, float, float]

__all__ = ["AABB", "clip_axis_x", "clip_axis_y", "clip_axis_z"]


@dataclass(frozen=True)
class AABB:
    """A box spanning from corner ``lo`` to corner ``hi``."""

    lo: Vec3
    hi: Vec3

    def translated(self, offset: Vec3) -> AABB:
        """Return the box moved by ``offset``."""
        return AABB(
            tuple(a + d for a, d in zip(self.lo, offset)),  # type: ignore[arg-type]
            tuple(a + d for a, d in zip(self.hi, offset)),  # type: ignore[arg-type]
        )


def _clip(moving: AABB, blocker: AABB, motion: float, axis: int) -> float:
    for other in range(3):
        if other == axis:
            continue
        if moving.hi[other] <= blocker.lo[other] or moving.lo[other] >= blocker.hi[other]:
            return motion
    if motion > 0.0 and moving.hi[axis] <= blocker.lo[axis]:
        return min(motion, blocker.lo[axis] - moving.hi[axis])
    if motion < 0.0 and moving.lo[axis] >= blocker.hi[axis]:
        return max(motion, blocker.hi[axis] - moving.lo[axis])
    return motion


def clip_axis_x(moving: AABB, blocker: AABB, motion: float) -> float:
    """Shorten an x motion so ``moving`` stops at ``blocker``."""
    return _clip(moving, blocker, motion, 0)


def clip_axis_y(moving: AABB, blocker: AABB, motion: float) -> float:
    """Shorten a y motion so ``moving`` stops at ``blocker``."""
    return _clip(moving, blocker, motion, 1)


def clip_axis_z(moving: AABB, blocker: AABB, motion: float) -> float:
    """Shorten a z motion so ``moving`` stops at ``blocker``."""
    return _clip(moving, blocker, motion, 2)