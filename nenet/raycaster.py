"""Voxel ray traversal that finds the first hittable block along a ray."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Callable

Vec3 = tuple[float, float, float]
IVec3 = tuple[int, int, int]
BlockReader = Callable[[int, int, int], Any]

__all__ = ["RaycastHit", "cast"]


@dataclass(frozen=True)
class RaycastHit:
    """The block hit, the face normal it was entered through, and the distance."""

    block_pos: IVec3
    normal: IVec3
    distance: float


def _sign(value: float) -> int:
    if value > 0.0:
        return 1
    if value < 0.0:
        return -1
    return 0


def _initial_t(step: int, origin: float, d: float) -> float:
    if step == 0:
        return math.inf
    fl = math.floor(origin)
    frac = (fl + 1.0 - origin) if step > 0 else (origin - fl)
    return frac / abs(d)


def cast(
    reader: BlockReader,
    origin: Vec3,
    direction: Vec3,
    max_distance: float,
    is_hittable: Callable[[Any], bool],
) -> RaycastHit | None:
    """Walk the grid from ``origin`` along ``direction`` up to ``max_distance``."""
    length = math.sqrt(sum(c * c for c in direction))
    if length < 1e-6:
        return None
    d = [c / length for c in direction]

    cell = [math.floor(c) for c in origin]
    step = [_sign(c) for c in d]
    t_max = [_initial_t(s, o, dc) for s, o, dc in zip(step, origin, d)]
    t_delta = [math.inf if s == 0 else 1.0 / abs(dc) for s, dc in zip(step, d)]

    if is_hittable(reader(*cell)):
        return RaycastHit((cell[0], cell[1], cell[2]), (0, 1, 0), 0.0)

    t = 0.0
    while t < max_distance:
        if t_max[0] < t_max[1] and t_max[0] < t_max[2]:
            axis = 0
        elif t_max[1] < t_max[2]:
            axis = 1
        else:
            axis = 2
        cell[axis] += step[axis]
        t = t_max[axis]
        t_max[axis] += t_delta[axis]
        normal = [0, 0, 0]
        normal[axis] = -step[axis]

        if t > max_distance:
            break
        if is_hittable(reader(*cell)):
            return RaycastHit((cell[0], cell[1], cell[2]), (normal[0], normal[1], normal[2]), t)
    return None