"""Player movement, collision, flying and health."""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from .aabb import AABB, clip_axis_x, clip_axis_y, clip_axis_z

Vec3 = tuple[float, float, float]
BlockReader = Callable[[int, int, int], Any]

__all__ = ["PlayerInput", "Player", "HealthTicker", "make_player_aabb"]

log = logging.getLogger(__name__)

HALF_WIDTH = 0.30
HEIGHT = 1.80
EYE_HEIGHT = 1.62
GRAVITY = -28.0
MAX_FALL_SPEED = -54.0
JUMP_VELOCITY = 8.4
WALK_SPEED = 4.5
SPRINT_MULTIPLIER = 1.6
FLY_SPEED = 12.0
FLY_SPRINT_MULTIPLIER = 4.0
MOUSE_SENSITIVITY = 0.12
DOUBLE_TAP_WINDOW = 0.30


class _Camera(Protocol):
    position: Vec3

    @property
    def forward(self) -> Vec3: ...

    @property
    def right(self) -> Vec3: ...

    def rotate(self, yaw_delta: float, pitch_delta: float) -> None: ...


@dataclass
class PlayerInput:
    """One frame of movement controls."""

    move_axis: tuple[float, float] = (0.0, 0.0)
    look_delta: tuple[float, float] = (0.0, 0.0)
    jump_held: bool = False
    jump_just_pressed: bool = False
    sprint: bool = False
    fly_down: bool = False


def make_player_aabb(foot: Vec3) -> AABB:
    """The player's collision box standing at ``foot``."""
    x, y, z = foot
    return AABB((x - HALF_WIDTH, y, z - HALF_WIDTH), (x + HALF_WIDTH, y + HEIGHT, z + HALF_WIDTH))


class Player:
    """A player body that moves through a block world and drives a camera."""

    MAX_HEALTH = 20

    def __init__(
        self,
        camera: _Camera,
        is_collision: Callable[[Any], bool],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._camera = camera
        self._is_collision = is_collision
        self._clock = clock
        cx, cy, cz = camera.position
        self._foot: Vec3 = (cx, cy - EYE_HEIGHT, cz)
        self._velocity: Vec3 = (0.0, 0.0, 0.0)
        self._on_ground = False
        self._flying = True
        self._last_space_time = -10.0
        self._health = self.MAX_HEALTH

    @property
    def foot_pos(self) -> Vec3:
        return self._foot

    @property
    def velocity(self) -> Vec3:
        return self._velocity

    @property
    def flying(self) -> bool:
        return self._flying

    @property
    def on_ground(self) -> bool:
        return self._on_ground

    @property
    def health(self) -> int:
        return self._health

    @property
    def max_health(self) -> int:
        return self.MAX_HEALTH

    def eye_pos(self) -> Vec3:
        x, y, z = self._foot
        return (x, y + EYE_HEIGHT, z)

    def set_foot_pos(self, pos: Vec3) -> None:
        self._foot = (float(pos[0]), float(pos[1]), float(pos[2]))
        self._camera.position = self.eye_pos()

    def set_flying(self, flying: bool) -> None:
        self._flying = flying
        vx, _, vz = self._velocity
        self._velocity = (vx, 0.0, vz)

    def damage(self, amount: int) -> None:
        if amount <= 0:
            return
        self._health = max(0, self._health - amount)

    def heal(self, amount: int) -> None:
        if amount <= 0:
            return
        self._health = min(self.MAX_HEALTH, self._health + amount)

    def reset_health(self) -> None:
        self._health = self.MAX_HEALTH

    def is_dead(self) -> bool:
        return self._health <= 0

    def _resolve_collision(self, motion: Vec3, reader: BlockReader) -> Vec3:
        box = make_player_aabb(self._foot)
        swept_lo = [min(a, a + m) for a, m in zip(box.lo, motion)]
        swept_hi = [max(a, a + m) for a, m in zip(box.hi, motion)]
        ranges = [
            range(math.floor(lo) - 1, math.floor(hi) + 2) for lo, hi in zip(swept_lo, swept_hi)
        ]
        blockers = [
            AABB((float(x), float(y), float(z)), (x + 1.0, y + 1.0, z + 1.0))
            for y in ranges[1]
            for z in ranges[2]
            for x in ranges[0]
            if self._is_collision(reader(x, y, z))
        ]

        mx, my, mz = motion
        for b in blockers:
            my = clip_axis_y(box, b, my)
        box = box.translated((0.0, my, 0.0))
        for b in blockers:
            mx = clip_axis_x(box, b, mx)
        box = box.translated((mx, 0.0, 0.0))
        for b in blockers:
            mz = clip_axis_z(box, b, mz)
        return (mx, my, mz)

    def update(self, inp: PlayerInput, reader: BlockReader, dt: float) -> None:
        """Advance one frame: look, toggle flight, move and collide."""
        lx, ly = inp.look_delta
        if lx != 0.0 or ly != 0.0:
            self._camera.rotate(lx * MOUSE_SENSITIVITY, -ly * MOUSE_SENSITIVITY)

        vx, vy, vz = self._velocity
        if inp.jump_just_pressed:
            now = self._clock()
            if now - self._last_space_time < DOUBLE_TAP_WINDOW:
                self._flying = not self._flying
                vy = 0.0
                log.info("flying = %s", self._flying)
            self._last_space_time = now

        ax, ay = inp.move_axis
        axis_len = math.hypot(ax, ay)
        if axis_len > 1.0:
            ax, ay = ax / axis_len, ay / axis_len

        fx, _, fz = self._camera.forward
        flat_len = math.hypot(fx, fz)
        if flat_len > 1e-4:
            fx, fz = fx / flat_len, fz / flat_len
        else:
            fx, fz = 0.0, 0.0
        rx, _, rz = self._camera.right
        dir_x = fx * ay + rx * ax
        dir_z = fz * ay + rz * ax

        if self._flying:
            speed = FLY_SPEED * (FLY_SPRINT_MULTIPLIER if inp.sprint else 1.0)
            vx, vz = dir_x * speed, dir_z * speed
            vy = 0.0
            if inp.jump_held:
                vy += speed
            if inp.fly_down:
                vy -= speed
        else:
            speed = WALK_SPEED * (SPRINT_MULTIPLIER if inp.sprint else 1.0)
            vx, vz = dir_x * speed, dir_z * speed
            vy = max(vy + GRAVITY * dt, MAX_FALL_SPEED)
            if self._on_ground and inp.jump_held:
                vy = JUMP_VELOCITY
                self._on_ground = False

        motion = (vx * dt, vy * dt, vz * dt)
        resolved = self._resolve_collision(motion, reader)

        if abs(resolved[0] - motion[0]) > 1e-6:
            vx = 0.0
        if abs(resolved[2] - motion[2]) > 1e-6:
            vz = 0.0
        if abs(resolved[1] - motion[1]) > 1e-6:
            if motion[1] < 0.0:
                self._on_ground = True
            vy = 0.0
        elif motion[1] < 0.0:
            self._on_ground = False

        self._velocity = (vx, vy, vz)
        self.set_foot_pos(tuple(p + r for p, r in zip(self._foot, resolved)))  # type: ignore[arg-type]


@dataclass
class HealthTicker:
    """Suffocation damage and slow regeneration over time."""

    suffocate_timer: float = 0.0
    regen_timer: float = 0.0

    SUFFOCATE_INTERVAL = 0.5
    REGEN_INTERVAL = 4.0

    def tick(self, player: Player, in_solid: bool, dt: float) -> bool:
        """Apply one frame; return whether the player is now dead."""
        if in_solid:
            self.suffocate_timer += dt
            self.regen_timer = 0.0
            while self.suffocate_timer >= self.SUFFOCATE_INTERVAL:
                self.suffocate_timer -= self.SUFFOCATE_INTERVAL
                player.damage(1)
                log.info("suffocating, HP=%d/%d", player.health, player.max_health)
        else:
            self.suffocate_timer = 0.0
            if player.health < player.max_health:
                self.regen_timer += dt
                while self.regen_timer >= self.REGEN_INTERVAL:
                    self.regen_timer -= self.REGEN_INTERVAL
                    player.heal(1)
            else:
                self.regen_timer = 0.0
        return player.is_dead()

    def reset(self) -> None:
        self.suffocate_timer = 0.0
        self.regen_timer = 0.0