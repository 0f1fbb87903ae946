"""Player position, camera and movement over a grid map."""

from __future__ import annotations

import math
from dataclasses import dataclass

from cubraycast.map_grid import GridMap, MapError

SPEED = 0.06666
ROT_SPEED = 0.10
PLANE_LENGTH = 0.66
SPAWN_OFFSET = 0.5001
SPAWN_CHARS = "NSEW"


@dataclass
class KeyState:
    """Which movement and camera keys are held down."""

    w: bool = False
    a: bool = False
    s: bool = False
    d: bool = False
    left: bool = False
    right: bool = False


@dataclass
class Player:
    """The player's position, view direction and camera plane."""

    x: float
    y: float
    direction_x: float = 0.0
    direction_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0
    mvt_speed: float = SPEED

    @classmethod
    def facing(cls, x: float, y: float, direction: str) -> Player:
        """Create a player at (x, y) looking towards N, S, E or W."""
        if direction in ("W", "E"):
            west = direction == "W"
            return cls(
                x,
                y,
                direction_x=-1.0 if west else 1.0,
                plane_y=-PLANE_LENGTH if west else PLANE_LENGTH,
            )
        if direction in ("N", "S"):
            return cls(
                x,
                y,
                direction_y=-1.0 if direction == "N" else 1.0,
                plane_x=-PLANE_LENGTH if direction == "S" else PLANE_LENGTH,
            )
        raise ValueError(f"unknown direction {direction!r}")

    def rotate(self, angle: float) -> None:
        """Turn the view direction and camera plane by ``angle`` radians."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        dx, dy = self.direction_x, self.direction_y
        self.direction_x = dx * cos_a - dy * sin_a
        self.direction_y = dx * sin_a + dy * cos_a
        px, py = self.plane_x, self.plane_y
        self.plane_x = px * cos_a - py * sin_a
        self.plane_y = px * sin_a + py * cos_a

    def _movement(self, key: str) -> tuple[float, float]:
        speed = self.mvt_speed
        if key == "w":
            return self.direction_x * speed, self.direction_y * speed
        if key == "s":
            return -self.direction_x * speed, -self.direction_y * speed
        if key == "d":
            return -self.direction_y * speed, self.direction_x * speed
        if key == "a":
            return self.direction_y * speed, -self.direction_x * speed
        raise ValueError(f"unknown movement key {key!r}")

    def step(self, grid: GridMap, key: str) -> None:
        """Move one step for a w/a/s/d key, sliding along walls."""
        dx, dy = self._movement(key)
        new_x, new_y = self.x + dx, self.y + dy
        if not grid.is_wall(int(new_x), int(self.y)):
            self.x = new_x
        if not grid.is_wall(int(self.x), int(new_y)):
            self.y = new_y

    def ray_dirs(self) -> tuple[tuple[float, float], tuple[float, float]]:
        """Return the leftmost ray and the span across the screen, per axis."""
        return (
            (self.direction_x - self.plane_x, self.plane_x * 2),
            (self.direction_y - self.plane_y, self.plane_y * 2),
        )


def spawn_player(grid: GridMap) -> tuple[Player, GridMap]:
    """Find the single spawn cell, returning the player and the cleared grid."""
    count = sum(grid.flat().count(char) for char in SPAWN_CHARS)
    if count > 1:
        raise MapError("More than one player.")
    if count == 0:
        raise MapError("No player on the map.")
    y, row = next(
        (y, row)
        for y, row in enumerate(grid.rows)
        if any(char in row for char in SPAWN_CHARS)
    )
    x = next(x for x, char in enumerate(row) if char in SPAWN_CHARS)
    player = Player.facing(x + SPAWN_OFFSET, y + SPAWN_OFFSET, row[x])
    return player, grid.with_cell(x, y, "0")


def apply_controls(player: Player, grid: GridMap, keys: KeyState) -> None:
    """Move the player according to the held movement keys."""
    horizontal = int(keys.d) - int(keys.a)
    vertical = int(keys.s) - int(keys.w)
    player.mvt_speed = SPEED
    if horizontal and vertical:
        player.mvt_speed /= 2
    if horizontal < 0:
        player.step(grid, "a")
    elif horizontal > 0:
        player.step(grid, "d")
    if vertical < 0:
        player.step(grid, "w")
    elif vertical > 0:
        player.step(grid, "s")


def apply_camera(player: Player, keys: KeyState) -> int:
    """Turn the camera for the held arrow keys; return left minus right."""
    turn = int(keys.left) - int(keys.right)
    if turn:
        player.rotate(ROT_SPEED if turn < 0 else -ROT_SPEED)
    return turn