"""Grid ray casting: wall distances, wall spans and floor row distances."""

from __future__ import annotations

import math
from dataclasses import dataclass

from cubraycast.map_grid import GridMap
from cubraycast.player import Player

WINDOW_SIZE = (1280, 720)
BONUS_WINDOW_SIZE = (2500, 2500)
BLIND_DELTA = 1.0
BONUS_BLIND_DELTA = 1000.0
_INT_MAX = 2**31 - 1


@dataclass(frozen=True)
class RayHit:
    """Where a ray met a wall.

    ``side`` is 0 when the ray crossed a vertical grid line (an east or west
    face) and 1 when it crossed a horizontal one (a north or south face).
    ``distance`` is the perpendicular distance to the camera plane.
    """

    ray_x: float
    ray_y: float
    distance: float
    side: int
    map_x: int
    map_y: int

    @property
    def ray_dir(self) -> tuple[float, float]:
        return self.ray_x, self.ray_y


@dataclass(frozen=True)
class WallSpan:
    """The rows of a screen column covered by a wall slice."""

    line_height: int
    half_line_height: int
    top: int
    bottom: int

    @property
    def rows(self) -> int:
        return self.bottom - self.top


def _divide(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator > 0:
        return math.inf
    if numerator < 0:
        return -math.inf
    return math.nan


def cast_ray(
    player: Player,
    cam_x: float,
    grid: GridMap,
    blind_delta: float = BLIND_DELTA,
) -> RayHit:
    """Walk the grid from the player along the ray for camera position ``cam_x``.

    ``blind_delta`` is the step length used along an axis the ray does not
    move on at all.
    """
    ray = (
        player.direction_x + player.plane_x * cam_x,
        player.direction_y + player.plane_y * cam_x,
    )
    origin = (player.x, player.y)
    pos = [int(player.x), int(player.y)]
    delta = [abs(1 / component) if component else blind_delta for component in ray]
    steps: list[int] = []
    side_dist: list[float] = []
    for coord, component, length in zip(origin, ray, delta):
        frac = coord - int(coord)
        if component >= 0:
            steps.append(1)
            side_dist.append((1 - frac) * length)
        else:
            steps.append(-1)
            side_dist.append(frac * length)

    side = 0
    while not grid.is_wall(pos[0], pos[1]):
        side = int(side_dist[0] >= side_dist[1])
        side_dist[side] += delta[side]
        pos[side] += steps[side]

    numerator = pos[side] - origin[side] + (1 - steps[side]) // 2
    distance = _divide(numerator, ray[side])
    return RayHit(ray[0], ray[1], distance, side, pos[0], pos[1])


def row_distance_table(half_height: int, height: int) -> tuple[float, ...]:
    """Distance to the floor for each screen row offset from the horizon."""
    return tuple(
        half_height / row if row else _divide(half_height, 0.0)
        for row in range(height)
    )


def wall_span(distance: float, height: int) -> WallSpan:
    """Return the screen rows a wall at ``distance`` covers, clamped to the window."""
    if distance == 0 or math.isnan(distance):
        line_height = _INT_MAX
    else:
        ratio = height / distance
        line_height = int(max(min(ratio, _INT_MAX), -_INT_MAX))
    half_line = line_height // 2
    half_height = height // 2
    top = max(half_height - half_line, 0)
    bottom = min(half_line + half_height, height)
    return WallSpan(line_height, half_line, top, bottom)