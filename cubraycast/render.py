"""Frame rendering: one ray per screen column, walls, floor and ceiling."""

from __future__ import annotations

import math
from enum import Enum

import numpy as np

from cubraycast.map_grid import GridMap
from cubraycast.player import Player
from cubraycast.raycast import (
    BLIND_DELTA,
    BONUS_BLIND_DELTA,
    RayHit,
    WallSpan,
    cast_ray,
    row_distance_table,
    wall_span,
)
from cubraycast.textures import Texture, TextureSet, sample_column, wall_texture_x

_COORD_LIMIT = 1e15


class RenderMode(Enum):
    """How floor and ceiling are drawn."""

    FLAT = "flat"
    TEXTURED = "textured"

    @property
    def blind_delta(self) -> float:
        """Step length used along an axis a ray does not move on."""
        return BLIND_DELTA if self is RenderMode.FLAT else BONUS_BLIND_DELTA


def _sample_plane(texture: Texture, xs: np.ndarray, ys: np.ndarray) -> np.ndarray:
    """Sample a repeating texture at world coordinates on the floor plane."""
    width, height = texture.width, texture.height
    with np.errstate(invalid="ignore", over="ignore"):
        scaled_x = np.clip(xs * width, -_COORD_LIMIT, _COORD_LIMIT)
        scaled_y = np.clip(ys * height, -_COORD_LIMIT, _COORD_LIMIT)
    columns = np.trunc(scaled_x).astype(np.int64) % width
    rows = np.trunc(scaled_y).astype(np.int64) % height
    return texture.pixels[rows, columns]


class Renderer:
    """Draws frames of a grid map seen from a player into a pixel array.

    Frames are ``height`` rows of ``width`` 0xRRGGBB values. The frame is
    kept between renders, so pixels no column writes keep their old colour.
    """

    def __init__(
        self,
        width: int,
        height: int,
        textures: TextureSet,
        grid: GridMap,
        mode: RenderMode = RenderMode.FLAT,
    ) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("the window needs a positive width and height")
        self.width = width
        self.height = height
        self.textures = textures
        self.grid = grid
        self.mode = mode
        self.half_height = height // 2
        self.cam_coef = 2 / float(width)
        self.row_distances = np.array(
            row_distance_table(self.half_height, height), dtype=np.float64
        )
        self.frame = np.zeros((height, width), dtype=np.uint32)

    def render(self, player: Player) -> np.ndarray:
        """Draw every column for ``player`` and return the frame."""
        for x in reversed(range(self.width)):
            self.render_column(player, x, self.frame)
        return self.frame

    def render_column(self, player: Player, x: int, frame: np.ndarray) -> RayHit:
        """Cast the ray for column ``x``, draw it into ``frame`` and return the hit."""
        if not 0 <= x < self.width:
            raise IndexError(f"column {x} is outside the window")
        if frame.shape != (self.height, self.width):
            raise ValueError("the frame does not match the window size")
        cam_x = self.cam_coef * x - 1
        hit = cast_ray(player, cam_x, self.grid, self.mode.blind_delta)
        span = wall_span(hit.distance, self.height)
        if self.mode is RenderMode.FLAT:
            self._fill_flat(frame, x, span)
        else:
            self._fill_textured(frame, x, span, player, hit)
        self._draw_wall(frame, x, span, player, hit)
        return hit

    def _fill_flat(self, frame: np.ndarray, x: int, span: WallSpan) -> None:
        frame[: max(span.top, 0), x] = self.textures.ceiling.pixel(0, 0)
        frame[max(span.bottom, 0):, x] = self.textures.floor.pixel(0, 0)

    def _fill_textured(
        self,
        frame: np.ndarray,
        x: int,
        span: WallSpan,
        player: Player,
        hit: RayHit,
    ) -> None:
        top, bottom = span.top, span.bottom
        if top <= 0:
            return
        offsets = np.arange(top)
        indices = np.clip(bottom - self.half_height + offsets, 0, self.height - 1)
        distances = self.row_distances[indices]
        finite = np.isfinite(distances)
        safe = np.where(finite, distances, 0.0)
        with np.errstate(invalid="ignore", over="ignore"):
            floor_x = np.where(finite, player.x + safe * hit.ray_x, 0.0)
            floor_y = np.where(finite, player.y + safe * hit.ray_y, 0.0)
        ceiling = _sample_plane(self.textures.ceiling, floor_x, floor_y)
        floor = _sample_plane(self.textures.floor, floor_x, floor_y)

        up_rows = top - offsets
        up_valid = (up_rows >= 0) & (up_rows < self.height)
        frame[up_rows[up_valid], x] = ceiling[up_valid]
        down_rows = bottom + offsets
        down_valid = (down_rows >= 0) & (down_rows < self.height)
        frame[down_rows[down_valid], x] = floor[down_valid]

    def _draw_wall(
        self,
        frame: np.ndarray,
        x: int,
        span: WallSpan,
        player: Player,
        hit: RayHit,
    ) -> None:
        if span.rows <= 0 or not math.isfinite(hit.distance):
            return
        texture = self.textures.wall_for(hit)
        tex_x = wall_texture_x(hit, player, texture)
        tex_x = min(max(tex_x, 0), texture.width - 1)
        column = sample_column(texture, tex_x, span, self.half_height)
        if column.size:
            frame[span.top: span.top + column.size, x] = column