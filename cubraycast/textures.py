"""Wall, floor and ceiling textures and their sampling."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from cubraycast.player import Player  # noqa: E402
from cubraycast.raycast import RayHit, WallSpan  # noqa: E402


@dataclass(frozen=True, eq=False)
class Texture:
    """A picture stored as rows of 0xRRGGBB colours."""

    pixels: np.ndarray

    def __post_init__(self) -> None:
        array = np.array(self.pixels, dtype=np.uint32)
        if array.ndim != 2 or array.size == 0:
            raise ValueError("a texture needs a non-empty two-dimensional pixel grid")
        array.flags.writeable = False
        object.__setattr__(self, "pixels", array)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @classmethod
    def solid(cls, color: int) -> Texture:
        """A one-pixel texture of a single colour."""
        return cls(np.array([[color & 0xFFFFFFFF]], dtype=np.uint32))

    @classmethod
    def load(cls, path: str | Path) -> Texture:
        """Load an image file (XPM, BMP, PNG...) as a texture."""
        try:
            surface = pygame.image.load(str(path))
        except (pygame.error, OSError) as exc:
            raise ValueError(f"cannot load texture {path}") from exc
        rgb = pygame.surfarray.array3d(surface).astype(np.uint32)
        packed = (rgb[..., 0] << 16) | (rgb[..., 1] << 8) | rgb[..., 2]
        return cls(packed.T)

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x`` of row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside the texture")
        return int(self.pixels[y, x])


@dataclass(frozen=True)
class TextureSet:
    """The six textures a scene uses."""

    north: Texture
    south: Texture
    west: Texture
    east: Texture
    floor: Texture
    ceiling: Texture

    @classmethod
    def from_scene(
        cls, scene, loader: Callable[[str], Texture] | None = None
    ) -> TextureSet:
        """Load a scene's textures; plain colours become one-pixel textures."""
        load = loader if loader is not None else Texture.load

        def surface(path: str | None, color: int | None) -> Texture:
            if path is not None:
                return load(path)
            return Texture.solid(color if color is not None else 0)

        return cls(
            north=load(scene.north),
            south=load(scene.south),
            west=load(scene.west),
            east=load(scene.east),
            floor=surface(scene.floor_path, scene.floor_color),
            ceiling=surface(scene.ceiling_path, scene.ceiling_color),
        )

    def wall_for(self, hit: RayHit) -> Texture:
        """Pick the wall texture for the face a ray hit."""
        if hit.side == 0:
            return self.east if hit.ray_x < 0 else self.west
        return self.south if hit.ray_y < 0 else self.north


def wall_texture_x(hit: RayHit, player: Player, texture: Texture) -> int:
    """Return the texture column to draw for a wall hit."""
    if hit.side == 0:
        wall_x = player.y + hit.distance * hit.ray_y
    else:
        wall_x = player.x + hit.distance * hit.ray_x
    wall_x -= int(wall_x)
    tex_x = int(wall_x * texture.width)
    if (hit.side == 0 and hit.ray_x > 0) or (hit.side == 1 and hit.ray_y < 0):
        tex_x = texture.width - tex_x - 1
    return texture.width - tex_x - 1


def sample_column(
    texture: Texture, tex_x: int, span: WallSpan, half_height: int
) -> np.ndarray:
    """Return the colours of one texture column stretched over a wall span."""
    count = span.rows
    if count <= 0 or span.line_height == 0:
        return np.empty(0, dtype=np.uint32)
    step = texture.height / span.line_height
    start = (span.top - half_height + span.half_line_height) * step
    increments = np.full(count, step, dtype=np.float64)
    increments[0] = start
    positions = np.cumsum(increments)
    rows = np.clip(positions.astype(np.int64), 0, texture.height - 1)
    return texture.pixels[rows, tex_x]