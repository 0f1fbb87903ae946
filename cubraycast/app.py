"""The game: key handling, the frame loop and the command line entry point."""

from __future__ import annotations

import dataclasses
import os
import sys
from collections.abc import Sequence

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from cubraycast.player import KeyState, apply_camera, apply_controls  # noqa: E402
from cubraycast.raycast import BONUS_WINDOW_SIZE, WINDOW_SIZE  # noqa: E402
from cubraycast.render import Renderer, RenderMode  # noqa: E402
from cubraycast.scene import (  # noqa: E402
    Scene,
    SceneError,
    check_extension,
    load_scene,
    usage_text,
)
from cubraycast.textures import TextureSet  # noqa: E402

WINDOW_TITLE = "Cub3d"
QUIT_KEY = "escape"
_HELD_KEYS = {
    "w": "w",
    "a": "a",
    "s": "s",
    "d": "d",
    "left": "left",
    "right": "right",
}
_PYGAME_KEYS = {
    pygame.K_w: "w",
    pygame.K_a: "a",
    pygame.K_s: "s",
    pygame.K_d: "d",
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
    pygame.K_ESCAPE: QUIT_KEY,
}
_FLAT_OPTION = "--flat"


class Game:
    """A running scene: the player, the held keys and the renderer."""

    def __init__(
        self,
        scene: Scene,
        textures: TextureSet,
        width: int,
        height: int,
        mode: RenderMode = RenderMode.TEXTURED,
    ) -> None:
        self.scene = scene
        self.grid = scene.grid
        self.player = dataclasses.replace(scene.player)
        self.keys = KeyState()
        self.renderer = Renderer(width, height, textures, self.grid, mode)
        self.running = True

    def handle_key(self, key: str, pressed: bool) -> bool:
        """Record a key press or release; return whether the key is used.

        Pressing escape stops the game.
        """
        if key == QUIT_KEY:
            if pressed:
                self.running = False
            return True
        field = _HELD_KEYS.get(key)
        if field is None:
            return False
        setattr(self.keys, field, bool(pressed))
        return True

    def tick(self) -> np.ndarray:
        """Move and turn the player for the held keys, then draw a frame."""
        apply_controls(self.player, self.grid, self.keys)
        apply_camera(self.player, self.keys)
        return self.renderer.render(self.player)


def _frame_to_rgb(frame: np.ndarray) -> np.ndarray:
    """Turn rows of 0xRRGGBB values into a (width, height, 3) byte array."""
    channels = np.stack(
        [(frame >> 16) & 0xFF, (frame >> 8) & 0xFF, frame & 0xFF], axis=-1
    ).astype(np.uint8)
    return channels.transpose(1, 0, 2)


def run(game: Game, width: int | None = None, height: int | None = None) -> int:
    """Open a window and run the game until it is closed or escape is pressed.

    The frame is scaled to the window when their sizes differ.
    """
    frame_size = (game.renderer.width, game.renderer.height)
    window_size = (width or frame_size[0], height or frame_size[1])
    try:
        pygame.display.init()
    except pygame.error as exc:
        raise RuntimeError("Cannot initiate display.") from exc
    try:
        try:
            window = pygame.display.set_mode(window_size)
        except pygame.error as exc:
            raise RuntimeError("Cannot generate image or window.") from exc
        pygame.display.set_caption(WINDOW_TITLE)
        canvas = pygame.Surface(frame_size)
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    name = _PYGAME_KEYS.get(event.key)
                    if name is not None:
                        game.handle_key(name, event.type == pygame.KEYDOWN)
            if not game.running:
                break
            frame = game.tick()
            pygame.surfarray.blit_array(canvas, _frame_to_rgb(frame))
            if window_size == frame_size:
                window.blit(canvas, (0, 0))
            else:
                window.blit(pygame.transform.scale(canvas, window_size), (0, 0))
            pygame.display.flip()
    finally:
        pygame.display.quit()
    return 0


def _error(message: str) -> None:
    sys.stderr.write(f"Error\n{message}\n")


def main(argv: Sequence[str] | None = None) -> int:
    """Start the game for the scene file named on the command line."""
    args = list(sys.argv[1:] if argv is None else argv)
    mode = RenderMode.TEXTURED
    if _FLAT_OPTION in args:
        args = [arg for arg in args if arg != _FLAT_OPTION]
        mode = RenderMode.FLAT
    if len(args) != 1:
        sys.stderr.write(usage_text())
        return 1
    try:
        path = check_extension(args[0])
        scene = load_scene(path, bonus=mode is RenderMode.TEXTURED)
    except SceneError as exc:
        _error(str(exc))
        return 1
    try:
        textures = TextureSet.from_scene(scene)
    except ValueError as exc:
        _error(str(exc))
        return 1
    width, height = WINDOW_SIZE if mode is RenderMode.FLAT else BONUS_WINDOW_SIZE
    game = Game(scene, textures, width, height, mode)
    try:
        return run(game, width, height)
    except RuntimeError as exc:
        _error(str(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())