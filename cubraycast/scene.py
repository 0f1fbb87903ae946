"""Reading and validating scene description (.cub) files."""

from __future__ import annotations

import re
import string
from dataclasses import dataclass
from pathlib import Path

from cubraycast.map_grid import GridMap, MapError, parse_map
from cubraycast.player import Player, spawn_player

EXTENSION = ".cub"
ELEMENTS = ("NO", "SO", "WE", "EA", "F", "C")
_COLOR_ELEMENTS = frozenset({"F", "C"})
_MAP_START_CHARS = "01NSEW "
_PROBE_SIZE = 10
_NUMBER = re.compile(r"[ \t\r\f\v]*([+-]?)([0-9]*)")

_USAGE = (
    "Hello there !\nThis program should take a describing scene"
    " file with '.cub' extension.\n\n The file should only be"
    " formated with the following characters :\n\t- 0 : For empty"
    " spaces.\n\t- 1 : For walls. The map should be closed with"
    " walls.\n\t- N, S, E or W : The starting position"
    " and orientation of the player. Only one is accepted.\n\t"
    "- Spaces : You can put spaces to change the shape of the "
    "map, if there's spaces inside the\n\t\t   map, they should "
    "be surrounded with walls to be valid.\n\n"
    "For performances and seg fault reasons, the movement speed"
    " won't exceed 1.\n\n"
)


class SceneError(ValueError):
    """Raised when a scene file cannot be used."""


@dataclass
class Scene:
    """Everything a scene file describes: textures, colours, map and player."""

    north: str
    south: str
    west: str
    east: str
    grid: GridMap
    player: Player
    floor_color: int | None = None
    ceiling_color: int | None = None
    floor_path: str | None = None
    ceiling_path: str | None = None

    def describe(self) -> str:
        """Return a readable dump of the scene's contents."""
        lines = [
            f"no_path = {self.north}",
            f"so_path = {self.south}",
            f"we_path = {self.west}",
            f"ea_path = {self.east}",
            _describe_surface("f_rgb", self.floor_color, "floor_path", self.floor_path),
            _describe_surface("c_rgb", self.ceiling_color, "ceil_path", self.ceiling_path),
            f"h_map = {self.grid.height}",
            f"w_map = {self.grid.width}",
            "map :",
            self.grid.flat(),
            "map_array :",
            *self.grid.rows,
        ]
        return "\n".join(lines) + "\n"


def _describe_surface(
    color_name: str, color: int | None, path_name: str, path: str | None
) -> str:
    if color is not None:
        red, green, blue = (color >> 16) & 0xFF, (color >> 8) & 0xFF, color & 0xFF
        return f"{color_name} = {{{red}, {green}, {blue}}}"
    return f"{path_name} = {path if path is not None else '(null)'}"


def usage_text() -> str:
    """Return the help text shown when the program is started wrongly."""
    return _USAGE


def check_extension(path: str) -> str:
    """Return ``path`` if it names a ``.cub`` file, otherwise raise."""
    if len(path) <= len(EXTENSION) or not path.endswith(EXTENSION):
        raise SceneError("file with '.cub' extension needed.")
    return path


def check_texture_path(path: str) -> str:
    """Return ``path`` if it leads to a readable, non-empty file."""
    try:
        with open(path, "rb") as handle:
            try:
                probe = handle.read(_PROBE_SIZE)
            except OSError as exc:
                raise SceneError("Path for elem is not leading to a file") from exc
    except IsADirectoryError as exc:
        raise SceneError("Path for elem is not leading to a file") from exc
    except OSError as exc:
        raise SceneError("Path for elem is invalid") from exc
    if not probe:
        raise SceneError("Path for elem leads to empty file")
    return path


def parse_rgb(info: str) -> int:
    """Parse ``R,G,B`` from the start of ``info`` into a 0xRRGGBB integer."""
    line = info.split("\n", 1)[0]
    pos = 0
    channels = []
    for _ in range(3):
        match = _NUMBER.match(line, pos)
        sign, digits = match.group(1), match.group(2)
        if not digits:
            raise SceneError("Invalid RGB color.")
        value = int(sign + digits)
        if not 0 <= value <= 255:
            raise SceneError("Invalid RGB color.")
        channels.append(value)
        pos = match.end()
        if pos < len(line):
            pos += 1
    if any(char in string.digits for char in line[pos:]):
        raise SceneError("Too many RGB colors.")
    red, green, blue = channels
    return (red << 16) | (green << 8) | blue


def _element_value(line: str, key: str, bonus: bool) -> str | int:
    is_color = key in _COLOR_ELEMENTS
    if is_color and (not bonus or (len(line) > 2 and line[2] in string.digits)):
        return parse_rgb(line[2:])
    if len(line) < 4:
        raise SceneError("No informations for an elem.")
    offset = 2 if is_color else 3
    return check_texture_path(line[offset:])


def _read_elements(text: str, bonus: bool) -> tuple[dict[str, str | int], int]:
    values: dict[str, str | int] = {}
    pos = 0
    for key in ELEMENTS:
        if pos >= len(text):
            raise SceneError("Lacking elements for map.")
        while pos < len(text) and text[pos] in "\n\r":
            pos += 1
        if not text.startswith(key, pos):
            raise SceneError("Elements aren't in right order.")
        end = text.find("\n", pos)
        if end == -1:
            end = len(text)
        values[key] = _element_value(text[pos:end], key, bonus)
        pos = end
    return values, pos


def parse_scene(text: str, bonus: bool = False) -> Scene:
    """Parse the contents of a scene file.

    In bonus mode the floor and ceiling may name texture files instead of
    giving colours.
    """
    if not text:
        raise SceneError("Empty file.")
    values, pos = _read_elements(text, bonus)
    while pos < len(text) and text[pos] not in _MAP_START_CHARS:
        pos += 1
    if pos >= len(text):
        raise SceneError("No map given.")
    try:
        player, grid = spawn_player(parse_map(text[pos:]))
    except MapError as exc:
        raise SceneError(str(exc)) from exc

    surfaces: dict[str, int | str | None] = {}
    for key, color_field, path_field in (
        ("F", "floor_color", "floor_path"),
        ("C", "ceiling_color", "ceiling_path"),
    ):
        value = values[key]
        if isinstance(value, int):
            surfaces[color_field] = value
        else:
            surfaces[path_field] = value

    return Scene(
        north=str(values["NO"]),
        south=str(values["SO"]),
        west=str(values["WE"]),
        east=str(values["EA"]),
        grid=grid,
        player=player,
        **surfaces,
    )


def load_scene(path: str | Path, bonus: bool = False) -> Scene:
    """Read and parse the scene file at ``path``."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise SceneError("Empty file.") from exc
    return parse_scene(data.decode("utf-8", errors="replace"), bonus)