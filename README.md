# cubraycast

A small first-person raycaster. It reads a `.cub` scene file that describes
the wall textures, the floor and ceiling, and a grid map, and then lets you
walk through the map in a pygame window.

## Installing

```
pip install .
```

## Running

```
cubraycast path/to/scene.cub
cubraycast --flat path/to/scene.cub
```

The command takes exactly one scene file, whose name must end in `.cub`.
With any other number of arguments it prints a short description of the file
format on standard error and exits with status 1. Any problem with the scene,
its textures or the window is reported on standard error as `Error` followed
by a message on the next line, and the exit status is 1.

By default the floor and ceiling are drawn textured (a plain colour counts as
a one-pixel texture) in a 2500×2500 window, and `F` and `C` may name texture
files. With `--flat` the floor and ceiling are filled with single colours in a
1280×720 window, and `F` and `C` must be colours.

### Controls

| Key            | Action               |
|----------------|----------------------|
| `W` / `S`      | move forward / back  |
| `A` / `D`      | strafe left / right  |
| Left / Right   | turn the camera      |
| `Escape`       | quit                 |

Closing the window also quits. Moving and strafing at the same time halves
the speed. Walls block movement separately on the x and y axes, so you slide
along them.

## The scene file

Six elements come first, in this order, each on its own line (blank lines
between them are allowed):

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0
```

`NO`, `SO`, `WE` and `EA` name wall texture files; each must exist and not be
empty. Textures are read with `pygame.image.load`, so any format your pygame
build can load works. `F` and `C` are the floor and ceiling colours as three
values from 0 to 255; in the default (textured) mode a line whose value does
not start with a digit is taken as a texture path instead.

The map follows, using only these characters:

- `0` an empty cell
- `1` a wall
- `N`, `S`, `E` or `W` the player's start and facing; exactly one is allowed
- space, to shape the map; spaces inside the map must be enclosed by walls

The map must be closed by walls on every side. Shorter rows are padded and
every space is turned into a wall.

## Using it as a library

```python
from cubraycast.scene import load_scene
from cubraycast.raycast import cast_ray
from cubraycast.render import Renderer, RenderMode
from cubraycast.textures import TextureSet

scene = load_scene("maps/example.cub", bonus=False)
hit = cast_ray(scene.player, 0.0, scene.grid)
print(hit.distance, hit.side)

textures = TextureSet.from_scene(scene)
renderer = Renderer(320, 200, textures, scene.grid, RenderMode.FLAT)
frame = renderer.render(scene.player)  # 200 rows of 320 0xRRGGBB values
```

- `cubraycast.map_grid.parse_map` validates a map on its own and returns a
  `GridMap`; it raises `MapError` on a bad one.
- `cubraycast.player` holds `Player`, `KeyState`, `spawn_player` (returns the
  player and the grid with the spawn cell cleared), `apply_controls` and
  `apply_camera`.
- `cubraycast.scene.parse_scene` and `load_scene` return a `Scene` and raise
  `SceneError`; `Scene.describe()` gives a readable dump of it.
- `cubraycast.raycast` has `cast_ray`, `wall_span` and `row_distance_table`.
- `cubraycast.textures` has `Texture` (`solid`, `load`, `pixel`),
  `TextureSet`, `wall_texture_x` and `sample_column`.
- `cubraycast.app.Game` ties a scene to a renderer; `cubraycast.app.run`
  opens a window for it and `cubraycast.app.main` is the command above.

## What it does not do

There is no mouse control, sound, minimap, sprites or doors: only walls,
floor and ceiling are drawn, one ray per screen column, in software.

## Tests

```
pip install .[test]
pytest
```