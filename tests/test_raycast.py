import math

import pytest

from cubraycast.map_grid import GridMap, parse_map
from cubraycast.player import Player, spawn_player
from cubraycast.raycast import (
    BLIND_DELTA,
    BONUS_BLIND_DELTA,
    RayHit,
    WallSpan,
    cast_ray,
    row_distance_table,
    wall_span,
)


def _box(facing):
    text = f"11111\n10001\n10{facing}01\n10001\n11111"
    player, grid = spawn_player(parse_map(text))
    return player, grid


def test_north_ray_hits_top_wall():
    player, grid = _box("N")
    hit = cast_ray(player, 0.0, grid, BONUS_BLIND_DELTA)
    assert hit.side == 1
    assert (hit.map_x, hit.map_y) == (2, 0)
    assert hit.distance == pytest.approx(player.y - 1)


def test_zero_axis_with_small_blind_delta_drifts_sideways():
    player, grid = _box("N")
    hit = cast_ray(player, 0.0, grid, BLIND_DELTA)
    assert hit.side == 0
    assert math.isinf(hit.distance)


def test_east_ray_hits_right_wall():
    player, grid = _box("E")
    hit = cast_ray(player, 0.0, grid, BONUS_BLIND_DELTA)
    assert hit.side == 0
    assert hit.map_x == grid.width - 1
    assert hit.distance == pytest.approx(hit.map_x - player.x)


def test_perpendicular_distance_is_flat_across_camera():
    player, grid = _box("E")
    centre = cast_ray(player, 0.0, grid, BONUS_BLIND_DELTA)
    off = cast_ray(player, 0.3, grid, BONUS_BLIND_DELTA)
    assert off.side == centre.side == 0
    assert off.distance == pytest.approx(centre.distance)


def test_ray_direction_follows_camera_plane():
    player, grid = _box("N")
    hit = cast_ray(player, 1.0, grid, BONUS_BLIND_DELTA)
    assert hit.ray_dir == (
        player.direction_x + player.plane_x,
        player.direction_y + player.plane_y,
    )


@pytest.mark.parametrize("cam_x", [-1.0, -0.5, 0.25, 0.75, 1.0])
def test_hits_are_walls_at_positive_distance(cam_x):
    player, grid = _box("S")
    hit = cast_ray(player, cam_x, grid, BONUS_BLIND_DELTA)
    assert grid.is_wall(hit.map_x, hit.map_y)
    assert hit.distance > 0


def test_open_grid_runs_off_the_map():
    grid = GridMap(("000",))
    player = Player.facing(1.5, 0.5, "E")
    with pytest.raises(IndexError):
        cast_ray(player, 0.0, grid, BONUS_BLIND_DELTA)


def test_row_distance_table_values():
    table = row_distance_table(50, 100)
    assert len(table) == 100
    assert math.isinf(table[0])
    assert table[50] == 1.0
    for row in range(1, 100):
        assert table[row] * row == pytest.approx(50)


def test_wall_span_far_away_is_empty():
    span = wall_span(math.inf, 720)
    assert span.line_height == 0
    assert span.top == span.bottom == 360
    assert span.rows == 0


def test_wall_span_clamped_to_window():
    span = wall_span(0.25, 720)
    assert span.top == 0
    assert span.bottom == 720


@pytest.mark.parametrize("distance", [1.0, 2.0, 3.5, 10.0])
def test_wall_span_is_centred(distance):
    span = wall_span(distance, 720)
    assert span == WallSpan(span.line_height, span.line_height // 2, span.top, span.bottom)
    assert span.top + span.bottom == 720
    assert span.line_height == int(720 / distance)


def test_ray_hit_is_immutable():
    hit = RayHit(1.0, 0.0, 2.0, 0, 3, 1)
    with pytest.raises(AttributeError):
        hit.distance = 5.0
    assert hit.ray_dir == (1.0, 0.0)