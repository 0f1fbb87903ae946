import math

import pytest

from cubraycast.map_grid import MapError, parse_map
from cubraycast.player import (
    SPEED,
    KeyState,
    Player,
    apply_camera,
    apply_controls,
    spawn_player,
)

ROOM = "11111\n10001\n10N01\n10001\n11111\n"


@pytest.fixture
def grid():
    return parse_map(ROOM)


def test_facing_north():
    player = Player.facing(1.0, 2.0, "N")
    assert (player.direction_x, player.direction_y) == (0.0, -1.0)
    assert (player.plane_x, player.plane_y) == (0.66, 0.0)


def test_facing_west():
    player = Player.facing(1.0, 2.0, "W")
    assert (player.direction_x, player.direction_y) == (-1.0, 0.0)
    assert (player.plane_x, player.plane_y) == (0.0, -0.66)


def test_facing_unknown_direction():
    with pytest.raises(ValueError):
        Player.facing(0.0, 0.0, "Q")


def test_spawn_player(grid):
    player, cleared = spawn_player(grid)
    assert player.x == pytest.approx(2.5001)
    assert player.y == pytest.approx(2.5001)
    assert player.mvt_speed == SPEED
    assert cleared.cell(2, 2) == "0"
    assert "N" not in cleared.flat()


def test_spawn_two_players():
    with pytest.raises(MapError, match="More than one player"):
        spawn_player(parse_map("1111\n1NS1\n1111\n"))


def test_spawn_no_player():
    with pytest.raises(MapError, match="No player"):
        spawn_player(parse_map("111\n101\n111\n"))


def test_step_forward_moves_by_speed(grid):
    player, cleared = spawn_player(grid)
    start_y = player.y
    player.step(cleared, "w")
    assert player.y == pytest.approx(start_y - SPEED)
    assert player.x == pytest.approx(2.5001)


def test_step_forward_then_back_round_trip(grid):
    player, cleared = spawn_player(grid)
    player.step(cleared, "d")
    player.step(cleared, "a")
    assert player.x == pytest.approx(2.5001)
    assert player.y == pytest.approx(2.5001)


def test_step_blocked_by_wall(grid):
    player = Player.facing(1.5, 1.05, "N")
    player.step(grid, "w")
    assert player.y == 1.05


def test_step_unknown_key(grid):
    player = Player.facing(2.5, 2.5, "N")
    with pytest.raises(ValueError):
        player.step(grid, "q")


def test_rotate_round_trip_and_length():
    player = Player.facing(2.5, 2.5, "E")
    player.rotate(0.7)
    assert math.hypot(player.direction_x, player.direction_y) == pytest.approx(1.0)
    assert math.hypot(player.plane_x, player.plane_y) == pytest.approx(0.66)
    player.rotate(-0.7)
    assert player.direction_x == pytest.approx(1.0)
    assert player.plane_y == pytest.approx(0.66)


def test_ray_dirs():
    player = Player.facing(2.5, 2.5, "N")
    (x0, x_span), (y0, y_span) = player.ray_dirs()
    assert x0 == pytest.approx(-0.66)
    assert x_span == pytest.approx(1.32)
    assert (y0, y_span) == (-1.0, 0.0)


def test_controls_diagonal_halves_speed(grid):
    player, cleared = spawn_player(grid)
    apply_controls(player, cleared, KeyState(w=True, d=True))
    assert player.mvt_speed == pytest.approx(SPEED / 2)
    assert player.y < 2.5001
    assert player.x > 2.5001


def test_controls_opposite_keys_cancel(grid):
    player, cleared = spawn_player(grid)
    apply_controls(player, cleared, KeyState(w=True, s=True))
    assert player.mvt_speed == SPEED
    assert (player.x, player.y) == pytest.approx((2.5001, 2.5001))


def test_camera_left_turns_counterclockwise():
    player = Player.facing(2.5, 2.5, "N")
    turn = apply_camera(player, KeyState(left=True))
    assert turn == 1
    cross = 0.0 * player.direction_y - (-1.0) * player.direction_x
    assert cross < 0
    assert math.hypot(player.direction_x, player.direction_y) == pytest.approx(1.0)


def test_camera_both_keys_no_turn():
    player = Player.facing(2.5, 2.5, "S")
    assert apply_camera(player, KeyState(left=True, right=True)) == 0
    assert (player.direction_x, player.direction_y) == (0.0, 1.0)


def test_camera_right_then_left_round_trip():
    player = Player.facing(2.5, 2.5, "W")
    assert apply_camera(player, KeyState(right=True)) == -1
    apply_camera(player, KeyState(left=True))
    assert player.direction_x == pytest.approx(-1.0)
    assert player.direction_y == pytest.approx(0.0, abs=1e-12)