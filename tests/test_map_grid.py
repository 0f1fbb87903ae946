import pytest

from cubraycast.map_grid import GridMap, MapError, parse_map

SIMPLE = "111\n1N1\n111\n"


def test_simple_map_rows():
    grid = parse_map(SIMPLE)
    assert grid.rows == ("111", "1N1", "111")
    assert grid.width == 3
    assert grid.height == 3


def test_flat_joins_rows():
    grid = parse_map(SIMPLE)
    assert grid.flat() == "111" + "1N1" + "111"


def test_carriage_returns_and_blank_lines_are_separators():
    assert parse_map("111\r\n1N1\r\n\r\n111").rows == parse_map(SIMPLE).rows


def test_short_rows_and_spaces_become_walls():
    grid = parse_map("1111\n1N01\n1111\n 11\n")
    assert grid.rows == ("1111", "1N01", "1111", "1111")
    assert all(len(row) == grid.width for row in grid.rows)


def test_wrong_character_rejected():
    with pytest.raises(MapError, match="Wrong format"):
        parse_map("111\n1X1\n111\n")


def test_empty_map_rejected():
    with pytest.raises(MapError):
        parse_map("\n\n")


def test_open_top_row_rejected():
    with pytest.raises(MapError, match="Invalid map"):
        parse_map("101\n1N1\n111\n")


def test_open_side_rejected():
    with pytest.raises(MapError, match="Invalid map"):
        parse_map("1111\n1N00\n1111\n")


def test_space_next_to_floor_rejected():
    with pytest.raises(MapError, match="Invalid map"):
        parse_map("11111\n1N 01\n11111\n")


def test_shorter_row_under_floor_rejected():
    with pytest.raises(MapError, match="Invalid map"):
        parse_map("1111\n1N01\n111\n")


def test_cell_and_is_wall():
    grid = parse_map(SIMPLE)
    assert grid.cell(1, 1) == "N"
    assert grid.is_wall(0, 0)
    assert not grid.is_wall(1, 1)


def test_cell_out_of_bounds():
    grid = parse_map(SIMPLE)
    with pytest.raises(IndexError):
        grid.cell(3, 0)
    with pytest.raises(IndexError):
        grid.cell(0, -1)


def test_with_cell_returns_new_grid():
    grid = parse_map(SIMPLE)
    changed = grid.with_cell(1, 1, "0")
    assert changed.cell(1, 1) == "0"
    assert grid.cell(1, 1) == "N"
    assert changed.rows[0] == grid.rows[0]


def test_with_cell_rejects_long_value():
    grid = GridMap(("111", "101", "111"))
    with pytest.raises(ValueError):
        grid.with_cell(1, 1, "00")