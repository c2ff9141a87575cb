"""
Tests for the board collaborator: coordinates, adjacency, placement and longest road.
"""
import pytest

from catan_referee.board import (
    Board,
    HexCoordinate,
    IntersectionCoordinate,
    PathCoordinate,
    TileType,
)
from helpers import CENTER, corner, edge


def test_hex_coordinate_requires_grid_constraint():
    with pytest.raises(ValueError):
        HexCoordinate(1, 1, 1)


def test_intersection_is_canonical_regardless_of_order():
    a, b, c = HexCoordinate(0, 0, 0), HexCoordinate(1, -1, 0), HexCoordinate(1, 0, -1)
    assert IntersectionCoordinate.of(c, a, b) == IntersectionCoordinate.of(a, b, c)
    with pytest.raises(ValueError):
        IntersectionCoordinate(c, b, a)


def test_intersection_rejects_non_adjacent_hexes():
    with pytest.raises(ValueError):
        IntersectionCoordinate.of(HexCoordinate(0, 0, 0), HexCoordinate(2, -1, -1), HexCoordinate(1, 0, -1))


def test_corners_are_neighbours_in_sequence():
    """Consecutive corners of a hex are joined by a path."""
    corners = CENTER.corners()
    assert len(set(corners)) == 6
    for i in range(6):
        assert corners[(i + 1) % 6] in corners[i].neighbours()
    assert corners[2] not in corners[0].neighbours()


def test_standard_board_layout():
    board = Board.standard()
    assert len(board.tiles) == 19
    assert board.tiles[CENTER].tile_type is TileType.DESERT
    assert board.robber == CENTER
    assert len(board.intersections()) == 54


def test_tiles_touching_skip_off_board_hexes():
    board = Board.standard()
    outer = corner(0, HexCoordinate(2, -2, 0))
    assert 1 <= len(board.tiles_touching(outer)) < 3


def test_distance_rule_and_road_connection():
    board = Board.standard()
    board.place_settlement(corner(0), 0)
    assert not board.satisfies_distance_rule(corner(1))
    assert board.satisfies_distance_rule(corner(2))
    assert board.can_extend_road(edge(0), 0)
    assert not board.can_extend_road(edge(0), 1)
    assert not board.can_extend_road(edge(2), 0)


def test_opponent_building_blocks_road_extension():
    board = Board.standard()
    board.place_road(edge(0), 0)
    board.place_settlement(corner(1), 1)
    assert not board.can_extend_road(edge(1), 0)


def test_swap_roll_numbers_refuses_protected_numbers():
    board = Board.standard()
    forest_3, fields_4 = HexCoordinate(0, 1, -1), HexCoordinate(1, 0, -1)
    board.swap_roll_numbers(forest_3, fields_4)
    assert board.tiles[forest_3].number == 4
    assert board.tiles[fields_4].number == 3
    hills_6 = HexCoordinate(-1, 0, 1)
    with pytest.raises(ValueError):
        board.swap_roll_numbers(forest_3, hills_6)
    with pytest.raises(ValueError):
        board.swap_roll_numbers(forest_3, CENTER)


def test_longest_road_follows_a_trail_and_is_cut_by_opponents():
    board = Board.standard()
    for i in range(5):
        board.place_road(edge(i), 0)
    assert board.longest_road(0) == 5
    board.place_settlement(corner(3), 1)
    assert board.longest_road(0) == 3


def test_longest_road_around_a_closed_ring():
    board = Board.standard()
    for i in range(6):
        board.place_road(edge(i), 0)
    assert board.longest_road(0) == 6


def test_open_road_detection():
    board = Board.standard()
    board.place_settlement(corner(0), 0)
    board.place_road(edge(0), 0)
    assert board.is_open_road(edge(0))
    board.place_road(edge(1), 0)
    assert not board.is_open_road(edge(0))
    assert board.is_open_road(edge(1))


def test_demote_city_removes_wall():
    board = Board.standard()
    board.place_settlement(corner(0), 0)
    board.upgrade_to_city(corner(0))
    board.building_at(corner(0)).walled = True
    board.demote_city(corner(0))
    building = board.building_at(corner(0))
    assert not building.is_city
    assert not building.walled


def test_path_requires_adjacent_ends():
    with pytest.raises(ValueError):
        PathCoordinate.between(corner(0), corner(2))
