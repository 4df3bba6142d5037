"""Tests for xiangqi types."""

from __future__ import annotations

from xiangqi_ai.game.types import (
    COLS,
    HORSE_STEPS,
    NUM_SQUARES,
    ROWS,
    PieceKind,
    Side,
    in_bounds,
    in_palace,
    on_own_half,
)


def test_board_dimensions() -> None:
    assert ROWS == 10
    assert COLS == 9
    assert NUM_SQUARES == 90


def test_side_opponent() -> None:
    assert Side.RED.opponent == Side.BLACK
    assert Side.BLACK.opponent == Side.RED


def test_side_forward() -> None:
    # 赤は上（行が減る方向）、黒は下に進む
    assert Side.RED.forward == -1
    assert Side.BLACK.forward == 1


def test_7_piece_kinds() -> None:
    assert len(PieceKind) == 7


def test_palace() -> None:
    assert in_palace(Side.RED, 9, 4)
    assert in_palace(Side.RED, 7, 3)
    assert not in_palace(Side.RED, 6, 4)
    assert not in_palace(Side.RED, 8, 2)
    assert in_palace(Side.BLACK, 0, 5)
    assert not in_palace(Side.BLACK, 3, 4)
    assert not in_palace(Side.BLACK, 9, 4)


def test_river_halves() -> None:
    assert on_own_half(Side.RED, 5)
    assert not on_own_half(Side.RED, 4)
    assert on_own_half(Side.BLACK, 4)
    assert not on_own_half(Side.BLACK, 5)


def test_in_bounds() -> None:
    assert in_bounds(0, 0)
    assert in_bounds(9, 8)
    assert not in_bounds(10, 0)
    assert not in_bounds(0, -1)


def test_horse_legs_adjacent_in_long_direction() -> None:
    for dr, dc, leg_dr, leg_dc in HORSE_STEPS:
        assert {abs(dr), abs(dc)} == {1, 2}
        assert abs(leg_dr) + abs(leg_dc) == 1
        if abs(dr) == 2:
            assert (leg_dr, leg_dc) == (dr // 2, 0)
        else:
            assert (leg_dr, leg_dc) == (0, dc // 2)
