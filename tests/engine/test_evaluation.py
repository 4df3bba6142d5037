"""Tests for static evaluation."""

from __future__ import annotations

from xiangqi_ai.engine.evaluation import (
    PIECE_VALUES,
    POSITION_TABLES,
    evaluate,
    evaluate_batch,
    piece_score,
)
from xiangqi_ai.game.board import Board, Piece
from xiangqi_ai.game.moves import apply_move, legal_moves
from xiangqi_ai.game.types import COLS, ROWS, PieceKind, Side


class TestTables:
    def test_material_values(self) -> None:
        assert PIECE_VALUES[PieceKind.GENERAL] == 10000
        assert PIECE_VALUES[PieceKind.CHARIOT] == 900
        assert PIECE_VALUES[PieceKind.HORSE] == 450
        assert PIECE_VALUES[PieceKind.CANNON] == 450
        assert PIECE_VALUES[PieceKind.ADVISOR] == 200
        assert PIECE_VALUES[PieceKind.ELEPHANT] == 200
        assert PIECE_VALUES[PieceKind.SOLDIER] == 100

    def test_position_tables_shape(self) -> None:
        for kind in (PieceKind.SOLDIER, PieceKind.CHARIOT, PieceKind.HORSE):
            table = POSITION_TABLES[kind]
            assert len(table) == ROWS
            assert all(len(row) == COLS for row in table)

    def test_black_reads_mirrored_row(self) -> None:
        assert piece_score(PieceKind.SOLDIER, Side.RED, 6, 4) == 140
        assert piece_score(PieceKind.SOLDIER, Side.BLACK, 3, 4) == 140
        assert piece_score(PieceKind.HORSE, Side.RED, 7, 2) == 465
        assert piece_score(PieceKind.HORSE, Side.BLACK, 2, 2) == 465

    def test_kinds_without_table_are_material_only(self) -> None:
        assert piece_score(PieceKind.CANNON, Side.RED, 4, 4) == 450
        assert piece_score(PieceKind.ADVISOR, Side.BLACK, 1, 4) == 200


class TestEvaluate:
    def test_initial_position_is_zero(self) -> None:
        assert evaluate(Board(), Side.RED) == 0
        assert evaluate(Board(), Side.BLACK) == 0

    def test_perspective_is_antisymmetric(self) -> None:
        board = apply_move(Board(), (7, 1), (0, 1))  # 赤砲が黒馬を取る
        assert evaluate(board, Side.RED) == -evaluate(board, Side.BLACK)

    def test_material_gain(self) -> None:
        board = Board().set_piece(0, 0, None)  # 黒車を除く
        assert evaluate(board, Side.RED) == 900
        assert evaluate(board, Side.BLACK) == -900

    def test_only_pieces_on_board_count(self) -> None:
        board = Board.empty().set_piece(9, 4, Piece(PieceKind.GENERAL, Side.RED))
        assert evaluate(board, Side.RED) == 10000


class TestEvaluateBatch:
    def test_matches_evaluate(self) -> None:
        board = Board()
        children = [apply_move(board, m.src, m.dst) for m in legal_moves(board, Side.RED)]
        for side in Side:
            batch = evaluate_batch(children, side).tolist()
            assert batch == [evaluate(b, side) for b in children]

    def test_empty(self) -> None:
        assert evaluate_batch([], Side.RED).shape == (0,)
