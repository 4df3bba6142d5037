"""Tests for xiangqi game state."""

from __future__ import annotations

import pytest

from xiangqi_ai.game.board import Board, Piece
from xiangqi_ai.game.moves import ACTION_SPACE, encode_move
from xiangqi_ai.game.protocol import GameState
from xiangqi_ai.game.state import NUM_PLANES, Outcome, XiangqiState
from xiangqi_ai.game.types import COLS, ROWS, PieceKind, Side


def _make_state(
    pieces: dict[tuple[int, int], tuple[PieceKind, Side]],
    side: Side = Side.RED,
) -> XiangqiState:
    """Helper: create a state from {(row, col): (kind, side)}."""
    board = Board.empty()
    for (r, c), (kind, owner) in pieces.items():
        board = board.set_piece(r, c, Piece(kind, owner))
    return XiangqiState(board=board, _current_player=side)


class TestProtocolCompliance:
    def test_implements_game_state(self) -> None:
        assert isinstance(XiangqiState(), GameState)

    def test_action_space_size(self) -> None:
        assert XiangqiState().action_space_size == ACTION_SPACE


class TestInitialState:
    def test_red_starts(self) -> None:
        state = XiangqiState()
        assert state.current_player == 0
        assert state.side == Side.RED

    def test_not_terminal(self) -> None:
        state = XiangqiState()
        assert not state.is_terminal
        assert state.outcome is None
        assert state.winner is None

    def test_has_44_legal_moves(self) -> None:
        state = XiangqiState()
        assert len(state.legal_moves()) == 44
        assert len(state.moves()) == 44


class TestApplyMove:
    def test_player_alternates(self) -> None:
        state = XiangqiState()
        new_state = state.apply_move(state.legal_moves()[0])
        assert new_state.current_player == 1
        assert new_state.move_count == 1

    def test_immutability(self) -> None:
        state = XiangqiState()
        new_state = state.apply_move(state.legal_moves()[0])
        assert state.current_player == 0  # Original unchanged
        assert state.board == Board()
        assert new_state.board != state.board

    def test_play_by_coordinates(self) -> None:
        state = XiangqiState().play((7, 1), (7, 4))  # 炮二平五
        assert state.board.piece_at(7, 4) == Piece(PieceKind.CANNON, Side.RED)
        assert state.board.piece_at(7, 1) is None

    def test_illegal_move_raises(self) -> None:
        state = XiangqiState()
        with pytest.raises(ValueError):
            state.apply_move(encode_move((9, 4), (7, 4)))
        with pytest.raises(ValueError):
            state.play((3, 0), (4, 0))  # 黒の兵は赤番に動かせない


class TestUndo:
    def test_undo_one_ply(self) -> None:
        state = XiangqiState().play((7, 1), (7, 4))
        undone = state.undo()
        assert undone.board == Board()
        assert undone.side == Side.RED
        assert undone.move_count == 0

    def test_undo_two_plies(self) -> None:
        state = XiangqiState().play((7, 1), (7, 4)).play((0, 1), (2, 2))
        undone = state.undo(plies=2)
        assert undone.board == Board()
        assert undone.side == Side.RED

        one = state.undo()
        assert one.side == Side.BLACK
        assert one.board.piece_at(7, 4) == Piece(PieceKind.CANNON, Side.RED)

    def test_undo_past_start_raises(self) -> None:
        with pytest.raises(ValueError):
            XiangqiState().undo()
        with pytest.raises(ValueError):
            XiangqiState().play((7, 1), (7, 4)).undo(plies=2)


class TestTerminal:
    def test_general_missing_is_capture(self) -> None:
        state = _make_state({(9, 4): (PieceKind.GENERAL, Side.RED)}, Side.BLACK)
        assert state.is_terminal
        assert state.outcome == Outcome.CAPTURE
        assert state.winner == Side.RED.value

    def test_checkmate_winner_is_last_mover(self) -> None:
        state = _make_state(
            {
                (0, 4): (PieceKind.GENERAL, Side.BLACK),
                (0, 0): (PieceKind.CHARIOT, Side.RED),
                (1, 8): (PieceKind.CHARIOT, Side.RED),
                (9, 3): (PieceKind.GENERAL, Side.RED),
            },
            Side.BLACK,
        )
        assert state.in_check
        assert state.outcome == Outcome.CHECKMATE
        assert state.winner == Side.RED.value
        assert state.legal_moves() == []

    def test_stalemate_loses(self) -> None:
        state = _make_state(
            {
                (0, 3): (PieceKind.GENERAL, Side.BLACK),
                (1, 0): (PieceKind.CHARIOT, Side.RED),
                (9, 4): (PieceKind.GENERAL, Side.RED),
            },
            Side.BLACK,
        )
        assert not state.in_check
        assert state.outcome == Outcome.STALEMATE
        assert state.winner == Side.RED.value

    def test_mate_by_play(self) -> None:
        state = _make_state(
            {
                (0, 4): (PieceKind.GENERAL, Side.BLACK),
                (5, 0): (PieceKind.CHARIOT, Side.RED),
                (1, 8): (PieceKind.CHARIOT, Side.RED),
                (9, 3): (PieceKind.GENERAL, Side.RED),
            },
        )
        assert not state.is_terminal
        mated = state.play((5, 0), (0, 0))
        assert mated.outcome == Outcome.CHECKMATE
        assert mated.winner == Side.RED.value


class TestTensorPlanes:
    def test_shape(self) -> None:
        planes = XiangqiState().to_tensor_planes()
        assert planes.shape == (NUM_PLANES, ROWS, COLS)

    def test_piece_counts(self) -> None:
        planes = XiangqiState().to_tensor_planes()
        assert planes[:7].sum().item() == 16  # 現プレイヤーの駒
        assert planes[7:14].sum().item() == 16  # 相手の駒
        assert planes[PieceKind.GENERAL.value, 9, 4].item() == 1.0

    def test_side_indicator(self) -> None:
        state = XiangqiState()
        assert state.to_tensor_planes()[14].sum().item() == ROWS * COLS
        black = state.play((7, 1), (7, 4))
        planes = black.to_tensor_planes()
        assert planes[14].sum().item() == 0
        # 黒番では黒の駒が ch.0-6 に入る
        assert planes[PieceKind.GENERAL.value, 0, 4].item() == 1.0
