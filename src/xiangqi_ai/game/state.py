"""GameState implementation for 象棋 (Xiangqi).

象棋の対局状態（ゲームツリーのノード）。
盤面・手番・手数に加えて、待った（undo）用に過去の盤面を保持する。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import torch

from xiangqi_ai.game.board import Board, Move
from xiangqi_ai.game.moves import (
    ACTION_SPACE,
    encode_move,
    has_legal_move,
    is_in_check,
    is_legal_move,
    iter_legal_moves,
)
from xiangqi_ai.game.moves import apply_move as _apply_move
from xiangqi_ai.game.moves import decode_move as _decode_move
from xiangqi_ai.game.types import COLS, ROWS, PieceKind, Side

NUM_PLANES = 2 * len(PieceKind) + 1  # 15


class Outcome(Enum):
    """終局の種類。象棋に引き分けはない（困毙も手番側の負け）。"""

    CAPTURE = "capture"      # 将が取られた（本来は合法手フィルタで起きない）
    CHECKMATE = "checkmate"  # 将死
    STALEMATE = "stalemate"  # 困毙


def board_planes(board: Board, side: Side) -> torch.Tensor:
    """Encode a board as one-hot planes from side's point of view.

    ch.0-6:  side の駒（7駒種）
    ch.7-13: 相手の駒（7駒種）
    """
    planes = torch.zeros(2 * len(PieceKind), ROWS, COLS)
    for pos, piece in board.pieces():
        offset = 0 if piece.side == side else len(PieceKind)
        planes[offset + piece.kind.value, pos.row, pos.col] = 1.0
    return planes


@dataclass(frozen=True)
class XiangqiState:
    """Immutable game state for 象棋.

    象棋の対局状態。GameState プロトコルを実装する。

    Terminal conditions（終局条件、この順に判定）:
    1. 将取り: 本来は合法手フィルタで王手放置を防ぐため起きない
    2. 合法手なし + 王手 = 将死: 直前に指した側の勝ち
    3. 合法手なし + 王手なし = 困毙: 同じく直前に指した側の勝ち
    """

    board: Board = field(default_factory=Board)
    _current_player: Side = Side.RED
    _move_count: int = 0
    _history: tuple[Board, ...] = ()

    @property
    def action_space_size(self) -> int:
        """行動空間のサイズ（90×90 = 8100 手）。"""
        return ACTION_SPACE

    @property
    def current_player(self) -> int:
        """現在の手番（0=赤, 1=黒）。"""
        return self._current_player.value

    @property
    def side(self) -> Side:
        return self._current_player

    @property
    def move_count(self) -> int:
        return self._move_count

    @property
    def in_check(self) -> bool:
        """手番側の将が王手されていれば True。"""
        return is_in_check(self.board, self._current_player)

    @property
    def outcome(self) -> Outcome | None:
        """終局の種類を返す。対局中は None。"""
        for side in Side:
            if self.board.find_general(side) is None:
                return Outcome.CAPTURE
        if has_legal_move(self.board, self._current_player):
            return None
        if self.in_check:
            return Outcome.CHECKMATE
        return Outcome.STALEMATE

    @property
    def is_terminal(self) -> bool:
        return self.outcome is not None

    @property
    def winner(self) -> int | None:
        """勝者を返す。対局中は None。"""
        for side in Side:
            if self.board.find_general(side) is None:
                return side.opponent.value

        # 合法手なし（将死・困毙）→ 手番側の負け
        if not has_legal_move(self.board, self._current_player):
            return self._current_player.opponent.value

        return None

    def legal_moves(self) -> list[int]:
        """合法手のエンコード値リストを返す。"""
        return [
            encode_move(m.src, m.dst)
            for m in iter_legal_moves(self.board, self._current_player)
        ]

    def moves(self) -> list[Move]:
        """合法手を Move のリストで返す。"""
        return list(iter_legal_moves(self.board, self._current_player))

    def apply_move(self, move: int) -> XiangqiState:
        """手を適用して新しい対局状態を返す。

        非合法手には ValueError を送出する。過去の盤面は待った用に積んでおく。
        """
        decoded = _decode_move(move)
        if not is_legal_move(self.board, decoded.src, decoded.dst, self._current_player):
            raise ValueError(f"Illegal move: {move}")
        return XiangqiState(
            board=_apply_move(self.board, decoded.src, decoded.dst),
            _current_player=self._current_player.opponent,  # 手番交代
            _move_count=self._move_count + 1,
            _history=self._history + (self.board,),
        )

    def play(self, src: tuple[int, int], dst: tuple[int, int]) -> XiangqiState:
        """座標で手を指す（apply_move の便利版）。"""
        return self.apply_move(encode_move(src, dst))

    def undo(self, plies: int = 1) -> XiangqiState:
        """Take back the last `plies` moves.

        待った。一人用モードではAIの応手と自分の手をまとめて戻すため plies=2 を使う。
        """
        if plies < 1 or plies > len(self._history):
            raise ValueError(
                f"Cannot undo {plies} plies (history has {len(self._history)})"
            )
        side = self._current_player
        if plies % 2 == 1:
            side = side.opponent
        return XiangqiState(
            board=self._history[-plies],
            _current_player=side,
            _move_count=self._move_count - plies,
            _history=self._history[:-plies],
        )

    def to_tensor_planes(self) -> torch.Tensor:
        """Convert to tensor planes.

        局面をテンソルに変換する（15チャンネル）。

        ch.0-6:  現プレイヤーの駒（7駒種）
        ch.7-13: 相手プレイヤーの駒（7駒種）
        ch.14:   手番インジケータ（赤番なら全1）
        """
        planes = torch.zeros(NUM_PLANES, ROWS, COLS)
        planes[: NUM_PLANES - 1] = board_planes(self.board, self._current_player)
        if self._current_player == Side.RED:
            planes[NUM_PLANES - 1, :, :] = 1.0
        return planes
