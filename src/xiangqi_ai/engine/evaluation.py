"""Static evaluation for 象棋: material plus piece-square bonuses.

駒の価値（材料）と駒種ごとの位置ボーナスを合計する静的評価関数。
位置テーブルは赤視点で定義し、黒の駒は行を反転（9 - row）して参照する。
"""

from __future__ import annotations

from collections.abc import Sequence

import torch

from xiangqi_ai.game.board import Board
from xiangqi_ai.game.state import board_planes
from xiangqi_ai.game.types import COLS, ROWS, PieceKind, Side

# 駒の価値テーブル
# 将に圧倒的に高い値を設定することで「将を守る」行動を優先させる
PIECE_VALUES: dict[PieceKind, int] = {
    PieceKind.GENERAL: 10000,
    PieceKind.CHARIOT: 900,
    PieceKind.HORSE: 450,
    PieceKind.CANNON: 450,
    PieceKind.ADVISOR: 200,
    PieceKind.ELEPHANT: 200,
    PieceKind.SOLDIER: 100,
}

# 位置ボーナス（赤視点、row 0 = 敵陣の奥）
POSITION_TABLES: dict[PieceKind, list[list[int]]] = {
    # 兵: 河を越えて中央に進むほど価値が上がる
    PieceKind.SOLDIER: [
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [10, 20, 30, 40, 40, 40, 30, 20, 10],
        [10, 20, 30, 40, 40, 40, 30, 20, 10],
        [10, 20, 30, 40, 40, 40, 30, 20, 10],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ],
    # 車: 開いた筋・横段を支配できる位置
    PieceKind.CHARIOT: [
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [5, 10, 10, 10, 10, 10, 10, 10, 5],
        [0, 0, 5, 5, 5, 5, 5, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 0, 5, 5, 5, 5, 5, 0, 0],
        [5, 10, 10, 10, 10, 10, 10, 10, 5],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ],
    # 馬: 中央寄りほど利きが多い
    PieceKind.HORSE: [
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
        [0, 5, 10, 5, 0, 5, 10, 5, 0],
        [0, 10, 15, 10, 5, 10, 15, 10, 0],
        [0, 5, 10, 15, 10, 15, 10, 5, 0],
        [0, 5, 10, 10, 10, 10, 10, 5, 0],
        [0, 5, 10, 10, 10, 10, 10, 5, 0],
        [0, 5, 10, 15, 10, 15, 10, 5, 0],
        [0, 10, 15, 10, 5, 10, 15, 10, 0],
        [0, 5, 10, 5, 0, 5, 10, 5, 0],
        [0, 0, 0, 0, 0, 0, 0, 0, 0],
    ],
}


def piece_score(kind: PieceKind, side: Side, row: int, col: int) -> int:
    """1枚の駒の価値（材料 + 位置ボーナス）。"""
    value = PIECE_VALUES[kind]
    table = POSITION_TABLES.get(kind)
    if table is not None:
        # 黒は盤を上下反転して同じテーブルを使う
        value += table[row if side == Side.RED else ROWS - 1 - row][col]
    return value


def evaluate(board: Board, side: Side) -> int:
    """Evaluate a position from side's perspective.

    side の駒は +値、相手の駒は -値 として全駒を合計する。
    Returns positive if side is better off.
    """
    score = 0
    for pos, piece in board.pieces():
        value = piece_score(piece.kind, piece.side, pos.row, pos.col)
        if piece.side == side:
            score += value
        else:
            score -= value
    return score


def _weight_planes(side: Side) -> torch.Tensor:
    """board_planes() と同じチャンネル構成の重み平面を作る。

    ch.0-6 は side の駒の価値、ch.7-13 は相手の駒の価値（負値）。
    """
    weights = torch.zeros(2 * len(PieceKind), ROWS, COLS, dtype=torch.int64)
    for kind in PieceKind:
        for r in range(ROWS):
            for c in range(COLS):
                weights[kind.value, r, c] = piece_score(kind, side, r, c)
                weights[len(PieceKind) + kind.value, r, c] = -piece_score(
                    kind, side.opponent, r, c
                )
    return weights


_WEIGHTS: dict[Side, torch.Tensor] = {side: _weight_planes(side) for side in Side}


def evaluate_batch(boards: Sequence[Board], side: Side) -> torch.Tensor:
    """Evaluate many boards at once.

    盤面群をワンホット平面に変換し、重み平面との要素積の総和で一括評価する。
    結果は evaluate() と完全に一致する（int64 テンソル）。
    """
    if not boards:
        return torch.zeros(0, dtype=torch.int64)
    planes = torch.stack([board_planes(b, side) for b in boards]).to(torch.int64)
    return (planes * _WEIGHTS[side]).sum(dim=(1, 2, 3))
