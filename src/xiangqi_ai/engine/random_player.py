"""Uniform random baseline player for 象棋.

合法手から一様ランダムに1手を選ぶベースライン。
ランダム対局でルール実装が壊れないかの確認や、探索AIの強さの下限確認に使う。
"""

from __future__ import annotations

import random

from xiangqi_ai.game.board import Board, Move
from xiangqi_ai.game.moves import legal_moves
from xiangqi_ai.game.protocol import GameState
from xiangqi_ai.game.types import Side


def random_board_move(
    board: Board, side: Side, rng: random.Random | None = None
) -> Move | None:
    """盤面と手番から合法手を1つ選ぶ。合法手がなければ None。"""
    moves = legal_moves(board, side)
    if not moves:
        return None
    return (rng or random).choice(moves)


def random_move(state: GameState, rng: random.Random | None = None) -> int:
    """Return a random legal move (encoded) for the side to move.

    合法手がない場合は ValueError（終局局面では呼ばれないはず）。
    """
    moves = state.legal_moves()
    if not moves:
        raise ValueError("No legal moves available")
    return (rng or random).choice(moves)
