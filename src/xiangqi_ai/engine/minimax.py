"""Minimax search with alpha-beta pruning for 象棋."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from xiangqi_ai.engine.evaluation import evaluate
from xiangqi_ai.game.board import Board, Move
from xiangqi_ai.game.moves import apply_move, encode_move, legal_moves
from xiangqi_ai.game.protocol import GameState
from xiangqi_ai.game.types import Side

logger = logging.getLogger(__name__)

# 合法手がない局面の評価値（±∞ ではなく有限の番兵値）
MATE_SCORE = 9000

# 難易度ごとの探索深さ（entry = 初級, advance = 上級）
DIFFICULTY_DEPTHS: dict[str, int] = {
    "entry": 1,
    "advance": 2,
}

# ヒント（最善手の提案）に使う探索深さ
HINT_DEPTH = 2

# API から指定できる探索深さの上限
MAX_DEPTH = 3


@dataclass(frozen=True)
class SearchConfig:
    """Configuration for minimax search.

    Attributes:
        depth:   探索深さ（プライ数）。0 なら候補手の静的評価の比較になる
        shuffle: 候補手の順序をランダムにする（同点手の選択を毎回変える）
        seed:    シャッフル用の乱数シード（None なら毎回異なる）
    """

    depth: int = 2
    shuffle: bool = True
    seed: int | None = None

    @classmethod
    def for_difficulty(cls, difficulty: str) -> SearchConfig:
        """難易度名から設定を作る。未知の難易度は ValueError。"""
        if difficulty not in DIFFICULTY_DEPTHS:
            msg = f"Unknown difficulty: {difficulty}"
            raise ValueError(msg)
        return cls(depth=DIFFICULTY_DEPTHS[difficulty])


def minimax(
    board: Board,
    depth: int,
    alpha: float,
    beta: float,
    maximizing: bool,
    root_side: Side,
) -> float:
    """Minimax search with alpha-beta pruning.

    ミニマックス法 + αβ枝刈りによる探索。
    評価値は常に root_side（探索を開始した側）の視点で返す。

    alpha: 最大化側（root_side）が保証できる最低スコア
    beta:  最小化側（相手）が保証できる最高スコア
    beta <= alpha になった時点で残りの兄弟ノードは探索しない。

    合法手がない局面は ±MATE_SCORE を返す（最大化側が指せなければ負け、
    最小化側が指せなければ勝ち）。
    """
    # 探索深さ0に達したら静的評価を返す（葉ノード）
    if depth <= 0:
        return evaluate(board, root_side)

    current = root_side if maximizing else root_side.opponent
    moves = legal_moves(board, current)
    if not moves:
        return -MATE_SCORE if maximizing else MATE_SCORE

    if maximizing:
        best = float("-inf")
        for move in moves:
            score = minimax(
                apply_move(board, move.src, move.dst),
                depth - 1, alpha, beta, False, root_side,
            )
            best = max(best, score)
            alpha = max(alpha, score)
            if beta <= alpha:
                break  # βカットオフ
        return best

    best = float("inf")
    for move in moves:
        score = minimax(
            apply_move(board, move.src, move.dst),
            depth - 1, alpha, beta, True, root_side,
        )
        best = min(best, score)
        beta = min(beta, score)
        if beta <= alpha:
            break  # αカットオフ
    return best


def search(
    board: Board,
    side: Side,
    depth: int,
    rng: random.Random | None = None,
    shuffle: bool = True,
    moves: list[Move] | None = None,
) -> Move | None:
    """Return the best move for side, annotated with its backed-up score.

    ルート局面の合法手をシャッフルしてから順に評価し、
    評価値が厳密に大きい手だけで最善手を更新する（同点なら先に見た手が残る）。
    シャッフルにより同点の手から毎回同じ手を選ぶことを避ける。

    合法手がなければ None（詰み・困毙は呼び出し側で判定済みのはず）。
    moves を渡すと合法手の生成を省略する（渡したリストはシャッフルで並べ替わる）。
    """
    if moves is None:
        moves = legal_moves(board, side)
    if not moves:
        return None

    if shuffle:
        (rng or random).shuffle(moves)

    best_move: Move | None = None
    best_score = float("-inf")
    for move in moves:
        # 相手番（最小化ノード）から1手少ない深さで探索
        score = minimax(
            apply_move(board, move.src, move.dst),
            depth - 1, float("-inf"), float("inf"), False, side,
        )
        if score > best_score:
            best_score = score
            best_move = move

    assert best_move is not None
    logger.debug(
        "search side=%s depth=%d candidates=%d best=%s score=%s",
        side.name, depth, len(moves), best_move, best_score,
    )
    return Move(best_move.src, best_move.dst, score=int(best_score))


def minimax_move(state: GameState, depth: int = 2, config: SearchConfig | None = None) -> int:
    """Return the best move for the current player using minimax search.

    ミニマックス探索で最善手（エンコード値）を返す。
    config を渡した場合は depth より config.depth を優先する。
    合法手がない場合は ValueError を送出する。
    """
    if config is None:
        config = SearchConfig(depth=depth)
    rng = random.Random(config.seed) if config.seed is not None else None
    board = state.board
    side = state.side
    move = search(board, side, config.depth, rng=rng, shuffle=config.shuffle)
    if move is None:
        raise ValueError("No legal moves available")
    return encode_move(move.src, move.dst)
