"""象棋 (Xiangqi): 10x9 board rules engine."""

from xiangqi_ai.game.board import Board, Move, Piece, Position
from xiangqi_ai.game.moves import (
    apply_move,
    is_checkmate,
    is_in_check,
    is_legal_move,
    is_pseudo_legal_move,
    is_stalemate,
    iter_legal_moves,
    legal_moves,
)
from xiangqi_ai.game.state import Outcome, XiangqiState
from xiangqi_ai.game.types import COLS, ROWS, PieceKind, Side

__all__ = [
    "Board",
    "COLS",
    "Move",
    "Outcome",
    "Piece",
    "PieceKind",
    "Position",
    "ROWS",
    "Side",
    "XiangqiState",
    "apply_move",
    "is_checkmate",
    "is_in_check",
    "is_legal_move",
    "is_pseudo_legal_move",
    "is_stalemate",
    "iter_legal_moves",
    "legal_moves",
]
