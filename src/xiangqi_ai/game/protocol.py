"""Protocol for game nodes consumed by the search engines.

探索エンジン（ミニマックス・ランダム）が受け取る局面ノードの型。
エンジンは XiangqiState に直接依存せず、このプロトコルだけを見る。
手はエンコード済みの整数（src * 90 + dst）で受け渡す。
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import torch

from xiangqi_ai.game.board import Board
from xiangqi_ai.game.types import Side


@runtime_checkable
class GameState(Protocol):
    """An immutable 象棋 game node.

    apply_move() / undo() は新しいノードを返し、元のノードは変化しない。
    """

    @property
    def board(self) -> Board:
        """現在の盤面。"""
        ...

    @property
    def side(self) -> Side:
        """手番側。"""
        ...

    @property
    def current_player(self) -> int:
        """手番の整数表現（0=赤, 1=黒）。"""
        ...

    @property
    def is_terminal(self) -> bool: ...

    @property
    def winner(self) -> int | None:
        """勝者（0=赤, 1=黒）。対局中は None。"""
        ...

    @property
    def action_space_size(self) -> int: ...

    def legal_moves(self) -> list[int]: ...

    def apply_move(self, move: int) -> GameState: ...

    def undo(self, plies: int = 1) -> GameState:
        """plies 手前のノードに戻す。"""
        ...

    def to_tensor_planes(self) -> torch.Tensor:
        """盤面を (15, 10, 9) のワンホット平面に変換する。"""
        ...
