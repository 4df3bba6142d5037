"""Board representation for 象棋 (10x9).

10×9盤の盤面データ構造。
イミュータブルなデータクラスで、変更メソッドは新しいオブジェクトを返す。
象棋には持ち駒がないため、盤面は90マスのタプルだけで表せる。
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import NamedTuple

from xiangqi_ai.game.types import COLS, NUM_SQUARES, ROWS, PieceKind, Side


class Position(NamedTuple):
    """盤上の座標。row ∈ [0, 9]、col ∈ [0, 8]。"""

    row: int
    col: int


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    盤面上の駒。種類と所属を持つ。駒種が変わることはない（成りなし）。
    """

    kind: PieceKind
    side: Side


@dataclass(frozen=True)
class Move:
    """A move from src to dst.

    score は探索で付与される評価値（比較・ハッシュには含めない）。
    手は生成元の盤面に対してのみ意味を持つ。
    """

    src: Position
    dst: Position
    score: int | None = field(default=None, compare=False)


_BACK_RANK = [
    PieceKind.CHARIOT, PieceKind.HORSE, PieceKind.ELEPHANT,
    PieceKind.ADVISOR, PieceKind.GENERAL, PieceKind.ADVISOR,
    PieceKind.ELEPHANT, PieceKind.HORSE, PieceKind.CHARIOT,
]


@dataclass(frozen=True)
class Board:
    """Immutable board state for 10x9 象棋.

    10×9 = 90マスの盤面を表すイミュータブルなデータ構造。

    squares: 90要素のタプル（行優先）。squares[row * COLS + col] でアクセス。
    """

    squares: tuple[Piece | None, ...] = field(
        default_factory=lambda: Board._initial_squares()
    )

    @staticmethod
    def _initial_squares() -> tuple[Piece | None, ...]:
        """Return the standard starting position.

        象棋の標準初期配置を返す。
        Row 0 = 黒の後段（上端）、Row 9 = 赤の後段（下端）。
        """
        squares: list[Piece | None] = [None] * NUM_SQUARES

        for side, back, cannon, soldier in (
            (Side.BLACK, 0, 2, 3),
            (Side.RED, 9, 7, 6),
        ):
            # 後段: 車馬象士将士象馬車
            for c, kind in enumerate(_BACK_RANK):
                squares[back * COLS + c] = Piece(kind, side)
            # 砲は2列目と8列目
            squares[cannon * COLS + 1] = Piece(PieceKind.CANNON, side)
            squares[cannon * COLS + 7] = Piece(PieceKind.CANNON, side)
            # 兵/卒は1列おきに5枚
            for c in range(0, COLS, 2):
                squares[soldier * COLS + c] = Piece(PieceKind.SOLDIER, side)

        return tuple(squares)

    @classmethod
    def empty(cls) -> Board:
        """駒が1枚もない盤面を返す（テストや局面作成用）。"""
        return cls(squares=(None,) * NUM_SQUARES)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Piece | None]]) -> Board:
        """Build a board from a 10x9 grid snapshot.

        10行×9列のグリッドから盤面を作る。ネットワーク越しに受け取った
        スナップショットを復元するために使う。形状の検証は呼び出し側の責任。
        """
        return cls(squares=tuple(p for row in rows for p in row))

    def to_rows(self) -> list[list[Piece | None]]:
        """盤面を10行×9列のグリッドに変換する。"""
        return [list(self.squares[r * COLS:(r + 1) * COLS]) for r in range(ROWS)]

    def piece_at(self, row: int, col: int) -> Piece | None:
        """マス(row, col)の駒を返す。駒がなければ None。"""
        return self.squares[row * COLS + col]

    def set_piece(self, row: int, col: int, piece: Piece | None) -> Board:
        """マス(row, col)の駒を変更した新しい Board を返す。"""
        squares = list(self.squares)
        squares[row * COLS + col] = piece
        return Board(squares=tuple(squares))

    def move_piece(self, src: Position, dst: Position) -> Board:
        """src の駒を dst に移した新しい Board を返す（dst の駒は上書き = 取り）。"""
        squares = list(self.squares)
        src_idx = src[0] * COLS + src[1]
        squares[dst[0] * COLS + dst[1]] = squares[src_idx]
        squares[src_idx] = None
        return Board(squares=tuple(squares))

    def pieces(self) -> Iterator[tuple[Position, Piece]]:
        """盤上の全駒を (座標, 駒) の組で列挙する。"""
        for idx, piece in enumerate(self.squares):
            if piece is not None:
                yield Position(idx // COLS, idx % COLS), piece

    def find_general(self, side: Side) -> Position | None:
        """side の将の位置を返す。将がなければ None。

        王手判定や終局判定に使用する。
        """
        for idx, piece in enumerate(self.squares):
            if (
                piece is not None
                and piece.kind == PieceKind.GENERAL
                and piece.side == side
            ):
                return Position(idx // COLS, idx % COLS)
        return None

    def count_between(self, src: Position, dst: Position) -> int:
        """Count pieces strictly between two squares on one rank or file.

        同じ行または列にある2マスの間（両端を除く）の駒数を返す。
        車の通り道や砲の台（スクリーン）の判定に使う。
        一直線上にない場合は 0 を返す。
        """
        count = 0
        if src[0] == dst[0]:
            lo, hi = sorted((src[1], dst[1]))
            for c in range(lo + 1, hi):
                if self.squares[src[0] * COLS + c] is not None:
                    count += 1
        elif src[1] == dst[1]:
            lo, hi = sorted((src[0], dst[0]))
            for r in range(lo + 1, hi):
                if self.squares[r * COLS + src[1]] is not None:
                    count += 1
        return count
