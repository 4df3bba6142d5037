"""Types and constants for 象棋 (Xiangqi, 10x9).

象棋（シャンチー）の基本型・定数定義。
盤は10行×9列。行0〜4が黒の陣地、行5〜9が赤の陣地（4行目と5行目の間が河）。
"""

from __future__ import annotations

from enum import IntEnum, unique

ROWS = 10
COLS = 9
NUM_SQUARES = ROWS * COLS  # 90マス

# 九宮（将・士が動ける範囲）の列
PALACE_COLS = range(3, 6)


@unique
class Side(IntEnum):
    """Side identifiers.

    赤（RED）は下側から上に向かって進む（row 9 → row 0）。先手。
    黒（BLACK）は上側から下に向かって進む（row 0 → row 9）。
    """

    RED = 0
    BLACK = 1

    @property
    def opponent(self) -> Side:
        """相手側を返す。"""
        return Side(1 - self.value)

    @property
    def forward(self) -> int:
        """前進方向の行差分（赤は -1、黒は +1）。"""
        return -1 if self == Side.RED else 1


@unique
class PieceKind(IntEnum):
    """Piece kinds in 象棋（7種類）.

    値は to_tensor_planes() でのチャンネルインデックスに対応する。
    """

    GENERAL = 0   # 帥/将
    ADVISOR = 1   # 仕/士
    ELEPHANT = 2  # 相/象
    HORSE = 3     # 傌/馬
    CHARIOT = 4   # 俥/車
    CANNON = 5    # 炮/砲
    SOLDIER = 6   # 兵/卒


def in_palace(side: Side, row: int, col: int) -> bool:
    """マス(row, col)が side の九宮内なら True。"""
    if col not in PALACE_COLS:
        return False
    if side == Side.RED:
        return 7 <= row <= 9
    return 0 <= row <= 2


def on_own_half(side: Side, row: int) -> bool:
    """行 row が side の陣地（河を渡っていない側）なら True。"""
    if side == Side.RED:
        return row >= 5
    return row <= 4


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < ROWS and 0 <= col < COLS


# 縦横の4方向（車・砲・将の直線判定に使用）
ORTHOGONAL: list[tuple[int, int]] = [(-1, 0), (1, 0), (0, -1), (0, 1)]

# 士: 斜め1マス
ADVISOR_STEPS: list[tuple[int, int]] = [(-1, -1), (-1, 1), (1, -1), (1, 1)]

# 相: 斜め2マス（田の字）。目（中間マス）は差分の半分で求める
ELEPHANT_STEPS: list[tuple[int, int]] = [(-2, -2), (-2, 2), (2, -2), (2, 2)]

# 馬: 日の字移動と、その「脚」（動く駒に隣接する縦横のマス）の差分
# (dr, dc, leg_dr, leg_dc)
HORSE_STEPS: list[tuple[int, int, int, int]] = [
    (-2, -1, -1, 0), (-2, 1, -1, 0),
    (2, -1, 1, 0), (2, 1, 1, 0),
    (-1, -2, 0, -1), (1, -2, 0, -1),
    (-1, 2, 0, 1), (1, 2, 0, 1),
]
