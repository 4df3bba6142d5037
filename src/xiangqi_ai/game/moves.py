"""Legal move generation for 象棋.

Move encoding (from×to approach, used by the GameState protocol):
  from_idx * 90 + to_idx   (range 0..8099)

  Total action space: 90 * 90 = 8100

盤面・座標・手番を受け取る純粋関数だけで構成する。状態は持たない。
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from xiangqi_ai.game.board import Board, Move, Piece, Position
from xiangqi_ai.game.types import (
    ADVISOR_STEPS,
    COLS,
    ELEPHANT_STEPS,
    HORSE_STEPS,
    NUM_SQUARES,
    ORTHOGONAL,
    ROWS,
    PieceKind,
    Side,
    in_bounds,
    in_palace,
    on_own_half,
)

ACTION_SPACE = NUM_SQUARES * NUM_SQUARES  # 8100


def encode_move(src: tuple[int, int], dst: tuple[int, int]) -> int:
    """手を整数（from_idx * 90 + to_idx）にエンコードする。"""
    return (src[0] * COLS + src[1]) * NUM_SQUARES + dst[0] * COLS + dst[1]


def decode_move(move: int) -> Move:
    """整数の手を Move にデコードする。"""
    from_idx, to_idx = divmod(move, NUM_SQUARES)
    return Move(
        Position(from_idx // COLS, from_idx % COLS),
        Position(to_idx // COLS, to_idx % COLS),
    )


# ---------------------------------------------------------------------------
# 駒種ごとの移動判定（dr, dc は src → dst の差分）
# ---------------------------------------------------------------------------

_Square = tuple[int, int]
_Rule = Callable[[Board, Piece, _Square, _Square, Piece | None], bool]


def _general_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    dr, dc = dst[0] - src[0], dst[1] - src[1]
    return abs(dr) + abs(dc) == 1 and in_palace(piece.side, dst[0], dst[1])


def _advisor_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    dr, dc = dst[0] - src[0], dst[1] - src[1]
    return abs(dr) == 1 and abs(dc) == 1 and in_palace(piece.side, dst[0], dst[1])


def _elephant_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    dr, dc = dst[0] - src[0], dst[1] - src[1]
    if abs(dr) != 2 or abs(dc) != 2:
        return False
    # 河を渡れない
    if not on_own_half(piece.side, dst[0]):
        return False
    # 象の目（田の字の中心）が塞がっていれば動けない
    return board.piece_at(src[0] + dr // 2, src[1] + dc // 2) is None


def _horse_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    dr, dc = dst[0] - src[0], dst[1] - src[1]
    if (abs(dr), abs(dc)) == (2, 1):
        leg = (src[0] + dr // 2, src[1])
    elif (abs(dr), abs(dc)) == (1, 2):
        leg = (src[0], src[1] + dc // 2)
    else:
        return False
    # 馬の脚（長い方向に隣接するマス）が塞がっていれば動けない
    return board.piece_at(*leg) is None


def _chariot_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    if src[0] != dst[0] and src[1] != dst[1]:
        return False
    return board.count_between(src, dst) == 0


def _cannon_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    if src[0] != dst[0] and src[1] != dst[1]:
        return False
    between = board.count_between(src, dst)
    if target is not None:
        return between == 1  # 取るには台がちょうど1枚必要
    return between == 0


def _soldier_step(side: Side, src_row: int, dr: int, dc: int) -> bool:
    """兵/卒の1歩が成立するか（前進、または河を渡った後の横移動）。"""
    if dr == side.forward and dc == 0:
        return True
    return not on_own_half(side, src_row) and dr == 0 and abs(dc) == 1


def _soldier_rule(
    board: Board, piece: Piece, src: _Square, dst: _Square, target: Piece | None
) -> bool:
    return _soldier_step(piece.side, src[0], dst[0] - src[0], dst[1] - src[1])


_RULES: dict[PieceKind, _Rule] = {
    PieceKind.GENERAL: _general_rule,
    PieceKind.ADVISOR: _advisor_rule,
    PieceKind.ELEPHANT: _elephant_rule,
    PieceKind.HORSE: _horse_rule,
    PieceKind.CHARIOT: _chariot_rule,
    PieceKind.CANNON: _cannon_rule,
    PieceKind.SOLDIER: _soldier_rule,
}


def is_pseudo_legal_move(
    board: Board,
    src: tuple[int, int],
    dst: tuple[int, int],
    side: Side,
) -> bool:
    """Check piece geometry only (own general may be left in check).

    駒の動き方だけを判定する。自玉が王手になるかどうかは考慮しない。
    不正な入力（同一マス、手番でない駒、自駒取り、盤外）は False を返す。
    """
    if tuple(src) == tuple(dst):
        return False
    if not (in_bounds(*src) and in_bounds(*dst)):
        return False
    piece = board.piece_at(*src)
    if piece is None or piece.side != side:
        return False
    target = board.piece_at(*dst)
    if target is not None and target.side == side:
        return False
    return _RULES[piece.kind](board, piece, src, dst, target)


def apply_move(board: Board, src: tuple[int, int], dst: tuple[int, int]) -> Board:
    """手を適用した新しい盤面を返す。合法性は検査しない（呼び出し側で検証済み）。"""
    return board.move_piece(src, dst)


def is_in_check(board: Board, side: Side) -> bool:
    """Check if side's general is under attack.

    将の位置から逆向きに攻撃元を探す:
    1. 縦横4方向の直線: 最初の駒が敵の車・将（対面将）なら王手、
       2枚目の駒が敵の砲なら王手。2枚目で走査を打ち切る。
    2. 馬: 8方向。馬の脚が空いている場合のみ王手。
    3. 兵/卒: 前から、または河を渡った兵が横から。
    士・象は将に届かないので調べない。
    """
    general = board.find_general(side)
    if general is None:
        return False  # 正常な対局では起きない
    enemy = side.opponent
    gr, gc = general

    for dr, dc in ORTHOGONAL:
        seen = 0
        r, c = gr + dr, gc + dc
        while 0 <= r < ROWS and 0 <= c < COLS:
            p = board.piece_at(r, c)
            if p is not None:
                if seen == 0:
                    if p.side == enemy and p.kind in (PieceKind.CHARIOT, PieceKind.GENERAL):
                        return True
                    seen = 1
                else:
                    if p.side == enemy and p.kind == PieceKind.CANNON:
                        return True
                    break
            r, c = r + dr, c + dc

    for dr, dc, leg_dr, leg_dc in HORSE_STEPS:
        # (dr, dc) だけ動いて将に届く馬の位置と、その脚
        hr, hc = gr - dr, gc - dc
        if not in_bounds(hr, hc):
            continue
        p = board.piece_at(hr, hc)
        if p is not None and p.side == enemy and p.kind == PieceKind.HORSE:
            if board.piece_at(hr + leg_dr, hc + leg_dc) is None:
                return True

    for dr, dc in ((enemy.forward, 0), (0, 1), (0, -1)):
        sr, sc = gr - dr, gc - dc
        if not in_bounds(sr, sc):
            continue
        p = board.piece_at(sr, sc)
        if p is not None and p.side == enemy and p.kind == PieceKind.SOLDIER:
            if _soldier_step(enemy, sr, dr, dc):
                return True

    return False


def is_legal_move(
    board: Board,
    src: tuple[int, int],
    dst: tuple[int, int],
    side: Side,
) -> bool:
    """駒の動きとして正しく、かつ指した後に自将が王手にならなければ True。"""
    if not is_pseudo_legal_move(board, src, dst, side):
        return False
    return not is_in_check(apply_move(board, src, dst), side)


def _candidate_targets(piece: Piece, row: int, col: int) -> Iterator[tuple[int, int]]:
    """駒種ごとに幾何的に到達しうるマスを列挙する（合法性は未検査）。"""
    kind = piece.kind
    if kind in (PieceKind.CHARIOT, PieceKind.CANNON):
        for dr, dc in ORTHOGONAL:
            r, c = row + dr, col + dc
            while 0 <= r < ROWS and 0 <= c < COLS:
                yield r, c
                r, c = r + dr, c + dc
        return

    if kind == PieceKind.GENERAL:
        steps = ORTHOGONAL
    elif kind == PieceKind.ADVISOR:
        steps = ADVISOR_STEPS
    elif kind == PieceKind.ELEPHANT:
        steps = ELEPHANT_STEPS
    elif kind == PieceKind.HORSE:
        steps = [(dr, dc) for dr, dc, _, _ in HORSE_STEPS]
    else:
        steps = [(piece.side.forward, 0), (0, -1), (0, 1)]

    for dr, dc in steps:
        r, c = row + dr, col + dc
        if in_bounds(r, c):
            yield r, c


def iter_legal_moves(board: Board, side: Side) -> Iterator[Move]:
    """Lazily yield every legal move for side.

    合法手を遅延生成する。呼び出すたびに新しいイテレータを返すので何度でも再走査できる。
    """
    for src, piece in board.pieces():
        if piece.side != side:
            continue
        for dst in _candidate_targets(piece, src.row, src.col):
            if is_legal_move(board, src, dst, side):
                yield Move(src, Position(*dst))


def legal_moves(board: Board, side: Side) -> list[Move]:
    """Generate all legal moves (excluding moves that leave the general in check)."""
    return list(iter_legal_moves(board, side))


def brute_force_legal_moves(board: Board, side: Side) -> list[Move]:
    """全 (from, to) の組を総当たりで検査する合法手生成（検証用）。

    iter_legal_moves() と同じ集合を返さなければならない。
    """
    moves: list[Move] = []
    for src, piece in board.pieces():
        if piece.side != side:
            continue
        for r in range(ROWS):
            for c in range(COLS):
                if is_legal_move(board, src, (r, c), side):
                    moves.append(Move(src, Position(r, c)))
    return moves


def has_legal_move(board: Board, side: Side) -> bool:
    """合法手が1つでもあれば True（最初の1手が見つかった時点で打ち切る）。"""
    return next(iter_legal_moves(board, side), None) is not None


def is_checkmate(board: Board, side: Side) -> bool:
    """王手されていて、かつ合法手がない（詰み）。"""
    return is_in_check(board, side) and not has_legal_move(board, side)


def is_stalemate(board: Board, side: Side) -> bool:
    """王手されていないが合法手がない（困毙）。"""
    return not is_in_check(board, side) and not has_legal_move(board, side)
