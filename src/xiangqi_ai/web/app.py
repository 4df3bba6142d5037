"""FastAPI web application exposing the 象棋 rules and search engines.

FastAPI を使った象棋エンジンの REST API。
サーバは対局を保持しない（ステートレス）。クライアントは毎回
盤面スナップショット（10×9 のグリッド）と手番を送る。

エンドポイント:
  GET  /api/initial      : 初期局面を返す
  POST /api/legal-moves  : 合法手の一覧（from を指定すればその駒の手だけ）
  POST /api/validate     : 1手の合法性を判定
  POST /api/apply        : 手を適用して次の局面を返す
  POST /api/status       : 王手・将死・困毙の判定
  POST /api/best-move    : AI の最善手（難易度・深さ指定、または random）
  POST /api/hint         : ヒント: 最善手と各合法手の静的評価
"""

from __future__ import annotations

import logging
from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, field_validator

from xiangqi_ai.engine.evaluation import evaluate_batch
from xiangqi_ai.engine.minimax import HINT_DEPTH, MAX_DEPTH, SearchConfig, search
from xiangqi_ai.engine.random_player import random_board_move
from xiangqi_ai.game.board import Board, Move, Piece
from xiangqi_ai.game.moves import (
    apply_move,
    is_legal_move,
    is_pseudo_legal_move,
    iter_legal_moves,
    legal_moves,
)
from xiangqi_ai.game.state import Outcome, XiangqiState
from xiangqi_ai.game.types import COLS, ROWS, PieceKind, Side

logger = logging.getLogger(__name__)

app = FastAPI(title="Xiangqi AI")

SideName = Literal["red", "black"]
KindName = Literal[
    "GENERAL", "ADVISOR", "ELEPHANT", "HORSE", "CHARIOT", "CANNON", "SOLDIER"
]


class PieceModel(BaseModel):
    """盤上の駒のスキーマ。"""

    kind: KindName
    side: SideName


class PositionRequest(BaseModel):
    """局面スナップショット（盤面 + 手番）のスキーマ。"""

    board: list[list[PieceModel | None]]
    side: SideName = "red"
    src: tuple[int, int] | None = None  # /api/legal-moves で駒を絞り込む場合のみ

    @field_validator("board")
    @classmethod
    def _check_shape(
        cls, rows: list[list[PieceModel | None]]
    ) -> list[list[PieceModel | None]]:
        if len(rows) != ROWS or any(len(row) != COLS for row in rows):
            msg = f"board must be {ROWS} rows of {COLS} cells"
            raise ValueError(msg)
        return rows


class MoveRequest(PositionRequest):
    """1手を指定するリクエストのスキーマ。"""

    src: tuple[int, int]
    dst: tuple[int, int]


class SearchRequest(PositionRequest):
    """AI 探索リクエストのスキーマ。depth を指定すれば difficulty より優先する。"""

    difficulty: str = "entry"
    depth: int | None = None


def _to_board(rows: list[list[PieceModel | None]]) -> Board:
    return Board.from_rows(
        [
            [
                None if p is None else Piece(PieceKind[p.kind], Side[p.side.upper()])
                for p in row
            ]
            for row in rows
        ]
    )


def _board_to_json(board: Board) -> list[list[dict[str, str] | None]]:
    return [
        [
            None
            if p is None
            else {"kind": p.kind.name, "side": p.side.name.lower()}
            for p in row
        ]
        for row in board.to_rows()
    ]


def _move_to_json(move: Move) -> dict[str, Any]:
    data: dict[str, Any] = {"from": list(move.src), "to": list(move.dst)}
    if move.score is not None:
        data["score"] = move.score
    return data


def _status(board: Board, side: Side) -> dict[str, Any]:
    """手番側から見た局面の状態（王手・将死・困毙・勝者）。"""
    state = XiangqiState(board=board, _current_player=side)
    outcome = state.outcome
    winner = state.winner
    return {
        "side": side.name.lower(),
        "check": state.in_check,
        "checkmate": outcome == Outcome.CHECKMATE,
        "stalemate": outcome == Outcome.STALEMATE,
        "outcome": None if outcome is None else outcome.value,
        "winner": None if winner is None else Side(winner).name.lower(),
    }


def _ensure_not_decided(board: Board, side: Side) -> None:
    """将が取られた局面（決着済み）なら 400 を送出する。"""
    if XiangqiState(board=board, _current_player=side).outcome == Outcome.CAPTURE:
        raise HTTPException(400, "Game is already over")


@app.get("/api/initial")
async def initial() -> dict[str, Any]:
    """初期局面を返す（赤番から開始）。"""
    board = Board()
    return {"board": _board_to_json(board), "status": _status(board, Side.RED)}


@app.post("/api/legal-moves")
async def legal_moves_endpoint(req: PositionRequest) -> dict[str, Any]:
    """合法手の一覧を返す。src を指定すると、その駒の移動先だけを返す（移動先表示用）。"""
    board = _to_board(req.board)
    side = Side[req.side.upper()]
    moves = [
        m
        for m in iter_legal_moves(board, side)
        if req.src is None or tuple(m.src) == tuple(req.src)
    ]
    return {"moves": [_move_to_json(m) for m in moves]}


@app.post("/api/validate")
async def validate(req: MoveRequest) -> dict[str, bool]:
    """1手の合法性を返す。pseudo_legal は自将の王手を考慮しない判定。"""
    board = _to_board(req.board)
    side = Side[req.side.upper()]
    return {
        "legal": is_legal_move(board, req.src, req.dst, side),
        "pseudo_legal": is_pseudo_legal_move(board, req.src, req.dst, side),
    }


@app.post("/api/apply")
async def apply(req: MoveRequest) -> dict[str, Any]:
    """手を検証して適用し、次の局面と相手番の状態を返す。

    ローカルの手もネットワーク経由で中継された手も同じ処理で確定する。
    """
    board = _to_board(req.board)
    side = Side[req.side.upper()]
    _ensure_not_decided(board, side)
    if not is_legal_move(board, req.src, req.dst, side):
        logger.info("rejected illegal move %s -> %s for %s", req.src, req.dst, req.side)
        raise HTTPException(400, f"Illegal move: {req.src} -> {req.dst}")

    new_board = apply_move(board, req.src, req.dst)
    next_side = side.opponent
    return {
        "board": _board_to_json(new_board),
        "side": next_side.name.lower(),
        "status": _status(new_board, next_side),
    }


@app.post("/api/status")
async def status(req: PositionRequest) -> dict[str, Any]:
    """王手・将死・困毙の判定結果を返す。"""
    return _status(_to_board(req.board), Side[req.side.upper()])


# 探索は CPU を占有するので async にせず、FastAPI のスレッドプールで実行させる
@app.post("/api/best-move")
def best_move(req: SearchRequest) -> dict[str, Any]:
    """AI の最善手を返す。合法手がなければ move は null。

    difficulty="random" はランダムプレイヤー（探索なし、depth は 0 として返す）。
    depth は 0..MAX_DEPTH の範囲のみ受け付ける。
    """
    board = _to_board(req.board)
    side = Side[req.side.upper()]
    _ensure_not_decided(board, side)

    if req.depth is None and req.difficulty == "random":
        rmove = random_board_move(board, side)
        return {"move": None if rmove is None else _move_to_json(rmove), "depth": 0}

    if req.depth is not None:
        if not 0 <= req.depth <= MAX_DEPTH:
            raise HTTPException(400, f"depth must be between 0 and {MAX_DEPTH}")
        config = SearchConfig(depth=req.depth)
    else:
        try:
            config = SearchConfig.for_difficulty(req.difficulty)
        except ValueError as e:
            raise HTTPException(400, str(e)) from e

    move = search(board, side, config.depth, shuffle=config.shuffle)
    logger.debug("best-move side=%s depth=%d move=%s", side.name, config.depth, move)
    return {
        "move": None if move is None else _move_to_json(move),
        "depth": config.depth,
    }


@app.post("/api/hint")
def hint(req: PositionRequest) -> dict[str, Any]:
    """Suggest a move for the side to move.

    ヒント: HINT_DEPTH で探索した最善手に加えて、全合法手の指した後の
    静的評価を一括計算して返す（評価値の高い順）。
    """
    board = _to_board(req.board)
    side = Side[req.side.upper()]
    _ensure_not_decided(board, side)
    candidates = legal_moves(board, side)
    if not candidates:
        return {"move": None, "analysis": []}

    # search はリストをシャッフルするのでコピーを渡す
    move = search(board, side, HINT_DEPTH, moves=list(candidates))
    assert move is not None
    scores = evaluate_batch([apply_move(board, m.src, m.dst) for m in candidates], side)
    analysis = sorted(
        (
            _move_to_json(Move(m.src, m.dst, score=int(s)))
            for m, s in zip(candidates, scores.tolist())
        ),
        key=lambda d: d["score"],
        reverse=True,
    )
    return {"move": _move_to_json(move), "analysis": analysis}


def main() -> None:
    """Run the web server.

    `xiangqi-web` または `python -m xiangqi_ai.web.app` で起動する。
    """
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
