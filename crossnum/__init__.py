# crossnum/__init__.py
# -*- coding: utf-8 -*-
"""
crossnum パッケージの入口となるモジュールです。

api_proto/local_api.py などから:

    from crossnum import validate_board

と呼び出されることを想定しています。

ここでは、盤面（pandas.DataFrame）とパズル定義を受け取り、
1. 盤面の正規化（マス → 数字の割り当て）
2. 制約の判定（answer による一括判定を含む）
3. 表示用の結果構築
を順番に呼び出します。

判定エンジンだけを使う場合は validate_constraints / is_solved を直接呼べます。
"""

from __future__ import annotations

from typing import Any, Dict

import pandas as pd

from .engine import evaluate_constraint, is_solved, validate_constraints
from .grid.parser import assignment_from_board
from .grid.slot_resolver import resolve_slot
from .logging_utils import get_logger
from .postprocess.render_result import build_result
from .types import Puzzle, Verdict

logger = get_logger()

__all__ = [
    "Puzzle",
    "Verdict",
    "evaluate_constraint",
    "is_solved",
    "resolve_slot",
    "validate_board",
    "validate_constraints",
]


def validate_board(puzzle: Puzzle, df: pd.DataFrame) -> Dict[str, Any]:
    """
    2次元の盤面を判定し、表示用の結果 dict を返します。

    Parameters
    ----------
    puzzle : Puzzle
        パズル定義。
    df : pandas.DataFrame
        shape = (rows, cols) の盤面。空マスは None / "" / "_"。

    Returns
    -------
    dict
        build_result の戻り値（board / slots / verdicts / solved）。

    Raises
    ------
    ValueError
        盤面の大きさが合わない、またはセルの値が不正なとき。
    """
    logger.info("=== validate_board() START: puzzle=%s ===", puzzle.puzzle_id)

    assignment = assignment_from_board(df, puzzle.layout)
    filled = sum(v is not None for v in assignment.values())
    logger.info("Filled cells: %d/%d", filled, len(assignment))

    verdicts = validate_constraints(puzzle, assignment)
    for v in verdicts:
        logger.info(
            "  %s: %s (%s)", v.constraint_id, "OK" if v.satisfied else "NG", v.message
        )

    result = build_result(puzzle, assignment, verdicts, board_df=df)
    logger.info("=== validate_board() END: solved=%s ===", result["solved"])
    return result
