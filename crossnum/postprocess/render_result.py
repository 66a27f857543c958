# -*- coding: utf-8 -*-
"""
判定結果をもとに表示用の情報を構築するモジュールです。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from ..config import EMPTY_CELL_MARK, INACTIVE_CELL_MARK
from ..engine import is_solved
from ..grid.parser import format_cell_id
from ..grid.slot_resolver import resolve_slot, slot_text
from ..types import Assignment, Puzzle, Verdict


def build_board(puzzle: Puzzle, assignment: Assignment) -> np.ndarray:
    """
    盤面を 2次元配列にします。

    Parameters
    ----------
    puzzle : Puzzle
        パズル定義。
    assignment : mapping
        マス → 数字（空なら None）。

    Returns
    -------
    numpy.ndarray
        shape = (rows, cols) の object 配列。
        非アクティブなマスは "■"、空マスは "_"、それ以外は数字の文字列。
    """
    layout = puzzle.layout
    board = np.full((layout.rows, layout.cols), INACTIVE_CELL_MARK, dtype=object)

    for cell in layout.cells:
        i, j = cell
        value = assignment.get(cell)
        board[i, j] = EMPTY_CELL_MARK if value is None else str(value)

    return board


def build_slot_texts(puzzle: Puzzle, assignment: Assignment) -> List[Dict[str, Any]]:
    """
    各スロットについて、いまできている数をまとめます。

    まだ埋まっていないマスは "_" で表示します。
    """
    out: List[Dict[str, Any]] = []
    for slot in puzzle.slots:
        out.append(
            {
                "slot_id": slot.slot_id,
                "label": slot.label,
                "cells": [format_cell_id(p) for p in slot.positions],
                "text": slot_text(slot, assignment),
                "complete": resolve_slot(slot, assignment) is not None,
            }
        )
    return out


def build_puzzle_summary(puzzle: Puzzle) -> Dict[str, Any]:
    """画面表示用にパズル定義を dict にします（answer は含めません）。"""
    return {
        "id": puzzle.puzzle_id,
        "title": puzzle.title,
        "instruction": puzzle.instruction,
        "mode": puzzle.mode,
        "shape": (puzzle.layout.rows, puzzle.layout.cols),
        "cells": {
            format_cell_id(cell): ({"color": info.color} if info.color else {})
            for cell, info in puzzle.layout.cells.items()
        },
        "digits": list(puzzle.digits),
        "slots": [
            {
                "id": s.slot_id,
                "label": s.label,
                "cells": [format_cell_id(p) for p in s.positions],
            }
            for s in puzzle.slots
        ],
        "conditions": [
            {"id": c.constraint_id, "description": c.description}
            for c in puzzle.constraints
        ],
    }


def build_result(
    puzzle: Puzzle,
    assignment: Assignment,
    verdicts: Sequence[Verdict],
    board_df: Optional[pd.DataFrame] = None,
) -> Dict[str, Any]:
    """
    API などに返す結果の dict を作ります。

    board_df を渡すと、その index / columns を盤面に引き継ぎます。
    """
    board = build_board(puzzle, assignment)
    rows, cols = board.shape

    board_frame = pd.DataFrame(
        board,
        index=board_df.index if board_df is not None else None,
        columns=board_df.columns if board_df is not None else None,
    )

    return {
        "puzzle_id": puzzle.puzzle_id,
        "board": board_frame.values.tolist(),  # DataFrame そのものは返さない
        "shape": (rows, cols),
        "slots": build_slot_texts(puzzle, assignment),
        "verdicts": [v.to_dict() for v in verdicts],
        "solved": is_solved(verdicts),
    }
