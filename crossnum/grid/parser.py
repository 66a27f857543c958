# -*- coding: utf-8 -*-
"""
盤面のセルを内部表現に正規化するモジュールです。

主な役割:
- "row,col" 形式のセル ID と (row, col) タプルの相互変換
- pandas.DataFrame の盤面から「マス → 数字」の割り当てを作る
- 各セルの値を「数字 (0〜9)」または「空 (None)」に正規化
"""

from __future__ import annotations

import math
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from ..config import EMPTY_CELL_MARK, INACTIVE_CELL_MARK
from ..types import CellCoord, PuzzleLayout

# 空マスとして扱う文字列
EMPTY_TOKENS = {"", EMPTY_CELL_MARK, INACTIVE_CELL_MARK, "□"}


def parse_cell_id(cell_id: str) -> CellCoord:
    """
    "2,1" のようなセル ID を (2, 1) に変換します。

    形式が正しくなければ ValueError を送出します。
    """
    parts = str(cell_id).split(",")
    if len(parts) != 2:
        raise ValueError(f"Invalid cell id: {cell_id!r}")
    try:
        row, col = int(parts[0]), int(parts[1])
    except ValueError as e:
        raise ValueError(f"Invalid cell id: {cell_id!r}") from e
    if row < 0 or col < 0:
        raise ValueError(f"Invalid cell id: {cell_id!r}")
    return row, col


def format_cell_id(cell: CellCoord) -> str:
    """(2, 1) → "2,1" """
    return f"{cell[0]},{cell[1]}"


def normalize_cell(x: Any) -> Optional[int]:
    """
    個々のセルの値を、内部表現に変換します。

    変換ルール
    ----------
    - None / NaN / "" / "_" / "■" / "□": 空（None）
    - 0〜9 の整数、または "7" のような数字 1 文字: その数字
    - それ以外: ValueError
    """
    if x is None:
        return None
    if isinstance(x, bool):
        raise ValueError(f"Invalid cell value: {x!r}")
    if isinstance(x, float):
        if math.isnan(x):
            return None
        if not x.is_integer():
            raise ValueError(f"Invalid cell value: {x!r}")
        x = int(x)
    if isinstance(x, (int, np.integer)):
        x = int(x)
        if 0 <= x <= 9:
            return x
        raise ValueError(f"Digit out of range: {x!r}")

    s = str(x).strip()
    if s in EMPTY_TOKENS:
        return None
    if len(s) == 1 and s.isdigit():
        return int(s)
    raise ValueError(f"Invalid cell value: {x!r}")


def assignment_from_board(
    df: pd.DataFrame,
    layout: PuzzleLayout,
) -> Dict[CellCoord, Optional[int]]:
    """
    2次元の盤面（DataFrame）から、アクティブなマスだけの割り当てを作ります。

    Parameters
    ----------
    df : pandas.DataFrame
        shape = (rows, cols) の盤面。各セルは :func:`normalize_cell` で正規化されます。
    layout : PuzzleLayout
        パズルの盤面定義。

    Returns
    -------
    dict[(row, col), int or None]
        アクティブな全マスの割り当て。

    Raises
    ------
    ValueError
        盤面の大きさが layout と合わない、またはセルの値が不正なとき。
    """
    rows, cols = df.shape
    if rows != layout.rows or cols != layout.cols:
        raise ValueError(
            f"Board shape {(rows, cols)} does not match layout {(layout.rows, layout.cols)}"
        )

    assignment: Dict[CellCoord, Optional[int]] = {}
    for cell in layout.cells:
        i, j = cell
        if not (0 <= i < rows and 0 <= j < cols):
            raise ValueError(f"Layout cell {format_cell_id(cell)} is outside the board")
        assignment[cell] = normalize_cell(df.iat[i, j])
    return assignment


def assignment_from_cell_ids(
    cells: Dict[str, Any],
    layout: PuzzleLayout,
) -> Dict[CellCoord, Optional[int]]:
    """
    {"2,1": 8, "0,1": None, ...} のような dict から割り当てを作ります。

    layout に無いマスが含まれていれば ValueError を送出します。
    書かれていないアクティブなマスは空として扱います。
    """
    assignment: Dict[CellCoord, Optional[int]] = {cell: None for cell in layout.cells}
    for cell_id, value in cells.items():
        cell = parse_cell_id(cell_id)
        if not layout.is_active(cell):
            raise ValueError(f"Cell {cell_id!r} is not part of the layout")
        assignment[cell] = normalize_cell(value)
    return assignment
