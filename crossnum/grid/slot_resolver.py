# -*- coding: utf-8 -*-
"""
スロットに並んだマスから「いまできている数」を取り出すモジュールです。

- resolve_slot : 全マスが埋まっていれば数字列、1 つでも空なら None
- slot_value   : 数字列を 10 進の値にする
- slot_text    : 表示用の文字列（空マスは "_"）
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..config import EMPTY_CELL_MARK
from ..types import Assignment, Slot


def resolve_slot(slot: Slot, assignment: Assignment) -> Optional[Tuple[int, ...]]:
    """
    スロットのマスを先頭から順に読み、数字列を返します。

    割り当てに無いマスや空のマスが 1 つでもあれば None を返します。
    """
    digits = []
    for pos in slot.positions:
        value = assignment.get(pos)
        if value is None:
            return None
        digits.append(value)
    return tuple(digits)


def slot_value(digits: Sequence[int]) -> int:
    """
    数字列を 10 進の値に変換します。

    例: (1, 0, 3) -> 103, (0, 0, 1) -> 1
    """
    value = 0
    for d in digits:
        value = value * 10 + d
    return value


def slot_text(slot: Slot, assignment: Assignment, empty: str = EMPTY_CELL_MARK) -> str:
    """空マスを empty で埋めた表示用の文字列を返します。"""
    chars = []
    for pos in slot.positions:
        value = assignment.get(pos)
        chars.append(empty if value is None else str(value))
    return "".join(chars)
