# -*- coding: utf-8 -*-
"""
作問時（オフライン）にパズルデータの整合性をチェックするモジュールです。

判定エンジンは壊れたデータでも例外を出さずに「不成立」を返しますが、
それでは作問ミスに気づきにくいので、データを追加したときに
ここでまとめて確認します。
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional

from ..grid.parser import format_cell_id
from ..types import (
    CellDigitRestriction,
    Constraint,
    NoRepeatPooled,
    PlaceValueDifferenceBetweenSlots,
    Puzzle,
    SlotDifferenceEqualsSlot,
    UnknownConstraint,
)


class PuzzleIntegrityError(ValueError):
    """パズルデータに作問上の不備があるときに送出されます。"""

    def __init__(self, puzzle_id: str, problems: List[str]):
        self.puzzle_id = puzzle_id
        self.problems = problems
        super().__init__(f"Puzzle {puzzle_id} has {len(problems)} problem(s): " + "; ".join(problems))


def referenced_slots(constraint: Constraint) -> List[str]:
    """制約が参照しているスロット ID を返します（全スロット対象の制約は空リスト）。"""
    if isinstance(constraint, NoRepeatPooled):
        return list(constraint.related_slots)
    if isinstance(constraint, PlaceValueDifferenceBetweenSlots):
        return [s for s in (constraint.slot_a, constraint.slot_b) if s]
    if isinstance(constraint, SlotDifferenceEqualsSlot):
        return [s for s in (constraint.slot_a, constraint.slot_b, constraint.result_slot) if s]
    slot: Optional[str] = getattr(constraint, "slot", None)
    return [slot] if slot else []


def _duplicates(values: Iterable[str]) -> List[str]:
    return sorted(v for v, n in Counter(values).items() if n > 1)


def find_problems(puzzle: Puzzle) -> List[str]:
    """
    パズルデータの問題点を文字列のリストで返します（問題が無ければ空）。

    チェック内容
    ------------
    - スロット ID / 制約 ID の重複
    - 盤面の外にあるマス
    - スロットのマスがアクティブなマスでない / 同じマスを 2 回使っている
    - 制約・answer が存在しないスロットを参照している
    - answer / prefilled の桁数がスロットと合わない
    - 評価モードなのに prefilled が無いスロットがある
    - 重なったマスで prefilled の数字が食い違っている
    - 組み立てモードで、配る数字の個数とマスの数が合わない
    - 種類の分からない制約、色の無い色制約
    """
    problems: List[str] = []
    layout = puzzle.layout

    for slot_id in _duplicates(s.slot_id for s in puzzle.slots):
        problems.append(f"duplicate slot id {slot_id!r}")
    for cid in _duplicates(c.constraint_id for c in puzzle.constraints):
        problems.append(f"duplicate constraint id {cid!r}")

    for row, col in layout.cells:
        if not (0 <= row < layout.rows and 0 <= col < layout.cols):
            problems.append(f"cell {format_cell_id((row, col))} is outside the {layout.rows}x{layout.cols} grid")

    used_cells = set()
    prefilled_values = {}
    for slot in puzzle.slots:
        if len(set(slot.positions)) != len(slot.positions):
            problems.append(f"slot {slot.slot_id!r} uses the same cell twice")
        for pos in slot.positions:
            if not layout.is_active(pos):
                problems.append(f"slot {slot.slot_id!r} uses inactive cell {format_cell_id(pos)}")
        used_cells.update(slot.positions)

        if slot.prefilled is not None:
            if len(slot.prefilled) != slot.length:
                problems.append(
                    f"slot {slot.slot_id!r} has {len(slot.prefilled)} prefilled digits for {slot.length} cells"
                )
            for pos, digit in zip(slot.positions, slot.prefilled):
                previous = prefilled_values.setdefault(pos, digit)
                if previous != digit:
                    problems.append(
                        f"cell {format_cell_id(pos)} is prefilled with both {previous} and {digit}"
                    )
        elif puzzle.is_evaluation:
            problems.append(f"slot {slot.slot_id!r} has no prefilled digits in evaluation mode")

    slot_ids = {s.slot_id for s in puzzle.slots}
    for c in puzzle.constraints:
        if isinstance(c, UnknownConstraint):
            problems.append(f"constraint {c.constraint_id!r} has unknown type {c.type_name!r}")
            continue
        if isinstance(c, CellDigitRestriction) and c.color and not layout.cells_with_color(c.color):
            problems.append(f"constraint {c.constraint_id!r} targets color {c.color!r} that no cell has")
        for ref in referenced_slots(c):
            if ref not in slot_ids:
                problems.append(f"constraint {c.constraint_id!r} refers to unknown slot {ref!r}")

    for slot_id, expected in (puzzle.answer or {}).items():
        slot = puzzle.find_slot(slot_id)
        if slot is None:
            problems.append(f"answer refers to unknown slot {slot_id!r}")
        elif len(expected) != slot.length:
            problems.append(
                f"answer for slot {slot_id!r} has {len(expected)} digits for {slot.length} cells"
            )

    if not puzzle.is_evaluation and len(puzzle.digits) != len(used_cells):
        problems.append(
            f"digit pool has {len(puzzle.digits)} digits for {len(used_cells)} slot cells"
        )

    return problems


def check_puzzle(puzzle: Puzzle) -> None:
    """問題があれば PuzzleIntegrityError を送出します。"""
    problems = find_problems(puzzle)
    if problems:
        raise PuzzleIntegrityError(puzzle.puzzle_id, problems)
