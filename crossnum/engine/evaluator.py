# -*- coding: utf-8 -*-
"""
制約を 1 つずつ評価し、判定結果（Verdict）を作るモジュールです。

評価の流れ
----------
1. answer による一括判定（direct_answer.py）
2. 一致しなければ、制約を記述順に 1 つずつ評価

どんな不備（スロットが無い、未入力、設定漏れ、未知の種類）でも
例外は投げず、satisfied=False の Verdict として返します。
盤面（assignment）とパズル定義は読むだけで書き換えません。
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple, Type

from ..grid.slot_resolver import resolve_slot, slot_value
from ..logging_utils import get_logger
from ..types import (
    Assignment,
    CellDigitRestriction,
    Constraint,
    FailureKind,
    GreatestNumber,
    NoRepeatEachSlot,
    NoRepeatPooled,
    NoRepeatWithinSlot,
    Place,
    PlaceValueDifferenceBetweenSlots,
    PlaceValueDifferenceWithinSlot,
    PlaceValueSumEquals,
    Puzzle,
    SlotDifferenceEqualsSlot,
    SmallestNumber,
    UnknownConstraint,
    Verdict,
)
from .direct_answer import answer_verdicts, matches_direct_answer
from .rules import (
    digit_at_place,
    first_repeated,
    greatest_arrangement,
    has_repeat,
    smallest_arrangement,
)

logger = get_logger("engine")

SLOT_NOT_FOUND = "Slot not found"
INCOMPLETE = "Incomplete"
UNKNOWN_CONSTRAINT_TYPE = "Unknown constraint type"
INVALID_CONFIGURATION = "Invalid constraint configuration"
CANNOT_REPEAT = "Cannot repeat digits"


# ----------------------------------------------------------------------
# Verdict を作る小さなヘルパー
# ----------------------------------------------------------------------


def _verdict(c: Constraint, satisfied: bool, message: str) -> Verdict:
    return Verdict(
        constraint_id=c.constraint_id,
        description=c.description,
        satisfied=satisfied,
        message=message,
        failure=None if satisfied else FailureKind.VIOLATION,
    )


def _fail(c: Constraint, message: str, failure: FailureKind) -> Verdict:
    return Verdict(
        constraint_id=c.constraint_id,
        description=c.description,
        satisfied=False,
        message=message,
        failure=failure,
    )


def _slot_not_found(c: Constraint, slot_ids: Sequence[Optional[str]]) -> Verdict:
    logger.warning(
        "Constraint %s refers to unknown slot(s): %s", c.constraint_id, list(slot_ids)
    )
    return _fail(c, SLOT_NOT_FOUND, FailureKind.SLOT_NOT_FOUND)


def _invalid_configuration(c: Constraint) -> Verdict:
    logger.warning("Constraint %s (%s) is missing required fields", c.constraint_id, c.kind)
    return _fail(c, INVALID_CONFIGURATION, FailureKind.INVALID_CONFIGURATION)


def _place_not_found(c: Constraint, place: Optional[Place] = None) -> Verdict:
    message = f"Place {place.label} not found" if place is not None else "Place not found"
    return _fail(c, message, FailureKind.PLACE_NOT_FOUND)


def _resolve_slots(
    c: Constraint,
    puzzle: Puzzle,
    assignment: Assignment,
    *slot_ids: Optional[str],
) -> Tuple[Optional[List[Tuple[int, ...]]], Optional[Verdict]]:
    """
    参照されている全スロットを数字列にします。

    Returns
    -------
    (digits_list, None)
        すべて埋まっている場合。
    (None, verdict)
        スロットが無い、または未入力のマスがある場合の不成立 Verdict。
    """
    slots = [puzzle.find_slot(sid) for sid in slot_ids]
    if any(s is None for s in slots):
        return None, _slot_not_found(c, slot_ids)

    resolved = [resolve_slot(s, assignment) for s in slots]  # type: ignore[arg-type]
    if any(d is None for d in resolved):
        return None, _fail(c, INCOMPLETE, FailureKind.INCOMPLETE)

    return resolved, None  # type: ignore[return-value]


# ----------------------------------------------------------------------
# 最大・最小
# ----------------------------------------------------------------------


def _check_greatest(c: GreatestNumber, puzzle: Puzzle, assignment: Assignment) -> Verdict:
    resolved, failed = _resolve_slots(c, puzzle, assignment, c.slot)
    if failed:
        return failed
    digits = resolved[0]

    if c.no_repeat and has_repeat(digits):
        return _verdict(c, False, CANNOT_REPEAT)

    current = slot_value(digits)
    target = slot_value(greatest_arrangement(digits))
    if current == target:
        return _verdict(c, True, f"{current} is the greatest")
    return _verdict(c, False, f"{current} is not the greatest ({target})")


def _check_smallest(c: SmallestNumber, puzzle: Puzzle, assignment: Assignment) -> Verdict:
    resolved, failed = _resolve_slots(c, puzzle, assignment, c.slot)
    if failed:
        return failed
    digits = resolved[0]

    if c.sum_of_digits is not None:
        actual_sum = sum(digits)
        if actual_sum != c.sum_of_digits:
            return _verdict(
                c, False, f"Sum of digits is {actual_sum}, not {c.sum_of_digits}"
            )

    if c.no_repeat and has_repeat(digits):
        return _verdict(c, False, CANNOT_REPEAT)

    current = slot_value(digits)
    target = slot_value(smallest_arrangement(digits))
    if current == target:
        return _verdict(c, True, f"{current} is the smallest")
    return _verdict(c, False, f"{current} is not the smallest ({target})")


# ----------------------------------------------------------------------
# 重複禁止
# ----------------------------------------------------------------------


def _check_no_repeat_within(
    c: NoRepeatWithinSlot, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    resolved, failed = _resolve_slots(c, puzzle, assignment, c.slot)
    if failed:
        return failed

    if has_repeat(resolved[0]):
        return _verdict(c, False, "Contains repeated digits")
    return _verdict(c, True, "No repeated digits")


def _check_no_repeat_each_slot(
    c: NoRepeatEachSlot, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    # 最初に未入力または重複のあるスロットが見つかった時点で打ち切る
    for slot in puzzle.slots:
        digits = resolve_slot(slot, assignment)
        if digits is None:
            return _fail(c, INCOMPLETE, FailureKind.INCOMPLETE)
        if has_repeat(digits):
            return _verdict(c, False, f"{slot.label} has repeated digits")
    return _verdict(c, True, "No repeated digits in any number")


def _check_no_repeat_pooled(
    c: NoRepeatPooled, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    if not c.related_slots:
        return _invalid_configuration(c)

    resolved, failed = _resolve_slots(c, puzzle, assignment, *c.related_slots)
    if failed:
        return failed

    pooled = [d for digits in resolved for d in digits]
    repeated = first_repeated(pooled)
    if repeated is not None:
        return _verdict(c, False, f"Digit {repeated} is repeated across numbers")
    return _verdict(c, True, "No repeated digits across numbers")


# ----------------------------------------------------------------------
# 位取り
# ----------------------------------------------------------------------


def _check_place_value_sum(
    c: PlaceValueSumEquals, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    if not c.places or c.target is None:
        return _invalid_configuration(c)

    resolved, failed = _resolve_slots(c, puzzle, assignment, c.slot)
    if failed:
        return failed
    digits = resolved[0]

    total = 0
    for place in c.places:
        d = digit_at_place(digits, place)
        if d is None:
            return _place_not_found(c, place)
        total += d * place.weight

    if total == c.target:
        return _verdict(c, True, f"Sum equals {c.target}")
    return _verdict(c, False, f"Sum is {total}, not {c.target}")


def _difference_verdict(c: Constraint, actual: int, expected: int) -> Verdict:
    if actual == expected:
        return _verdict(c, True, f"Difference is {expected}")
    return _verdict(c, False, f"Difference is {actual}, not {expected}")


def _check_place_difference_within(
    c: PlaceValueDifferenceWithinSlot, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    if c.place_a is None or c.place_b is None or c.difference is None:
        return _invalid_configuration(c)

    resolved, failed = _resolve_slots(c, puzzle, assignment, c.slot)
    if failed:
        return failed
    digits = resolved[0]

    digit_a = digit_at_place(digits, c.place_a)
    digit_b = digit_at_place(digits, c.place_b)
    if digit_a is None or digit_b is None:
        return _place_not_found(c)

    return _difference_verdict(c, abs(digit_a - digit_b), c.difference)


def _check_place_difference_between(
    c: PlaceValueDifferenceBetweenSlots, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    if not c.slot_a or not c.slot_b or c.place is None or c.difference is None:
        return _invalid_configuration(c)

    resolved, failed = _resolve_slots(c, puzzle, assignment, c.slot_a, c.slot_b)
    if failed:
        return failed
    digits_a, digits_b = resolved

    digit_a = digit_at_place(digits_a, c.place)
    digit_b = digit_at_place(digits_b, c.place)
    if digit_a is None or digit_b is None:
        return _place_not_found(c, c.place)

    # 符号付きの差（A - B）
    return _difference_verdict(c, digit_a - digit_b, c.difference)


# ----------------------------------------------------------------------
# スロット同士の計算
# ----------------------------------------------------------------------


def _check_slot_difference(
    c: SlotDifferenceEqualsSlot, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    if not c.slot_a or not c.slot_b or not c.result_slot:
        return _invalid_configuration(c)

    resolved, failed = _resolve_slots(
        c, puzzle, assignment, c.slot_a, c.slot_b, c.result_slot
    )
    if failed:
        return failed

    a, b, result = (slot_value(digits) for digits in resolved)
    expected = a - b
    if result == expected:
        return _verdict(c, True, f"{a} - {b} = {result}")
    return _verdict(c, False, f"{a} - {b} = {expected}, not {result}")


# ----------------------------------------------------------------------
# 色付きマスの数字制限
# ----------------------------------------------------------------------


def _check_cell_restriction(
    c: CellDigitRestriction, puzzle: Puzzle, assignment: Assignment
) -> Verdict:
    if not c.color or (not c.not_allowed and c.allowed_range is None):
        return _invalid_configuration(c)

    for cell in puzzle.layout.cells_with_color(c.color):
        digit = assignment.get(cell)
        if digit is None:
            # 空マスは判定対象外
            continue

        if digit in c.not_allowed:
            return _verdict(
                c, False, f"Digit {digit} is not allowed in {c.color} cells"
            )

        if c.allowed_range is not None:
            low, high = c.allowed_range
            if digit < low or digit > high:
                return _verdict(
                    c,
                    False,
                    f"Digit {digit} is not in allowed range [{low}-{high}] "
                    f"for {c.color} cells",
                )

    return _verdict(c, True, f"All {c.color} cells satisfy restrictions")


# ----------------------------------------------------------------------
# 振り分け
# ----------------------------------------------------------------------

Checker = Callable[[Constraint, Puzzle, Assignment], Verdict]

_CHECKERS: Dict[Type[Constraint], Checker] = {
    GreatestNumber: _check_greatest,
    SmallestNumber: _check_smallest,
    NoRepeatWithinSlot: _check_no_repeat_within,
    NoRepeatEachSlot: _check_no_repeat_each_slot,
    NoRepeatPooled: _check_no_repeat_pooled,
    PlaceValueSumEquals: _check_place_value_sum,
    PlaceValueDifferenceWithinSlot: _check_place_difference_within,
    PlaceValueDifferenceBetweenSlots: _check_place_difference_between,
    SlotDifferenceEqualsSlot: _check_slot_difference,
    CellDigitRestriction: _check_cell_restriction,
}  # type: ignore[dict-item]


def evaluate_constraint(
    constraint: Constraint,
    puzzle: Puzzle,
    assignment: Assignment,
) -> Verdict:
    """
    制約 1 つを評価します（answer による一括判定は行いません）。

    Parameters
    ----------
    constraint : Constraint
        評価する制約。
    puzzle : Puzzle
        パズル定義（スロットや盤面の色情報を参照します）。
    assignment : mapping
        マス → 数字（空なら None）。

    Returns
    -------
    Verdict
        判定結果。未知の種類の制約は "Unknown constraint type" で不成立になります。
    """
    checker = _CHECKERS.get(type(constraint))
    if checker is None:
        type_name = (
            constraint.type_name
            if isinstance(constraint, UnknownConstraint)
            else type(constraint).__name__
        )
        logger.warning(
            "Constraint %s has unknown type %r", constraint.constraint_id, type_name
        )
        return _fail(constraint, UNKNOWN_CONSTRAINT_TYPE, FailureKind.UNKNOWN_CONSTRAINT_TYPE)
    return checker(constraint, puzzle, assignment)


def validate_constraints(puzzle: Puzzle, assignment: Assignment) -> List[Verdict]:
    """
    パズルの全制約を評価し、記述順どおりの判定結果リストを返します。

    answer が書かれていて盤面がそれと一致する場合は、
    個々の制約を評価せずに全て成立とします。
    """
    if matches_direct_answer(puzzle, assignment):
        logger.debug("Puzzle %s matches the declared answer", puzzle.puzzle_id)
        return answer_verdicts(puzzle)

    verdicts = [evaluate_constraint(c, puzzle, assignment) for c in puzzle.constraints]
    logger.debug(
        "Puzzle %s: %d/%d constraints satisfied",
        puzzle.puzzle_id,
        sum(v.satisfied for v in verdicts),
        len(verdicts),
    )
    return verdicts


def is_solved(verdicts: Sequence[Verdict]) -> bool:
    """全判定が成立なら True（制約が 0 個でも True）。"""
    return all(v.satisfied for v in verdicts)
