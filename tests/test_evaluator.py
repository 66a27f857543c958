"""Tests for constraint evaluation."""

from crossnum.engine import evaluate_constraint, is_solved, validate_constraints
from crossnum.puzzles.catalog import get_puzzle
from crossnum.puzzles.loader import load_puzzle
from crossnum.types import FailureKind, Verdict


def _by_id(verdicts):
    return {v.constraint_id: v for v in verdicts}


def _two_slot_puzzle(constraints):
    return load_puzzle(
        {
            "id": "two",
            "layout": {
                "rows": 2,
                "cols": 2,
                "cells": {"0,0": {}, "0,1": {}, "1,0": {}, "1,1": {}},
            },
            "slots": [
                {"id": "a", "label": "A", "cells": ["0,0", "0,1"]},
                {"id": "b", "label": "B", "cells": ["1,0", "1,1"]},
            ],
            "constraints": constraints,
        }
    )


class TestGreatestNumber:
    def test_greatest_arrangement_is_satisfied(self, q4, fill):
        verdict = evaluate_constraint(q4.constraints[0], q4, fill(q4, number1=[8, 6, 3, 0]))
        assert verdict.satisfied is True
        assert verdict.message == "8630 is the greatest"
        assert verdict.failure is None

    def test_other_arrangement_fails_with_target(self, q4, fill):
        verdict = evaluate_constraint(q4.constraints[0], q4, fill(q4, number1=[6, 8, 3, 0]))
        assert verdict.satisfied is False
        assert verdict.message == "6830 is not the greatest (8630)"
        assert verdict.failure == FailureKind.VIOLATION

    def test_incomplete_slot(self, q4, fill):
        verdict = evaluate_constraint(q4.constraints[0], q4, fill(q4, number1=[8, 6, None, 0]))
        assert verdict.satisfied is False
        assert verdict.message == "Incomplete"
        assert verdict.failure == FailureKind.INCOMPLETE

    def test_no_repeat_fails_before_max_check(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [{"id": "c", "type": "greatestNumber", "slot": "n", "noRepeat": True}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[9, 9, 1, 0]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Cannot repeat digits"

    def test_all_zero_digits(self, make_puzzle, fill):
        puzzle = make_puzzle([{"id": "c", "type": "greatestNumber", "slot": "n"}], length=2)
        assert validate_constraints(puzzle, fill(puzzle, n=[0, 0]))[0].satisfied is True


class TestSmallestNumber:
    def test_q4_solution(self, q4, fill):
        assignment = fill(q4, number1=[8, 6, 0, 0], number2=[1, 0, 3])
        verdicts = validate_constraints(q4, assignment)
        assert [v.satisfied for v in verdicts] == [True, True]
        assert verdicts[1].message == "103 is the smallest"
        assert is_solved(verdicts) is True

    def test_q4_zero_leading_fails(self, q4, fill):
        assignment = fill(q4, number1=[8, 6, 3, 0], number2=[0, 3, 1])
        verdicts = _by_id(validate_constraints(q4, assignment))
        assert verdicts["c1"].satisfied is True
        assert verdicts["c2"].satisfied is False
        assert verdicts["c2"].message == "31 is not the smallest (103)"

    def test_leading_zero_rule(self, make_puzzle, fill):
        puzzle = make_puzzle([{"id": "c", "type": "smallestNumber", "slot": "n"}], length=3)
        assert validate_constraints(puzzle, fill(puzzle, n=[1, 0, 0]))[0].satisfied is True

        verdict = validate_constraints(puzzle, fill(puzzle, n=[0, 0, 1]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "1 is not the smallest (100)"

    def test_no_repeat(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [{"id": "c", "type": "smallestNumber", "slot": "n", "noRepeat": True}], length=3
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 0, 0]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Cannot repeat digits"

    def test_sum_of_digits_checked_first(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [
                {
                    "id": "c",
                    "type": "smallestNumber",
                    "slot": "n",
                    "noRepeat": True,
                    "sumOfDigits": 10,
                }
            ],
            length=3,
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 0, 0]))[0]
        assert verdict.message == "Sum of digits is 1, not 10"

        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 3, 6]))[0]
        assert verdict.satisfied is True


class TestNoRepeat:
    def test_within_slot(self, make_puzzle, fill):
        puzzle = make_puzzle([{"id": "c", "type": "noRepeatWithinSlot", "slot": "n"}])
        assert validate_constraints(puzzle, fill(puzzle, n=[1, 2, 3, 4]))[0].satisfied is True

        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 2, 2, 4]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Contains repeated digits"

    def test_each_slot_default(self, fill):
        q7 = get_puzzle("q7")
        ok = fill(q7, number1=[8, 5, 3], number2=[7, 5, 4])
        assert _by_id(validate_constraints(q7, ok))["c3"].satisfied is True

        bad = fill(q7, number1=[5, 5, 3], number2=[7, 5, 4])
        verdict = _by_id(validate_constraints(q7, bad))["c3"]
        assert verdict.satisfied is False
        assert verdict.message == "Number 1 has repeated digits"

    def test_each_slot_incomplete(self, fill):
        q7 = get_puzzle("q7")
        verdict = _by_id(validate_constraints(q7, fill(q7, number1=[8, 5, 3])))["c3"]
        assert verdict.failure == FailureKind.INCOMPLETE

    def test_pooled_related_slots(self, fill):
        puzzle = _two_slot_puzzle(
            [{"id": "c", "type": "noRepeatAcrossSlots", "relatedSlots": ["a", "b"]}]
        )
        assert validate_constraints(puzzle, fill(puzzle, a=[1, 2], b=[3, 4]))[0].satisfied

        verdict = validate_constraints(puzzle, fill(puzzle, a=[1, 2], b=[2, 3]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Digit 2 is repeated across numbers"

    def test_pooled_incomplete(self, fill):
        puzzle = _two_slot_puzzle(
            [{"id": "c", "type": "noRepeatAcrossSlots", "relatedSlots": ["a", "b"]}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[1, 2], b=[3, None]))[0]
        assert verdict.satisfied is False
        assert verdict.failure == FailureKind.INCOMPLETE

    def test_pooled_unknown_slot(self, fill):
        puzzle = _two_slot_puzzle(
            [{"id": "c", "type": "noRepeatAcrossSlots", "relatedSlots": ["a", "zzz"]}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[1, 2], b=[3, 4]))[0]
        assert verdict.failure == FailureKind.SLOT_NOT_FOUND
        assert verdict.message == "Slot not found"

    def test_pooled_without_slots_is_invalid(self, fill):
        puzzle = _two_slot_puzzle(
            [{"id": "c", "type": "noRepeatAcrossSlots", "relatedSlots": []}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[1, 2], b=[3, 4]))[0]
        assert verdict.failure == FailureKind.INVALID_CONFIGURATION


class TestPlaceValue:
    def test_sum_equals(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [
                {
                    "id": "c",
                    "type": "placeValueSumEquals",
                    "slot": "n",
                    "places": ["tens", "ones"],
                    "sum": 21,
                }
            ]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[7, 4, 2, 1]))[0]
        assert verdict.satisfied is True
        assert verdict.message == "Sum equals 21"

        verdict = validate_constraints(puzzle, fill(puzzle, n=[7, 4, 1, 2]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Sum is 12, not 21"

    def test_place_not_found(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [
                {
                    "id": "c",
                    "type": "placeValueSumEquals",
                    "slot": "n",
                    "places": ["thousands"],
                    "sum": 1000,
                }
            ],
            length=3,
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 2, 3]))[0]
        assert verdict.failure == FailureKind.PLACE_NOT_FOUND
        assert verdict.message == "Place thousands not found"

    def test_difference_within_slot_place_not_found(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [
                {
                    "id": "c",
                    "type": "placeValueDifference",
                    "slot": "n",
                    "placeA": "thousands",
                    "placeB": "ones",
                    "difference": 1,
                }
            ],
            length=2,
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[2, 1]))[0]
        assert verdict.satisfied is False
        assert verdict.failure == FailureKind.PLACE_NOT_FOUND
        assert verdict.message == "Place not found"

    def test_difference_between_slots_place_not_found(self, fill):
        puzzle = _two_slot_puzzle(
            [
                {
                    "id": "c",
                    "type": "placeValueDifference",
                    "slotA": "a",
                    "slotB": "b",
                    "place": "hundreds",
                    "difference": 1,
                }
            ]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[2, 1], b=[1, 1]))[0]
        assert verdict.failure == FailureKind.PLACE_NOT_FOUND
        assert verdict.message == "Place hundreds not found"

    def test_difference_between_slots_unknown_slot(self, fill):
        puzzle = _two_slot_puzzle(
            [
                {
                    "id": "c",
                    "type": "placeValueDifference",
                    "slotA": "a",
                    "slotB": "zzz",
                    "place": "ones",
                    "difference": 1,
                }
            ]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[2, 1], b=[1, 1]))[0]
        assert verdict.failure == FailureKind.SLOT_NOT_FOUND

    def test_sum_without_target_is_invalid(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [{"id": "c", "type": "placeValueSumEquals", "slot": "n", "places": ["ones"]}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 2, 3, 4]))[0]
        assert verdict.message == "Invalid constraint configuration"
        assert verdict.failure == FailureKind.INVALID_CONFIGURATION

    def test_difference_within_slot_is_absolute(self, fill):
        q5 = get_puzzle("q5")
        assert is_solved(validate_constraints(q5, fill(q5, number1=[7, 4, 2, 1])))
        assert _by_id(validate_constraints(q5, fill(q5, number1=[4, 7, 2, 1])))["c2"].satisfied

        verdict = _by_id(validate_constraints(q5, fill(q5, number1=[7, 2, 4, 1])))["c2"]
        assert verdict.satisfied is False
        assert verdict.message == "Difference is 5, not 3"

    def test_difference_between_slots_is_signed(self, fill):
        q6 = get_puzzle("q6")
        ok = fill(q6, numberA=[8, 7, 5], numberB=[3, 2, 1], result=[5, 5, 4])
        assert _by_id(validate_constraints(q6, ok))["c2"].satisfied is True

        swapped = fill(q6, numberA=[3, 2, 1], numberB=[8, 7, 5], result=[5, 5, 4])
        verdict = _by_id(validate_constraints(q6, swapped))["c2"]
        assert verdict.satisfied is False
        assert verdict.message == "Difference is -5, not 5"

    def test_difference_between_slots_incomplete(self, fill):
        q6 = get_puzzle("q6")
        verdict = _by_id(validate_constraints(q6, fill(q6, numberA=[8, 7, 5])))["c2"]
        assert verdict.failure == FailureKind.INCOMPLETE


class TestSlotArithmetic:
    def test_difference_equals_result(self, fill):
        q6 = get_puzzle("q6")
        verdict = _by_id(
            validate_constraints(q6, fill(q6, numberA=[8, 7, 5], numberB=[3, 2, 1], result=[5, 5, 4]))
        )["c1"]
        assert verdict.satisfied is True
        assert verdict.message == "875 - 321 = 554"

    def test_wrong_result(self, fill):
        q6 = get_puzzle("q6")
        verdict = _by_id(
            validate_constraints(q6, fill(q6, numberA=[8, 7, 5], numberB=[3, 2, 1], result=[5, 5, 5]))
        )["c1"]
        assert verdict.satisfied is False
        assert verdict.message == "875 - 321 = 554, not 555"

    def test_missing_result_slot_is_invalid(self, fill):
        puzzle = _two_slot_puzzle(
            [{"id": "c", "type": "slotDifferenceEqualsSlot", "slotA": "a", "slotB": "b"}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[9, 9], b=[1, 1]))[0]
        assert verdict.failure == FailureKind.INVALID_CONFIGURATION

    def test_unknown_result_slot(self, fill):
        puzzle = _two_slot_puzzle(
            [{"id": "c", "type": "slotDifferenceEqualsSlot", "slotA": "a", "slotB": "b", "resultSlot": "zzz"}]
        )
        verdict = validate_constraints(puzzle, fill(puzzle, a=[9, 9], b=[1, 1]))[0]
        assert verdict.failure == FailureKind.SLOT_NOT_FOUND
        assert verdict.message == "Slot not found"


class TestCellDigitRestriction:
    def test_solution_passes(self, fill):
        q7 = get_puzzle("q7")
        verdicts = validate_constraints(q7, fill(q7, number1=[8, 5, 3], number2=[7, 5, 4]))
        assert is_solved(verdicts)
        assert verdicts[0].message == "All yellow cells satisfy restrictions"

    def test_out_of_range_yellow_cell(self, fill):
        q7 = get_puzzle("q7")
        verdict = validate_constraints(q7, fill(q7, number1=[5, 8, 3], number2=[7, 8, 4]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Digit 5 is not in allowed range [6-9] for yellow cells"

    def test_empty_colored_cells_are_skipped(self, fill):
        q7 = get_puzzle("q7")
        verdicts = validate_constraints(q7, fill(q7))
        assert verdicts[0].satisfied is True
        assert verdicts[1].satisfied is True

    def test_not_allowed_digit(self, fill):
        q7 = get_puzzle("q7")
        verdict = validate_constraints(q7, fill(q7, number1=[8, 5, 2]))[1]
        assert verdict.satisfied is False
        assert verdict.message == "Digit 2 is not allowed in blue cells"

    def test_missing_color_is_invalid(self, make_puzzle, fill):
        puzzle = make_puzzle([{"id": "c", "type": "cellDigitRestriction", "notAllowed": [0]}])
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 2, 3, 4]))[0]
        assert verdict.failure == FailureKind.INVALID_CONFIGURATION


class TestDispatch:
    def test_unknown_constraint_type(self, make_puzzle, fill):
        puzzle = make_puzzle([{"id": "c", "type": "primeNumber", "slot": "n"}])
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 2, 3, 4]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Unknown constraint type"
        assert verdict.failure == FailureKind.UNKNOWN_CONSTRAINT_TYPE

    def test_slot_not_found(self, make_puzzle, fill):
        puzzle = make_puzzle([{"id": "c", "type": "greatestNumber", "slot": "missing"}])
        verdict = validate_constraints(puzzle, fill(puzzle, n=[1, 2, 3, 4]))[0]
        assert verdict.satisfied is False
        assert verdict.message == "Slot not found"
        assert verdict.failure == FailureKind.SLOT_NOT_FOUND

    def test_verdicts_follow_declaration_order(self, make_puzzle, fill):
        puzzle = make_puzzle(
            [
                {"id": "z", "type": "noRepeatWithinSlot", "slot": "n", "description": "Z"},
                {"id": "a", "type": "greatestNumber", "slot": "n", "description": "A"},
                {"id": "m", "type": "smallestNumber", "slot": "n", "description": "M"},
            ]
        )
        verdicts = validate_constraints(puzzle, fill(puzzle, n=[4, 3, 2, 1]))
        assert [v.constraint_id for v in verdicts] == ["z", "a", "m"]
        assert [v.description for v in verdicts] == ["Z", "A", "M"]

    def test_assignment_is_not_mutated_and_result_is_stable(self, q4, fill):
        assignment = fill(q4, number1=[8, 6, 0, 0], number2=[1, 0, 3])
        snapshot = dict(assignment)
        first = validate_constraints(q4, assignment)
        second = validate_constraints(q4, assignment)
        assert assignment == snapshot
        assert first == second

    def test_no_constraints(self, fill):
        q1 = get_puzzle("q1")
        verdicts = validate_constraints(q1, fill(q1))
        assert verdicts == []
        assert is_solved(verdicts) is True


class TestIsSolved:
    def test_empty(self):
        assert is_solved([]) is True

    def test_single_false(self):
        verdicts = [
            Verdict("c1", "a", True),
            Verdict("c2", "b", False, "Incomplete", FailureKind.INCOMPLETE),
        ]
        assert is_solved(verdicts) is False

    def test_to_dict(self):
        verdict = Verdict("c1", "desc", False, "Incomplete", FailureKind.INCOMPLETE)
        assert verdict.to_dict() == {
            "constraintId": "c1",
            "description": "desc",
            "satisfied": False,
            "message": "Incomplete",
            "failure": "incomplete",
        }
        assert Verdict("c2", "d", True).to_dict() == {
            "constraintId": "c2",
            "description": "d",
            "satisfied": True,
        }
