# -*- coding: utf-8 -*-
"""
「正解の数字列」による一括判定を行うモジュールです。

パズルに answer（スロット ID → 正解の数字列）が書かれていて、
いまの盤面がそのすべてと一致していれば、個々の制約を評価せずに
全制約を成立扱いにします。一致しなければ通常の評価に進みます。
"""

from __future__ import annotations

from typing import List

from ..grid.slot_resolver import resolve_slot
from ..logging_utils import get_logger
from ..types import Assignment, Puzzle, Verdict

logger = get_logger("engine")

CORRECT_ANSWER_MESSAGE = "Correct answer!"


def matches_direct_answer(puzzle: Puzzle, assignment: Assignment) -> bool:
    """
    盤面が answer のすべてのスロットと完全に一致しているかを返します。

    - answer が無い（または空）なら False
    - 空マスが 1 つでもあれば不一致
    - 桁数や数字が 1 つでも違えば不一致
    - answer に書かれたスロットが存在しなければ不一致
    """
    if not puzzle.answer:
        return False

    for slot_id, expected in puzzle.answer.items():
        slot = puzzle.find_slot(slot_id)
        if slot is None:
            logger.warning(
                "Puzzle %s: answer refers to unknown slot %r", puzzle.puzzle_id, slot_id
            )
            return False

        actual = resolve_slot(slot, assignment)
        if actual is None:
            return False
        if actual != tuple(expected):
            return False

    return True


def answer_verdicts(puzzle: Puzzle) -> List[Verdict]:
    """全制約を成立とした判定結果を、制約の記述順に返します。"""
    return [
        Verdict(
            constraint_id=c.constraint_id,
            description=c.description,
            satisfied=True,
            message=CORRECT_ANSWER_MESSAGE,
        )
        for c in puzzle.constraints
    ]
