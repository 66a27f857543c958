# -*- coding: utf-8 -*-
"""
ゲームに同梱するパズルの一覧です。

パズルは JSON と同じ形の dict で書いておき、初回アクセス時に
loader.load_puzzle で Puzzle に変換してキャッシュします。
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import DEFAULT_PUZZLE_ID
from ..types import Puzzle
from .loader import load_puzzle

# ----------------------------------------------------------------------
# パズルデータ
# ----------------------------------------------------------------------

Q1: Dict[str, Any] = {
    "id": "q1",
    "title": "Q1",
    "instruction": (
        "Let's start with something easy! Make any 2 numbers in the "
        "cross-number using the digits given below."
    ),
    "layout": {
        "rows": 5,
        "cols": 4,
        "cells": {
            "0,1": {}, "1,1": {}, "2,0": {}, "2,1": {},
            "2,2": {}, "2,3": {}, "3,1": {},
        },
    },
    "digits": [1, 3, 6, 9, 8, 7, 2],
    "slots": [
        {"id": "number1", "label": "Number 1", "cells": ["0,1", "1,1", "2,1", "3,1"]},
        {"id": "number2", "label": "Number 2", "cells": ["2,0", "2,1", "2,2", "2,3"]},
    ],
    # 制約なし（数字を全部置けば正解）
    "constraints": [],
}

# ラダさんが完成させた盤面を見て、満たしている条件を選ぶ問題
Q3: Dict[str, Any] = {
    "id": "q3",
    "title": "Q3",
    "instruction": (
        "Radha completed a cross-number like this. "
        "Select all the conditions she satisfied!"
    ),
    "mode": "evaluation",
    "layout": {
        "rows": 5,
        "cols": 3,
        "cells": {
            "0,0": {}, "1,0": {}, "2,0": {}, "3,0": {}, "4,0": {},
            "4,1": {}, "4,2": {}, "2,1": {}, "2,2": {},
        },
    },
    "digits": [9, 8, 7, 6, 5, 5, 1, 0, 0],
    "slots": [
        {
            "id": "number1",
            "label": "Number 1",
            "cells": ["0,0", "1,0", "2,0", "3,0", "4,0"],
            "prefilled": [9, 8, 7, 6, 5],
        },
        {
            "id": "number2",
            "label": "Number 2",
            "cells": ["2,1", "2,2", "2,0"],
            "prefilled": [1, 0, 7],
        },
        {
            "id": "number3",
            "label": "Number 3",
            "cells": ["4,0", "4,1", "4,2"],
            "prefilled": [5, 0, 5],
        },
    ],
    "constraints": [
        {
            "id": "c1",
            "type": "greatestNumber",
            "slot": "number1",
            "description": "Make the greatest 5-digit number without repeating digits",
            "noRepeat": True,
        },
        {
            "id": "c2",
            "type": "greatestNumber",
            "slot": "number2",
            "description": "Make the greatest 3-digit number without repeating the digits",
            "noRepeat": True,
        },
        {
            "id": "c3",
            "type": "smallestNumber",
            "slot": "number3",
            "description": "Make the smallest 3-digit number",
        },
    ],
}

Q4: Dict[str, Any] = {
    "id": "q4",
    "title": "Q4",
    "instruction": (
        "Make 2 numbers in this cross-number from the digits given below "
        "satisfying the given conditions."
    ),
    "layout": {
        "rows": 4,
        "cols": 3,
        "cells": {
            "0,1": {}, "1,1": {}, "2,0": {}, "2,1": {}, "2,2": {}, "3,1": {},
        },
    },
    "digits": [6, 0, 8, 0, 1, 3],
    "slots": [
        {"id": "number1", "label": "Number 1", "cells": ["0,1", "1,1", "2,1", "3,1"]},
        {"id": "number2", "label": "Number 2", "cells": ["2,0", "2,1", "2,2"]},
    ],
    "constraints": [
        {
            "id": "c1",
            "type": "greatestNumber",
            "slot": "number1",
            "description": "Make the greatest 4-digit number",
        },
        {
            "id": "c2",
            "type": "smallestNumber",
            "slot": "number2",
            "description": "Make the smallest 3-digit number without repeating the digits",
            "noRepeat": True,
        },
    ],
}

Q5: Dict[str, Any] = {
    "id": "q5",
    "title": "Q5",
    "instruction": "Make a 4-digit number that satisfies all the place value conditions.",
    "layout": {
        "rows": 1,
        "cols": 4,
        "cells": {"0,0": {}, "0,1": {}, "0,2": {}, "0,3": {}},
    },
    "digits": [7, 4, 2, 1],
    "slots": [
        {"id": "number1", "label": "Number 1", "cells": ["0,0", "0,1", "0,2", "0,3"]},
    ],
    "constraints": [
        {
            "id": "c1",
            "type": "placeValueSumEquals",
            "slot": "number1",
            "places": ["tens", "ones"],
            "sum": 21,
            "description": "The tens and ones places together make 21",
        },
        {
            "id": "c2",
            "type": "placeValueDifference",
            "slot": "number1",
            "placeA": "thousands",
            "placeB": "hundreds",
            "difference": 3,
            "description": "The thousands and hundreds digits differ by 3",
        },
        {
            "id": "c3",
            "type": "noRepeatWithinSlot",
            "slot": "number1",
            "description": "Do not repeat any digit",
        },
    ],
}

Q6: Dict[str, Any] = {
    "id": "q6",
    "title": "Q6",
    "instruction": "Fill the subtraction so that Number A - Number B = Result.",
    "layout": {
        "rows": 3,
        "cols": 3,
        "cells": {
            "0,0": {}, "0,1": {}, "0,2": {},
            "1,0": {}, "1,1": {}, "1,2": {},
            "2,0": {}, "2,1": {}, "2,2": {},
        },
    },
    "digits": [9, 7, 5, 4, 3, 2, 5, 4, 3],
    "slots": [
        {"id": "numberA", "label": "Number A", "cells": ["0,0", "0,1", "0,2"]},
        {"id": "numberB", "label": "Number B", "cells": ["1,0", "1,1", "1,2"]},
        {"id": "result", "label": "Result", "cells": ["2,0", "2,1", "2,2"]},
    ],
    "constraints": [
        {
            "id": "c1",
            "type": "slotDifferenceEqualsSlot",
            "slotA": "numberA",
            "slotB": "numberB",
            "resultSlot": "result",
            "description": "Number A - Number B = Result",
        },
        {
            "id": "c2",
            "type": "placeValueDifference",
            "slotA": "numberA",
            "slotB": "numberB",
            "place": "hundreds",
            "difference": 5,
            "description": "The hundreds digit of A is 5 more than that of B",
        },
        {
            "id": "c3",
            "type": "greatestNumber",
            "slot": "numberA",
            "description": "Number A is the greatest number its digits can make",
        },
    ],
    "answer": {
        "numberA": [9, 7, 5],
        "numberB": [4, 3, 2],
        "result": [5, 4, 3],
    },
}

Q7: Dict[str, Any] = {
    "id": "q7",
    "title": "Q7",
    "instruction": "Yellow cells take big digits, blue cells cannot take 0, 1 or 2.",
    "layout": {
        "rows": 3,
        "cols": 3,
        "cells": {
            "0,1": {"color": "yellow"},
            "1,0": {"color": "yellow"},
            "1,1": {},
            "1,2": {"color": "blue"},
            "2,1": {"color": "blue"},
        },
    },
    "digits": [8, 5, 3, 7, 4],
    "slots": [
        {"id": "number1", "label": "Number 1", "cells": ["0,1", "1,1", "2,1"]},
        {"id": "number2", "label": "Number 2", "cells": ["1,0", "1,1", "1,2"]},
    ],
    "constraints": [
        {
            "id": "c1",
            "type": "cellDigitRestriction",
            "color": "yellow",
            "allowedRange": [6, 9],
            "description": "Yellow cells hold digits from 6 to 9",
        },
        {
            "id": "c2",
            "type": "cellDigitRestriction",
            "color": "blue",
            "notAllowed": [0, 1, 2],
            "description": "Blue cells cannot hold 0, 1 or 2",
        },
        {
            "id": "c3",
            "type": "noRepeatAcrossSlots",
            "description": "No number repeats a digit",
        },
        {
            "id": "c4",
            "type": "greatestNumber",
            "slot": "number2",
            "noRepeat": True,
            "description": "Number 2 is the greatest number its digits can make",
        },
    ],
}

# 出題順
PUZZLE_DATA: List[Dict[str, Any]] = [Q1, Q3, Q4, Q5, Q6, Q7]

_PUZZLE_CACHE: Optional[List[Puzzle]] = None


def list_puzzles() -> List[Puzzle]:
    """同梱パズルを出題順に返します。"""
    global _PUZZLE_CACHE
    if _PUZZLE_CACHE is None:
        _PUZZLE_CACHE = [load_puzzle(data) for data in PUZZLE_DATA]
    return list(_PUZZLE_CACHE)


def get_puzzle(puzzle_id: str) -> Puzzle:
    """ID からパズルを返します。無ければ KeyError。"""
    for puzzle in list_puzzles():
        if puzzle.puzzle_id == puzzle_id:
            return puzzle
    raise KeyError(f"Unknown puzzle: {puzzle_id}")


def get_default_puzzle() -> Puzzle:
    return get_puzzle(DEFAULT_PUZZLE_ID)
