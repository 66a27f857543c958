# -*- coding: utf-8 -*-
"""
パズル定義（dict / JSON）を読み込み、Puzzle に変換するモジュールです。

データ形式はゲーム本体と同じ camelCase のものです:

- layout.cells のキーは "row,col"（値は {} または {"color": "yellow"}）
- 制約は "type" で種類を表し、種類ごとに slot / relatedSlots / slotA /
  slotB / resultSlot / places / placeA / placeB / place / sum /
  difference / sumOfDigits / noRepeat / color / notAllowed /
  allowedRange を持ちます。

形式そのものが壊れている場合（セル ID が読めない、位の名前が未対応、
数字でない値など）は PuzzleFormatError を送出します。
制約に必要なフィールドが欠けているだけなら読み込みは成功し、
評価時に "Invalid constraint configuration" として報告されます。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..grid.parser import parse_cell_id
from ..logging_utils import get_logger
from ..types import (
    MODE_CONSTRUCTION,
    MODE_EVALUATION,
    CellDigitRestriction,
    CellCoord,
    CellInfo,
    Constraint,
    GreatestNumber,
    NoRepeatEachSlot,
    NoRepeatPooled,
    NoRepeatWithinSlot,
    Place,
    PlaceValueDifferenceBetweenSlots,
    PlaceValueDifferenceWithinSlot,
    PlaceValueSumEquals,
    Puzzle,
    PuzzleLayout,
    Slot,
    SlotDifferenceEqualsSlot,
    SmallestNumber,
    UnknownConstraint,
)

logger = get_logger("puzzles")


class PuzzleFormatError(ValueError):
    """パズル定義の形式が壊れているときに送出されます。"""


# ----------------------------------------------------------------------
# 値の読み取りヘルパー
# ----------------------------------------------------------------------


def _require(data: Mapping[str, Any], key: str, where: str) -> Any:
    if key not in data or data[key] is None:
        raise PuzzleFormatError(f"{where}: missing '{key}'")
    return data[key]


def _to_int(value: Any, where: str) -> int:
    # 小数部のある値（21.9 など）は整数として扱わない
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise PuzzleFormatError(f"{where}: expected an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise PuzzleFormatError(f"{where}: expected an integer, got {value!r}") from e


def _optional_int(data: Mapping[str, Any], key: str, where: str) -> Optional[int]:
    value = data.get(key)
    if value is None:
        return None
    return _to_int(value, f"{where}.{key}")


def _to_digit(value: Any, where: str) -> int:
    d = _to_int(value, where)
    if not 0 <= d <= 9:
        raise PuzzleFormatError(f"{where}: digit out of range: {value!r}")
    return d


def _digits(values: Any, where: str) -> Tuple[int, ...]:
    if isinstance(values, str):
        values = list(values)
    return tuple(_to_digit(v, where) for v in values)


def _place(value: Any, where: str) -> Optional[Place]:
    if value is None:
        return None
    try:
        return Place.from_name(value)
    except ValueError as e:
        raise PuzzleFormatError(f"{where}: {e}") from e


def _cell(cell_id: Any, where: str) -> CellCoord:
    try:
        return parse_cell_id(cell_id)
    except ValueError as e:
        raise PuzzleFormatError(f"{where}: {e}") from e


# ----------------------------------------------------------------------
# 部品ごとの変換
# ----------------------------------------------------------------------


def _build_layout(raw: Mapping[str, Any]) -> PuzzleLayout:
    rows = _to_int(_require(raw, "rows", "layout"), "layout.rows")
    cols = _to_int(_require(raw, "cols", "layout"), "layout.cols")

    raw_cells = raw.get("cells") or {}
    cells: Dict[CellCoord, CellInfo] = {}
    if isinstance(raw_cells, Mapping):
        for cell_id, props in raw_cells.items():
            props = props or {}
            cells[_cell(cell_id, "layout.cells")] = CellInfo(color=props.get("color"))
    else:
        # ["0,1", "1,1", ...] のような色なしの一覧も受け付ける
        for cell_id in raw_cells:
            cells[_cell(cell_id, "layout.cells")] = CellInfo()

    for row, col in cells:
        if not (row < rows and col < cols):
            raise PuzzleFormatError(
                f"layout.cells: {row},{col} is outside the {rows}x{cols} grid"
            )

    return PuzzleLayout(rows=rows, cols=cols, cells=cells)


def _build_slot(raw: Mapping[str, Any]) -> Slot:
    slot_id = str(_require(raw, "id", "slot"))
    where = f"slot {slot_id}"
    positions = tuple(_cell(c, where) for c in _require(raw, "cells", where))
    if not positions:
        raise PuzzleFormatError(f"{where}: a slot needs at least one cell")

    prefilled = raw.get("prefilled")
    return Slot(
        slot_id=slot_id,
        label=str(raw.get("label") or slot_id),
        positions=positions,
        prefilled=_digits(prefilled, f"{where}.prefilled") if prefilled is not None else None,
    )


def build_constraint(raw: Mapping[str, Any]) -> Constraint:
    """
    制約 1 つ分の dict を、種類に応じた Constraint のサブクラスに変換します。

    種類が分からなければ UnknownConstraint を返します（例外にはしません）。
    """
    cid = str(_require(raw, "id", "constraint"))
    where = f"constraint {cid}"
    ctype = raw.get("type")
    common = {"constraint_id": cid, "description": str(raw.get("description", ""))}
    slot = str(raw.get("slot") or "")

    if ctype == "greatestNumber":
        return GreatestNumber(**common, slot=slot, no_repeat=bool(raw.get("noRepeat")))

    if ctype == "smallestNumber":
        return SmallestNumber(
            **common,
            slot=slot,
            no_repeat=bool(raw.get("noRepeat")),
            sum_of_digits=_optional_int(raw, "sumOfDigits", where),
        )

    if ctype == "noRepeatWithinSlot":
        return NoRepeatWithinSlot(**common, slot=slot)

    if ctype == "noRepeatAcrossSlots":
        # relatedSlots があれば「まとめて重複なし」、無ければ「各スロットごとに重複なし」
        related = raw.get("relatedSlots")
        if related is not None:
            if not isinstance(related, (list, tuple)):
                raise PuzzleFormatError(f"{where}: relatedSlots must be a list of slot ids")
            return NoRepeatPooled(**common, related_slots=tuple(str(s) for s in related))
        return NoRepeatEachSlot(**common)

    if ctype == "placeValueSumEquals":
        places = tuple(
            _place(p, f"{where}.places") for p in (raw.get("places") or [])
        )
        return PlaceValueSumEquals(
            **common,
            slot=slot,
            places=places,  # type: ignore[arg-type]
            target=_optional_int(raw, "sum", where),
        )

    if ctype == "placeValueDifference":
        if "slotA" in raw or "slotB" in raw:
            return PlaceValueDifferenceBetweenSlots(
                **common,
                slot_a=raw.get("slotA"),
                slot_b=raw.get("slotB"),
                place=_place(raw.get("place"), f"{where}.place"),
                difference=_optional_int(raw, "difference", where),
            )
        return PlaceValueDifferenceWithinSlot(
            **common,
            slot=slot,
            place_a=_place(raw.get("placeA"), f"{where}.placeA"),
            place_b=_place(raw.get("placeB"), f"{where}.placeB"),
            difference=_optional_int(raw, "difference", where),
        )

    if ctype == "slotDifferenceEqualsSlot":
        return SlotDifferenceEqualsSlot(
            **common,
            slot_a=raw.get("slotA"),
            slot_b=raw.get("slotB"),
            result_slot=raw.get("resultSlot"),
        )

    if ctype == "cellDigitRestriction":
        allowed_range = raw.get("allowedRange")
        if allowed_range is not None:
            if len(allowed_range) != 2:
                raise PuzzleFormatError(f"{where}: allowedRange must be [min, max]")
            low, high = (_to_digit(v, f"{where}.allowedRange") for v in allowed_range)
            allowed_range = (low, high)
        return CellDigitRestriction(
            **common,
            color=raw.get("color"),
            not_allowed=frozenset(_digits(raw.get("notAllowed") or [], f"{where}.notAllowed")),
            allowed_range=allowed_range,
        )

    logger.warning("Constraint %s has unrecognised type %r", cid, ctype)
    return UnknownConstraint(**common, type_name=str(ctype))


def load_puzzle(data: Mapping[str, Any]) -> Puzzle:
    """
    パズル定義の dict を Puzzle に変換します。

    Parameters
    ----------
    data : mapping
        ゲームのパズルデータと同じ形の dict。

    Returns
    -------
    Puzzle

    Raises
    ------
    PuzzleFormatError
        必須項目が無い、または値の形式が不正なとき。
    """
    puzzle_id = str(_require(data, "id", "puzzle"))

    mode = data.get("mode") or MODE_CONSTRUCTION
    if mode not in (MODE_CONSTRUCTION, MODE_EVALUATION):
        raise PuzzleFormatError(f"puzzle {puzzle_id}: unknown mode {mode!r}")

    answer: Optional[Dict[str, Tuple[int, ...]]] = None
    raw_answer = data.get("answer")
    if raw_answer is not None:
        if not isinstance(raw_answer, Mapping):
            raise PuzzleFormatError(f"puzzle {puzzle_id}: answer must map slot ids to digits")
        answer = {
            str(slot_id): _digits(digits, f"puzzle {puzzle_id}.answer.{slot_id}")
            for slot_id, digits in raw_answer.items()
        }

    slots: List[Slot] = [_build_slot(s) for s in data.get("slots") or []]
    constraints: List[Constraint] = [build_constraint(c) for c in data.get("constraints") or []]

    return Puzzle(
        puzzle_id=puzzle_id,
        title=str(data.get("title") or puzzle_id),
        instruction=str(data.get("instruction") or ""),
        layout=_build_layout(_require(data, "layout", f"puzzle {puzzle_id}")),
        digits=_digits(data.get("digits") or [], f"puzzle {puzzle_id}.digits"),
        slots=tuple(slots),
        constraints=tuple(constraints),
        mode=mode,
        answer=answer,
    )


def load_puzzle_file(path: str | Path) -> Puzzle:
    """
    JSON ファイルからパズル定義を読み込みます。

    ファイルが無ければ FileNotFoundError を送出します。
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Puzzle file not found: {p}")

    with p.open(encoding="utf-8") as f:
        data = json.load(f)

    puzzle = load_puzzle(data)
    logger.info(
        "Loaded puzzle %s from %s (%d slots, %d constraints)",
        puzzle.puzzle_id,
        p,
        len(puzzle.slots),
        len(puzzle.constraints),
    )
    return puzzle
