# -*- coding: utf-8 -*-
"""
crossnum で使う主なデータ構造（型）をまとめたモジュールです。

dataclass を使うことで、
「この構造体はどんなフィールドを持っているのか」を
分かりやすく表現しています。

制約（Constraint）は種類ごとに別クラスになっていて、
それぞれが自分に必要なフィールドだけを持ちます。
評価側（engine.evaluator）はクラスで振り分けます。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import ClassVar, Dict, FrozenSet, List, Mapping, Optional, Tuple

# グリッド上の座標を表す型 (row, col)
CellCoord = Tuple[int, int]

# マス → 数字（空なら None）の割り当て
Assignment = Mapping[CellCoord, Optional[int]]

MODE_CONSTRUCTION = "construction"
MODE_EVALUATION = "evaluation"


class Place(IntEnum):
    """
    位取り（一の位、十の位、…）を表す列挙型です。

    値は「末尾（一の位）から数えた桁のインデックス」で、
    10 ** 値 がその位の重みになります。
    """

    ONES = 0
    TENS = 1
    HUNDREDS = 2
    THOUSANDS = 3
    TEN_THOUSANDS = 4

    @property
    def label(self) -> str:
        """パズルデータ上の名前（例: "tenThousands"）を返します。"""
        return PLACE_NAMES[self.value]

    @property
    def weight(self) -> int:
        return 10 ** self.value

    @classmethod
    def from_name(cls, name: str) -> "Place":
        """
        "ones" / "tens" / "tenThousands" のような名前から Place を返します。

        "ten_thousands" のようなスネークケースも受け付けます。
        未対応の名前なら ValueError を送出します。
        """
        key = str(name).strip()
        for place in cls:
            if key == place.label or key.upper() == place.name:
                return place
        raise ValueError(f"Unsupported place name: {name!r}")


# Place の並び順どおりのデータ上の名前
PLACE_NAMES: Tuple[str, ...] = ("ones", "tens", "hundreds", "thousands", "tenThousands")


@dataclass(frozen=True)
class CellInfo:
    """アクティブなマス 1 つ分の付加情報です（現状は色タグのみ）。"""

    color: Optional[str] = None


@dataclass(frozen=True)
class PuzzleLayout:
    """
    盤面の形を表すクラスです。

    Attributes
    ----------
    rows, cols : int
        盤面の行数・列数。
    cells : dict[(row, col), CellInfo]
        アクティブなマスの一覧。ここに無いマスは盤面に含まれません。
        並び順はパズルデータの記述順を保ちます。
    """

    rows: int
    cols: int
    cells: Dict[CellCoord, CellInfo] = field(default_factory=dict)

    def is_active(self, cell: CellCoord) -> bool:
        return cell in self.cells

    def cells_with_color(self, color: str) -> List[CellCoord]:
        """指定した色タグを持つマスを、記述順のまま返します。"""
        return [cell for cell, info in self.cells.items() if info.color == color]


@dataclass(frozen=True)
class Slot:
    """
    1 つの数を作るマスの並び（スロット）を表すクラスです。

    Attributes
    ----------
    slot_id : str
        スロットの識別子（例: "number1"）。
    label : str
        表示用の名前（例: "Number 1"）。
    positions : tuple of (row, col)
        このスロットに含まれるマスの座標。先頭が最上位の桁です。
    prefilled : tuple of int, optional
        評価モードのパズルで、あらかじめ埋まっている数字。
    """

    slot_id: str
    label: str
    positions: Tuple[CellCoord, ...]
    prefilled: Optional[Tuple[int, ...]] = None

    @property
    def length(self) -> int:
        """このスロットの長さ（桁数）を返します。"""
        return len(self.positions)


# ----------------------------------------------------------------------
# 制約
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Constraint:
    """
    すべての制約に共通する部分です。

    description は判定結果（Verdict）にそのまま載ります。
    """

    kind: ClassVar[str] = "constraint"

    constraint_id: str
    description: str


@dataclass(frozen=True)
class GreatestNumber(Constraint):
    kind: ClassVar[str] = "greatestNumber"

    slot: str = ""
    no_repeat: bool = False


@dataclass(frozen=True)
class SmallestNumber(Constraint):
    kind: ClassVar[str] = "smallestNumber"

    slot: str = ""
    no_repeat: bool = False
    sum_of_digits: Optional[int] = None


@dataclass(frozen=True)
class NoRepeatWithinSlot(Constraint):
    kind: ClassVar[str] = "noRepeatWithinSlot"

    slot: str = ""


@dataclass(frozen=True)
class NoRepeatEachSlot(Constraint):
    """パズル中のすべてのスロットが、それぞれ数字の重複を持たないこと。"""

    kind: ClassVar[str] = "noRepeatAcrossSlots"


@dataclass(frozen=True)
class NoRepeatPooled(Constraint):
    """related_slots の数字をまとめたときに重複が無いこと。"""

    kind: ClassVar[str] = "noRepeatAcrossSlots"

    related_slots: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PlaceValueSumEquals(Constraint):
    kind: ClassVar[str] = "placeValueSumEquals"

    slot: str = ""
    places: Tuple[Place, ...] = ()
    target: Optional[int] = None


@dataclass(frozen=True)
class PlaceValueDifferenceWithinSlot(Constraint):
    kind: ClassVar[str] = "placeValueDifference"

    slot: str = ""
    place_a: Optional[Place] = None
    place_b: Optional[Place] = None
    difference: Optional[int] = None


@dataclass(frozen=True)
class PlaceValueDifferenceBetweenSlots(Constraint):
    kind: ClassVar[str] = "placeValueDifference"

    slot_a: Optional[str] = None
    slot_b: Optional[str] = None
    place: Optional[Place] = None
    difference: Optional[int] = None


@dataclass(frozen=True)
class SlotDifferenceEqualsSlot(Constraint):
    """slot_a の値 - slot_b の値 == result_slot の値"""

    kind: ClassVar[str] = "slotDifferenceEqualsSlot"

    slot_a: Optional[str] = None
    slot_b: Optional[str] = None
    result_slot: Optional[str] = None


@dataclass(frozen=True)
class CellDigitRestriction(Constraint):
    kind: ClassVar[str] = "cellDigitRestriction"

    color: Optional[str] = None
    not_allowed: FrozenSet[int] = frozenset()
    allowed_range: Optional[Tuple[int, int]] = None


@dataclass(frozen=True)
class UnknownConstraint(Constraint):
    """読み込み時に種類が分からなかった制約。評価すると必ず不成立になります。"""

    kind: ClassVar[str] = "unknown"

    type_name: str = ""


# ----------------------------------------------------------------------
# パズル全体
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class Puzzle:
    """
    1 問分のパズル定義です。

    Attributes
    ----------
    puzzle_id : str
        パズルの識別子（例: "q4"）。
    title, instruction : str
        表示用のテキスト。
    layout : PuzzleLayout
        盤面の形。
    digits : tuple of int
        組み立てモードで配る数字（重複あり）。
    slots : tuple of Slot
        スロット一覧（記述順）。
    constraints : tuple of Constraint
        制約一覧（記述順）。判定結果もこの順に並びます。
    mode : str
        "construction"（数字を置く）または "evaluation"（完成盤面を見て条件を選ぶ）。
    answer : dict[str, tuple of int], optional
        スロット ID → 正解の数字列。一致すれば全制約を成立扱いにします。
    """

    puzzle_id: str
    title: str
    layout: PuzzleLayout
    instruction: str = ""
    digits: Tuple[int, ...] = ()
    slots: Tuple[Slot, ...] = ()
    constraints: Tuple[Constraint, ...] = ()
    mode: str = MODE_CONSTRUCTION
    answer: Optional[Dict[str, Tuple[int, ...]]] = None

    def find_slot(self, slot_id: Optional[str]) -> Optional[Slot]:
        """スロット ID からスロットを探します。見つからなければ None。"""
        if not slot_id:
            return None
        for slot in self.slots:
            if slot.slot_id == slot_id:
                return slot
        return None

    @property
    def is_evaluation(self) -> bool:
        return self.mode == MODE_EVALUATION


# ----------------------------------------------------------------------
# 判定結果
# ----------------------------------------------------------------------


class FailureKind(str, Enum):
    """不成立になった理由の分類です。"""

    SLOT_NOT_FOUND = "slot_not_found"
    INCOMPLETE = "incomplete"
    UNKNOWN_CONSTRAINT_TYPE = "unknown_constraint_type"
    INVALID_CONFIGURATION = "invalid_configuration"
    PLACE_NOT_FOUND = "place_not_found"
    VIOLATION = "violation"


@dataclass(frozen=True)
class Verdict:
    """
    制約 1 つ分の判定結果です。

    satisfied が False のときは failure に理由の分類が入ります。
    """

    constraint_id: str
    description: str
    satisfied: bool
    message: Optional[str] = None
    failure: Optional[FailureKind] = None

    def to_dict(self) -> Dict[str, object]:
        """JSON にそのまま載せられる dict に変換します。"""
        out: Dict[str, object] = {
            "constraintId": self.constraint_id,
            "description": self.description,
            "satisfied": self.satisfied,
        }
        if self.message is not None:
            out["message"] = self.message
        if self.failure is not None:
            out["failure"] = self.failure.value
        return out
