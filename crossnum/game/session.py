# -*- coding: utf-8 -*-
"""
1 問分のゲーム進行（盤面・手持ちの数字・スコア・ライフ）を管理するモジュールです。

判定エンジンは盤面を読むだけなので、数字を置く・戻す・入れ替えるといった
状態の変更はすべてここで行います。重なったスロットの共有マスは
grid の同じキーを書き換えるので、自然に同じ値になります。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from ..config import HEALTH_PER_MISS, INITIAL_HEALTH, SCORE_PER_SOLVE
from ..engine import is_solved, validate_constraints
from ..logging_utils import get_logger
from ..types import CellCoord, Puzzle, Verdict

logger = get_logger("game")

STATUS_SOLVED = "solved"
STATUS_WRONG = "wrong"
STATUS_POOL_NOT_EMPTY = "pool_not_empty"
STATUS_GAME_OVER = "game_over"


class PlacementError(ValueError):
    """盤面に対する操作が不正なときに送出されます。"""


@dataclass
class SubmitResult:
    """
    提出 1 回分の結果です。

    Attributes
    ----------
    status : str
        "solved" / "wrong" / "pool_not_empty" / "game_over"
    solved : bool
        正解したかどうか。
    verdicts : list of Verdict
        制約ごとの判定結果（判定しなかった場合は空）。
    """

    status: str
    solved: bool
    verdicts: List[Verdict] = field(default_factory=list)


class GameSession:
    """
    1 問分のゲーム状態です。

    組み立てモードでは手持ちの数字（available_digits）を盤面に置いていき、
    評価モードでは埋まった盤面を見て「満たしている条件」を選びます。
    """

    def __init__(self, puzzle: Puzzle, score: int = 0, health: int = INITIAL_HEALTH) -> None:
        self.puzzle = puzzle
        self.score = score
        self.health = health
        self._load()

    def _load(self) -> None:
        self.grid: Dict[CellCoord, Optional[int]] = {
            cell: None for cell in self.puzzle.layout.cells
        }
        if self.puzzle.is_evaluation:
            for slot in self.puzzle.slots:
                for pos, digit in zip(slot.positions, slot.prefilled or ()):
                    self.grid[pos] = digit
            self.available_digits: List[int] = []
        else:
            self.available_digits = list(self.puzzle.digits)
        self.selected_conditions: Set[str] = set()
        self._clear_submission()

    def _clear_submission(self) -> None:
        self.is_submitted = False
        self.verdicts: List[Verdict] = []

    # ------------------------------------------------------------------
    # 状態の参照
    # ------------------------------------------------------------------

    def assignment(self) -> Dict[CellCoord, Optional[int]]:
        """判定エンジンに渡す盤面のスナップショット（コピー）を返します。"""
        return dict(self.grid)

    @property
    def is_game_over(self) -> bool:
        return self.health <= 0

    # ------------------------------------------------------------------
    # 盤面の操作
    # ------------------------------------------------------------------

    def _check_editable(self, *cells: CellCoord) -> None:
        if self.puzzle.is_evaluation:
            raise PlacementError(f"Puzzle {self.puzzle.puzzle_id} is read-only")
        for cell in cells:
            if cell not in self.grid:
                raise PlacementError(f"Cell {cell} is not part of the puzzle")

    def place(self, cell: CellCoord, pool_index: int) -> None:
        """
        手持ちの pool_index 番目の数字を cell に置きます。

        cell にすでに数字があれば、それを手持ちに戻してから置きます。
        """
        self._check_editable(cell)
        if not 0 <= pool_index < len(self.available_digits):
            raise PlacementError(f"No digit at pool index {pool_index}")

        digit = self.available_digits.pop(pool_index)
        previous = self.grid[cell]
        if previous is not None:
            self.available_digits.append(previous)
        self.grid[cell] = digit
        self._clear_submission()

    def remove(self, cell: CellCoord) -> int:
        """cell の数字を手持ちに戻し、その数字を返します。"""
        self._check_editable(cell)
        digit = self.grid[cell]
        if digit is None:
            raise PlacementError(f"Cell {cell} is empty")

        self.grid[cell] = None
        self.available_digits.append(digit)
        self._clear_submission()
        return digit

    def move(self, source: CellCoord, target: CellCoord) -> None:
        """
        source の数字を target に移します。

        target に数字があれば入れ替え、無ければ source は空になります。
        """
        self._check_editable(source, target)
        digit = self.grid[source]
        if digit is None:
            raise PlacementError(f"Cell {source} is empty")
        if source == target:
            return

        self.grid[source] = self.grid[target]
        self.grid[target] = digit
        self._clear_submission()

    def toggle_condition(self, constraint_id: str) -> bool:
        """
        評価モードで条件の選択を切り替え、切り替え後に選ばれているかを返します。
        """
        if not self.puzzle.is_evaluation:
            raise PlacementError(f"Puzzle {self.puzzle.puzzle_id} has no conditions to select")
        if constraint_id not in {c.constraint_id for c in self.puzzle.constraints}:
            raise PlacementError(f"Unknown condition {constraint_id!r}")

        if constraint_id in self.selected_conditions:
            self.selected_conditions.remove(constraint_id)
        else:
            self.selected_conditions.add(constraint_id)
        self._clear_submission()
        return constraint_id in self.selected_conditions

    # ------------------------------------------------------------------
    # 提出
    # ------------------------------------------------------------------

    def submit(self) -> SubmitResult:
        """
        いまの盤面を判定します。

        - 組み立てモードで手持ちの数字が残っていれば判定せずに "pool_not_empty"
        - 正解ならスコア加算、不正解ならライフを減らします
        """
        if self.is_game_over:
            return SubmitResult(status=STATUS_GAME_OVER, solved=False)

        if not self.puzzle.is_evaluation and self.available_digits:
            return SubmitResult(status=STATUS_POOL_NOT_EMPTY, solved=False)

        verdicts = validate_constraints(self.puzzle, self.assignment())
        self.verdicts = verdicts
        self.is_submitted = True

        if self.puzzle.is_evaluation:
            satisfied = {v.constraint_id for v in verdicts if v.satisfied}
            solved = satisfied == self.selected_conditions
        else:
            solved = is_solved(verdicts)

        if solved:
            self.score += SCORE_PER_SOLVE
            status = STATUS_SOLVED
        else:
            self.health -= HEALTH_PER_MISS
            status = STATUS_GAME_OVER if self.is_game_over else STATUS_WRONG

        logger.info(
            "Puzzle %s submitted: %s (score=%d, health=%d)",
            self.puzzle.puzzle_id,
            status,
            self.score,
            self.health,
        )
        return SubmitResult(status=status, solved=solved, verdicts=verdicts)

    def reset(self) -> None:
        """盤面と手持ちを初期状態に戻します（スコアとライフは保持）。"""
        self._load()


class GameRun:
    """
    複数のパズルを順番に解く 1 回分のプレイです。

    スコアとライフは次の問題に持ち越されます。
    """

    def __init__(self, puzzles: Sequence[Puzzle], health: int = INITIAL_HEALTH) -> None:
        if not puzzles:
            raise ValueError("A run needs at least one puzzle")
        self.puzzles = list(puzzles)
        self.index = 0
        self.session = GameSession(self.puzzles[0], score=0, health=health)
        self._solved_current = False

    @property
    def score(self) -> int:
        return self.session.score

    @property
    def health(self) -> int:
        return self.session.health

    @property
    def finished(self) -> bool:
        return self.index >= len(self.puzzles)

    @property
    def current_puzzle(self) -> Optional[Puzzle]:
        return None if self.finished else self.puzzles[self.index]

    def submit(self) -> SubmitResult:
        result = self.session.submit()
        if result.solved:
            self._solved_current = True
        return result

    def next_puzzle(self) -> Optional[Puzzle]:
        """
        いまの問題が解けていれば次の問題に進み、そのパズルを返します。

        最後の問題を解き終えたら None を返し、finished が True になります。
        """
        if not self._solved_current:
            raise PlacementError("The current puzzle is not solved yet")

        self.index += 1
        self._solved_current = False
        if self.finished:
            logger.info("Run finished with score %d", self.score)
            return None

        self.session = GameSession(
            self.puzzles[self.index], score=self.session.score, health=self.session.health
        )
        return self.session.puzzle
