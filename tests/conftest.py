"""Shared test fixtures for crossnum tests."""

import pytest

from crossnum.puzzles.catalog import get_puzzle
from crossnum.puzzles.loader import load_puzzle


def _fill(puzzle, **slot_digits):
    """Build an assignment with every active cell empty, then write slot digits in order."""
    assignment = {cell: None for cell in puzzle.layout.cells}
    for slot_id, digits in slot_digits.items():
        slot = puzzle.find_slot(slot_id)
        for pos, d in zip(slot.positions, digits):
            assignment[pos] = d
    return assignment


@pytest.fixture
def fill():
    return _fill


@pytest.fixture
def q4():
    return get_puzzle("q4")


@pytest.fixture
def make_puzzle():
    """Build a one-row puzzle whose single slot 'n' spans `length` cells."""

    def _make(constraints, length=4, **extra):
        data = {
            "id": "t",
            "layout": {
                "rows": 1,
                "cols": length,
                "cells": {f"0,{j}": {} for j in range(length)},
            },
            "slots": [{"id": "n", "label": "N", "cells": [f"0,{j}" for j in range(length)]}],
            "constraints": constraints,
        }
        data.update(extra)
        return load_puzzle(data)

    return _make
