from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from crossnum import validate_board, validate_constraints
from crossnum.grid.parser import assignment_from_cell_ids
from crossnum.logging_utils import get_logger
from crossnum.postprocess.render_result import build_puzzle_summary, build_result
from crossnum.puzzles.catalog import get_puzzle, list_puzzles

logger = get_logger("api")

app = FastAPI()


class ValidateRequest(BaseModel):
    puzzle_id: str
    board: Optional[List[List[Any]]] = None  # 2D array (rows x cols)
    cells: Optional[Dict[str, Optional[int]]] = None  # {"row,col": digit or null}


def _get_puzzle_or_404(puzzle_id: str):
    try:
        return get_puzzle(puzzle_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown puzzle: {puzzle_id}")


@app.get("/api/puzzles")
async def api_list_puzzles():
    """
    Catalog endpoint. Returns id / title / mode of every bundled puzzle.
    """
    return [
        {"id": p.puzzle_id, "title": p.title, "mode": p.mode}
        for p in list_puzzles()
    ]


@app.get("/api/puzzles/{puzzle_id}")
async def api_get_puzzle(puzzle_id: str):
    puzzle = _get_puzzle_or_404(puzzle_id)
    return build_puzzle_summary(puzzle)


@app.post("/api/validate")
async def api_validate(request: ValidateRequest):
    """
    Validation endpoint.
    Receives either a 2D board or a cell map, and returns per-condition verdicts.
    """
    puzzle = _get_puzzle_or_404(request.puzzle_id)
    logger.info("POST /api/validate puzzle=%s", request.puzzle_id)

    try:
        if request.board is not None:
            # 2D配列をDataFrameに変換
            df = pd.DataFrame(request.board, dtype=object)
            return validate_board(puzzle, df)

        assignment = assignment_from_cell_ids(request.cells or {}, puzzle.layout)
        verdicts = validate_constraints(puzzle, assignment)
        return build_result(puzzle, assignment, verdicts)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
