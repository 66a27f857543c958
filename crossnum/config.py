# -*- coding: utf-8 -*-
"""
crossnum 全体で共通して使う設定値をまとめたモジュールです。

ここを編集することで
- ゲームの初期ライフ（health）やスコア加算量
- 盤面表示に使う記号
- ログレベル
などを変更できます。
"""

from __future__ import annotations

import os

# ==== ログ関連 =============================================================

# 環境変数 CROSSNUM_LOG_LEVEL で上書きできます（例: DEBUG）
LOG_LEVEL: str = os.getenv("CROSSNUM_LOG_LEVEL", "INFO").upper()

# ==== ゲーム進行 ===========================================================

# 1 問ごとに持ち越されるライフの初期値
INITIAL_HEALTH: int = 3

# 正解したときに加算されるスコア
SCORE_PER_SOLVE: int = 1

# 不正解のときに減るライフ
HEALTH_PER_MISS: int = 1

# 既定で表示するパズル ID
DEFAULT_PUZZLE_ID: str = "q4"

# ==== 盤面表示 =============================================================

# 盤面に含まれない（非アクティブな）マス
INACTIVE_CELL_MARK: str = "■"

# アクティブだがまだ数字が置かれていないマス
EMPTY_CELL_MARK: str = "_"
