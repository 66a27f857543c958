# -*- coding: utf-8 -*-
"""
crossnum.engine パッケージ

制約の判定エンジンです。
- rules.py         : 最大・最小の並び、重複、位取りなど数字列の計算
- direct_answer.py : 正解の数字列による一括判定
- evaluator.py     : 制約の種類ごとの評価と全体の判定
"""

from .evaluator import evaluate_constraint, is_solved, validate_constraints

__all__ = ["evaluate_constraint", "is_solved", "validate_constraints"]
