# -*- coding: utf-8 -*-
"""
数字列に対する純粋な計算をまとめたモジュールです。

制約の評価（evaluator.py）はここにある関数を組み合わせて判定します。
どの関数も引数を書き換えません。
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..types import Place


def has_repeat(digits: Sequence[int]) -> bool:
    """同じ数字が 2 回以上出てくれば True。"""
    return len(set(digits)) != len(digits)


def first_repeated(digits: Sequence[int]) -> Optional[int]:
    """最初に重複が見つかった数字を返します。重複が無ければ None。"""
    seen = set()
    for d in digits:
        if d in seen:
            return d
        seen.add(d)
    return None


def greatest_arrangement(digits: Sequence[int]) -> Tuple[int, ...]:
    """
    同じ数字の組で作れる最大の並びを返します。

    降順に並べるだけで十分です（全部 0 でない限り先頭は 0 になりません）。
    """
    return tuple(sorted(digits, reverse=True))


def smallest_arrangement(digits: Sequence[int]) -> Tuple[int, ...]:
    """
    同じ数字の組で作れる最小の並びを返します（先頭 0 は避ける）。

    昇順に並べたあと、先頭が 0 で 2 桁以上あるなら、
    左から見て最初の 0 でない数字と先頭を入れ替えます。

    例: (0, 0, 1) -> (1, 0, 0), (3, 0, 1) -> (1, 0, 3)
    """
    ordered: List[int] = sorted(digits)
    if len(ordered) > 1 and ordered[0] == 0:
        for i, d in enumerate(ordered):
            if d != 0:
                ordered[0], ordered[i] = ordered[i], ordered[0]
                break
    return tuple(ordered)


def digit_at_place(digits: Sequence[int], place: Place) -> Optional[int]:
    """
    一の位・十の位…の数字を取り出します。

    数字列は先頭が最上位の桁なので、一の位は末尾の要素です。
    桁数が足りない場合は None を返します。
    """
    index = len(digits) - 1 - int(place)
    if index < 0:
        return None
    return digits[index]
