# -*- coding: utf-8 -*-
"""
ログ出力の設定を行うモジュールです。

crossnum パッケージ内のモジュールは、ここで作ったロガー
（またはその子ロガー）を通してメッセージを出します。
"""

from __future__ import annotations

import logging

from .config import LOG_LEVEL

# crossnum パッケージ共通で使うロガー名
LOGGER_NAME = "crossnum"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    crossnum 全体で共通して使う logger を返します。

    name を渡した場合は "crossnum.<name>" の子ロガーを返します。
    親ロガーにハンドラがまだ無い場合だけ、標準出力（コンソール）への
    ハンドラを 1 つ追加します。
    """
    root = logging.getLogger(LOGGER_NAME)

    # まだハンドラが設定されていなければ、簡単な設定を行う
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(LOG_LEVEL)

    if name:
        return root.getChild(name)
    return root
