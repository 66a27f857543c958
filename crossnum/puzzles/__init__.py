# -*- coding: utf-8 -*-
"""
crossnum.puzzles パッケージ

パズルデータの読み込みと管理をまとめたサブパッケージです。
- loader.py    : dict / JSON → Puzzle への変換
- catalog.py   : 同梱パズルの一覧
- integrity.py : 作問時にデータの整合性をチェックする
"""
