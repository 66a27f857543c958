# -*- coding: utf-8 -*-
"""
crossnum.grid パッケージ

盤面（グリッド）に関する処理をまとめたサブパッケージです。
- parser.py        : セル ID・盤面データから内部表現への変換
- slot_resolver.py : スロットに並んだマスから数字列を取り出す
"""
