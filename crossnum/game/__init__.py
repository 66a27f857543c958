# -*- coding: utf-8 -*-
"""
crossnum.game パッケージ

盤面の操作や提出など、判定エンジンの外側にあるゲーム進行をまとめています。
"""
