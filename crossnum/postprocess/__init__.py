# -*- coding: utf-8 -*-
"""
crossnum.postprocess パッケージ

判定結果を画面や API 向けの形に整えるサブパッケージです。
"""
