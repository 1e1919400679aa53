"""
CPUアーキテクチャ実装パッケージ。
"""
