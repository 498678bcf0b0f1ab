"""Adapters layer - 外部データソースの実装"""
