# src/shared/__init__.py
"""
Общие DTO HTTP слоя.
"""
