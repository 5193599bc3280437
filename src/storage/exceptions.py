# src/storage/exceptions.py
"""
Исключения слоя хранения.
"""


class StorageError(Exception):
    """Хранилище отклонило операцию."""
    pass


class StorageConnectionError(StorageError):
    """Не удалось подтвердить подключение к хранилищу."""
    pass
