"""
Persistence adapters.

Each entity type lives in its own JSON file holding a single array.
Services depend on ``FileRepository`` instead of touching the files.
"""

from .json_storage import FileRepository, StorageError

__all__ = ["FileRepository", "StorageError"]
