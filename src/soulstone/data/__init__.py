"""Data layer utilities for loading JSON content."""

from .errors import (
    ContentNotFoundError,
    DataError,
    DataLoadError,
    DataReferenceError,
    DataValidationError,
    MapNotFoundError,
    QuestNotFoundError,
    RoomNotFoundError,
)
from .paths import get_content_path, get_repo_root

__all__ = [
    "ContentNotFoundError",
    "DataError",
    "DataLoadError",
    "DataReferenceError",
    "DataValidationError",
    "MapNotFoundError",
    "QuestNotFoundError",
    "RoomNotFoundError",
    "get_content_path",
    "get_repo_root",
]
