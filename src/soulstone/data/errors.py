"""Custom exceptions for content loading and validation."""


class DataError(Exception):
    """Base exception for the data layer."""


class DataLoadError(DataError):
    """Raised when JSON files are missing or invalid."""


class DataValidationError(DataError):
    """Raised when JSON content fails structural validation."""


class DataReferenceError(DataError):
    """Raised when content references missing related data."""


class ContentNotFoundError(DataError, KeyError):
    """Raised when a record is requested by an identifier that has no content."""

    kind = "content"

    def __init__(self, record_id: str) -> None:
        super().__init__(record_id)
        self.record_id = record_id

    def __str__(self) -> str:
        return f"Unknown {self.kind} '{self.record_id}'."


class RoomNotFoundError(ContentNotFoundError):
    kind = "room"


class QuestNotFoundError(ContentNotFoundError):
    kind = "quest"


class MapNotFoundError(ContentNotFoundError):
    kind = "map"
