"""Base repository implementations for JSON content."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Generic, List, Type, TypeVar

from soulstone.data import paths
from soulstone.data.errors import ContentNotFoundError, DataValidationError
from soulstone.data.json_loader import load_json
from soulstone.domain.flags import FLAG_VALUES, is_valid_flag_value

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ContentValidation:
    """Structural checks shared by every repository."""

    @staticmethod
    def _require_mapping(value: object, context: str) -> dict[str, object]:
        if not isinstance(value, dict):
            raise DataValidationError(f"{context} must be an object.")
        return value

    @staticmethod
    def _require_list(value: object, context: str) -> list[object]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        return value

    @staticmethod
    def _require_str(value: object, context: str) -> str:
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string.")
        return value

    @staticmethod
    def _optional_str(value: object, context: str) -> str | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise DataValidationError(f"{context} must be a string if provided.")
        return value

    @staticmethod
    def _require_int(value: object, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise DataValidationError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_bool(value: object, context: str) -> bool:
        if not isinstance(value, bool):
            raise DataValidationError(f"{context} must be a boolean.")
        return value

    @staticmethod
    def _require_number(value: object, context: str) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"{context} must be a number.")
        return float(value)

    @staticmethod
    def _require_str_list(value: object, context: str) -> List[str]:
        if not isinstance(value, list):
            raise DataValidationError(f"{context} must be a list.")
        result: List[str] = []
        for entry in value:
            if not isinstance(entry, str):
                raise DataValidationError(f"{context} entries must be strings.")
            result.append(entry)
        return result

    @staticmethod
    def _require_flag_value(value: object, context: str) -> str:
        if not is_valid_flag_value(value):
            raise DataValidationError(
                f"{context} must be one of {', '.join(FLAG_VALUES)} (found {value!r})."
            )
        return value  # type: ignore[return-value]

    @staticmethod
    def _assert_known_fields(payload: dict[str, object], allowed_keys: set[str], context: str) -> None:
        unknown = set(payload.keys()) - allowed_keys
        if unknown:
            raise DataValidationError(f"{context} has unknown fields: {sorted(unknown)}.")


class RepositoryBase(ContentValidation, Generic[T]):
    """Caching and loading for a single catalog file of definitions."""

    def __init__(self, filename: str, base_path: Path | str | None = None) -> None:
        self._filename = filename
        self._base_path = Path(base_path) if base_path is not None else None
        self._definitions: Dict[str, T] | None = None

    def _get_file_path(self) -> Path:
        return paths.get_content_path(self._base_path) / self._filename

    def _load_raw(self) -> dict[str, object]:
        file_path = self._get_file_path()
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        return raw

    def _build(self, raw: dict[str, object]) -> Dict[str, T]:
        """Convert a raw dict into typed definitions."""
        raise NotImplementedError

    def _ensure_loaded(self) -> None:
        if self._definitions is None:
            raw = self._load_raw()
            self._definitions = self._build(raw)

    def get(self, def_id: str) -> T:
        """Return a definition by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        try:
            return self._definitions[def_id]
        except KeyError as exc:
            raise KeyError(def_id) from exc

    def all(self) -> list[T]:
        """Return all definitions sorted deterministically by id."""
        self._ensure_loaded()
        assert self._definitions is not None
        return [self._definitions[key] for key in sorted(self._definitions.keys())]


class RecordRepositoryBase(ContentValidation, Generic[T]):
    """Caching and loading for content stored as one JSON file per record id."""

    not_found_error: Type[ContentNotFoundError] = ContentNotFoundError

    def __init__(self, folder: str, base_path: Path | str | None = None) -> None:
        self._folder = folder
        self._base_path = Path(base_path) if base_path is not None else None
        self._records: Dict[str, T] = {}

    def _get_folder_path(self) -> Path:
        return paths.get_content_path(self._base_path) / self._folder

    def _build(self, record_id: str, raw: dict[str, object]) -> T:
        """Convert one raw record into a typed definition."""
        raise NotImplementedError

    def exists(self, record_id: str) -> bool:
        if not self._is_safe_id(record_id):
            return False
        return record_id in self._records or (self._get_folder_path() / f"{record_id}.json").is_file()

    def get(self, record_id: str) -> T:
        """Return a record by id, loading and caching it on first use."""
        cached = self._records.get(record_id)
        if cached is not None:
            return cached
        if not self.exists(record_id):
            raise self.not_found_error(record_id)
        file_path = self._get_folder_path() / f"{record_id}.json"
        raw = load_json(file_path)
        if not isinstance(raw, dict):
            raise DataValidationError(f"Expected top-level object in {file_path}")
        record = self._build(record_id, raw)
        self._records[record_id] = record
        logger.debug("Loaded %s record '%s'", self._folder, record_id)
        return record

    def ids(self) -> list[str]:
        """Return every record id available on disk, sorted."""
        folder = self._get_folder_path()
        if not folder.is_dir():
            return sorted(self._records.keys())
        on_disk = {path.stem for path in folder.glob("*.json")}
        return sorted(on_disk | set(self._records.keys()))

    def all(self) -> list[T]:
        """Return all records sorted deterministically by id."""
        return [self.get(record_id) for record_id in self.ids()]

    @staticmethod
    def _is_safe_id(record_id: object) -> bool:
        if not isinstance(record_id, str) or not record_id:
            return False
        return "/" not in record_id and "\\" not in record_id and ".." not in record_id
