"""Budget dataset loading and record access.

The dataset is a single JSON object whose top-level keys name sub-collections
(``student-costs``, ``jmu-revenues``, ``jmu-athletics``), each a list of flat
records. It is fetched once, then shared read-only by every diagram build.
"""

import asyncio
import json
import logging
import math
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import httpx

from jmu_sankey import __version__

logger = logging.getLogger(__name__)


class DatasetError(Exception):
    """Base exception for dataset problems."""


class DatasetLoadError(DatasetError):
    """Raised when the dataset cannot be fetched or parsed."""


class MissingCollectionError(DatasetError):
    """Raised when a sub-collection is absent from a loaded dataset."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Dataset has no '{name}' collection (available: {', '.join(available) or 'none'})"
        )


class RecordError(DatasetError):
    """Base exception for a single record that cannot be used."""

    def __init__(self, collection: str, index: int, field: str, detail: str) -> None:
        self.collection = collection
        self.index = index
        self.field = field
        super().__init__(f"{collection}[{index}] field '{field}': {detail}")


class MissingFieldError(RecordError):
    """Raised when a record lacks a field the active rule requires."""

    def __init__(self, collection: str, index: int, field: str) -> None:
        super().__init__(collection, index, field, "missing")


class InvalidValueError(RecordError):
    """Raised when a record field holds an unusable value."""


class Record:
    """Read-only view of one dataset record with typed field access."""

    def __init__(self, collection: str, index: int, data: Mapping[str, Any]) -> None:
        self.collection = collection
        self.index = index
        self._data = data

    def get(self, field: str, default: Any = None) -> Any:
        return self._data.get(field, default)

    def text(self, field: str) -> str:
        """Return a required field as a string label."""
        value = self._data.get(field)
        if value is None:
            raise MissingFieldError(self.collection, self.index, field)
        return str(value)

    def number(self, field: str, *, required: bool = True) -> float | None:
        """Return a numeric field.

        Args:
            field: Field name.
            required: If False, an absent or null field returns None instead of raising.

        Raises:
            MissingFieldError: Field absent or null and required.
            InvalidValueError: Field is not a finite real number.
        """
        value = self._data.get(field)
        if value is None:
            if required:
                raise MissingFieldError(self.collection, self.index, field)
            return None
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidValueError(
                self.collection, self.index, field, f"expected a number, got {value!r}"
            )
        try:
            finite = math.isfinite(value)
        except OverflowError as e:
            raise InvalidValueError(
                self.collection, self.index, field, "integer too large for a float"
            ) from e
        if not finite:
            raise InvalidValueError(self.collection, self.index, field, f"not finite: {value!r}")
        return value

    def amount(self, field: str) -> float:
        """Return a required non-negative flow amount."""
        value = self.number(field)
        assert value is not None
        if value < 0:
            raise InvalidValueError(
                self.collection, self.index, field, f"negative amount {value!r}"
            )
        return value

    def __repr__(self) -> str:
        return f"Record({self.collection}[{self.index}])"


class Dataset:
    """Read-only budget dataset."""

    def __init__(self, data: Mapping[str, Any]) -> None:
        self._data = MappingProxyType(dict(data))

    @property
    def names(self) -> list[str]:
        """Names of the sub-collections present in the document."""
        return list(self._data.keys())

    def collection(self, name: str) -> tuple[Mapping[str, Any], ...]:
        """Return the records of a sub-collection.

        Raises:
            MissingCollectionError: If the collection is absent or not a list.
        """
        records = self._data.get(name)
        if not isinstance(records, list):
            raise MissingCollectionError(name, self.names)
        return tuple(records)

    def records(self, name: str) -> list[Record]:
        """Return a sub-collection wrapped as Record views.

        Entries that are not JSON objects are skipped with a warning.
        """
        result = []
        for index, data in enumerate(self.collection(name)):
            if not isinstance(data, Mapping):
                logger.warning("Skipping %s[%d]: not an object (%r)", name, index, data)
                continue
            result.append(Record(name, index, data))
        return result


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def _parse(text: str, source: str) -> Dataset:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        msg = f"Dataset at {source} is not valid JSON: {e}"
        raise DatasetLoadError(msg) from e

    if not isinstance(data, dict):
        msg = f"Dataset at {source} must be a JSON object, got {type(data).__name__}"
        raise DatasetLoadError(msg)

    return Dataset(data)


async def _fetch_url(source: str, timeout: float) -> str:
    headers = {"User-Agent": f"jmu-sankey/{__version__}", "Accept": "application/json"}
    try:
        async with httpx.AsyncClient(
            timeout=timeout, headers=headers, follow_redirects=True
        ) as client:
            response = await client.get(source)
            response.raise_for_status()
    except httpx.HTTPStatusError as e:
        msg = f"Failed to fetch dataset from {source}: HTTP {e.response.status_code}"
        raise DatasetLoadError(msg) from e
    except httpx.HTTPError as e:
        msg = f"Failed to fetch dataset from {source}: {e}"
        raise DatasetLoadError(msg) from e
    return response.text


async def _read_file(source: str) -> str:
    path = Path(source)
    try:
        return await asyncio.to_thread(path.read_text, encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        msg = f"Failed to read dataset from {path}: {e}"
        raise DatasetLoadError(msg) from e


async def load_dataset(source: str, *, timeout: float = 30.0) -> Dataset:
    """Fetch and parse the budget dataset.

    Args:
        source: Local file path or http(s) URL of the JSON document.
        timeout: Request timeout in seconds for URL sources.

    Returns:
        Parsed Dataset.

    Raises:
        DatasetLoadError: If the document cannot be fetched, read or parsed.
    """
    logger.info("Loading dataset from %s", source)
    if _is_url(source):
        text = await _fetch_url(source, timeout)
    else:
        text = await _read_file(source)

    dataset = _parse(text, source)
    logger.info("Loaded dataset with collections: %s", ", ".join(dataset.names))
    return dataset
