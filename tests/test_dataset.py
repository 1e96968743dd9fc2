"""Tests for dataset loading and record access."""

import math
from pathlib import Path
from typing import Any

import httpx
import pytest
import respx

from jmu_sankey.dataset import (
    Dataset,
    DatasetLoadError,
    InvalidValueError,
    MissingCollectionError,
    MissingFieldError,
    Record,
    load_dataset,
)

DATASET_URL = "https://example.org/data/jmu.json"


class TestRecord:
    """Tests for typed record field access."""

    def _record(self, **fields: Any) -> Record:
        return Record("student-costs", 3, fields)

    def test_text_field(self) -> None:
        assert self._record(name="Housing").text("name") == "Housing"

    def test_text_field_stringifies(self) -> None:
        assert self._record(name=2023).text("name") == "2023"

    def test_text_field_missing(self) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            self._record().text("name")

        error = exc_info.value
        assert error.collection == "student-costs"
        assert error.index == 3
        assert error.field == "name"
        assert str(error) == "student-costs[3] field 'name': missing"

    def test_null_counts_as_missing(self) -> None:
        with pytest.raises(MissingFieldError):
            self._record(name=None).text("name")

    def test_number_field(self) -> None:
        assert self._record(amount=12.5).number("amount") == 12.5

    def test_optional_number_missing(self) -> None:
        assert self._record().number("amount", required=False) is None

    def test_number_rejects_strings(self) -> None:
        with pytest.raises(InvalidValueError, match="expected a number"):
            self._record(amount="100").number("amount")

    def test_number_rejects_bools(self) -> None:
        with pytest.raises(InvalidValueError):
            self._record(amount=True).number("amount")

    def test_number_rejects_non_finite(self) -> None:
        with pytest.raises(InvalidValueError, match="not finite"):
            self._record(amount=math.inf).number("amount")

    def test_number_rejects_integer_too_large_for_float(self) -> None:
        with pytest.raises(InvalidValueError, match="too large"):
            self._record(amount=10**400).number("amount")

    def test_amount_rejects_negative(self) -> None:
        with pytest.raises(InvalidValueError, match="negative"):
            self._record(amount=-1).amount("amount")

    def test_amount_allows_zero(self) -> None:
        assert self._record(amount=0).amount("amount") == 0


class TestDataset:
    """Tests for sub-collection access."""

    def test_collection(self, dataset: Dataset) -> None:
        assert len(dataset.collection("jmu-athletics")) == 3

    def test_names(self, dataset: Dataset) -> None:
        assert dataset.names == ["student-costs", "jmu-revenues", "jmu-athletics"]

    def test_missing_collection(self) -> None:
        dataset = Dataset({"student-costs": []})

        with pytest.raises(MissingCollectionError) as exc_info:
            dataset.collection("jmu-revenues")

        assert exc_info.value.name == "jmu-revenues"
        assert exc_info.value.available == ["student-costs"]

    def test_non_list_collection_counts_as_missing(self) -> None:
        with pytest.raises(MissingCollectionError):
            Dataset({"jmu-revenues": {"type": "x"}}).collection("jmu-revenues")

    def test_records_skip_non_objects(self) -> None:
        dataset = Dataset({"jmu-athletics": [{"name": "A"}, "junk", None, {"name": "B"}]})

        records = dataset.records("jmu-athletics")

        assert [r.text("name") for r in records] == ["A", "B"]
        assert [r.index for r in records] == [0, 3]

    def test_top_level_is_read_only(self, dataset_dict: dict[str, Any]) -> None:
        dataset = Dataset(dataset_dict)
        dataset_dict["extra"] = []

        assert "extra" not in dataset.names


class TestLoadDatasetFromFile:
    """Tests for loading the dataset from a local file."""

    @pytest.mark.asyncio
    async def test_load_file(self, dataset_path: Path) -> None:
        dataset = await load_dataset(str(dataset_path))

        assert "student-costs" in dataset.names

    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DatasetLoadError, match="Failed to read"):
            await load_dataset(str(tmp_path / "nope.json"))

    @pytest.mark.asyncio
    async def test_non_utf8_file(self, tmp_path: Path) -> None:
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"a": "\xff\xfe"}')

        with pytest.raises(DatasetLoadError, match="Failed to read"):
            await load_dataset(str(path))

    @pytest.mark.asyncio
    async def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(DatasetLoadError, match="not valid JSON"):
            await load_dataset(str(path))

    @pytest.mark.asyncio
    async def test_non_object_document(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")

        with pytest.raises(DatasetLoadError, match="must be a JSON object"):
            await load_dataset(str(path))


class TestLoadDatasetFromURL:
    """Tests for fetching the dataset over HTTP."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch(self, dataset_dict: dict[str, Any]) -> None:
        route = respx.get(DATASET_URL).mock(return_value=httpx.Response(200, json=dataset_dict))

        dataset = await load_dataset(DATASET_URL)

        assert route.called
        assert dataset.names == list(dataset_dict)
        assert route.calls.last.request.headers["User-Agent"].startswith("jmu-sankey/")

    @pytest.mark.asyncio
    @respx.mock
    async def test_http_error_status(self) -> None:
        respx.get(DATASET_URL).mock(return_value=httpx.Response(404))

        with pytest.raises(DatasetLoadError, match="HTTP 404"):
            await load_dataset(DATASET_URL)

    @pytest.mark.asyncio
    @respx.mock
    async def test_transport_error(self) -> None:
        respx.get(DATASET_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(DatasetLoadError, match="connection refused"):
            await load_dataset(DATASET_URL)

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_json_body(self) -> None:
        respx.get(DATASET_URL).mock(return_value=httpx.Response(200, text="<html></html>"))

        with pytest.raises(DatasetLoadError, match="not valid JSON"):
            await load_dataset(DATASET_URL)
