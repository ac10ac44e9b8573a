from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from areacodes.core.errors import (
    DatasetNotFoundError,
    DatasetReadError,
    DecodingFailedError,
    InvalidDataError,
)
from areacodes.dataset.loader import DatasetLoader, parse_dataset
from areacodes.dataset.source import DirectoryDatasetSource, PackagedDatasetSource


def _row(code: str, e164: str, **extra: Any) -> dict[str, Any]:
    out: dict[str, Any] = {"code": code, "country_code": "BY", "e164": e164}
    out.update(extra)
    return out


def _write(directory: Path, country_code: str, payload: Any) -> None:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    (directory / f"{country_code.lower()}.json").write_text(text, encoding="utf-8")


def test_packaged_source_lists_bundled_countries() -> None:
    assert PackagedDatasetSource().available() == ["AU", "BY", "CA", "DE", "FR", "GB", "US"]


def test_load_bundled_dataset_preserves_row_order() -> None:
    records = DatasetLoader(PackagedDatasetSource()).load("by")
    assert [r.code for r in records][:2] == ["17", "152"]
    assert all(r.country_code == "BY" for r in records)
    assert all(r.e164 == "375" + r.code for r in records)


def test_missing_resource_raises_not_found(tmp_path: Path) -> None:
    loader = DatasetLoader(DirectoryDatasetSource(tmp_path))
    with pytest.raises(DatasetNotFoundError) as info:
        loader.load("FR")
    assert info.value.country_code == "FR"


def test_unsupported_country_raises_not_found(tmp_path: Path) -> None:
    _write(tmp_path, "JP", [])
    with pytest.raises(DatasetNotFoundError):
        DatasetLoader(DirectoryDatasetSource(tmp_path)).load("JP")


def test_optional_fields_default_to_empty(tmp_path: Path) -> None:
    _write(tmp_path, "BY", [_row("17", "37517", notes=42, city=None, region="Minsk")])
    (record,) = DatasetLoader(DirectoryDatasetSource(tmp_path)).load("BY")
    assert record.notes == ""
    assert record.city == ""
    assert record.region == "Minsk"


@pytest.mark.parametrize("missing", ["code", "country_code", "e164"])
def test_missing_required_field_fails_whole_load(missing: str) -> None:
    good = _row("17", "37517")
    bad = _row("152", "375152")
    del bad[missing]
    with pytest.raises(InvalidDataError) as info:
        parse_dataset(json.dumps([good, bad]), country_code="BY")
    assert missing in info.value.detail
    assert info.value.country_code == "BY"


def test_inconsistent_rows_are_invalid() -> None:
    with pytest.raises(InvalidDataError):
        parse_dataset(json.dumps([_row("17", "37518")]), country_code="BY")
    with pytest.raises(InvalidDataError):
        parse_dataset(json.dumps([_row("1-7", "3751-7")]), country_code="BY")
    with pytest.raises(InvalidDataError):
        parse_dataset(json.dumps([_row("17", "37517")]), country_code="DE")


@pytest.mark.parametrize("payload", ['[{"code": "17",', '{"code": "17"}', '["17"]'])
def test_structural_errors_raise_decoding_failed(payload: str) -> None:
    with pytest.raises(DecodingFailedError):
        parse_dataset(payload, country_code="BY")


def test_undecodable_file_raises_decoding_failed(tmp_path: Path) -> None:
    (tmp_path / "by.json").write_bytes(b'[{"code": "17", "city": "\xff"}]')
    with pytest.raises(DecodingFailedError) as info:
        DatasetLoader(DirectoryDatasetSource(tmp_path)).load("BY")
    assert info.value.country_code == "BY"
    assert "UTF-8" in info.value.detail


def test_unreadable_file_raises_read_error(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    _write(tmp_path, "BY", [_row("17", "37517")])

    def deny(self: Path, *args: Any, **kwargs: Any) -> str:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_text", deny)
    with pytest.raises(DatasetReadError) as info:
        DatasetLoader(DirectoryDatasetSource(tmp_path)).load("BY")
    assert info.value.country_code == "BY"
    assert "Permission denied" in info.value.detail
