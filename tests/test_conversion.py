"""Tests for the conversion adapter and its cleanup guarantees."""

import json
from pathlib import Path

import pytest
import requests
import responses
import yaml

from postman_exporter.client import PostmanClient
from postman_exporter.conversion import ConversionAdapter
from postman_exporter.converters import ConversionOptions
from postman_exporter.errors import (
    CollectionFetchError,
    ConversionError,
    ConverterError,
    NetworkError,
)

API_BASE = "https://api.getpostman.com"


class FakeConverter:
    """Writes a fixed document and records what it was given."""

    def __init__(self, document=None, error: Exception | None = None, write_first=False):
        self.document = document or {"openapi": "3.0.0", "paths": {}}
        self.error = error
        self.write_first = write_first
        self.calls: list[tuple[Path, Path, ConversionOptions]] = []
        self.input_seen: dict | None = None

    def convert(self, input_path, output_path, options):
        self.calls.append((input_path, output_path, options))
        self.input_seen = json.loads(Path(input_path).read_text(encoding="utf-8"))
        if self.write_first:
            Path(output_path).write_text("partial", encoding="utf-8")
        if self.error:
            raise self.error
        if options.output_format == "yaml":
            Path(output_path).write_text(yaml.safe_dump(self.document), encoding="utf-8")
        else:
            Path(output_path).write_text(json.dumps(self.document), encoding="utf-8")


def _adapter(tmp_path, converter, output_format="json") -> ConversionAdapter:
    return ConversionAdapter(
        PostmanClient(API_BASE),
        converter,
        work_dir=tmp_path,
        output_format=output_format,
    )


def _leftovers(tmp_path: Path) -> list[str]:
    return sorted(p.name for p in tmp_path.iterdir())


@responses.activate
def test_convert_returns_document_and_cleans_up(tmp_path, collection_body):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)
    converter = FakeConverter(document={"openapi": "3.0.0", "info": {"title": "User API"}})

    document = _adapter(tmp_path, converter).convert("col1", "k")

    assert document["info"]["title"] == "User API"
    assert _leftovers(tmp_path) == []

    input_path, output_path, options = converter.calls[0]
    assert input_path == tmp_path / "temp-col1.json"
    assert output_path == tmp_path / "openapi-col1.json"
    assert options == ConversionOptions(default_tag="User API", output_format="json")
    assert converter.input_seen["info"]["name"] == "User API"


@responses.activate
def test_convert_reads_yaml_output(tmp_path, collection_body):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)
    converter = FakeConverter(document={"openapi": "3.0.0", "paths": {"/a": {}}})

    document = _adapter(tmp_path, converter, output_format="yaml").convert("col1", "k")

    assert document["paths"] == {"/a": {}}
    assert converter.calls[0][1].name == "openapi-col1.yaml"
    assert _leftovers(tmp_path) == []


@responses.activate
def test_missing_envelope_raises_collection_fetch_error(tmp_path):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json={"data": {}})
    converter = FakeConverter()

    with pytest.raises(ConversionError) as exc_info:
        _adapter(tmp_path, converter).convert("col1", "k")

    assert isinstance(exc_info.value.cause, CollectionFetchError)
    assert exc_info.value.collection_uid == "col1"
    assert converter.calls == []
    assert _leftovers(tmp_path) == []


@responses.activate
def test_converter_failure_cleans_both_files(tmp_path, collection_body):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)
    converter = FakeConverter(error=ConverterError("bad collection"), write_first=True)

    with pytest.raises(ConversionError, match="bad collection") as exc_info:
        _adapter(tmp_path, converter).convert("col1", "k")

    assert isinstance(exc_info.value.__cause__, ConverterError)
    assert _leftovers(tmp_path) == []


@responses.activate
def test_unparseable_output_cleans_up(tmp_path, collection_body):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)

    class GarbageConverter:
        def convert(self, input_path, output_path, options):
            Path(output_path).write_text("{not json", encoding="utf-8")

    with pytest.raises(ConversionError):
        _adapter(tmp_path, GarbageConverter()).convert("col1", "k")

    assert _leftovers(tmp_path) == []


@responses.activate
def test_converter_that_writes_nothing_fails_cleanly(tmp_path, collection_body):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)

    class SilentConverter:
        def convert(self, input_path, output_path, options):
            return None

    with pytest.raises(ConversionError) as exc_info:
        _adapter(tmp_path, SilentConverter()).convert("col1", "k")

    assert isinstance(exc_info.value.cause, FileNotFoundError)
    assert _leftovers(tmp_path) == []


@responses.activate
def test_input_write_failure_skips_converter(tmp_path, collection_body, mocker):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)
    mocker.patch.object(Path, "write_text", side_effect=OSError("disk full"))
    converter = FakeConverter()

    with pytest.raises(ConversionError, match="disk full") as exc_info:
        _adapter(tmp_path, converter).convert("col1", "k")

    assert isinstance(exc_info.value.cause, OSError)
    assert converter.calls == []
    assert _leftovers(tmp_path) == []


@responses.activate
def test_missing_work_dir_fails_cleanly(tmp_path, collection_body):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)
    converter = FakeConverter()

    with pytest.raises(ConversionError) as exc_info:
        _adapter(tmp_path / "gone", converter).convert("col1", "k")

    assert isinstance(exc_info.value.cause, FileNotFoundError)
    assert converter.calls == []
    assert _leftovers(tmp_path) == []


@responses.activate
def test_network_failure_is_wrapped(tmp_path):
    responses.add(
        responses.GET,
        f"{API_BASE}/collections/col1",
        body=requests.ConnectionError("refused"),
    )

    with pytest.raises(ConversionError) as exc_info:
        _adapter(tmp_path, FakeConverter()).convert("col1", "k")

    assert isinstance(exc_info.value.cause, NetworkError)


@responses.activate
def test_cleanup_failure_does_not_mask_original_error(tmp_path, collection_body, mocker):
    responses.add(responses.GET, f"{API_BASE}/collections/col1", json=collection_body)
    mocker.patch.object(Path, "unlink", side_effect=PermissionError("locked"))
    mock_logger = mocker.patch("postman_exporter.conversion.logger")

    converter = FakeConverter(error=ConverterError("original failure"))

    with pytest.raises(ConversionError, match="original failure"):
        _adapter(tmp_path, converter).convert("col1", "k")

    assert mock_logger.warning.called


def test_work_dir_defaults_to_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    adapter = ConversionAdapter(PostmanClient(API_BASE), FakeConverter())

    input_path, output_path = adapter.transient_paths("abc")

    assert input_path == tmp_path / "temp-abc.json"
    assert output_path == tmp_path / "openapi-abc.json"
