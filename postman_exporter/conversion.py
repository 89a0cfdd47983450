"""Fetch one collection and run it through the converter.

The converter works on files, so each conversion writes the collection to
``temp-<uid>.json`` and reads the document back from ``openapi-<uid>.<ext>``
inside the work directory. Both files are removed on every exit path.
Names only depend on the collection uid: converting the same uid twice at
the same time in the same work directory is not supported.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from postman_exporter.client import PostmanClient
from postman_exporter.converters import ConversionOptions, Converter, OutputFormat
from postman_exporter.errors import CollectionFetchError, ConversionError
from postman_exporter.utils.logging import get_logger

logger = get_logger(__name__)


def _remove_if_exists(path: Path) -> None:
    """Best-effort removal; a failure is logged and never raised."""
    try:
        if path.exists():
            path.unlink()
    except OSError as e:
        logger.warning("Failed to remove transient file", path=str(path), error=str(e))


class ConversionAdapter:
    """Wraps a Converter with the fetch/write/convert/read/cleanup protocol."""

    def __init__(
        self,
        client: PostmanClient,
        converter: Converter,
        *,
        work_dir: str | Path | None = None,
        output_format: OutputFormat = "json",
    ) -> None:
        self._client = client
        self._converter = converter
        self._work_dir = Path(work_dir) if work_dir else None
        self._output_format = output_format

    @property
    def work_dir(self) -> Path:
        return self._work_dir or Path.cwd()

    def transient_paths(self, collection_uid: str) -> tuple[Path, Path]:
        """Return the (input, output) transient paths for a collection."""
        extension = "yaml" if self._output_format == "yaml" else "json"
        return (
            self.work_dir / f"temp-{collection_uid}.json",
            self.work_dir / f"openapi-{collection_uid}.{extension}",
        )

    def convert(self, collection_uid: str, credential: str) -> dict[str, Any]:
        """Convert one collection to an OpenAPI document.

        Args:
            collection_uid: Collection uid from the workspace listing
            credential: Postman API key

        Returns:
            The parsed OpenAPI document

        Raises:
            ConversionError: any failure while fetching, converting or reading;
                the original exception is available as ``cause``
        """
        slog = logger.bind(uid=collection_uid)
        input_path, output_path = self.transient_paths(collection_uid)

        try:
            slog.debug("Getting collection")
            data = self._client.request(f"/collections/{collection_uid}", credential)
            collection = data.get("collection")
            if not isinstance(collection, dict):
                raise CollectionFetchError(collection_uid)

            info = collection.get("info") or {}
            default_tag = info.get("name") or collection_uid

            try:
                input_path.write_text(
                    json.dumps(collection, indent=2, ensure_ascii=False),
                    encoding="utf-8",
                )

                slog.debug("Converting to OpenAPI", input=str(input_path))
                self._converter.convert(
                    input_path,
                    output_path,
                    ConversionOptions(
                        default_tag=default_tag, output_format=self._output_format
                    ),
                )

                return self._read_document(output_path)
            finally:
                _remove_if_exists(input_path)
                _remove_if_exists(output_path)
        except Exception as e:
            slog.debug("Conversion failed", error=str(e))
            raise ConversionError(collection_uid, e) from e

    def _read_document(self, path: Path) -> dict[str, Any]:
        text = path.read_text(encoding="utf-8")
        if self._output_format == "yaml":
            document = yaml.safe_load(text)
        else:
            document = json.loads(text)
        if not isinstance(document, dict):
            raise ValueError(f"Converter output is not a document: {path}")
        return document
