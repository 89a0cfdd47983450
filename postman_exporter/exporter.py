"""Export the collections of a Postman workspace as OpenAPI documents.

Steps:
1. Check the required inputs (workspace, API key)
2. Create the output directory
3. Validate the workspace and the API key
4. List the workspace collections
5. Narrow them down by uid/name filters
6. Convert and write each collection, one at a time
7. Aggregate the per-collection results

Steps 1-5 abort the whole export. A failure in step 6 is recorded for that
collection and the batch moves on; step 7 raises BatchPartialFailureError
if anything failed, leaving the successful files in place.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from postman_exporter.client import PostmanClient
from postman_exporter.config import Settings, get_settings
from postman_exporter.conversion import ConversionAdapter
from postman_exporter.converters import Converter, get_converter
from postman_exporter.errors import (
    BatchPartialFailureError,
    MissingArgumentError,
    NoMatchError,
    PostmanExportError,
)
from postman_exporter.filtering import filter_collections
from postman_exporter.resolver import WorkspaceResolver
from postman_exporter.types import (
    CollectionSummary,
    ExportReport,
    ExportResult,
    WorkspaceSummary,
)
from postman_exporter.utils.logging import get_logger

logger = get_logger(__name__)

# Failures that stay inside one collection's export
ITEM_ERRORS = (PostmanExportError, OSError, TypeError, ValueError)


class WorkspaceExporter:
    """Runs the export pipeline for one workspace at a time."""

    def __init__(
        self,
        resolver: WorkspaceResolver,
        adapter: ConversionAdapter,
    ) -> None:
        self._resolver = resolver
        self._adapter = adapter

    def export(
        self,
        workspace: str,
        output_dir: str | Path,
        *,
        credential: str,
        ids: Iterable[str] = (),
        names: Iterable[str] = (),
    ) -> ExportReport:
        """Export the selected collections of a workspace.

        Args:
            workspace: Workspace id, prefixes such as ``workspace-`` allowed
            output_dir: Directory receiving ``<name>.json`` files
            credential: Postman API key
            ids: Collection uids to export
            names: Case-insensitive name fragments to export

        Returns:
            The report of a fully successful batch

        Raises:
            MissingArgumentError: workspace or API key missing
            InvalidCredentialError: API key rejected
            WorkspaceNotFoundError: unknown workspace
            EmptyInventoryError: the workspace has no collections
            NoMatchError: nothing matched the filters
            BatchPartialFailureError: some collections failed; carries the report
        """
        if not workspace or not workspace.strip() or not credential or not credential.strip():
            raise MissingArgumentError("Workspace ID and API key are required")

        output_path = Path(output_dir)
        output_path.mkdir(parents=True, exist_ok=True)

        ws = self._resolver.validate_workspace(workspace, credential)
        logger.debug("Workspace validated", workspace_name=ws.name)

        collections = self._resolver.list_collections(workspace, credential)
        logger.debug("Found collections", count=len(collections))

        selected = filter_collections(collections, list(ids), list(names))
        if not selected:
            raise NoMatchError()

        self._warn_on_filename_collisions(selected)
        logger.info("Exporting collections", count=len(selected), output_dir=str(output_path))

        report = ExportReport(
            results=tuple(
                self._export_one(collection, credential, output_path)
                for collection in selected
            )
        )

        if report.has_failures:
            logger.info(
                "Export summary",
                successful=report.successful,
                failed=report.failed,
            )
            raise BatchPartialFailureError(report)

        return report

    def _export_one(
        self, collection: CollectionSummary, credential: str, output_path: Path
    ) -> ExportResult:
        slog = logger.bind(collection=collection.name, uid=collection.uid)
        slog.debug("Exporting collection")
        try:
            document = self._adapter.convert(collection.uid, credential)
            target = output_path / collection.output_filename
            target.write_text(
                json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
            )
        except ITEM_ERRORS as e:
            slog.error("Failed to export collection", error=str(e))
            return ExportResult.failed(collection.name, str(e), uid=collection.uid)

        slog.info("Saved collection", file=str(target))
        return ExportResult.ok(collection.name, str(target), uid=collection.uid)

    @staticmethod
    def _warn_on_filename_collisions(selected: list[CollectionSummary]) -> None:
        seen: dict[str, str] = {}
        for collection in selected:
            filename = collection.output_filename
            if filename in seen:
                logger.warning(
                    "Collections share an output file, the later one wins",
                    file=filename,
                    first=seen[filename],
                    second=collection.name,
                )
            else:
                seen[filename] = collection.name


def _build_client(settings: Settings, debug: bool | None) -> PostmanClient:
    return PostmanClient(
        settings.postman.api_base,
        debug=settings.logging.debug if debug is None else debug,
        timeout_s=settings.postman.timeout_s,
    )


def export_workspace(
    workspace: str,
    output_dir: str | Path,
    *,
    api_key: str,
    ids: Iterable[str] = (),
    names: Iterable[str] = (),
    debug: bool | None = None,
    converter: Converter | None = None,
    settings: Settings | None = None,
) -> ExportReport:
    """Public entry point to export a workspace.

    Args:
        workspace: Workspace id
        output_dir: Output directory
        api_key: Postman API key
        ids: Collection uids to export
        names: Collection name fragments to export
        debug: Log request/response detail (default: from settings)
        converter: Converter to use (default: from settings)
        settings: Settings to read defaults from (default: global settings)
    """
    settings = settings or get_settings()
    client = _build_client(settings, debug)
    adapter = ConversionAdapter(
        client,
        converter or get_converter(settings.export.converter),
        work_dir=settings.export.work_dir,
        output_format=settings.export.output_format,
    )
    exporter = WorkspaceExporter(WorkspaceResolver(client), adapter)
    return exporter.export(
        workspace, output_dir, credential=api_key, ids=ids, names=names
    )


def list_workspaces(
    api_key: str,
    *,
    debug: bool | None = None,
    settings: Settings | None = None,
) -> list[WorkspaceSummary]:
    """Public entry point to list the workspaces visible to an API key."""
    if not api_key:
        raise MissingArgumentError("API key is required")
    client = _build_client(settings or get_settings(), debug)
    return WorkspaceResolver(client).list_workspaces(api_key)


def list_collections(
    workspace: str,
    api_key: str,
    *,
    debug: bool | None = None,
    settings: Settings | None = None,
) -> list[CollectionSummary]:
    """Public entry point to list the collections of a workspace."""
    if not workspace or not api_key:
        raise MissingArgumentError("Workspace ID and API key are required")
    client = _build_client(settings or get_settings(), debug)
    return WorkspaceResolver(client).list_collections(workspace, api_key)
