"""Export Postman workspace collections to OpenAPI documents."""

from postman_exporter.exporter import (
    WorkspaceExporter,
    export_workspace,
    list_collections,
    list_workspaces,
)
from postman_exporter.types import ExportReport, ExportResult

__version__ = "1.1.0"

__all__ = [
    "ExportReport",
    "ExportResult",
    "WorkspaceExporter",
    "__version__",
    "export_workspace",
    "list_collections",
    "list_workspaces",
]
