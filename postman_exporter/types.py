"""Value objects shared by the resolver, the converter adapter and the exporter.

All of them are immutable and only live for the duration of one export call.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9]")


def sanitize_filename(name: str) -> str:
    """Replace every non-alphanumeric character with ``_``."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


@dataclass(frozen=True)
class WorkspaceSummary:
    """A workspace as listed by ``GET /workspaces``."""

    id: str
    name: str
    type: str = ""
    description: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> WorkspaceSummary:
        return cls(
            id=str(data.get("id") or data.get("_postman_id") or ""),
            name=data.get("name", ""),
            type=data.get("type") or "",
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class CollectionSummary:
    """A collection entry from a workspace listing."""

    uid: str
    name: str

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> CollectionSummary:
        return cls(
            uid=str(data.get("uid") or data.get("id") or ""),
            name=data.get("name", ""),
        )

    @property
    def output_filename(self) -> str:
        return f"{sanitize_filename(self.name)}.json"


@dataclass(frozen=True)
class Workspace:
    """Workspace detail from ``GET /workspaces/{id}``.

    ``collections`` is None when the response carried no collections list,
    which is different from an empty tuple.
    """

    id: str
    name: str
    type: str = ""
    description: str = ""
    collections: tuple[CollectionSummary, ...] | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Workspace:
        raw_collections = data.get("collections")
        collections = None
        if isinstance(raw_collections, list):
            collections = tuple(
                CollectionSummary.from_api(c) for c in raw_collections
            )
        return cls(
            id=str(data.get("id", "")),
            name=data.get("name", ""),
            type=data.get("type") or "",
            description=data.get("description") or "",
            collections=collections,
        )


@dataclass(frozen=True)
class ExportResult:
    """Outcome of exporting one collection.

    Either ``file`` (success) or ``error`` (failure) is set, never both.
    Use ``ExportResult.ok`` / ``ExportResult.failed`` to build one.
    """

    name: str
    success: bool
    uid: str = ""
    file: str | None = None
    error: str | None = None

    def __post_init__(self) -> None:
        if self.success and (self.file is None or self.error is not None):
            raise ValueError("A successful ExportResult needs a file and no error")
        if not self.success and (self.error is None or self.file is not None):
            raise ValueError("A failed ExportResult needs an error and no file")

    @classmethod
    def ok(cls, name: str, file: str, uid: str = "") -> ExportResult:
        return cls(name=name, success=True, uid=uid, file=file)

    @classmethod
    def failed(cls, name: str, error: str, uid: str = "") -> ExportResult:
        return cls(name=name, success=False, uid=uid, error=error)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "success": self.success}
        if self.uid:
            data["uid"] = self.uid
        if self.success:
            data["file"] = self.file
        else:
            data["error"] = self.error
        return data


@dataclass(frozen=True)
class ExportReport:
    """Ordered per-collection results of one batch."""

    results: tuple[ExportResult, ...] = ()

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def has_failures(self) -> bool:
        return self.failed > 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failed,
            "results": [r.to_dict() for r in self.results],
        }
