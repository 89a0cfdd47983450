"""Workspace validation and collection inventory lookups.

Every call goes to the API; nothing is cached between calls.
"""

from __future__ import annotations

import re
from typing import Any

from postman_exporter.client import PostmanClient
from postman_exporter.errors import (
    EmptyInventoryError,
    InvalidCredentialError,
    MalformedResponseError,
    RemoteError,
    WorkspaceNotFoundError,
)
from postman_exporter.types import CollectionSummary, Workspace, WorkspaceSummary
from postman_exporter.utils.logging import get_logger

logger = get_logger(__name__)

_WORKSPACE_PREFIX = re.compile(r"^(workspace-|workspace:|workspace/|workspaces/)", re.I)


def normalize_workspace_id(handle: str) -> str:
    """Strip known ``workspace`` prefixes and surrounding whitespace.

    Prefixes are stripped repeatedly, so the result is a fixed point.
    """
    if not handle:
        return handle
    while (clean := _WORKSPACE_PREFIX.sub("", handle.strip()).strip()) != handle:
        handle = clean
    return handle


class WorkspaceResolver:
    """Read-only lookups of workspaces and their collections."""

    def __init__(self, client: PostmanClient) -> None:
        self._client = client

    def list_workspaces(self, credential: str) -> list[WorkspaceSummary]:
        data = self._client.request("/workspaces", credential)
        workspaces = data.get("workspaces")
        if not isinstance(workspaces, list):
            raise MalformedResponseError("Invalid workspace data received from API")

        logger.debug("Found workspaces", count=len(workspaces))
        return [WorkspaceSummary.from_api(w) for w in workspaces]

    def validate_workspace(self, handle: str, credential: str) -> Workspace:
        """Fetch the workspace detail, mapping 401 and 404 to dedicated errors.

        Args:
            handle: Workspace id as given by the user, prefixes allowed
            credential: Postman API key

        Returns:
            The workspace record

        Raises:
            InvalidCredentialError: the API key was rejected
            WorkspaceNotFoundError: no such workspace; carries the original handle
            MalformedResponseError: the response had no workspace object
        """
        workspace = Workspace.from_api(self._fetch_workspace(handle, credential))
        logger.debug(
            "Workspace validated", workspace_id=workspace.id, workspace_name=workspace.name
        )
        return workspace

    def list_collections(self, handle: str, credential: str) -> list[CollectionSummary]:
        """Return the collections of a workspace.

        Raises:
            EmptyInventoryError: the workspace lists no collections, or the
                response carried no collections list at all
        """
        workspace = Workspace.from_api(self._fetch_workspace(handle, credential))

        if workspace.collections is None:
            raise EmptyInventoryError(handle, EmptyInventoryError.MISSING)
        if not workspace.collections:
            raise EmptyInventoryError(handle, EmptyInventoryError.EMPTY)

        logger.debug(
            "Found collections",
            workspace=workspace.id,
            count=len(workspace.collections),
        )
        return list(workspace.collections)

    def _fetch_workspace(self, handle: str, credential: str) -> dict[str, Any]:
        clean_id = normalize_workspace_id(handle)
        try:
            data = self._client.request(f"/workspaces/{clean_id}", credential)
        except RemoteError as e:
            if e.status == 401:
                raise InvalidCredentialError(
                    "Invalid API key or insufficient permissions",
                    e.status,
                    e.response_body,
                ) from e
            if e.status == 404:
                raise WorkspaceNotFoundError(handle, e.status, e.response_body) from e
            raise

        workspace = data.get("workspace")
        if not isinstance(workspace, dict):
            raise MalformedResponseError("Invalid workspace data received from API")
        return workspace
