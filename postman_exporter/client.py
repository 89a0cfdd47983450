"""HTTP client for the Postman API.

Provides session management, API key authentication, and translation of
transport and HTTP failures into the exporter's error types.
"""

from __future__ import annotations

from typing import Any

import requests

from postman_exporter.config import DEFAULT_API_BASE
from postman_exporter.errors import MalformedResponseError, NetworkError, RemoteError
from postman_exporter.utils.logging import get_logger

logger = get_logger(__name__)

API_KEY_HEADER = "X-Api-Key"


def _error_message(status: int, reason: str, body: Any) -> str:
    """Build a message from the structured ``error`` field when present."""
    if isinstance(body, dict) and isinstance(body.get("error"), dict):
        error = body["error"]
        message = error.get("message")
        name = error.get("name")
        if name and message:
            return f"{name}: {message}"
        if message:
            return str(message)
    return f"HTTP {status} {reason}".strip()


class PostmanClient:
    """Minimal client for the Postman REST API.

    The debug flag is passed in explicitly; when set, every request target,
    response status, headers and body are logged verbatim. The API key is
    part of the logged request headers.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_API_BASE,
        *,
        debug: bool = False,
        timeout_s: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._api_base = api_base
        self._debug = debug
        self._timeout = timeout_s
        self._session = session or requests.Session()
        self._session.headers.update({"Accept": "application/json"})

    def _url(self, path: str) -> str:
        """Build full URL from base URL and path."""
        base = self._api_base.rstrip("/")
        p = path if path.startswith("/") else f"/{path}"
        return f"{base}{p}"

    def request(
        self,
        path: str,
        credential: str,
        *,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None,
    ) -> dict[str, Any]:
        """Execute an authenticated request and return the decoded JSON body.

        Args:
            path: API path, appended to the base URL
            credential: Postman API key
            method: HTTP method
            headers: Extra headers merged over the defaults
            body: Request body; dicts and lists are sent as JSON

        Returns:
            Response JSON as dict

        Raises:
            RemoteError: non-success HTTP status
            NetworkError: the API could not be reached
            MalformedResponseError: a success response that is not a JSON object
        """
        url = self._url(path)
        request_headers = {API_KEY_HEADER: credential, **(headers or {})}

        kwargs: dict[str, Any] = {}
        if isinstance(body, (dict, list)):
            kwargs["json"] = body
        elif body is not None:
            kwargs["data"] = body

        if self._debug:
            logger.debug("Making request", method=method, url=url, headers=request_headers)

        try:
            resp = self._session.request(
                method=method,
                url=url,
                headers=request_headers,
                timeout=self._timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            if self._debug:
                logger.debug("Request failed", url=url, error=str(e))
            raise NetworkError() from e

        data = self._decode(resp)

        if self._debug:
            logger.debug(
                "Response received",
                status=resp.status_code,
                headers=dict(resp.headers),
                body=data,
            )

        if not resp.ok:
            raise RemoteError(
                _error_message(resp.status_code, resp.reason or "", data),
                resp.status_code,
                data,
            )

        if not isinstance(data, dict):
            raise MalformedResponseError(
                f"Expected a JSON object from {path}, got: {str(data)[:200]}"
            )
        return data

    @staticmethod
    def _decode(resp: requests.Response) -> Any:
        """Return the JSON body, or the raw text when it is not JSON."""
        if resp.status_code == 204 or not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError:
            return resp.text
