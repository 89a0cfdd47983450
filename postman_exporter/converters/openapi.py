"""Built-in Postman collection (v2.x) to OpenAPI 3.0 converter.

Covers what the exporter needs: one operation per request, folders as tags,
path/query/header parameters, request bodies and saved response examples.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

import yaml

from postman_exporter.converters.base import ConversionOptions
from postman_exporter.errors import ConverterError
from postman_exporter.utils.logging import get_logger

logger = get_logger(__name__)

OPENAPI_VERSION = "3.0.0"

# Headers that OpenAPI expresses elsewhere (content negotiation, security)
_SKIPPED_HEADERS = {"accept", "content-type", "authorization"}

_PATH_VARIABLE = re.compile(r"^(?::(?P<colon>.+)|\{\{(?P<braces>[^}]+)\}\})$")


def infer_schema(value: Any) -> dict[str, Any]:
    """Infer a JSON schema from an example value."""
    if isinstance(value, dict):
        return {
            "type": "object",
            "properties": {k: infer_schema(v) for k, v in value.items()},
        }
    if isinstance(value, list):
        return {"type": "array", "items": infer_schema(value[0]) if value else {}}
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "number"}
    if isinstance(value, str):
        return {"type": "string"}
    return {}


def _description(value: Any) -> str:
    """Postman descriptions are either strings or ``{content, type}`` objects."""
    if isinstance(value, dict):
        return value.get("content") or ""
    return value or ""


class OpenAPIConverter:
    """Converts a Postman collection file to an OpenAPI document file."""

    def convert(
        self, input_path: Path, output_path: Path, options: ConversionOptions
    ) -> None:
        try:
            data = json.loads(Path(input_path).read_text(encoding="utf-8"))
        except ValueError as e:
            raise ConverterError(f"Collection file is not valid JSON: {e}") from e

        document = self.build_document(data, options.default_tag)

        if options.output_format == "yaml":
            text = yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
        else:
            text = json.dumps(document, indent=2, ensure_ascii=False)
        Path(output_path).write_text(text, encoding="utf-8")

    def build_document(self, data: Any, default_tag: str) -> dict[str, Any]:
        """Build the OpenAPI document for a collection (envelope optional)."""
        collection = data.get("collection", data) if isinstance(data, dict) else None
        if not isinstance(collection, dict) or not isinstance(
            collection.get("info"), dict
        ):
            raise ConverterError("Input is not a Postman collection (missing info)")

        info = collection["info"]
        items = collection.get("item") or []
        if not isinstance(items, list):
            raise ConverterError("Collection 'item' must be a list")

        document: dict[str, Any] = {
            "openapi": OPENAPI_VERSION,
            "info": {
                "title": info.get("name") or default_tag,
                "description": _description(info.get("description")),
                "version": self._version(collection),
            },
        }

        servers: list[str] = []
        paths: dict[str, dict[str, Any]] = {}
        tags: list[str] = []
        self._walk(items, None, default_tag, paths, servers, tags)

        if servers:
            document["servers"] = [{"url": s} for s in servers]
        if tags:
            document["tags"] = [{"name": t} for t in tags]
        document["paths"] = paths

        logger.debug("Built OpenAPI document", title=document["info"]["title"], paths=len(paths))
        return document

    @staticmethod
    def _version(collection: dict[str, Any]) -> str:
        for variable in collection.get("variable") or []:
            if isinstance(variable, dict) and variable.get("key") == "version":
                return str(variable.get("value") or "1.0.0")
        return "1.0.0"

    def _walk(
        self,
        items: list[Any],
        folder: str | None,
        default_tag: str,
        paths: dict[str, dict[str, Any]],
        servers: list[str],
        tags: list[str],
    ) -> None:
        for item in items:
            if not isinstance(item, dict):
                continue
            if isinstance(item.get("item"), list):
                # Nested folders keep the tag of their top-level folder
                self._walk(
                    item["item"],
                    folder or item.get("name"),
                    default_tag,
                    paths,
                    servers,
                    tags,
                )
                continue
            if "request" not in item:
                continue

            tag = folder or default_tag
            if tag not in tags:
                tags.append(tag)
            self._add_operation(item, tag, paths, servers)

    def _add_operation(
        self,
        item: dict[str, Any],
        tag: str,
        paths: dict[str, dict[str, Any]],
        servers: list[str],
    ) -> None:
        request = item["request"]
        if isinstance(request, str):
            request = {"url": request, "method": "GET"}

        server, path, parameters = self._parse_url(request.get("url") or "")
        if server and server not in servers:
            servers.append(server)

        for header in request.get("header") or []:
            key = header.get("key", "")
            if header.get("disabled") or not key or key.lower() in _SKIPPED_HEADERS:
                continue
            parameters.append(
                {
                    "name": key,
                    "in": "header",
                    "schema": {"type": "string", "example": header.get("value", "")},
                }
            )

        operation: dict[str, Any] = {
            "tags": [tag],
            "summary": item.get("name", ""),
        }
        description = _description(request.get("description"))
        if description:
            operation["description"] = description
        if parameters:
            operation["parameters"] = parameters

        request_body = self._request_body(request.get("body"))
        if request_body:
            operation["requestBody"] = request_body

        operation["responses"] = self._responses(item.get("response") or [])

        method = str(request.get("method") or "GET").lower()
        paths.setdefault(path, {})[method] = operation

    def _parse_url(self, url: Any) -> tuple[str, str, list[dict[str, Any]]]:
        """Split a Postman url into (server, OpenAPI path, parameters)."""
        if isinstance(url, str):
            url = {"raw": url}

        raw = url.get("raw") or ""
        server, raw_path = self._split_raw(raw)

        if url.get("host"):
            host = url["host"]
            host = ".".join(host) if isinstance(host, list) else str(host)
            protocol = url.get("protocol")
            server = f"{protocol}://{host}" if protocol else host

        segments = url.get("path")
        if segments is None:
            segments = [s for s in raw_path.split("/") if s]
        elif isinstance(segments, str):
            segments = [s for s in segments.split("/") if s]

        variables = {
            v.get("key"): v for v in url.get("variable") or [] if isinstance(v, dict)
        }
        parameters: list[dict[str, Any]] = []
        openapi_segments = []
        for segment in segments:
            if isinstance(segment, dict):
                segment = segment.get("value", "")
            match = _PATH_VARIABLE.match(str(segment))
            if not match:
                openapi_segments.append(str(segment))
                continue
            name = match.group("colon") or match.group("braces")
            openapi_segments.append(f"{{{name}}}")
            variable = variables.get(name, {})
            parameter: dict[str, Any] = {
                "name": name,
                "in": "path",
                "required": True,
                "schema": {"type": "string"},
            }
            if _description(variable.get("description")):
                parameter["description"] = _description(variable.get("description"))
            if variable.get("value"):
                parameter["example"] = variable["value"]
            parameters.append(parameter)

        for query in url.get("query") or []:
            if not isinstance(query, dict) or query.get("disabled") or not query.get("key"):
                continue
            parameter = {
                "name": query["key"],
                "in": "query",
                "schema": {"type": "string"},
            }
            if _description(query.get("description")):
                parameter["description"] = _description(query.get("description"))
            if query.get("value") is not None:
                parameter["example"] = query["value"]
            parameters.append(parameter)

        return server, "/" + "/".join(openapi_segments), parameters

    @staticmethod
    def _split_raw(raw: str) -> tuple[str, str]:
        without_query = raw.split("?", 1)[0].split("#", 1)[0]
        scheme = ""
        rest = without_query
        if "://" in rest:
            scheme, rest = rest.split("://", 1)
        host, _, path = rest.partition("/")
        if not host:
            return "", path
        server = f"{scheme}://{host}" if scheme else host
        return server, path

    def _request_body(self, body: Any) -> dict[str, Any] | None:
        if not isinstance(body, dict):
            return None

        mode = body.get("mode")
        if mode == "raw":
            raw = body.get("raw") or ""
            if not raw.strip():
                return None
            try:
                example = json.loads(raw)
            except ValueError:
                return {"content": {"text/plain": {"schema": {"type": "string"}, "example": raw}}}
            return {
                "content": {
                    "application/json": {
                        "schema": infer_schema(example),
                        "example": example,
                    }
                }
            }

        if mode in ("urlencoded", "formdata"):
            fields = [
                f for f in body.get(mode) or [] if isinstance(f, dict) and not f.get("disabled")
            ]
            if not fields:
                return None
            media_type = (
                "application/x-www-form-urlencoded"
                if mode == "urlencoded"
                else "multipart/form-data"
            )
            properties = {}
            for f in fields:
                if f.get("type") == "file":
                    properties[f.get("key", "")] = {"type": "string", "format": "binary"}
                else:
                    properties[f.get("key", "")] = {
                        "type": "string",
                        "example": f.get("value", ""),
                    }
            return {
                "content": {
                    media_type: {"schema": {"type": "object", "properties": properties}}
                }
            }

        return None

    @staticmethod
    def _responses(saved: list[Any]) -> dict[str, Any]:
        responses: dict[str, Any] = {}
        for response in saved:
            if not isinstance(response, dict):
                continue
            code = str(response.get("code") or 200)
            if code in responses:
                continue
            entry: dict[str, Any] = {
                "description": response.get("name") or response.get("status") or ""
            }
            try:
                example = json.loads(response.get("body") or "")
            except ValueError:
                example = None
            if example is not None:
                entry["content"] = {"application/json": {"example": example}}
            responses[code] = entry

        if not responses:
            responses["200"] = {
                "description": "Successful response",
                "content": {"application/json": {}},
            }
        return responses
