"""OpenAPI document loading and endpoint flattening."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from api_typegen.fetching import FetchError, fetch_json
from api_typegen.sampling import pascal_case

BODY_METHODS = frozenset({"post", "put", "patch"})


class OpenApiLoadError(Exception):
    """Raised when an OpenAPI source cannot be read or decoded."""


@dataclass(slots=True, frozen=True)
class EndpointRecord:
    """One path/method pair with a JSON 200 response schema."""

    url: str
    method: str
    operation_id: str | None
    schema: dict[str, object]
    request_schema: dict[str, object] | None = None

    @property
    def has_request_body(self) -> bool:
        return self.method.lower() in BODY_METHODS

    def type_name(self) -> str:
        """Return the generated response type name."""
        return f"{pascal_case(self.method.lower())}{_path_name(self.url)}Response"

    def api_name(self) -> str:
        """Return operationId or a method+path derived function name."""
        if self.operation_id:
            return self.operation_id
        return f"{self.method.lower()}{_path_name(self.url)}"


def _path_name(url: str) -> str:
    return pascal_case(url.replace("/", "_"))


def load_openapi(
    source: str,
    fetcher: Callable[[str], object] = fetch_json,
) -> dict[str, object]:
    """Load an OpenAPI JSON document from an http(s) URL or a local file."""
    if source.startswith(("http://", "https://")):
        try:
            document = fetcher(source)
        except FetchError as error:
            raise OpenApiLoadError(f"Failed to fetch OpenAPI document: {error}") from error
    else:
        path = Path(source)
        if not path.is_file():
            raise OpenApiLoadError("Invalid OpenAPI source: must be URL or file path.")
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as error:
            raise OpenApiLoadError(f"OpenAPI file is not valid JSON: {error.msg}") from error
    if not isinstance(document, dict):
        raise OpenApiLoadError("OpenAPI document must be a JSON object.")
    return document


def flatten_endpoints(document: dict[str, object]) -> list[EndpointRecord]:
    """Return endpoints that declare an application/json 200 response schema."""
    paths = document.get("paths") or {}
    if not isinstance(paths, dict):
        return []
    records: list[EndpointRecord] = []
    for url, methods in paths.items():
        if not isinstance(methods, dict):
            continue
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue
            schema = _response_schema(operation)
            if schema is None:
                continue
            operation_id = operation.get("operationId")
            records.append(
                EndpointRecord(
                    url=str(url),
                    method=str(method),
                    operation_id=operation_id if isinstance(operation_id, str) else None,
                    schema=schema,
                    request_schema=_request_schema(operation),
                )
            )
    return records


def component_schemas(document: dict[str, object]) -> dict[str, object]:
    components = document.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else {}


def _request_schema(operation: dict[str, object]) -> dict[str, object] | None:
    return _schema_at(operation, ("requestBody", "content", "application/json", "schema"))


def _response_schema(operation: dict[str, object]) -> dict[str, object] | None:
    return _schema_at(operation, ("responses", "200", "content", "application/json", "schema"))


def _schema_at(operation: dict[str, object], keys: tuple[str, ...]) -> dict[str, object] | None:
    node: object = operation
    for key in keys:
        if not isinstance(node, dict):
            return None
        node = node.get(key)
    return node if isinstance(node, dict) else None
