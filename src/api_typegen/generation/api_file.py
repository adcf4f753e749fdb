"""Request-function file rendering."""

from __future__ import annotations

from dataclasses import dataclass

from api_typegen.merge import type_import_statement

DEFAULT_REQUEST_MODULE = "@/utils/request"


@dataclass(slots=True, frozen=True)
class ApiFunctionSpec:
    """Inputs for one generated request function."""

    api_name: str
    type_name: str
    url: str
    method: str = "GET"
    has_request_body: bool = False
    request_module: str = DEFAULT_REQUEST_MODULE
    request_type_name: str | None = None


def capitalize_first(name: str) -> str:
    return name[:1].upper() + name[1:]


def generate_api_file(spec: ApiFunctionSpec) -> str:
    """Render an api file with one request function and its type imports."""
    type_name = capitalize_first(spec.type_name)
    method = spec.method.lower()

    imported = [type_name]
    params = ""
    call = f'request.{method}<{type_name}>("{spec.url}")'
    if spec.has_request_body:
        request_type_name = spec.request_type_name or f"{type_name}Request"
        imported.append(request_type_name)
        params = f"data: {request_type_name}"
        call = f'request.{method}<{type_name}>("{spec.url}", data)'

    return "\n".join(
        [
            f'import request from "{spec.request_module}";',
            type_import_statement(imported),
            "",
            f"export function {spec.api_name}({params}) {{",
            f"  return {call};",
            "}",
        ]
    )
