"""Merge of generated request functions into an existing api file."""

from __future__ import annotations

import re
from dataclasses import dataclass

_FUNCTION_NAME_RE = re.compile(r"export\s+function\s+([A-Za-z_$][A-Za-z0-9_$]*)\s*\(")
_TYPE_IMPORT_RE = re.compile(r"import\s+type\s+\{\s*([^}]+?)\s*\}")
_TYPE_IMPORT_STATEMENT_RE = re.compile(
    r"""import\s+type\s+\{[^}]+\}\s+from\s+(["'])\./types\1;?"""
)
_FUNCTION_BODY_RE = re.compile(r"(export\s+function[\s\S]+)")
_LEADING_IMPORTS_RE = re.compile(r"\A(?:[ \t]*import\b[^\n]*\n)*")


@dataclass(slots=True, frozen=True)
class ApiMergeResult:
    """Merged api file content and duplicate flag."""

    merged: str
    is_duplicate: bool


def parse_function_names(text: str) -> list[str]:
    """Return exported function names in source order."""
    return [match.group(1) for match in _FUNCTION_NAME_RE.finditer(text)]


def extract_imported_types(text: str) -> list[str]:
    """Return names listed by the first ``import type { ... }`` statement."""
    match = _TYPE_IMPORT_RE.search(text)
    if match is None:
        return []
    return [item.strip() for item in match.group(1).split(",") if item.strip()]


def type_import_statement(type_names: list[str]) -> str:
    """Render the shared type import header."""
    return f'import type {{ {", ".join(type_names)} }} from "./types";'


def merge_api_content(
    existing_content: str | None,
    new_content: str,
    new_api_name: str,
) -> ApiMergeResult:
    """Append a new request function and widen the shared type import.

    A function whose name already exists is discarded even when its body
    differs.
    """
    existing = existing_content or ""
    if not existing.strip():
        return ApiMergeResult(merged=new_content, is_duplicate=False)

    if new_api_name in parse_function_names(existing):
        return ApiMergeResult(merged=existing, is_duplicate=True)

    existing_types = extract_imported_types(existing)
    all_types = list(dict.fromkeys([*existing_types, *extract_imported_types(new_content)]))

    merged = existing
    if len(all_types) > len(existing_types):
        statement = type_import_statement(all_types)
        if _TYPE_IMPORT_STATEMENT_RE.search(merged) is not None:
            merged = _TYPE_IMPORT_STATEMENT_RE.sub(lambda _match: statement, merged, count=1)
        else:
            merged = _insert_after_imports(merged, statement)

    body_match = _FUNCTION_BODY_RE.search(new_content)
    if body_match is not None:
        merged = merged.strip() + "\n\n" + body_match.group(1)

    return ApiMergeResult(merged=merged, is_duplicate=False)


def _insert_after_imports(text: str, statement: str) -> str:
    header = _LEADING_IMPORTS_RE.match(text)
    end = header.end() if header is not None else 0
    return f"{text[:end]}{statement}\n{text[end:]}"
