"""Incremental merge engines for generated output files."""

from .api_merge import (
    ApiMergeResult,
    extract_imported_types,
    merge_api_content,
    parse_function_names,
    type_import_statement,
)
from .types_merge import TypeMergeResult, merge_types_content

__all__ = [
    "ApiMergeResult",
    "TypeMergeResult",
    "extract_imported_types",
    "merge_api_content",
    "merge_types_content",
    "parse_function_names",
    "type_import_statement",
]
