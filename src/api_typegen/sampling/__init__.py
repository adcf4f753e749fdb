"""Schema sampling and naming helpers."""

from .naming import is_valid_identifier, pascal_case, singularize, type_name_from
from .sampler import schema_to_sample

__all__ = [
    "is_valid_identifier",
    "pascal_case",
    "schema_to_sample",
    "singularize",
    "type_name_from",
]
