"""Generated output rendering."""

from .api_file import DEFAULT_REQUEST_MODULE, ApiFunctionSpec, capitalize_first, generate_api_file
from .typegen import generate_declarations_for, generate_type_declarations

__all__ = [
    "DEFAULT_REQUEST_MODULE",
    "ApiFunctionSpec",
    "capitalize_first",
    "generate_api_file",
    "generate_declarations_for",
    "generate_type_declarations",
]
