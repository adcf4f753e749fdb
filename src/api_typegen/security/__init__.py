"""Write-path safety primitives."""

from .paths import UnsafePathError, validate_output_path

__all__ = ["UnsafePathError", "validate_output_path"]
