"""Declaration scanning, renaming and conflict resolution."""

from .conflicts import ConflictResolution, resolve_conflict
from .renamer import apply_type_prefix, build_rename_map, rename_with_suffix
from .scanner import Declaration, extract_declarations, scan_declared_names

__all__ = [
    "ConflictResolution",
    "Declaration",
    "apply_type_prefix",
    "build_rename_map",
    "extract_declarations",
    "rename_with_suffix",
    "resolve_conflict",
    "scan_declared_names",
]
