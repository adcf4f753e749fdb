"""Consistent renaming of declared type names and all of their references."""

from __future__ import annotations

import re

from api_typegen.declarations.scanner import scan_declared_names

_IDENT_BEFORE = r"(?<![A-Za-z0-9_$])"
_IDENT_AFTER = r"(?![A-Za-z0-9_$])"


def apply_type_prefix(text: str, prefix: str | None) -> str:
    """Prepend prefix to every declared name and every reference to it.

    Applying the same prefix twice yields a doubled prefix (``TTFoo``); callers
    apply it at most once per generation.
    """
    if not prefix:
        return text
    return _rename_declared(text, prefix=prefix, suffix="")


def rename_with_suffix(text: str, suffix: str | int | None) -> str:
    """Append suffix to every declared name and every reference to it."""
    if suffix is None or suffix == "" or suffix == 0:
        return text
    return _rename_declared(text, prefix="", suffix=str(suffix))


def build_rename_map(text: str, prefix: str = "", suffix: str = "") -> dict[str, str]:
    """Return old -> new names for every declaration in text, longest name first."""
    names = list(dict.fromkeys(scan_declared_names(text)))
    names.sort(key=len, reverse=True)
    return {name: f"{prefix}{name}{suffix}" for name in names}


def _rename_declared(text: str, prefix: str, suffix: str) -> str:
    rename_map = build_rename_map(text, prefix=prefix, suffix=suffix)
    result = text
    for old_name, new_name in rename_map.items():
        escaped = re.escape(old_name)
        result = re.sub(
            rf"(export\s+(?:interface|type)\s+){escaped}{_IDENT_AFTER}",
            lambda match, replacement=new_name: f"{match.group(1)}{replacement}",
            result,
        )
        guard_before = f"(?<!{re.escape(prefix)})" if prefix else ""
        guard_after = f"(?!{re.escape(suffix)})" if suffix else ""
        result = re.sub(
            f"{guard_before}{_IDENT_BEFORE}{escaped}{_IDENT_AFTER}{guard_after}",
            lambda _match, replacement=new_name: replacement,
            result,
        )
    return result
