"""Identifier helpers for generated type and function names."""

from __future__ import annotations

import re

_IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
_WORD_SPLIT_RE = re.compile(r"[^0-9A-Za-z]+")


def is_valid_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name))


def pascal_case(name: str) -> str:
    """Convert a path-like or snake/kebab string into PascalCase.

    Names that already are plain identifiers keep their inner casing.
    """
    if is_valid_identifier(name):
        return name[:1].upper() + name[1:]
    parts = [part for part in _WORD_SPLIT_RE.split(name) if part]
    return "".join(part[:1].upper() + part[1:] for part in parts)


def type_name_from(hint: str, fallback: str = "Item") -> str:
    """Return a PascalCase name that is usable as a type identifier."""
    name = pascal_case(hint)
    if not name:
        return fallback
    if name[0].isdigit():
        return f"{fallback}{name}"
    return name


def singularize(name: str) -> str:
    if len(name) > 3 and name.endswith("ies"):
        return f"{name[:-3]}y"
    if len(name) > 1 and name.endswith("s") and not name.endswith("ss"):
        return name[:-1]
    return name
