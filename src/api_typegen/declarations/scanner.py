"""Line-based declaration scanning for generated TypeScript type text."""

from __future__ import annotations

import re
from dataclasses import dataclass

_DECLARATION_NAME_RE = re.compile(r"export\s+(interface|type)\s+([A-Za-z_$][A-Za-z0-9_$]*)")


@dataclass(slots=True, frozen=True)
class Declaration:
    """One exported interface or type alias block."""

    name: str
    kind: str
    body_text: str


def scan_declared_names(text: str) -> list[str]:
    """Return declared interface/type names in source order."""
    return [match.group(2) for match in _DECLARATION_NAME_RE.finditer(text)]


def extract_declarations(text: str) -> list[Declaration]:
    """Split text into complete declaration blocks using brace counting.

    Text outside declarations (imports, comments, blank lines) is ignored.
    A declaration left open at the end of the text is dropped.
    """
    declarations: list[Declaration] = []
    current: list[str] = []
    header: re.Match[str] | None = None
    depth = 0
    awaiting_alias_end = False

    for line in text.split("\n"):
        match = _DECLARATION_NAME_RE.search(line)
        if match is not None:
            header = match
            current = [line]
            depth = _brace_delta(line)
            awaiting_alias_end = False
            if depth == 0 and _closes_on_start_line(line, match.group(1)):
                declarations.append(_declaration_from(header, current))
                header = None
                current = []
            elif depth == 0 and match.group(1) == "type":
                awaiting_alias_end = True
            continue

        if header is None:
            continue

        current.append(line)
        depth += _brace_delta(line)
        if depth != 0:
            continue
        if awaiting_alias_end and not line.rstrip().endswith(";"):
            continue
        declarations.append(_declaration_from(header, current))
        header = None
        current = []
        awaiting_alias_end = False

    return declarations


def _brace_delta(line: str) -> int:
    return line.count("{") - line.count("}")


def _closes_on_start_line(line: str, kind: str) -> bool:
    stripped = line.rstrip()
    if kind == "type":
        return "=" in stripped and not stripped.endswith("=")
    return "{" in stripped


def _declaration_from(header: re.Match[str], lines: list[str]) -> Declaration:
    kind = "interface" if header.group(1) == "interface" else "type-alias"
    return Declaration(name=header.group(2), kind=kind, body_text="\n".join(lines))
