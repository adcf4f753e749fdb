"""Sample JSON to TypeScript declaration text."""

from __future__ import annotations

import json
import re
from collections.abc import Iterable

from api_typegen.sampling import singularize, type_name_from

_PLAIN_KEY_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
_INDENT = "    "


def generate_type_declarations(sample: object, root_name: str) -> str:
    """Return ``export interface``/``export type`` blocks describing sample.

    The root declaration comes first, nested declarations follow in discovery
    order, separated by blank lines.
    """
    return generate_declarations_for([(sample, root_name)])


def generate_declarations_for(roots: Iterable[tuple[object, str]]) -> str:
    """Describe several samples with one shared set of declaration names.

    Each root is followed by its nested declarations. A nested shape that
    differs from an earlier one with the same name gets a numeric suffix, so
    a response and its request body never share a mismatched type.
    """
    named = [(sample, type_name_from(root_name, fallback="Root")) for sample, root_name in roots]
    builder = _DeclarationBuilder(root_names={root for _, root in named})
    for sample, root in named:
        if isinstance(sample, dict):
            builder.object_type([sample], root, exact_name=True)
        else:
            builder.declare_alias(root, "any")
            builder.declare_alias(root, builder.value_type([sample], f"{root}Element"))
    return builder.render()


class _DeclarationBuilder:
    def __init__(self, root_names: set[str] | None = None) -> None:
        self._root_names = root_names or set()
        self._bodies: dict[str, list[str] | None] = {}
        self._aliases: dict[str, str] = {}

    def render(self) -> str:
        blocks: list[str] = []
        for name, body in self._bodies.items():
            if name in self._aliases:
                blocks.append(f"export type {name} = {self._aliases[name]};")
                continue
            lines = [f"export interface {name} {{", *(body or []), "}"]
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks) + "\n"

    def declare_alias(self, name: str, value: str) -> None:
        self._bodies[name] = []
        self._aliases[name] = value

    def object_type(self, samples: list[dict], hint: str, exact_name: bool = False) -> str:
        base = type_name_from(hint)
        name = base if exact_name else self._reserve(base)
        self._bodies[name] = None

        keys = list(dict.fromkeys(key for sample in samples for key in sample))
        fields: list[str] = []
        for key in keys:
            values = [sample[key] for sample in samples if key in sample]
            optional = "?" if len(values) < len(samples) else ""
            value_type = self.value_type(values, key)
            fields.append(f"{_INDENT}{_render_key(key)}{optional}: {value_type};")

        if not exact_name:
            for candidate in self._same_base(base):
                if candidate != name and self._bodies[candidate] == fields:
                    del self._bodies[name]
                    return candidate
        self._bodies[name] = fields
        return name

    def value_type(self, values: list[object], hint: str) -> str:
        parts: list[str] = []
        objects = [value for value in values if isinstance(value, dict)]
        arrays = [value for value in values if isinstance(value, list)]
        for value in values:
            if isinstance(value, (dict, list)):
                continue
            parts.append(_primitive_type(value))
        if objects:
            parts.append(self.object_type(objects, hint))
        if arrays:
            elements = [element for array in arrays for element in array]
            if not elements:
                parts.append("any[]")
            else:
                element_type = self.value_type(elements, singularize(type_name_from(hint)))
                if " | " in element_type:
                    element_type = f"({element_type})"
                parts.append(f"{element_type}[]")
        unique = list(dict.fromkeys(parts))
        if not unique:
            return "any"
        return " | ".join(unique)

    def _reserve(self, base: str) -> str:
        if not self._taken(base):
            return base
        suffix = 1
        while self._taken(f"{base}{suffix}"):
            suffix += 1
        return f"{base}{suffix}"

    def _taken(self, name: str) -> bool:
        return name in self._bodies or name in self._root_names

    def _same_base(self, base: str) -> list[str]:
        return [
            name
            for name, body in self._bodies.items()
            if body is not None
            and name not in self._aliases
            and (name == base or (name.startswith(base) and name[len(base) :].isdigit()))
        ]


def _primitive_type(value: object) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "any"


def _render_key(key: str) -> str:
    if _PLAIN_KEY_RE.match(key):
        return key
    return json.dumps(key)
