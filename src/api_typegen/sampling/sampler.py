"""Sample value synthesis from OpenAPI/JSON schemas."""

from __future__ import annotations

_TYPE_DEFAULTS: dict[str, object] = {
    "string": "example",
    "number": 0,
    "integer": 0,
    "boolean": False,
}
_LOCAL_REF_PREFIX = "#/components/schemas/"


def schema_to_sample(
    schema: dict[str, object] | None,
    components: dict[str, object] | None = None,
) -> object:
    """Build a JSON-compatible sample value shaped like schema."""
    return _sample(schema, components or {}, resolving=())


def _sample(
    schema: object,
    components: dict[str, object],
    resolving: tuple[str, ...],
) -> object:
    if not isinstance(schema, dict) or not schema:
        return {}

    ref = schema.get("$ref")
    if isinstance(ref, str):
        target_name = ref.removeprefix(_LOCAL_REF_PREFIX)
        target = components.get(target_name) if ref.startswith(_LOCAL_REF_PREFIX) else None
        if target is None or target_name in resolving:
            return None
        return _sample(target, components, (*resolving, target_name))

    schema_type = schema.get("type")
    properties = schema.get("properties")
    if isinstance(properties, dict) and schema_type in ("object", None):
        return {
            str(key): _sample(value, components, resolving) for key, value in properties.items()
        }

    items = schema.get("items")
    if schema_type == "array" and isinstance(items, dict):
        return [_sample(items, components, resolving)]

    if schema_type == "object":
        return {}
    if schema_type == "array":
        return []
    if isinstance(schema_type, str):
        return _TYPE_DEFAULTS.get(schema_type)
    return None
