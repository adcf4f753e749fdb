"""Incremental merge of generated type declarations into an existing file."""

from __future__ import annotations

from dataclasses import dataclass, field

from api_typegen.declarations import (
    ConflictResolution,
    Declaration,
    extract_declarations,
    rename_with_suffix,
    resolve_conflict,
    scan_declared_names,
)


@dataclass(slots=True, frozen=True)
class TypeMergeResult:
    """Merged declaration file content and merge metadata."""

    merged: str
    is_duplicate: bool
    final_type_name: str
    has_conflict: bool = False
    suffix: int = 0
    renamed_types: tuple[str, ...] = field(default_factory=tuple)


def merge_types_content(
    existing_content: str | None,
    new_content: str,
    type_name: str,
) -> TypeMergeResult:
    """Merge a new declaration blob into existing content.

    A top-level name collision renames every declaration in the new blob with
    the same numeric suffix. Declarations whose name already exists are dropped
    without comparing bodies; when nothing new remains the existing content is
    returned unchanged with ``is_duplicate`` set.
    """
    existing = existing_content or ""
    if not existing.strip():
        return _merge_into_empty(new_content, type_name)

    existing_names = scan_declared_names(existing)
    resolution = resolve_conflict(existing_names, type_name)

    processed = new_content
    if resolution.has_conflict:
        processed = rename_with_suffix(new_content, resolution.suffix)

    declarations = extract_declarations(processed)
    unique_blocks = _unique_blocks(declarations, seen=set(existing_names))

    if not unique_blocks:
        return TypeMergeResult(
            merged=existing,
            is_duplicate=True,
            final_type_name=resolution.final_name,
            has_conflict=resolution.has_conflict,
            suffix=resolution.suffix,
        )

    merged = existing.strip() + "\n\n" + "\n\n".join(unique_blocks)
    return TypeMergeResult(
        merged=merged,
        is_duplicate=False,
        final_type_name=resolution.final_name,
        has_conflict=resolution.has_conflict,
        suffix=resolution.suffix,
        renamed_types=_renamed_names(declarations, resolution),
    )


def _merge_into_empty(new_content: str, type_name: str) -> TypeMergeResult:
    declarations = extract_declarations(new_content)
    if not declarations:
        # Nothing recognizable; pass the generated text through untouched.
        return TypeMergeResult(merged=new_content, is_duplicate=False, final_type_name=type_name)
    return TypeMergeResult(
        merged="\n\n".join(_unique_blocks(declarations, seen=set())),
        is_duplicate=False,
        final_type_name=type_name,
    )


def _unique_blocks(declarations: list[Declaration], seen: set[str]) -> list[str]:
    blocks: list[str] = []
    for declaration in declarations:
        if declaration.name in seen:
            continue
        seen.add(declaration.name)
        blocks.append(declaration.body_text)
    return blocks


def _renamed_names(
    declarations: list[Declaration], resolution: ConflictResolution
) -> tuple[str, ...]:
    if not resolution.has_conflict:
        return ()
    return tuple(dict.fromkeys(declaration.name for declaration in declarations))
