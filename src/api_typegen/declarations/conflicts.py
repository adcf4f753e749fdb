"""Numeric-suffix disambiguation for colliding type names."""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class ConflictResolution:
    """Outcome of resolving one candidate name against existing names."""

    final_name: str
    has_conflict: bool
    suffix: int


def resolve_conflict(existing_names: Collection[str], candidate: str) -> ConflictResolution:
    """Return candidate unchanged or the first free ``candidate + N`` (N >= 1)."""
    if candidate not in existing_names:
        return ConflictResolution(final_name=candidate, has_conflict=False, suffix=0)
    suffix = 1
    while f"{candidate}{suffix}" in existing_names:
        suffix += 1
    return ConflictResolution(final_name=f"{candidate}{suffix}", has_conflict=True, suffix=suffix)
