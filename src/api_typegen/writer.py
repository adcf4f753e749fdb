"""Read-merge-write orchestration for one generated endpoint directory."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from api_typegen.declarations import apply_type_prefix
from api_typegen.generation import (
    DEFAULT_REQUEST_MODULE,
    ApiFunctionSpec,
    capitalize_first,
    generate_api_file,
)
from api_typegen.merge import merge_api_content, merge_types_content
from api_typegen.security import validate_output_path

TYPES_FILE_NAME = "types.ts"
API_FILE_NAME = "api.ts"


@dataclass(slots=True, frozen=True)
class WriteSettings:
    """Output settings resolved from configuration."""

    request_module: str = DEFAULT_REQUEST_MODULE
    type_prefix: str = ""
    api_prefix: str = ""


@dataclass(slots=True, frozen=True)
class WriteResult:
    """Outcome of writing one endpoint's types.ts and api.ts."""

    output_dir: Path
    api_name: str
    final_type_name: str
    type_conflict: bool
    type_duplicate: bool
    api_duplicate: bool
    dir_existed: bool
    renamed_types: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, object]:
        return {
            "output_dir": str(self.output_dir),
            "api_name": self.api_name,
            "final_type_name": self.final_type_name,
            "type_conflict": self.type_conflict,
            "type_duplicate": self.type_duplicate,
            "api_duplicate": self.api_duplicate,
            "dir_existed": self.dir_existed,
            "renamed_types": list(self.renamed_types),
        }


def write_endpoint_files(
    base_dir: str | Path,
    api_name: str,
    type_name: str,
    url: str,
    types_content: str,
    method: str = "GET",
    has_request_body: bool = False,
    settings: WriteSettings | None = None,
) -> WriteResult:
    """Merge generated declarations and request function into ``<base>/<api>/``.

    Raises UnsafePathError before touching the filesystem when the destination
    is a protected system directory. Both existing files are read before either
    is written, so an unreadable file leaves the directory unchanged.
    """
    active = settings or WriteSettings()
    validate_output_path(base_dir)
    prefixed_api_name = f"{active.api_prefix}{api_name}"
    output_dir = validate_output_path(Path(base_dir) / prefixed_api_name)

    dir_existed = output_dir.exists()
    output_dir.mkdir(parents=True, exist_ok=True)
    types_path = output_dir / TYPES_FILE_NAME
    api_path = output_dir / API_FILE_NAME

    processed_types = apply_type_prefix(types_content, active.type_prefix)
    prefixed_type_name = f"{active.type_prefix}{capitalize_first(type_name)}"

    existing_types = _read_text(types_path)
    existing_api = _read_text(api_path)

    type_merge = merge_types_content(existing_types, processed_types, prefixed_type_name)

    request_type_name = None
    if has_request_body:
        request_type_name = f"{prefixed_type_name}Request"
        if type_merge.has_conflict:
            request_type_name = f"{request_type_name}{type_merge.suffix}"

    new_api_content = generate_api_file(
        ApiFunctionSpec(
            api_name=prefixed_api_name,
            type_name=type_merge.final_type_name,
            url=url,
            method=method,
            has_request_body=has_request_body,
            request_module=active.request_module,
            request_type_name=request_type_name,
        )
    )
    api_merge = merge_api_content(existing_api, new_api_content, prefixed_api_name)

    types_path.write_text(type_merge.merged, encoding="utf-8")
    api_path.write_text(api_merge.merged, encoding="utf-8")

    return WriteResult(
        output_dir=output_dir,
        api_name=prefixed_api_name,
        final_type_name=type_merge.final_type_name,
        type_conflict=type_merge.has_conflict,
        type_duplicate=type_merge.is_duplicate,
        api_duplicate=api_merge.is_duplicate,
        dir_existed=dir_existed,
        renamed_types=type_merge.renamed_types,
    )


def _read_text(path: Path) -> str | None:
    if not path.exists():
        return None
    return path.read_text(encoding="utf-8")
