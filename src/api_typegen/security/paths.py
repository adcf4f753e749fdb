"""Output path safety checks applied before any directory creation or write."""

from __future__ import annotations

import os
import re
from pathlib import Path, PureWindowsPath
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")
WINDOWS_PROTECTED_ROOTS: Final[tuple[str, ...]] = (
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\System",
)
UNIX_PROTECTED_ROOTS: Final[tuple[str, ...]] = ("/System", "/usr", "/bin", "/sbin", "/etc")


class UnsafePathError(Exception):
    """Raised when a destination path points into a protected system directory."""

    def __init__(self, reason: str, hint: str, path: str = "") -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint
        self.path = path


def _is_windows_style(candidate: str) -> bool:
    return bool(WINDOWS_ABSOLUTE_PATTERN.match(candidate)) or candidate.startswith("\\\\")


def validate_output_path(candidate: str | Path) -> Path:
    """Resolve candidate to an absolute path and reject protected system roots.

    Windows-style paths compare case-insensitively, POSIX paths case-sensitively.
    """
    raw = str(candidate)
    if not raw.strip():
        raise UnsafePathError(
            reason="Output path is empty.",
            hint="Provide a directory such as './src/api'.",
            path=raw,
        )

    if _is_windows_style(raw):
        _check_windows(str(PureWindowsPath(raw)))
        return Path(raw)

    # Both the lexical and the symlink-resolved forms must clear the deny list:
    # on macOS /etc resolves to /private/etc.
    lexical = Path(os.path.abspath(os.path.expanduser(raw)))
    resolved = lexical.resolve(strict=False)
    for candidate_path in (lexical, resolved):
        native = str(candidate_path)
        if _is_windows_style(native):
            _check_windows(native)
        else:
            _check_posix(candidate_path.as_posix())
    return resolved


def _check_posix(resolved_text: str) -> None:
    for protected in UNIX_PROTECTED_ROOTS:
        if resolved_text.startswith(protected):
            raise _blocked(resolved_text)


def _check_windows(resolved_text: str) -> None:
    upper = resolved_text.upper()
    for protected in WINDOWS_PROTECTED_ROOTS:
        if upper.startswith(protected.upper()):
            raise _blocked(resolved_text)


def _blocked(resolved_text: str) -> UnsafePathError:
    return UnsafePathError(
        reason="Writing into a system directory is not allowed.",
        hint="Choose an output directory inside your project or home directory.",
        path=resolved_text,
    )
