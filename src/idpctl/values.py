"""Value-or-@file flag indirection."""

from __future__ import annotations

from pathlib import Path

from idpctl.errors import ValueFileError

FILE_MARKER = "@"


def resolve_value_or_file(value: str | None) -> str | None:
    """Resolve a flag value that may reference a local file.

    A value starting with ``@`` names a file whose contents replace the value
    verbatim; no whitespace is stripped. ``None`` and plain values pass through.
    """
    if value is None or not value.startswith(FILE_MARKER):
        return value

    raw_path = value[len(FILE_MARKER) :]
    if not raw_path:
        raise ValueFileError("missing file path after '@'")
    path = Path(raw_path)
    try:
        return path.read_bytes().decode("utf-8")
    except FileNotFoundError as exc:
        raise ValueFileError(f"file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ValueFileError(f"failed to read file {path}: {exc}") from exc
