from __future__ import annotations

import pytest

from idpctl.errors import ValueFileError
from idpctl.values import resolve_value_or_file


def test_plain_value_passes_through() -> None:
    assert resolve_value_or_file("https://foo.internal:8443") == "https://foo.internal:8443"


def test_none_passes_through() -> None:
    assert resolve_value_or_file(None) is None


def test_at_path_reads_file_verbatim(tmp_path) -> None:
    pem = "-----BEGIN CERTIFICATE-----\r\nMIIB\r\n-----END CERTIFICATE-----\r\n\n"
    path = tmp_path / "ca.crt"
    path.write_bytes(pem.encode("utf-8"))

    assert resolve_value_or_file(f"@{path}") == pem


def test_missing_file_raises(tmp_path) -> None:
    with pytest.raises(ValueFileError, match="file not found"):
        resolve_value_or_file(f"@{tmp_path / 'missing.crt'}")


def test_bare_marker_raises() -> None:
    with pytest.raises(ValueFileError, match="missing file path"):
        resolve_value_or_file("@")


def test_directory_raises(tmp_path) -> None:
    with pytest.raises(ValueFileError, match="failed to read file"):
        resolve_value_or_file(f"@{tmp_path}")
