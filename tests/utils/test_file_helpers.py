"""Tests for file helper utilities."""

from __future__ import annotations

import json
import os
from pathlib import Path

import pytest

from headless_proxy.utils.file_helpers import write_json_atomic


class TestWriteJsonAtomic:
    """Tests for write_json_atomic."""

    def test_writes_json(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"

        write_json_atomic(path, [{"siteId": "a"}])

        assert json.loads(path.read_text()) == [{"siteId": "a"}]

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "a" / "b" / "out.json"

        write_json_atomic(path, {})

        assert path.exists()

    def test_replaces_existing_content(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        path.write_text('{"old": true}')

        write_json_atomic(path, {"new": True})

        assert json.loads(path.read_text()) == {"new": True}

    def test_owner_only_permissions(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"

        write_json_atomic(path, {})

        assert path.stat().st_mode & 0o777 == 0o600

    def test_failed_write_keeps_old_content(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A failure before the rename leaves the target and no temp file behind."""
        path = tmp_path / "out.json"
        path.write_text('{"old": true}')

        def failing_replace(src: str, dst: str) -> None:
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(OSError, match="disk full"):
            write_json_atomic(path, {"new": True})

        assert json.loads(path.read_text()) == {"old": True}
        assert [p.name for p in tmp_path.iterdir()] == ["out.json"]

    def test_unserializable_data_raises_before_touching_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.json"
        path.write_text("[]")

        with pytest.raises(TypeError):
            write_json_atomic(path, {"bad": object()})

        assert path.read_text() == "[]"

