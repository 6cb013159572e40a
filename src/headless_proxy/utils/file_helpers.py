"""File helpers shared by the server config and the project registry."""

from __future__ import annotations

__all__ = [
    "get_app_dir",
    "write_json_atomic",
]

import json
import os
import tempfile
from pathlib import Path
from typing import Any

import click

from headless_proxy.constants import APP_NAME


def get_app_dir() -> Path:
    """Directory holding server.json and the default project list.

    click picks the platform convention, e.g. ~/.config/headless-proxy on
    Linux and ~/Library/Application Support/headless-proxy on macOS.
    """
    return Path(click.get_app_dir(APP_NAME))


def write_json_atomic(path: Path, data: Any) -> None:
    """Replace path with data serialized as JSON, all or nothing.

    The JSON is written to a sibling temp file, fsynced, made owner-only
    (0600) and renamed over path. Readers see either the previous file or
    the complete new one.

    Args:
        path: Destination file. Missing parent directories are created.
        data: JSON-serializable data.

    Raises:
        OSError: If the directory cannot be created or the write fails.
        TypeError: If data is not JSON-serializable.
    """
    content = json.dumps(data, indent=2) + "\n"
    path.parent.mkdir(parents=True, exist_ok=True)

    # Sibling temp file so the rename stays on one filesystem
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.stem}_", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, 0o600)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
