"""Project registry for headless site credentials.

Holds the ordered list of configured projects (site identifier, API key,
display name) loaded from a JSON file:
- Load at startup (fatal on missing/malformed storage)
- Lookup by site identifier (first match wins)
- Wholesale replacement (persist first, then swap in memory)
"""

from __future__ import annotations

__all__ = [
    "Project",
    "ProjectRegistry",
]

import asyncio
import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from headless_proxy.constants import APP_NAME
from headless_proxy.exceptions import ConfigWriteError, ConfigurationError
from headless_proxy.utils.file_helpers import write_json_atomic

_logger = logging.getLogger(f"{APP_NAME}.registry")


class Project(BaseModel):
    """A configured headless site project.

    Attributes:
        site_id: Upstream site identifier (lookup key).
        api_key: Upstream API key, sent verbatim as the Authorization header.
        project_name: Human-readable name (display only).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    site_id: str = Field(alias="siteId", min_length=1)
    api_key: str = Field(alias="apiKey", min_length=1)
    project_name: str = Field(default="", alias="projectName")

    def to_dict(self) -> dict[str, Any]:
        """Convert to the on-disk/API representation."""
        return self.model_dump(by_alias=True)


_PROJECT_LIST = TypeAdapter(list[Project])


class ProjectRegistry:
    """Registry of configured projects backed by a JSON file.

    The in-memory list is replaced as a whole, never mutated in place, so
    readers always see either the old or the new list. Writers are
    serialized with an asyncio lock.
    """

    def __init__(self, path: Path, projects: Iterable[Project] = ()) -> None:
        """Initialize the registry.

        Args:
            path: JSON file holding the project list.
            projects: Initial projects (normally empty until load()).
        """
        self._path = path
        self._projects: tuple[Project, ...] = tuple(projects)
        self._write_lock = asyncio.Lock()

    @classmethod
    def from_file(cls, path: Path) -> "ProjectRegistry":
        """Create a registry and load it from path.

        Raises:
            ConfigurationError: If the file is missing or malformed.
        """
        registry = cls(path)
        registry.load()
        return registry

    def load(self) -> None:
        """Read the full project list from storage.

        Raises:
            ConfigurationError: If the file is missing, unreadable, not JSON,
                or not a list of projects.
        """
        if not self._path.exists():
            raise ConfigurationError(
                f"Project list not found: {self._path}\n"
                "Create it with 'headless-proxy config init' or pass --projects."
            )

        try:
            with self._path.open(encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in {self._path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Cannot read {self._path}: {e}") from e

        try:
            projects = _PROJECT_LIST.validate_python(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid project list in {self._path}: {e}") from e

        self._projects = tuple(projects)
        _logger.info(
            {
                "event": "projects_loaded",
                "message": f"Loaded {len(projects)} project(s) from {self._path}",
                "count": len(projects),
            }
        )

    def find(self, site_id: str | None) -> Project | None:
        """Get the first project whose site_id matches, or None."""
        if site_id is None:
            return None
        return next((p for p in self._projects if p.site_id == site_id), None)

    def get_all(self) -> list[Project]:
        """List all configured projects in stored order."""
        return list(self._projects)

    async def replace_all(self, new_projects: Iterable[Project | dict[str, Any]]) -> list[Project]:
        """Persist a new project list and swap it in.

        The file is written first; the in-memory list only changes after
        the write succeeded.

        Args:
            new_projects: Complete replacement list (models or raw dicts).

        Returns:
            The newly installed project list.

        Raises:
            ValueError: If the list is empty or contains invalid projects.
            ConfigWriteError: If the file could not be written.
        """
        items = [p.to_dict() if isinstance(p, Project) else p for p in new_projects]
        if not items:
            raise ValueError("Project list must not be empty")
        projects = _PROJECT_LIST.validate_python(items)

        async with self._write_lock:
            data = [p.to_dict() for p in projects]
            try:
                await asyncio.to_thread(write_json_atomic, self._path, data)
            except OSError as e:
                _logger.error(
                    {
                        "event": "projects_write_failed",
                        "message": f"Failed to write project list: {e}",
                        "error_type": type(e).__name__,
                        "path": str(self._path),
                    }
                )
                raise ConfigWriteError(f"Failed to write project list to {self._path}: {e}") from e

            self._projects = tuple(projects)

        _logger.info(
            {
                "event": "projects_replaced",
                "message": f"Project list replaced ({len(projects)} project(s))",
                "count": len(projects),
            }
        )
        return list(projects)
