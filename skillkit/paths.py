"""Filesystem locations for deploy targets and link registries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .types import LINK_REGISTRY_PATHS, TARGET_PATHS, DeployTarget


@dataclass(frozen=True)
class SkillPaths:
    """Home and working directory that all target locations are resolved against.

    Core functions take this value instead of reading ``Path.home()`` or the
    process working directory, so callers (and tests) choose the roots.
    """

    home: Path
    cwd: Path

    @classmethod
    def from_environment(cls) -> SkillPaths:
        return cls(home=Path.home(), cwd=Path.cwd())

    def expand(self, value: str | Path) -> Path:
        """Expand a leading ``~`` against ``home`` and anchor relative paths at ``cwd``."""
        text = str(value)
        if text == "~":
            return self.home
        if text.startswith("~/") or text.startswith("~\\"):
            return self.home / text[2:]
        path = Path(text)
        if not path.is_absolute():
            return self.cwd / path
        return path

    def target_base(self, target: DeployTarget, project_path: str | Path | None = None) -> Path:
        """Directory skills are copied into, or the rules file for single-file targets."""
        paths = TARGET_PATHS[target]
        if target.single_file:
            project = self.expand(project_path) if project_path else self.cwd
            return project / paths["project"]
        if project_path:
            return self.expand(project_path) / paths["project"]
        return self.home / paths["user"]

    def registry_path(self, target: DeployTarget, user_level: bool) -> Path:
        root = self.home if user_level else self.cwd
        return root / LINK_REGISTRY_PATHS[target]
