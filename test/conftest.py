"""Shared fixtures for skillkit tests."""

import textwrap
from pathlib import Path
from typing import Optional

import pytest

from skillkit import SkillPaths
from skillkit.types import CloneResult


def render_skill_md(name: str, description: str, body: str = "", extra: str = "") -> str:
    header = f"name: {name}\ndescription: {description}\n{extra}".rstrip("\n")
    return f"---\n{header}\n---\n\n{body}"


@pytest.fixture
def paths(tmp_path) -> SkillPaths:
    """Home and project roots inside tmp_path so tests never touch the real home."""
    home = tmp_path / "home"
    cwd = tmp_path / "project"
    home.mkdir()
    cwd.mkdir()
    return SkillPaths(home=home, cwd=cwd)


@pytest.fixture
def make_skill(tmp_path):
    """Factory that writes a skill directory and returns its path.

    Usage:
        skill_dir = make_skill("lint", description="Run lint checks.")
    """

    def _make(
        name: str,
        description: str = "A test skill",
        body: str = "# Skill\n\nDo the thing.",
        parent: Optional[Path] = None,
        dir_name: Optional[str] = None,
        extra: str = "",
        raw: Optional[str] = None,
    ) -> Path:
        skill_dir = (parent or tmp_path / "src") / (dir_name or name)
        skill_dir.mkdir(parents=True, exist_ok=True)
        content = raw if raw is not None else render_skill_md(name, description, body, extra)
        (skill_dir / "SKILL.md").write_text(content, encoding="utf-8")
        return skill_dir

    return _make


class FakeRetriever:
    """Stands in for git: records clone calls and writes a canned repository."""

    def __init__(self, files: Optional[dict[str, str]] = None, error: Optional[str] = None):
        self.files = files or {}
        self.error = error
        self.calls: list[tuple[str, str, Path]] = []

    async def clone(self, url: str, branch: str, dest: Path) -> CloneResult:
        self.calls.append((url, branch, dest))
        if self.error:
            return CloneResult(success=False, error=self.error)
        for rel, content in self.files.items():
            file_path = dest / rel
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(textwrap.dedent(content), encoding="utf-8")
        return CloneResult(success=True)

    @property
    def last_dest(self) -> Path:
        return self.calls[-1][2]


@pytest.fixture
def fake_retriever():
    """Factory for FakeRetriever instances."""
    return FakeRetriever
