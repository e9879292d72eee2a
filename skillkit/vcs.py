"""Version-control retrieval used by link sync and the GitHub importer."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from .types import CloneResult

logger = logging.getLogger(__name__)


class Retriever(Protocol):
    async def clone(self, url: str, branch: str, dest: Path) -> CloneResult: ...


class GitRetriever:
    """Shallow, single-branch ``git clone`` into an existing empty directory.

    No timeout is applied: a hung clone blocks until git itself gives up.
    """

    def __init__(self, depth: int = 1, executable: str = "git") -> None:
        self.depth = depth
        self.executable = executable

    def build_args(self, url: str, branch: str, dest: Path) -> list[str]:
        return [
            "clone",
            "--depth",
            str(self.depth),
            "--branch",
            branch,
            "--single-branch",
            url,
            str(dest),
        ]

    async def clone(self, url: str, branch: str, dest: Path) -> CloneResult:
        args = self.build_args(url, branch, dest)
        logger.debug(f"Running {self.executable} {' '.join(args)}")
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            return CloneResult(success=False, error="git is required to clone repositories")

        _, stderr = await process.communicate()
        if process.returncode != 0:
            message = stderr.decode(errors="ignore").strip()
            return CloneResult(success=False, error=f"Git clone failed: {message}")
        return CloneResult(success=True)
