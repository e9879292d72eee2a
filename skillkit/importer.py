"""Import every skill from a GitHub repository's skills directory."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path

from config import Config

from .batch import discover_skills
from .errors import NotFoundError, RetrievalFailedError
from .installer import copy_tree, ensure_dir, exists, remove_path, temporary_directory
from .paths import SkillPaths
from .types import ImportResult, ImportSummary, OutcomeStatus
from .validator import validate_directory
from .vcs import GitRetriever, Retriever

logger = logging.getLogger(__name__)

_GITHUB_URL_RE = re.compile(r"github\.com[/:]([^/]+)/([^/]+?)(?:\.git)?/?$")
_SHORT_RE = re.compile(r"^([^/\s:]+)/([^/\s]+)$")


@dataclass
class ImportOptions:
    branch: str | None = None
    skills_path: str | None = None
    target_dir: str | Path | None = None
    force: bool = False
    dry_run: bool = False


def parse_github_url(url: str) -> tuple[str, str]:
    """Return ``(owner, repo)`` for GitHub HTTPS, SSH or ``owner/repo`` forms.

    Raises:
        ValueError: ``url`` is not recognizable as a GitHub repository.
    """
    url = url.strip()
    match = _GITHUB_URL_RE.search(url) or _SHORT_RE.match(url)
    if not match:
        raise ValueError(f"Invalid GitHub URL: {url}")
    repo = match.group(2)
    if repo.endswith(".git"):
        repo = repo[: -len(".git")]
    return match.group(1), repo


async def _import_one(
    skill_dir: Path, target_root: Path, options: ImportOptions
) -> ImportResult:
    name = skill_dir.name
    validation = await validate_directory(skill_dir)
    if not validation.valid:
        return ImportResult(
            skill_name=name,
            skill_dir=skill_dir,
            status=OutcomeStatus.FAILED,
            validation_errors=[f"{e.field}: {e.message}" for e in validation.errors],
        )

    destination = target_root / name
    already_there = await exists(destination)
    if already_there and not options.force:
        return ImportResult(
            skill_name=name,
            skill_dir=skill_dir,
            status=OutcomeStatus.SKIPPED,
            error="Skill already exists. Use --force to overwrite.",
        )

    if not options.dry_run:
        await ensure_dir(target_root)
        if already_there:
            await remove_path(destination)
        await copy_tree(skill_dir, destination)
    return ImportResult(skill_name=name, skill_dir=destination, status=OutcomeStatus.SUCCEEDED)


async def import_from_github(
    github_url: str,
    options: ImportOptions | None = None,
    paths: SkillPaths | None = None,
    retriever: Retriever | None = None,
) -> ImportSummary:
    """Clone a GitHub repository and copy its valid skills into a local directory.

    Args:
        github_url: ``https://github.com/o/r``, ``git@github.com:o/r.git`` or ``o/r``
        options: Branch, skills path inside the repo, destination and flags
        paths: Roots used to resolve a relative destination
        retriever: Clone implementation (default: shallow ``git clone``)

    Returns:
        ImportSummary with one ImportResult per discovered skill

    Raises:
        ValueError: The URL is not a GitHub repository.
        RetrievalFailedError: The clone failed.
        NotFoundError: The repository has no skills directory at ``skills_path``.
    """
    options = options or ImportOptions()
    paths = paths or SkillPaths.from_environment()
    retriever = retriever or GitRetriever(depth=Config.GIT_CLONE_DEPTH)

    owner, repo = parse_github_url(github_url)
    repo_url = f"https://github.com/{owner}/{repo}.git"
    branch = options.branch or Config.DEFAULT_BRANCH
    skills_path = options.skills_path or Config.IMPORT_SKILLS_PATH
    target_root = paths.expand(options.target_dir or Config.IMPORT_TARGET_DIR)

    summary = ImportSummary(repo_url=repo_url, branch=branch)
    async with temporary_directory(prefix="skill-import-") as temp_dir:
        logger.info(f"Cloning {repo_url} ({branch}) into {temp_dir}")
        result = await retriever.clone(repo_url, branch, temp_dir)
        if not result.success:
            raise RetrievalFailedError(result.error or f"Failed to clone {repo_url}")

        skills_dir = temp_dir / skills_path
        if not await exists(skills_dir):
            raise NotFoundError(
                f"Skills directory not found: {skills_path}. "
                f"Make sure the repository has a '{skills_path}' directory."
            )

        skill_dirs = await discover_skills(skills_dir)
        summary.total_found = len(skill_dirs)
        for skill_dir in skill_dirs:
            try:
                outcome = await _import_one(skill_dir, target_root, options)
            except OSError as e:
                outcome = ImportResult(
                    skill_name=skill_dir.name,
                    skill_dir=skill_dir,
                    status=OutcomeStatus.FAILED,
                    error=str(e),
                )
            logger.info(f"Import {skill_dir.name}: {outcome.status.value}")
            summary.results.append(outcome)
    return summary
