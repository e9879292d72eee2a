"""Deploy every skill found under a parent directory."""

from __future__ import annotations

import logging
from pathlib import Path

from .deployer import deploy_skill
from .errors import NoSkillsFoundError, NotFoundError
from .installer import exists, is_dir, list_subdirs
from .paths import SkillPaths
from .types import SKILL_FILE, BatchDeployResult, DeployOptions
from .validator import validate_directory

logger = logging.getLogger(__name__)


async def discover_skills(parent_dir: Path) -> list[Path]:
    """Return immediate subdirectories holding a SKILL.md, sorted by name.

    Raises:
        NotFoundError: ``parent_dir`` does not exist or is not a directory.
    """
    if not await exists(parent_dir):
        raise NotFoundError(f"Directory not found: {parent_dir}")
    if not await is_dir(parent_dir):
        raise NotFoundError(f"Not a directory: {parent_dir}")

    skills: list[Path] = []
    for entry in await list_subdirs(parent_dir):
        if await exists(entry / SKILL_FILE):
            skills.append(entry)
    return skills


async def batch_deploy(
    parent_dir: Path,
    options: DeployOptions,
    paths: SkillPaths | None = None,
) -> list[BatchDeployResult]:
    """Validate and deploy each discovered skill, isolating per-skill failures.

    Raises:
        NotFoundError: ``parent_dir`` is missing.
        NoSkillsFoundError: No subdirectory holds a SKILL.md.
    """
    paths = paths or SkillPaths.from_environment()
    parent_dir = paths.expand(parent_dir)
    skill_dirs = await discover_skills(parent_dir)
    if not skill_dirs:
        raise NoSkillsFoundError(f"No skills found in {parent_dir}")

    logger.info(f"Batch deploying {len(skill_dirs)} skill(s) from {parent_dir}")
    results: list[BatchDeployResult] = []
    for skill_dir in skill_dirs:
        validation = await validate_directory(skill_dir)
        if not validation.valid:
            detail = "; ".join(f"{e.field}: {e.message}" for e in validation.errors)
            logger.warning(f"Skipping {skill_dir.name}: {detail}")
            results.append(
                BatchDeployResult(
                    skill_name=skill_dir.name, skill_dir=skill_dir, validation_error=detail
                )
            )
            continue

        outcomes = await deploy_skill(skill_dir, options, paths)
        results.append(
            BatchDeployResult(skill_name=skill_dir.name, skill_dir=skill_dir, outcomes=outcomes)
        )
    return results
