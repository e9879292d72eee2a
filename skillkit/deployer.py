"""Copy skills into platform directories, or convert them for single-file targets."""

from __future__ import annotations

import logging
from pathlib import Path

from .converter import convert_to_cursor_rules
from .errors import SkillkitError, UnsupportedError
from .installer import copy_tree, ensure_dir, exists, list_subdirs, remove_path, write_text
from .paths import SkillPaths
from .types import (
    SKILL_FILE,
    TARGET_PATHS,
    DeployOptions,
    DeployOutcome,
    DeployTarget,
    Manifest,
    RemoveResult,
)
from .validator import parse_manifest

logger = logging.getLogger(__name__)


def _conflict(target: DeployTarget, path: Path) -> DeployOutcome:
    return DeployOutcome(
        target=target,
        success=False,
        path=path,
        error=f"Skill already exists at {path}. Use --force to overwrite.",
        already_exists=True,
    )


async def _deploy_directory(
    skill_dir: Path,
    manifest: Manifest,
    target: DeployTarget,
    options: DeployOptions,
    paths: SkillPaths,
) -> DeployOutcome:
    base = paths.target_base(target, options.project_path)
    # The declared name wins over the source directory's basename.
    destination = base / manifest.name

    if await exists(destination):
        if not options.force:
            logger.warning(f"{target.value}: {destination} exists, skipping")
            return _conflict(target, destination)
        if destination.resolve() == skill_dir.resolve():
            return DeployOutcome(
                target=target,
                success=False,
                path=destination,
                error=f"Source and destination are the same directory: {destination}",
            )
        if not options.dry_run:
            logger.info(f"{target.value}: removing existing {destination}")
            await remove_path(destination)

    if not options.dry_run:
        await ensure_dir(base)
        await copy_tree(skill_dir, destination)
        logger.info(f"{target.value}: deployed {manifest.name} to {destination}")

    return DeployOutcome(target=target, success=True, path=destination)


async def _deploy_single_file(
    manifest: Manifest,
    target: DeployTarget,
    options: DeployOptions,
    paths: SkillPaths,
) -> DeployOutcome:
    destination = paths.target_base(target, options.project_path)
    document = convert_to_cursor_rules(manifest)

    if await exists(destination):
        if not options.force:
            logger.warning(f"{target.value}: {destination} exists, skipping")
            return DeployOutcome(
                target=target,
                success=False,
                path=destination,
                error=f"{destination} already exists. Use --force to overwrite.",
                already_exists=True,
            )
        if not options.dry_run:
            await remove_path(destination)

    if not options.dry_run:
        await ensure_dir(destination.parent)
        await write_text(destination, document)
        logger.info(f"{target.value}: wrote {manifest.name} rules to {destination}")

    return DeployOutcome(target=target, success=True, path=destination)


async def deploy_skill(
    skill_dir: Path,
    options: DeployOptions,
    paths: SkillPaths | None = None,
) -> list[DeployOutcome]:
    """Deploy one skill directory to every target in ``options``.

    Targets are attempted independently; a failure on one never stops the
    others. With ``dry_run`` every check runs but nothing is written or removed.

    Args:
        skill_dir: Directory holding SKILL.md and its assets
        options: Targets plus force/dry-run/project-path settings
        paths: Home and working directory roots (default: process environment)

    Returns:
        One DeployOutcome per requested target, in request order
    """
    paths = paths or SkillPaths.from_environment()
    skill_dir = Path(skill_dir)

    try:
        manifest = await parse_manifest(skill_dir / SKILL_FILE)
    except (SkillkitError, OSError) as e:
        logger.error(f"Cannot load manifest from {skill_dir}: {e}")
        return [DeployOutcome(target=t, success=False, error=str(e)) for t in options.targets]

    outcomes: list[DeployOutcome] = []
    for target in options.targets:
        try:
            if target.single_file:
                outcome = await _deploy_single_file(manifest, target, options, paths)
            else:
                outcome = await _deploy_directory(skill_dir, manifest, target, options, paths)
        except OSError as e:
            logger.error(f"{target.value}: deploy of {manifest.name} failed: {e}")
            outcome = DeployOutcome(target=target, success=False, error=str(e))
        outcomes.append(outcome)
    return outcomes


async def remove_skill(
    name: str,
    target: DeployTarget,
    paths: SkillPaths | None = None,
    project_path: Path | None = None,
) -> RemoveResult:
    """Delete a deployed skill. ``name`` is ignored for single-file targets."""
    paths = paths or SkillPaths.from_environment()
    base = paths.target_base(target, project_path)
    destination = base if target.single_file else base / name

    try:
        if not await exists(destination):
            return RemoveResult(success=False, error=f"Skill not found: {destination}")
        await remove_path(destination)
    except OSError as e:
        return RemoveResult(success=False, path=destination, error=str(e))

    logger.info(f"{target.value}: removed {destination}")
    return RemoveResult(success=True, path=destination)


async def list_deployed_skills(
    target: DeployTarget,
    paths: SkillPaths | None = None,
    project_path: Path | None = None,
) -> list[str]:
    if target.single_file:
        rules_file = TARGET_PATHS[target]["project"]
        raise UnsupportedError(f"{target.value} uses a single {rules_file} file and cannot be listed")
    paths = paths or SkillPaths.from_environment()
    base = paths.target_base(target, project_path)
    if not await exists(base):
        return []
    names = []
    for entry in await list_subdirs(base):
        if await exists(entry / SKILL_FILE):
            names.append(entry.name)
    return names
