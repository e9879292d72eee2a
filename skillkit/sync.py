"""Materialize linked skills and deploy them.

Each sync walks the same steps: look the link up, materialize its source
(local path as-is, git into a temporary clone), validate, deploy to the one
requested target, then drop any temporary clone whatever happened.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from config import Config

from .deployer import deploy_skill
from .errors import RegistryCorruptError, RetrievalFailedError, UnsupportedError
from .installer import temporary_directory
from .linker import LinkRegistry
from .paths import SkillPaths
from .types import (
    DeployOptions,
    LinkKind,
    LinkOptions,
    SkillLink,
    SyncFailure,
    SyncResult,
)
from .validator import validate_directory
from .vcs import GitRetriever, Retriever

logger = logging.getLogger(__name__)

TEMP_PREFIX = "skill-link-"


class _InvalidSubPath(Exception):
    pass


class LinkSynchronizer:
    def __init__(
        self,
        registry: LinkRegistry,
        retriever: Retriever | None = None,
        default_branch: str | None = None,
    ) -> None:
        self.registry = registry
        self.paths: SkillPaths = registry.paths
        self.retriever = retriever or GitRetriever(depth=Config.GIT_CLONE_DEPTH)
        self.default_branch = default_branch or Config.DEFAULT_BRANCH

    @asynccontextmanager
    async def _materialize(self, link: SkillLink) -> AsyncIterator[Path]:
        if link.kind is LinkKind.LOCAL:
            yield self.paths.expand(link.source)
            return

        if link.kind is LinkKind.WEB:
            raise UnsupportedError("Web links are not yet supported for syncing")

        branch = link.branch or self.default_branch
        async with temporary_directory(prefix=TEMP_PREFIX) as temp_dir:
            result = await self.retriever.clone(link.source, branch, temp_dir)
            if not result.success:
                raise RetrievalFailedError(result.error or "Clone failed")
            if not link.path:
                yield temp_dir
                return
            skill_dir = (temp_dir / link.path).resolve()
            if not skill_dir.is_relative_to(temp_dir.resolve()):
                raise _InvalidSubPath(f"Path '{link.path}' escapes the repository")
            yield skill_dir

    async def _sync_link(self, link: SkillLink, options: LinkOptions) -> SyncResult:
        try:
            async with self._materialize(link) as skill_dir:
                validation = await validate_directory(skill_dir)
                if not validation.valid:
                    detail = ", ".join(f"{e.field}: {e.message}" for e in validation.errors)
                    return SyncResult(
                        link=link,
                        success=False,
                        error=f"Invalid skill directory: {detail}",
                        failure=SyncFailure.INVALID_SKILL,
                    )

                deploy_options = DeployOptions(
                    targets=[options.target],
                    force=options.force,
                    project_path=None if options.user_level else self.paths.cwd,
                )
                outcomes = await deploy_skill(skill_dir, deploy_options, self.paths)
        except UnsupportedError as e:
            return SyncResult(link=link, success=False, error=str(e), failure=SyncFailure.UNSUPPORTED)
        except RetrievalFailedError as e:
            logger.warning(f"Sync of '{link.name}' failed: {e}")
            return SyncResult(
                link=link, success=False, error=str(e), failure=SyncFailure.RETRIEVAL_FAILED
            )
        except _InvalidSubPath as e:
            return SyncResult(
                link=link, success=False, error=str(e), failure=SyncFailure.INVALID_SKILL
            )
        except OSError as e:
            logger.error(f"Sync of '{link.name}' failed: {e}")
            return SyncResult(
                link=link, success=False, error=str(e), failure=SyncFailure.DEPLOY_FAILED
            )

        failed = [o for o in outcomes if not o.success]
        if not failed:
            logger.info(f"Synced link '{link.name}' to {options.target.value}")
            return SyncResult(link=link, success=True, deploy_results=outcomes)

        failure = (
            SyncFailure.ALREADY_EXISTS
            if all(o.already_exists for o in failed)
            else SyncFailure.DEPLOY_FAILED
        )
        return SyncResult(
            link=link,
            success=False,
            deploy_results=outcomes,
            error="; ".join(o.error or "deploy failed" for o in failed),
            failure=failure,
        )

    async def sync(self, name: str, options: LinkOptions) -> SyncResult:
        """Sync one link by name. Disabled links are refused, not synced."""
        try:
            registry = await self.registry.read(options)
        except RegistryCorruptError as e:
            return SyncResult(
                link=None, success=False, error=str(e), failure=SyncFailure.REGISTRY_CORRUPT
            )

        link = registry.find(name)
        if link is None:
            return SyncResult(
                link=None,
                success=False,
                error=f'Link "{name}" not found',
                failure=SyncFailure.NOT_FOUND,
            )
        if not link.enabled:
            return SyncResult(
                link=link,
                success=False,
                error=f'Link "{name}" is disabled',
                failure=SyncFailure.DISABLED,
            )
        return await self._sync_link(link, options)

    async def sync_all(self, options: LinkOptions) -> list[SyncResult]:
        """Sync every enabled link in registry order.

        Raises:
            RegistryCorruptError: The registry cannot be read.
        """
        registry = await self.registry.read(options)
        results: list[SyncResult] = []
        for link in registry.links:
            if not link.enabled:
                continue
            results.append(await self._sync_link(link, options))
        return results
