"""Registry of externally located skills ("links").

One JSON registry exists per (target, scope). Every mutation reads the whole
document, changes it in memory, and rewrites it; there is no locking, so two
processes writing the same registry at once can lose an update.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .errors import RegistryCorruptError, SkillkitError
from .installer import ensure_dir, exists, is_dir, read_text, write_text
from .paths import SkillPaths
from .types import (
    LINK_REGISTRY_VERSION,
    LinkKind,
    LinkOptions,
    LinkResult,
    SkillLink,
    SkillLinkRegistry,
)
from .validator import is_valid_name, validate_directory

logger = logging.getLogger(__name__)

GIT_HOSTS = ("github.com", "gitlab.com", "bitbucket.org")
_HTTP_PREFIXES = ("http://", "https://")
_GIT_PREFIXES = _HTTP_PREFIXES + ("git@", "ssh://")


def infer_kind(source: str) -> LinkKind:
    """Guess the link kind from the shape of ``source``."""
    if source.startswith(_HTTP_PREFIXES):
        if any(host in source for host in GIT_HOSTS) or source.endswith(".git"):
            return LinkKind.GIT
        return LinkKind.WEB
    return LinkKind.LOCAL


def _link_from_dict(data: Any, index: int) -> SkillLink:
    if not isinstance(data, dict):
        raise RegistryCorruptError(f"Link at index {index} is not an object")
    for key in ("name", "source"):
        if not isinstance(data.get(key), str):
            raise RegistryCorruptError(f"Link at index {index} has no valid '{key}'")
    try:
        kind = LinkKind(data.get("type"))
    except ValueError:
        raise RegistryCorruptError(
            f"Link '{data['name']}' has unknown type: {data.get('type')!r}"
        ) from None
    enabled = data.get("enabled", True)
    if not isinstance(enabled, bool):
        raise RegistryCorruptError(f"Link '{data['name']}' has a non-boolean 'enabled'")
    for key in ("path", "branch", "description"):
        if data.get(key) is not None and not isinstance(data[key], str):
            raise RegistryCorruptError(f"Link '{data['name']}' has a non-string '{key}'")
    return SkillLink(
        name=data["name"],
        kind=kind,
        source=data["source"],
        path=data.get("path"),
        branch=data.get("branch"),
        enabled=enabled,
        description=data.get("description"),
    )


def registry_from_dict(data: Any) -> SkillLinkRegistry:
    if not isinstance(data, dict):
        raise RegistryCorruptError("Invalid registry format: expected an object")
    version = data.get("version")
    links = data.get("links")
    if not version or not isinstance(version, str) or not isinstance(links, list):
        raise RegistryCorruptError("Invalid registry format")
    return SkillLinkRegistry(
        version=version,
        links=[_link_from_dict(item, idx) for idx, item in enumerate(links)],
    )


async def validate_link(link: SkillLink, paths: SkillPaths) -> str | None:
    """Return why ``link`` cannot be stored, or None when it is acceptable."""
    if not is_valid_name(link.name):
        return "Link name must contain only lowercase letters, numbers, and hyphens"

    if link.kind is LinkKind.LOCAL:
        source = paths.expand(link.source)
        try:
            if not await exists(source):
                return f"Cannot access source: {source} does not exist"
            if not await is_dir(source):
                return "Local source must be a directory"
        except OSError as e:
            return f"Cannot access source: {e}"
        validation = await validate_directory(source)
        if not validation.valid:
            detail = ", ".join(e.message for e in validation.errors)
            return f"Invalid skill directory: {detail}"
    elif link.kind is LinkKind.GIT:
        if not link.source.startswith(_GIT_PREFIXES):
            return "Git source must be a valid URL or SSH address"
    elif link.kind is LinkKind.WEB:
        if not link.source.startswith(_HTTP_PREFIXES):
            return "Web source must be a valid HTTP(S) URL"
    return None


class LinkRegistry:
    """Read and mutate the per-target, per-scope link registry files."""

    def __init__(self, paths: SkillPaths | None = None) -> None:
        self.paths = paths or SkillPaths.from_environment()

    def registry_path(self, options: LinkOptions) -> Path:
        return self.paths.registry_path(options.target, options.user_level)

    async def read(self, options: LinkOptions) -> SkillLinkRegistry:
        """Load the registry; a missing file reads as an empty registry.

        Raises:
            RegistryCorruptError: The file is not valid JSON or has the wrong shape.
        """
        path = self.registry_path(options)
        try:
            content = await read_text(path)
        except FileNotFoundError:
            return SkillLinkRegistry(version=LINK_REGISTRY_VERSION, links=[])
        except UnicodeDecodeError as e:
            raise RegistryCorruptError(f"{path} is not valid UTF-8: {e}") from e

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise RegistryCorruptError(f"{path} is not valid JSON: {e}") from e
        return registry_from_dict(data)

    async def write(self, options: LinkOptions, registry: SkillLinkRegistry) -> None:
        path = self.registry_path(options)
        await ensure_dir(path.parent)
        await write_text(path, json.dumps(registry.to_dict(), indent=2) + "\n")

    async def add(
        self,
        name: str,
        source: str,
        options: LinkOptions,
        kind: LinkKind | None = None,
        path: str | None = None,
        branch: str | None = None,
        description: str | None = None,
        enabled: bool = True,
    ) -> LinkResult:
        """Validate and store a link, replacing a same-named one only with ``force``."""
        try:
            registry = await self.read(options)
            existing = registry.index_of(name)
            if existing >= 0 and not options.force:
                return LinkResult(
                    success=False, error=f'Link "{name}" already exists. Use --force to overwrite.'
                )

            link = SkillLink(
                name=name,
                kind=kind or infer_kind(source),
                source=source,
                path=path,
                branch=branch,
                enabled=enabled,
                description=description,
            )
            problem = await validate_link(link, self.paths)
            if problem:
                return LinkResult(success=False, link=link, error=problem)

            if existing >= 0:
                registry.links[existing] = link
            else:
                registry.links.append(link)
            await self.write(options, registry)
        except (SkillkitError, OSError) as e:
            return LinkResult(success=False, error=str(e))

        logger.info(f"Added {link.kind.value} link '{name}' -> {source}")
        return LinkResult(success=True, link=link)

    async def remove(self, name: str, options: LinkOptions) -> LinkResult:
        try:
            registry = await self.read(options)
            index = registry.index_of(name)
            if index < 0:
                return LinkResult(success=False, error=f'Link "{name}" not found')
            link = registry.links.pop(index)
            await self.write(options, registry)
        except (SkillkitError, OSError) as e:
            return LinkResult(success=False, error=str(e))

        logger.info(f"Removed link '{name}'")
        return LinkResult(success=True, link=link)

    async def list_links(self, options: LinkOptions) -> list[SkillLink]:
        return (await self.read(options)).links

    async def toggle(self, name: str, enabled: bool, options: LinkOptions) -> LinkResult:
        try:
            registry = await self.read(options)
            link = registry.find(name)
            if link is None:
                return LinkResult(success=False, error=f'Link "{name}" not found')
            link.enabled = enabled
            await self.write(options, registry)
        except (SkillkitError, OSError) as e:
            return LinkResult(success=False, error=str(e))

        logger.info(f"{'Enabled' if enabled else 'Disabled'} link '{name}'")
        return LinkResult(success=True, link=link)
