"""Exception types raised inside skillkit operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .types import ValidationError


class SkillkitError(Exception):
    """Base class for all skillkit failures."""


class NotFoundError(SkillkitError):
    """A file, directory, link or registry entry does not exist."""


class NoSkillsFoundError(NotFoundError):
    """A parent directory holds no skill directories."""


class MalformedHeaderError(SkillkitError):
    """SKILL.md frontmatter delimiters are missing or unterminated."""


class InvalidEncodingError(MalformedHeaderError):
    """SKILL.md frontmatter is not decodable as YAML."""


class InvalidManifestError(SkillkitError):
    """A parsed header failed validation and cannot become a Manifest."""

    def __init__(self, errors: list[ValidationError]) -> None:
        self.errors = errors
        detail = ", ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(f"Invalid SKILL.md metadata: {detail}")


class RetrievalFailedError(SkillkitError):
    """Fetching a version-controlled source failed."""


class UnsupportedError(SkillkitError):
    """Operation is not supported for this source or target."""


class RegistryCorruptError(SkillkitError):
    """A link registry file failed structural checks."""
