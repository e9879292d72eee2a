"""Data models for skill deployment and linking."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

SKILL_FILE = "SKILL.md"

NAME_MAX_LENGTH = 64
DESCRIPTION_MAX_LENGTH = 500

LINK_REGISTRY_VERSION = "1.0.0"


class DeployTarget(str, Enum):
    CLAUDE = "claude"
    CODEX = "codex"
    CURSOR = "cursor"

    @property
    def single_file(self) -> bool:
        """Cursor reads one project-level rules file instead of skill directories."""
        return self is DeployTarget.CURSOR

    @classmethod
    def parse(cls, value: str) -> DeployTarget:
        try:
            return cls(value)
        except ValueError:
            choices = ", ".join(t.value for t in cls)
            raise ValueError(f'Invalid target "{value}". Must be one of: {choices}') from None


# Relative to the home directory (user) or the project directory (project).
TARGET_PATHS: dict[DeployTarget, dict[str, str]] = {
    DeployTarget.CLAUDE: {"user": ".claude/skills", "project": ".claude/skills"},
    DeployTarget.CODEX: {"user": ".codex/skills", "project": ".codex/skills"},
    DeployTarget.CURSOR: {"project": ".cursorrules"},
}

LINK_REGISTRY_PATHS: dict[DeployTarget, str] = {
    DeployTarget.CLAUDE: ".claude/skill-links.json",
    DeployTarget.CODEX: ".codex/skill-links.json",
    DeployTarget.CURSOR: ".cursor/skill-links.json",
}


@dataclass(frozen=True)
class ValidationError:
    field: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[ValidationError] = field(default_factory=list)


@dataclass(frozen=True)
class ManifestDocument:
    """Untyped header bag plus body, as split out of a SKILL.md file."""

    header: dict[str, Any]
    body: str
    raw: str


@dataclass(frozen=True)
class Manifest:
    name: str
    description: str
    body: str
    allowed_tools: tuple[str, ...] | None = None
    model: str | None = None
    sub_skills: tuple[str, ...] | None = None


@dataclass
class DeployOptions:
    targets: list[DeployTarget]
    force: bool = False
    dry_run: bool = False
    project_path: Path | None = None


@dataclass(frozen=True)
class DeployOutcome:
    target: DeployTarget
    success: bool
    path: Path | None = None
    error: str | None = None
    already_exists: bool = False


@dataclass(frozen=True)
class RemoveResult:
    success: bool
    path: Path | None = None
    error: str | None = None


@dataclass
class BatchDeployResult:
    skill_name: str
    skill_dir: Path
    outcomes: list[DeployOutcome] = field(default_factory=list)
    validation_error: str | None = None

    @property
    def success(self) -> bool:
        return self.validation_error is None and all(o.success for o in self.outcomes)


class LinkKind(str, Enum):
    LOCAL = "local"
    GIT = "git"
    WEB = "web"


@dataclass
class SkillLink:
    name: str
    kind: LinkKind
    source: str
    path: str | None = None
    branch: str | None = None
    enabled: bool = True
    description: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "type": self.kind.value, "source": self.source}
        if self.path is not None:
            data["path"] = self.path
        if self.branch is not None:
            data["branch"] = self.branch
        data["enabled"] = self.enabled
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class SkillLinkRegistry:
    version: str = LINK_REGISTRY_VERSION
    links: list[SkillLink] = field(default_factory=list)

    def find(self, name: str) -> SkillLink | None:
        for link in self.links:
            if link.name == name:
                return link
        return None

    def index_of(self, name: str) -> int:
        for idx, link in enumerate(self.links):
            if link.name == name:
                return idx
        return -1

    def to_dict(self) -> dict[str, Any]:
        return {"version": self.version, "links": [link.to_dict() for link in self.links]}


@dataclass(frozen=True)
class LinkOptions:
    target: DeployTarget
    user_level: bool = True
    force: bool = False


@dataclass(frozen=True)
class LinkResult:
    success: bool
    link: SkillLink | None = None
    error: str | None = None


@dataclass(frozen=True)
class CloneResult:
    success: bool
    error: str | None = None


class OutcomeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class SyncFailure(str, Enum):
    NOT_FOUND = "not_found"
    DISABLED = "disabled"
    RETRIEVAL_FAILED = "retrieval_failed"
    UNSUPPORTED = "unsupported"
    INVALID_SKILL = "invalid_skill"
    ALREADY_EXISTS = "already_exists"
    DEPLOY_FAILED = "deploy_failed"
    REGISTRY_CORRUPT = "registry_corrupt"


@dataclass(frozen=True)
class SyncResult:
    link: SkillLink | None
    success: bool
    deploy_results: list[DeployOutcome] = field(default_factory=list)
    error: str | None = None
    failure: SyncFailure | None = None

    @property
    def status(self) -> OutcomeStatus:
        if self.success:
            return OutcomeStatus.SUCCEEDED
        if self.failure is SyncFailure.ALREADY_EXISTS:
            return OutcomeStatus.SKIPPED
        return OutcomeStatus.FAILED


@dataclass(frozen=True)
class ImportResult:
    skill_name: str
    skill_dir: Path
    status: OutcomeStatus
    error: str | None = None
    validation_errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is OutcomeStatus.SUCCEEDED

    @property
    def already_exists(self) -> bool:
        return self.status is OutcomeStatus.SKIPPED


@dataclass
class ImportSummary:
    repo_url: str
    branch: str
    total_found: int = 0
    results: list[ImportResult] = field(default_factory=list)

    def _count(self, status: OutcomeStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def imported(self) -> int:
        return self._count(OutcomeStatus.SUCCEEDED)

    @property
    def skipped(self) -> int:
        return self._count(OutcomeStatus.SKIPPED)

    @property
    def failed(self) -> int:
        return self._count(OutcomeStatus.FAILED)
