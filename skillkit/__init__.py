"""Skill validation, cross-platform deployment and external skill links."""

from .batch import batch_deploy, discover_skills
from .converter import convert_to_cursor_rules, extract_rules, optimize_skill_content
from .deployer import deploy_skill, list_deployed_skills, remove_skill
from .errors import (
    InvalidEncodingError,
    InvalidManifestError,
    MalformedHeaderError,
    NoSkillsFoundError,
    NotFoundError,
    RegistryCorruptError,
    RetrievalFailedError,
    SkillkitError,
    UnsupportedError,
)
from .importer import ImportOptions, import_from_github, parse_github_url
from .linker import LinkRegistry, infer_kind, validate_link
from .paths import SkillPaths
from .sync import LinkSynchronizer
from .types import (
    BatchDeployResult,
    DeployOptions,
    DeployOutcome,
    DeployTarget,
    LinkKind,
    LinkOptions,
    LinkResult,
    Manifest,
    SkillLink,
    SkillLinkRegistry,
    SyncFailure,
    SyncResult,
    ValidationError,
    ValidationResult,
)
from .validator import parse_manifest, validate_directory, validate_metadata
from .vcs import GitRetriever, Retriever

__all__ = [
    "BatchDeployResult",
    "DeployOptions",
    "DeployOutcome",
    "DeployTarget",
    "GitRetriever",
    "ImportOptions",
    "InvalidEncodingError",
    "InvalidManifestError",
    "LinkKind",
    "LinkOptions",
    "LinkRegistry",
    "LinkResult",
    "LinkSynchronizer",
    "MalformedHeaderError",
    "Manifest",
    "NoSkillsFoundError",
    "NotFoundError",
    "RegistryCorruptError",
    "RetrievalFailedError",
    "Retriever",
    "SkillLink",
    "SkillLinkRegistry",
    "SkillPaths",
    "SkillkitError",
    "SyncFailure",
    "SyncResult",
    "UnsupportedError",
    "ValidationError",
    "ValidationResult",
    "batch_deploy",
    "convert_to_cursor_rules",
    "deploy_skill",
    "discover_skills",
    "extract_rules",
    "import_from_github",
    "infer_kind",
    "list_deployed_skills",
    "optimize_skill_content",
    "parse_github_url",
    "parse_manifest",
    "remove_skill",
    "validate_directory",
    "validate_link",
    "validate_metadata",
]
