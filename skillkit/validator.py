"""SKILL.md validation.

Header rules follow the strictest of the supported platforms: names are at
most 64 characters, descriptions at most 500. Every rule is checked
independently so callers see all problems at once.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Mapping

from .errors import InvalidManifestError, SkillkitError
from .installer import exists, is_dir
from .parser import load_document
from .types import (
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    SKILL_FILE,
    Manifest,
    ValidationError,
    ValidationResult,
)

NAME_PATTERN = re.compile(r"[a-z0-9-]+")

_MISSING = object()


def is_valid_name(value: str) -> bool:
    return NAME_PATTERN.fullmatch(value) is not None


def _check_single_line_text(field: str, value: Any, limit: int) -> list[ValidationError]:
    if value is _MISSING or value is None or value == "":
        return [ValidationError(field, "Required field is missing")]
    if not isinstance(value, str):
        return [ValidationError(field, "Must be a string")]

    errors: list[ValidationError] = []
    if len(value) > limit:
        errors.append(
            ValidationError(field, f"Must be {limit} characters or less (got {len(value)})")
        )
    if "\n" in value or "\r" in value:
        errors.append(ValidationError(field, "Must be a single line (no newlines)"))
    return errors


def _check_string_list(field: str, value: Any) -> list[ValidationError]:
    if value is _MISSING:
        return []
    if not isinstance(value, list):
        return [ValidationError(field, "Must be an array")]
    return [
        ValidationError(field, f"Item at index {index} must be a string")
        for index, item in enumerate(value)
        if not isinstance(item, str)
    ]


def validate_metadata(header: Mapping[str, Any]) -> list[ValidationError]:
    """Check a parsed SKILL.md header and return every violation found."""
    name = header.get("name", _MISSING)
    errors = _check_single_line_text("name", name, NAME_MAX_LENGTH)
    if isinstance(name, str) and name and not is_valid_name(name):
        errors.append(
            ValidationError("name", "Must contain only lowercase letters, numbers, and hyphens")
        )

    errors.extend(
        _check_single_line_text(
            "description", header.get("description", _MISSING), DESCRIPTION_MAX_LENGTH
        )
    )
    errors.extend(_check_string_list("allowed-tools", header.get("allowed-tools", _MISSING)))

    model = header.get("model", _MISSING)
    if model is not _MISSING and not isinstance(model, str):
        errors.append(ValidationError("model", "Must be a string"))

    errors.extend(_check_string_list("skills", header.get("skills", _MISSING)))
    return errors


def manifest_from_header(header: Mapping[str, Any], body: str) -> Manifest:
    errors = validate_metadata(header)
    if errors:
        raise InvalidManifestError(errors)

    tools = header.get("allowed-tools")
    sub_skills = header.get("skills")
    return Manifest(
        name=header["name"],
        description=header["description"],
        body=body,
        allowed_tools=tuple(tools) if tools is not None else None,
        model=header.get("model"),
        sub_skills=tuple(sub_skills) if sub_skills is not None else None,
    )


async def parse_manifest(path: Path) -> Manifest:
    """Load SKILL.md at ``path`` into a validated Manifest.

    Raises:
        NotFoundError: The file does not exist.
        MalformedHeaderError: Frontmatter delimiters are missing.
        InvalidEncodingError: Frontmatter is not decodable YAML.
        InvalidManifestError: Header fields break the validation rules.
    """
    document = await load_document(path)
    return manifest_from_header(document.header, document.body)


async def validate_skill_file(path: Path) -> ValidationResult:
    try:
        document = await load_document(path)
    except (SkillkitError, OSError) as e:
        return ValidationResult(valid=False, errors=[ValidationError("file", str(e))])

    errors = validate_metadata(document.header)
    return ValidationResult(valid=not errors, errors=errors)


async def validate_directory(path: Path) -> ValidationResult:
    """Validate a skill directory: it must exist and hold a valid SKILL.md."""
    try:
        if not await exists(path):
            return ValidationResult(
                valid=False, errors=[ValidationError("directory", f"Directory not found: {path}")]
            )
        if not await is_dir(path):
            return ValidationResult(
                valid=False, errors=[ValidationError("directory", "Path is not a directory")]
            )
        if not await exists(path / SKILL_FILE):
            return ValidationResult(
                valid=False, errors=[ValidationError(SKILL_FILE, "File not found in directory")]
            )
    except OSError as e:
        return ValidationResult(valid=False, errors=[ValidationError("directory", str(e))])

    return await validate_skill_file(path / SKILL_FILE)


def format_errors(errors: list[ValidationError]) -> str:
    return "\n".join(f"  - {e.field}: {e.message}" for e in errors)
