"""Frontmatter parsing for SKILL.md files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidEncodingError, MalformedHeaderError, NotFoundError
from .installer import read_text
from .types import ManifestDocument

FRONTMATTER_DELIMITER = "---"


def parse_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Split SKILL.md text into a header mapping and the body after it.

    Raises:
        MalformedHeaderError: The opening or closing ``---`` line is missing.
        InvalidEncodingError: The header is not valid YAML, or not a mapping.
    """
    lines = text.split("\n")
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        raise MalformedHeaderError("SKILL.md must start with YAML frontmatter (---)")

    end_idx = None
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        raise MalformedHeaderError("YAML frontmatter must end with ---")

    yaml_text = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])

    try:
        data = yaml.safe_load(yaml_text)
    except yaml.YAMLError as e:
        raise InvalidEncodingError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise InvalidEncodingError("YAML frontmatter must be a mapping of fields")

    return data, body


async def load_document(path: Path) -> ManifestDocument:
    try:
        # utf-8-sig drops a leading byte order mark.
        text = await read_text(path, encoding="utf-8-sig")
    except FileNotFoundError:
        raise NotFoundError(f"File not found: {path}") from None
    except UnicodeDecodeError as e:
        raise InvalidEncodingError(f"{path} is not valid UTF-8: {e}") from e
    header, body = parse_frontmatter(text)
    return ManifestDocument(header=header, body=body, raw=text)
