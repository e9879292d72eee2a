"""Convert SKILL.md manifests for platforms that do not read frontmatter."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from .types import Manifest

# Bodies that already carry Cursor rule sections are passed through untouched.
RULE_MARKER = "## Rule:"
DEFAULT_RULE_TITLE = "Skill Instructions"


@dataclass
class RuleSection:
    title: str
    items: list[str] = field(default_factory=list)


def convert_to_cursor_rules(manifest: Manifest) -> str:
    """Render a manifest as a ``.cursorrules`` document."""
    lines = [
        f"# {manifest.name}",
        "",
        "## Description",
        manifest.description,
        "",
    ]

    if RULE_MARKER in manifest.body:
        lines.append(manifest.body)
    else:
        lines.append(f"{RULE_MARKER} {DEFAULT_RULE_TITLE}")
        lines.append("")
        lines.append(manifest.body.strip())

    return "\n".join(lines)


def extract_rules(body: str) -> list[RuleSection]:
    """Group body lines under their ``## `` headings.

    Lines before the first heading are ignored. List items and plain lines are
    both kept as single stripped items.
    """
    rules: list[RuleSection] = []
    current: RuleSection | None = None

    for line in body.split("\n"):
        if line.startswith("## "):
            if current is not None:
                rules.append(current)
            current = RuleSection(title=line[3:].strip())
        elif current is not None and line.strip():
            current.items.append(line.strip())

    if current is not None:
        rules.append(current)
    return rules


def optimize_skill_content(body: str) -> str:
    stripped = "\n".join(line.rstrip() for line in body.split("\n"))
    return re.sub(r"\n{3,}", "\n\n", stripped)
