"""YAML front matter utilities for corpus items.

Community articles sometimes start with a front matter block:

    ---
    title: Octane Patterns
    author: someone
    ---
    Body text...
"""

import re
from typing import Any

import yaml


# Front matter delimiter (3 dashes)
DELIMITER = "---"

_FRONT_MATTER_PATTERN = re.compile(rf"^{re.escape(DELIMITER)}\s*\n(.*?)\n{re.escape(DELIMITER)}\s*(?:\n|$)", re.DOTALL)


def parse_front_matter(content: str) -> tuple[dict[str, Any], str]:
    """Parse YAML front matter from the start of item content.

    Args:
        content: Item content, optionally preceded by blank lines

    Returns:
        Tuple of (front_matter_dict, remaining_content).
        If no valid front matter is found, returns (empty dict, original content)
    """
    stripped = content.lstrip("\n")
    match = _FRONT_MATTER_PATTERN.match(stripped)
    if not match:
        return {}, content

    try:
        metadata = yaml.safe_load(match.group(1)) or {}
    except yaml.YAMLError:
        return {}, content

    if not isinstance(metadata, dict):
        return {}, content

    return metadata, stripped[match.end() :]


def front_matter_title(content: str) -> str | None:
    """Return the ``title`` declared in front matter, if any."""
    metadata, _ = parse_front_matter(content)
    title = metadata.get("title")
    if title is None:
        return None
    title = str(title).strip()
    return title or None
