"""Project name validation following npm package naming rules."""

from __future__ import annotations

import re

_NPM_NAME_RE = re.compile(r"^(@[a-z0-9-~][a-z0-9-._~]*/)?[a-z0-9-~][a-z0-9-._~]*$")

MAX_NAME_LENGTH = 214


def validate_project_name(name: str) -> str | None:
    """Return a human-readable problem with *name*, or ``None`` if it is valid."""
    if not name or not name.strip():
        return "Project name cannot be empty"
    if name != name.lower():
        return "Project name must be lowercase"
    if name.startswith((".", "_")):
        return "Project name cannot start with . or _"
    if re.search(r"\s", name):
        return "Project name cannot contain spaces"
    if not _NPM_NAME_RE.match(name):
        return (
            "Project name can only contain lowercase letters, numbers, "
            "hyphens, and underscores"
        )
    if len(name) > MAX_NAME_LENGTH:
        return f"Project name must be {MAX_NAME_LENGTH} characters or fewer"
    return None


def to_valid_project_name(name: str) -> str:
    """Coerce arbitrary input into a valid project name.

    Examples::

        to_valid_project_name("  My Site ") -> "my-site"
        to_valid_project_name("_Hello World!") -> "hello-world"
    """
    result = name.strip().lower()
    result = re.sub(r"\s+", "-", result)
    result = re.sub(r"[^a-z0-9\-_~.]", "-", result)
    result = re.sub(r"^[-._]+", "", result)
    result = re.sub(r"[-._]+$", "", result)
    return re.sub(r"-+", "-", result)
