"""Rewrites ``package.json`` so the project is detached from the template repo."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from create_velocity.utils import dump_json, load_json

INITIAL_VERSION = "0.1.0"
# Fields that point back at the template's own repository.
DETACHED_FIELDS = ("repository", "bugs", "homepage")


def update_package_json(project_dir: Path, project_name: str) -> dict[str, Any]:
    """Set name and version and strip origin links. Returns the written data.

    Raises:
        FileNotFoundError: If the template has no ``package.json``.
    """
    pkg_path = Path(project_dir) / "package.json"
    if not pkg_path.is_file():
        raise FileNotFoundError("package.json not found in template")

    pkg = load_json(pkg_path)
    pkg["name"] = project_name
    pkg["version"] = INITIAL_VERSION
    for key in DETACHED_FIELDS:
        pkg.pop(key, None)

    dump_json(pkg, pkg_path)
    return pkg
