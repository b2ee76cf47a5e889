"""External collaborators: git and the JavaScript package managers.

Failures here never abort a composition; callers receive ``False`` and decide
what to tell the user.
"""

from __future__ import annotations

import os
from pathlib import Path

from create_velocity.models import PackageManager
from create_velocity.utils import run_command

INITIAL_COMMIT_MESSAGE = "Initial commit from create-velocity"

_INSTALL_COMMANDS: dict[PackageManager, list[str]] = {
    PackageManager.PNPM: ["pnpm", "install"],
    PackageManager.NPM: ["npm", "install"],
    PackageManager.YARN: ["yarn"],
    PackageManager.BUN: ["bun", "install"],
}

_RUN_COMMANDS: dict[PackageManager, str] = {
    PackageManager.PNPM: "pnpm",
    PackageManager.NPM: "npm run",
    PackageManager.YARN: "yarn",
    PackageManager.BUN: "bun",
}


def detect_package_manager(user_agent: str | None = None) -> PackageManager:
    """Guess the package manager from ``npm_config_user_agent``."""
    agent = user_agent if user_agent is not None else os.environ.get("npm_config_user_agent", "")
    for manager in (PackageManager.PNPM, PackageManager.YARN, PackageManager.BUN):
        if agent.startswith(manager.value):
            return manager
    return PackageManager.NPM


def get_install_command(manager: PackageManager) -> list[str]:
    return list(_INSTALL_COMMANDS[manager])


def get_run_command(manager: PackageManager) -> str:
    return _RUN_COMMANDS[manager]


async def init_git(project_dir: Path) -> bool:
    """Initialise a repository and record an initial commit. ``False`` on any failure."""
    steps = [
        ["git", "init"],
        ["git", "add", "-A"],
        ["git", "commit", "-m", INITIAL_COMMIT_MESSAGE],
    ]
    for step in steps:
        returncode, _, _ = await run_command(step, cwd=project_dir, timeout=60)
        if returncode != 0:
            return False
    return True


async def install_dependencies(project_dir: Path, manager: PackageManager) -> tuple[bool, str]:
    """Run the manager's install command. Returns ``(ok, stderr)``."""
    returncode, _, stderr = await run_command(get_install_command(manager), cwd=project_dir)
    return returncode == 0, stderr
