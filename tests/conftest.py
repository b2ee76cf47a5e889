"""Shared pytest fixtures for the create-velocity test suite.

Provides reusable fixtures for:
- A sample component registry (as a dict, a model, and a JSON file on disk)
- A miniature Velocity template tree to compose from
- Configurations pointing at local sources so no test touches the network
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any

import pytest

from create_velocity.config import Config
from create_velocity.registry.models import ComponentRegistry


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_registry_data() -> dict[str, Any]:
    """Registry with a diamond: ``dialog`` and ``card`` both need ``button``."""
    return {
        "version": "1.2.0",
        "categories": {
            "ui": {"name": "UI Components", "description": "Primitives"},
            "patterns": {"name": "Patterns", "description": "Composite sections"},
        },
        "utilities": {
            "cn": {
                "name": "Class names",
                "files": ["src/lib/cn.ts"],
                "npm": ["clsx", "tailwind-merge"],
            },
            "focus": {
                "name": "Focus trap",
                "files": ["src/lib/focus.ts"],
                "npm": ["focus-trap"],
            },
        },
        "components": {
            "button": {
                "name": "Button",
                "category": "ui",
                "files": ["src/components/ui/Button.astro"],
                "dependencies": {"utilities": ["cn"], "components": []},
            },
            "card": {
                "name": "Card",
                "category": "ui",
                "files": ["src/components/ui/Card.astro"],
                "dependencies": {"utilities": ["cn"], "components": ["button"]},
            },
            "dialog": {
                "name": "Dialog",
                "category": "ui",
                "files": ["src/components/ui/Dialog.astro", "src/components/ui/DialogTrigger.astro"],
                "dependencies": {"utilities": ["focus"], "components": ["button"]},
            },
            "pricing": {
                "name": "Pricing",
                "category": "patterns",
                "files": ["src/components/patterns/Pricing.astro"],
                "dependencies": {"utilities": [], "components": ["card", "dialog"]},
            },
        },
    }


@pytest.fixture
def sample_registry(sample_registry_data: dict[str, Any]) -> ComponentRegistry:
    return ComponentRegistry.model_validate(sample_registry_data)


@pytest.fixture
def registry_file(tmp_path: Path, sample_registry_data: dict[str, Any]) -> Path:
    """The sample registry written to disk as ``component-registry.json``."""
    path = tmp_path / "component-registry.json"
    path.write_text(json.dumps(sample_registry_data, indent=2), encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

BASE_ROUTES_TS = textwrap.dedent("""\
    export const routes = {
      home: {
        path: '/',
        nav: { show: true, order: 10, label: 'Home' },
      },
      blog: {
        path: '/blog',
        nav: { show: true, order: 20, label: 'Blog' },
      },
    } as const satisfies Record<string, RouteConfig>;
    """)


def _write(root: Path, rel: str, content: str = "") -> None:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A miniature Velocity template: optional components, demo content, routes."""
    root = tmp_path / "velocity-template"
    package = {
        "name": "velocity",
        "version": "2.3.0",
        "private": True,
        "repository": {"type": "git", "url": "https://github.com/southwellmedia/velocity"},
        "bugs": {"url": "https://github.com/southwellmedia/velocity/issues"},
        "homepage": "https://velocity.example",
        "scripts": {"dev": "astro dev"},
    }
    _write(root, "package.json", json.dumps(package, indent=2) + "\n")
    _write(root, "pnpm-lock.yaml", "lockfileVersion: '9.0'\n")
    _write(root, ".git/HEAD", "ref: refs/heads/main\n")

    for rel in (
        "src/components/ui/Button.astro",
        "src/components/ui/Card.astro",
        "src/components/ui/Dialog.astro",
        "src/components/ui/DialogTrigger.astro",
        "src/components/ui/Tooltip.astro",
        "src/components/patterns/Pricing.astro",
        "src/components/patterns/Faq.astro",
        "src/components/hero/Hero.astro",
        "src/components/layout/Header.astro",
        "src/lib/cn.ts",
        "src/lib/focus.ts",
    ):
        _write(root, rel, f"<!-- {rel} -->\n")

    for rel in (
        "src/pages/index.astro",
        "src/pages/about.astro",
        "src/pages/contact.astro",
        "src/components/landing/Features.astro",
        "src/layouts/LandingLayout.astro",
        "src/content/blog/hello.md",
    ):
        _write(root, rel, f"<!-- demo: {rel} -->\n")

    _write(root, "src/layouts/PageLayout.astro", "<slot />\n")
    _write(root, "src/config/routes.ts", BASE_ROUTES_TS)
    return root


@pytest.fixture
def local_config(template_dir: Path, registry_file: Path) -> Config:
    """Configuration that reads the template and registry from disk."""
    return Config(
        template_locator=str(template_dir),
        registry_source=str(registry_file),
        raw_base_url="https://raw.example.test/velocity/main",
    )


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Where a composed project lands (not created up front)."""
    return tmp_path / "my-site"
