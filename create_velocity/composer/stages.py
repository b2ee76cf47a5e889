"""The ordered composition stages.

Each stage declares a precondition (:meth:`Stage.applies`) and an effect
(:meth:`Stage.run`) over the working tree on disk. ``DEFAULT_STAGES`` fixes
their order; the composer runs them with a single driver loop.

Order constraints:

* the locale overlay runs before demo removal, so demo pages exist in their
  localized form before pruning and the minimal template lands on top of the
  localized routing scaffold;
* component filtering runs before both overlays, which never reintroduce
  optional component files;
* metadata is rewritten after pages are generated and after the template
  version has been captured.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from create_velocity.composer.fs import (
    copy_overlay,
    ensure_placeholder_dirs,
    keep_only_files,
    remove_items,
)
from create_velocity.composer.metadata import update_package_json
from create_velocity.composer.provenance import create_provenance, write_provenance
from create_velocity.composer.template import TemplateFetcher, detect_template_version, get_overlay_path
from create_velocity.config import Config
from create_velocity.models import ScaffoldOptions
from create_velocity.pages.generator import PageGenerator
from create_velocity.registry.fetcher import RegistryClient, RegistryUnavailableError
from create_velocity.registry.models import SelectionMode
from create_velocity.registry.resolver import get_selection_stats, resolve_dependencies
from create_velocity.tooling import get_install_command, init_git, install_dependencies
from create_velocity.utils import pluralize, print_summary_table, print_warning

# ---------------------------------------------------------------------------
# Template layout
# ---------------------------------------------------------------------------

# Retrieval artifacts that must not leak into the generated project.
CLEANUP_ITEMS: tuple[str, ...] = (
    "pnpm-lock.yaml",
    "package-lock.json",
    "yarn.lock",
    "bun.lockb",
    ".git",
)

# Demo-only content, in both the plain and the localized route shapes.
DEMO_CONTENT: tuple[str, ...] = (
    "src/components/landing",
    "src/components/hero",
    "src/pages/index.astro",
    "src/pages/about.astro",
    "src/pages/contact.astro",
    "src/pages/components.astro",
    "src/pages/[lang]/index.astro",
    "src/pages/[lang]/[...about].astro",
    "src/pages/[lang]/[...contact].astro",
    "src/pages/[lang]/[...components].astro",
    "src/layouts/LandingLayout.astro",
    "src/content/blog",
    "src/content/faqs",
    "src/content/authors",
    "src/content/pages",
)

# Only these directories are filtered by component selection.
OPTIONAL_COMPONENT_DIRS: tuple[str, ...] = (
    "src/components/ui",
    "src/components/patterns",
    "src/components/hero",
)

# Content collections the minimal template expects to exist.
CONTENT_DIRS: tuple[str, ...] = ("src/content/blog",)


# ---------------------------------------------------------------------------
# Shared state
# ---------------------------------------------------------------------------


@dataclass
class CompositionContext:
    """Everything a stage may read; the working tree itself lives on disk."""

    options: ScaffoldOptions
    config: Config
    registry: RegistryClient
    fetcher: TemplateFetcher
    pages: PageGenerator
    template_version: str = ""
    results: dict[str, Any] = field(default_factory=dict)

    @property
    def target_dir(self) -> Path:
        return Path(self.options.target_dir)


class Stage:
    """One step of the composition.

    Attributes:
        name: Short identifier used in errors and state.
        description: Progress text shown while the stage runs.
        best_effort: Failures are reported as warnings instead of aborting.
    """

    name: str = ""
    description: str = ""
    best_effort: bool = False

    def applies(self, ctx: CompositionContext) -> bool:
        return True

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Stages, in order
# ---------------------------------------------------------------------------


class RetrieveTemplateStage(Stage):
    name = "retrieve"
    description = "Downloading template"

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        await ctx.fetcher.retrieve(ctx.config.template_locator, ctx.target_dir)
        removed = await asyncio.to_thread(remove_items, ctx.target_dir, CLEANUP_ITEMS)
        # Captured now: the metadata stage resets package.json's version.
        ctx.template_version = await asyncio.to_thread(detect_template_version, ctx.target_dir)
        return {"template_version": ctx.template_version, "removed": removed}


class ComponentSelectionStage(Stage):
    name = "components"
    description = "Configuring components"

    def applies(self, ctx: CompositionContext) -> bool:
        return ctx.options.component_selection.mode is not SelectionMode.ALL

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        selection = ctx.options.component_selection

        if selection.mode is SelectionMode.NONE:
            removed = await asyncio.to_thread(remove_items, ctx.target_dir, OPTIONAL_COMPONENT_DIRS)
            return {"mode": selection.mode.value, "removed": removed}

        try:
            registry = await ctx.registry.load()
        except RegistryUnavailableError as exc:
            print_warning(f"  {exc}")
            print_warning("  Could not fetch component registry, keeping all components")
            return {"mode": selection.mode.value, "kept_all": True}

        resolved = resolve_dependencies(selection, registry)
        deleted = await asyncio.to_thread(
            keep_only_files, ctx.target_dir, OPTIONAL_COMPONENT_DIRS, set(resolved.files)
        )

        stats = get_selection_stats(resolved, registry)
        print_summary_table(
            {
                "Components": str(stats.component_count),
                "Files kept": str(stats.file_count),
                "Categories": ", ".join(stats.categories) or "-",
                "Packages": ", ".join(resolved.external_packages) or "-",
            },
            title="Component selection",
        )
        return {
            "mode": selection.mode.value,
            "components": resolved.components,
            "external_packages": resolved.external_packages,
            "deleted": deleted,
        }


class LocaleOverlayStage(Stage):
    name = "i18n"
    description = "Adding i18n support"

    def applies(self, ctx: CompositionContext) -> bool:
        return ctx.options.i18n

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        try:
            overlay = get_overlay_path("i18n")
        except FileNotFoundError as exc:
            print_warning(f"  {exc}")
            return {"applied": False}
        written = await asyncio.to_thread(copy_overlay, overlay, ctx.target_dir)
        return {"applied": True, "files": len(written)}


class DemoRemovalStage(Stage):
    name = "demo"
    description = "Configuring minimal template"

    def applies(self, ctx: CompositionContext) -> bool:
        return not ctx.options.demo

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        removed = await asyncio.to_thread(remove_items, ctx.target_dir, DEMO_CONTENT)

        written: list[Path] = []
        try:
            overlay = get_overlay_path("base")
        except FileNotFoundError as exc:
            print_warning(f"  {exc}")
        else:
            written = await asyncio.to_thread(copy_overlay, overlay, ctx.target_dir)

        created = await asyncio.to_thread(ensure_placeholder_dirs, ctx.target_dir, CONTENT_DIRS)
        return {"removed": removed, "base_files": len(written), "created_dirs": created}


class PageGenerationStage(Stage):
    name = "pages"
    description = "Generating starter pages"

    def applies(self, ctx: CompositionContext) -> bool:
        return bool(ctx.options.pages)

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        generated = await ctx.pages.generate(
            ctx.target_dir,
            ctx.options.pages,
            ctx.options.page_layout,
            ctx.options.i18n,
        )
        return {"generated": generated, "summary": f"Generated {pluralize(len(generated), 'page file')}"}


class MetadataStage(Stage):
    name = "metadata"
    description = "Configuring project"

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        pkg = await asyncio.to_thread(update_package_json, ctx.target_dir, ctx.options.project_name)
        return {"name": pkg["name"], "version": pkg["version"]}


class ProvenanceStage(Stage):
    name = "provenance"
    description = "Recording template provenance"
    best_effort = True

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        record = create_provenance(ctx.options, ctx.template_version or detect_template_version(ctx.target_dir))
        path = await asyncio.to_thread(write_provenance, ctx.target_dir, record, ctx.config.provenance_file)
        return {"path": str(path), "template_version": record.template_version}


class GitStage(Stage):
    name = "git"
    description = "Initializing git repository"
    best_effort = True

    def applies(self, ctx: CompositionContext) -> bool:
        return ctx.options.git

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        initialized = await init_git(ctx.target_dir)
        if not initialized:
            print_warning("  Git not available, skipping")
        return {"initialized": initialized}


class InstallStage(Stage):
    name = "install"
    description = "Installing dependencies"
    best_effort = True

    def applies(self, ctx: CompositionContext) -> bool:
        return ctx.options.install

    async def run(self, ctx: CompositionContext) -> dict[str, Any]:
        manager = ctx.options.package_manager
        ok, stderr = await install_dependencies(ctx.target_dir, manager)
        if not ok:
            command = " ".join(get_install_command(manager))
            print_warning(f"  Failed to install dependencies. Run \"{command}\" manually.")
        return {"installed": ok, "stderr": stderr[-2000:] if not ok else ""}


DEFAULT_STAGES: tuple[Stage, ...] = (
    RetrieveTemplateStage(),
    ComponentSelectionStage(),
    LocaleOverlayStage(),
    DemoRemovalStage(),
    PageGenerationStage(),
    MetadataStage(),
    ProvenanceStage(),
    GitStage(),
    InstallStage(),
)
