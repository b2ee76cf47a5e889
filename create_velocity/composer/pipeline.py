"""Composition driver.

Runs the ordered stages from :mod:`create_velocity.composer.stages` against a
target directory:

1. retrieve   -- download the base template, strip lock files and ``.git``.
2. components -- prune optional component directories to the resolved selection.
3. i18n       -- copy the locale overlay (overwrite).
4. demo       -- remove demo content, copy the minimal base overlay.
5. pages      -- generate starter pages and splice routes.
6. metadata   -- rewrite ``package.json``.
7. provenance -- write ``.velocity.json`` (best effort).
8. git        -- initialise a repository (best effort).
9. install    -- install dependencies (best effort).

A fatal stage failure aborts the run with a :class:`CompositionError`. The
working tree is left as the last completed step produced it; nothing is
rolled back.

Usage::

    composer = Composer(Config.from_env())
    project = await composer.compose(options)
"""

from __future__ import annotations

import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.panel import Panel

from create_velocity.composer.stages import DEFAULT_STAGES, CompositionContext, Stage
from create_velocity.composer.template import TemplateFetcher
from create_velocity.config import Config
from create_velocity.models import PageLayout, ScaffoldOptions
from create_velocity.pages.generator import PageGenerator
from create_velocity.registry.fetcher import (
    RegistryClient,
    RegistryUnavailableError,
    RegistryValidationError,
)
from create_velocity.registry.models import SelectionMode
from create_velocity.registry.resolver import validate_categories, validate_components
from create_velocity.utils import (
    console,
    create_progress,
    print_stage_header,
    format_duration,
    print_error,
    print_success,
    print_warning,
)
from create_velocity.validate import validate_project_name

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(Exception):
    """Raised by preflight validation, before the working tree is touched."""


class CompositionError(Exception):
    """Raised when a stage fails irrecoverably."""

    def __init__(self, stage: str, message: str, position: int | None = None) -> None:
        self.stage = stage
        self.position = position
        label = f"Stage {position} ({stage})" if position is not None else f"Stage {stage}"
        super().__init__(f"{label}: {message}")


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


class Composer:
    """Drives the composition stages.

    Attributes:
        config: Global configuration.
        registry: Registry client; its cache lives as long as the composer.
        stages: Stage objects in execution order.
        state: Accumulated per-stage results of the most recent run.
    """

    def __init__(
        self,
        config: Config | None = None,
        registry: RegistryClient | None = None,
        fetcher: TemplateFetcher | None = None,
        page_generator: PageGenerator | None = None,
        stages: tuple[Stage, ...] | list[Stage] | None = None,
    ) -> None:
        self.config = config or Config()
        self.registry = registry or RegistryClient(
            self.config.registry_source,
            raw_base_url=self.config.raw_base_url,
            timeout=self.config.http_timeout,
        )
        self.fetcher = fetcher or TemplateFetcher(timeout=self.config.http_timeout)
        self.page_generator = page_generator or PageGenerator()
        self.stages: list[Stage] = list(stages if stages is not None else DEFAULT_STAGES)
        self.state: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Preflight
    # ------------------------------------------------------------------

    async def preflight(self, options: ScaffoldOptions) -> ScaffoldOptions:
        """Validate *options* before any filesystem mutation.

        Returns the options to compose with (possibly adjusted).

        Raises:
            ConfigurationError: Invalid project name, unknown explicit ids or a
                cyclic component registry.
        """
        problem = validate_project_name(options.project_name)
        if problem:
            raise ConfigurationError(problem)

        if options.page_layout is PageLayout.LANDING and not options.demo:
            print_warning("LandingLayout is part of the demo content; using PageLayout instead.")
            options = options.model_copy(update={"page_layout": PageLayout.PAGE})

        selection = options.component_selection
        if selection.mode in (SelectionMode.CATEGORIES, SelectionMode.INDIVIDUAL):
            try:
                registry = await self.registry.load()
            except RegistryUnavailableError as exc:
                # The components stage keeps everything when the registry is unreachable.
                print_warning(f"Skipping selection validation: {exc}")
                return options
            except RegistryValidationError as exc:
                raise ConfigurationError(f"Invalid component registry: {exc}") from exc

            if selection.mode is SelectionMode.CATEGORIES:
                unknown = validate_categories(selection.categories, registry)
                kind = "categories"
            else:
                unknown = validate_components(selection.components, registry)
                kind = "components"
            if unknown:
                raise ConfigurationError(f"Unknown {kind}: {', '.join(unknown)}")

        return options

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------

    async def compose(self, options: ScaffoldOptions) -> Path:
        """Compose a project according to *options* and return its directory.

        Raises:
            ConfigurationError: Preflight validation failed (tree untouched).
            CompositionError: A fatal stage failed (tree left partially composed).
        """
        start = time.monotonic()
        options = await self.preflight(options)

        ctx = CompositionContext(
            options=options,
            config=self.config,
            registry=self.registry,
            fetcher=self.fetcher,
            pages=self.page_generator,
        )
        self.state = {
            "started_at": datetime.now(timezone.utc).isoformat(),
            "stages_completed": [],
            "stages_skipped": [],
            "warnings": [],
            "success": False,
        }

        console.print(
            Panel(
                f"Project : {options.project_name}\n"
                f"Target  : {Path(options.target_dir).resolve()}\n"
                f"Template: {self.config.template_locator}",
                title="[bold]create-velocity[/bold]",
                border_style="bright_cyan",
            )
        )

        for position, stage in enumerate(self.stages, start=1):
            if not stage.applies(ctx):
                self.state["stages_skipped"].append(stage.name)
                continue

            print_stage_header(position, stage.description)
            stage_start = time.monotonic()
            try:
                with create_progress() as progress:
                    progress.add_task(f"{stage.description}...", total=None)
                    result = await stage.run(ctx)
            except Exception as exc:
                if stage.best_effort:
                    message = f"{stage.description} failed: {exc}"
                    print_warning(message)
                    self.state["warnings"].append(message)
                    continue
                print_error(f"{stage.description} failed: {exc}")
                self.state["failed_stage"] = stage.name
                raise CompositionError(stage.name, str(exc), position) from exc

            ctx.results[stage.name] = result
            self.state[stage.name] = result
            self.state["stages_completed"].append(stage.name)
            summary = result.get("summary") if isinstance(result, dict) else None
            print_success(
                f"  {summary or stage.description} ({format_duration(time.monotonic() - stage_start)})"
            )

        self.state["success"] = True
        self.state["duration"] = format_duration(time.monotonic() - start)
        print_success(f"Project \"{options.project_name}\" created successfully!")
        return ctx.target_dir


async def compose(options: ScaffoldOptions, config: Config | None = None) -> Path:
    """Compose a project with a default :class:`Composer`."""
    return await Composer(config).compose(options)
