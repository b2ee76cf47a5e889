"""Command-line front end: ``create-velocity <project> [options]``."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from rich.table import Table

from create_velocity import __version__
from create_velocity.composer.fs import is_empty_dir
from create_velocity.composer.pipeline import Composer, CompositionError, ConfigurationError
from create_velocity.config import Config
from create_velocity.models import PackageManager, PageLayout, ScaffoldOptions
from create_velocity.pages.naming import parse_page_names
from create_velocity.registry.fetcher import RegistryClient, RegistryError
from create_velocity.registry.models import ComponentSelection
from create_velocity.tooling import detect_package_manager, get_run_command
from create_velocity.utils import console, print_error
from create_velocity.validate import to_valid_project_name


def _split_ids(value: str) -> list[str]:
    ids: list[str] = []
    for raw in value.split(","):
        item = raw.strip()
        if item and item not in ids:
            ids.append(item)
    return ids


def parse_components_flag(components: str | None, only: str | None = None) -> ComponentSelection:
    """Map ``--components`` / ``--only`` to a :class:`ComponentSelection`.

    ``--only`` wins. ``--components`` accepts ``none``, ``all`` or a comma
    separated list of category ids; omitting both keeps everything.

    Raises:
        ValueError: A flag was given with no usable ids.
    """
    if only is not None:
        ids = _split_ids(only)
        if not ids:
            raise ValueError("--only needs at least one component id")
        return ComponentSelection.from_components(ids)

    if components is None:
        return ComponentSelection.all()
    value = components.strip().lower()
    if value == "none":
        return ComponentSelection.none()
    if value in ("", "all"):
        return ComponentSelection.all()
    categories = _split_ids(value)
    if not categories:
        raise ValueError("--components needs 'none', 'all' or category ids")
    return ComponentSelection.from_categories(categories)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="create-velocity",
        description="Create a new Velocity (Astro) project",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-velocity my-site\n"
            "  create-velocity my-site --demo --i18n\n"
            "  create-velocity my-site --components ui,patterns --pages about,pricing\n"
            "  create-velocity my-site --only button,dialog --no-install\n"
        ),
    )
    parser.add_argument("project", nargs="?", help="Project directory (its name becomes the package name)")
    parser.add_argument("--demo", action="store_true", help="Keep the demo landing page and content")
    parser.add_argument(
        "--components",
        nargs="?",
        const="all",
        default=None,
        metavar="none|all|CATEGORIES",
        help="Optional components to keep (default: all)",
    )
    parser.add_argument("--only", default=None, metavar="IDS", help="Comma-separated component ids to keep")
    parser.add_argument("--i18n", action="store_true", help="Add locale routing and translations")
    parser.add_argument("--pages", default="", metavar="NAMES", help="Comma-separated starter pages to generate")
    parser.add_argument(
        "--layout",
        choices=[layout.value for layout in PageLayout],
        default=PageLayout.PAGE.value,
        help="Layout for generated pages (default: page)",
    )
    parser.add_argument(
        "--package-manager",
        choices=[pm.value for pm in PackageManager],
        default=None,
        help="Package manager used to install dependencies (default: detected)",
    )
    parser.add_argument("--no-git", action="store_true", help="Skip git initialisation")
    parser.add_argument("--no-install", action="store_true", help="Skip dependency installation")
    parser.add_argument("--force", action="store_true", help="Compose into a non-empty directory")
    parser.add_argument("--list-components", action="store_true", help="List registry components and exit")
    parser.add_argument("--version", action="version", version=f"create-velocity {__version__}")
    return parser


def options_from_args(args: argparse.Namespace) -> ScaffoldOptions:
    """Build :class:`ScaffoldOptions` from parsed arguments.

    Raises:
        ValueError: Malformed component flags.
    """
    target = Path(args.project)
    if args.package_manager:
        manager = PackageManager(args.package_manager)
    else:
        manager = detect_package_manager()
    return ScaffoldOptions(
        project_name=to_valid_project_name(target.resolve().name),
        target_dir=target,
        demo=args.demo,
        component_selection=parse_components_flag(args.components, args.only),
        i18n=args.i18n,
        pages=parse_page_names(args.pages) if args.pages else [],
        page_layout=PageLayout(args.layout),
        package_manager=manager,
        git=not args.no_git,
        install=not args.no_install,
    )


async def list_components(config: Config) -> None:
    """Print the registry's components grouped by category."""
    client = RegistryClient(config.registry_source, raw_base_url=config.raw_base_url, timeout=config.http_timeout)
    registry = await client.load()

    table = Table(title=f"Component registry v{registry.version}", header_style="bold cyan")
    table.add_column("Id", no_wrap=True)
    table.add_column("Name")
    table.add_column("Category", style="dim")
    table.add_column("Depends on", style="dim")
    for component_id, component in sorted(registry.components.items(), key=lambda kv: (kv[1].category, kv[0])):
        category = registry.categories.get(component.category)
        deps = component.dependencies.components + component.dependencies.utilities
        table.add_row(
            component_id,
            component.name,
            category.name if category else component.category,
            ", ".join(deps) or "-",
        )
    console.print(table)


def _print_next_steps(options: ScaffoldOptions) -> None:
    run = get_run_command(options.package_manager)
    console.print()
    console.print("[bold]Next steps:[/bold]")
    console.print(f"  cd {options.target_dir}")
    if not options.install:
        console.print(f"  {options.package_manager.value} install")
    console.print(f"  {run} dev")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``create-velocity``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    config = Config.from_env()

    if args.list_components:
        try:
            asyncio.run(list_components(config))
        except RegistryError as exc:
            print_error(str(exc))
            sys.exit(1)
        return

    if not args.project:
        parser.error("the project directory is required")

    try:
        options = options_from_args(args)
    except ValueError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    if not args.force and not is_empty_dir(options.target_dir):
        print_error(f"Error: Directory {options.target_dir} is not empty. Use --force to continue anyway.")
        sys.exit(1)

    try:
        asyncio.run(Composer(config).compose(options))
    except ConfigurationError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    except CompositionError as exc:
        print_error(f"Failed to create project: {exc}")
        sys.exit(1)

    _print_next_steps(options)


if __name__ == "__main__":
    main()
