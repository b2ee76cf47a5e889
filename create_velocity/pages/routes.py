"""Route-table and translation-file mutations for generated pages.

Every function here is tolerant of hand-edited projects: a missing file or a
missing anchor means the edit is skipped, never that page generation fails.
"""

from __future__ import annotations

from pathlib import Path

from create_velocity.pages.naming import to_route_id, to_title
from create_velocity.pages.splice import has_key, insert_before, insert_into_block, next_nav_order
from create_velocity.utils import print_warning

BASE_ROUTES_FILE = Path("src/config/routes.ts")
I18N_ROUTES_FILE = Path("src/i18n/routes.ts")
TRANSLATIONS_DIR = Path("src/i18n/translations")

# Locales shipped by the bundled i18n overlay (config.ts, routes.ts, translations/).
LOCALES = ("en", "es", "fr")

# Literal marker closing the routes object in both route tables.
ROUTES_ANCHOR = "} as const satisfies"
# Literal marker closing the exported translation object.
TRANSLATIONS_ANCHOR = "} as const"
NAV_BLOCK_PATTERN = r"nav:\s*\{[^}]+\}"


def _splice_route(routes_path: Path, route_id: str, render_entry) -> bool:
    """Shared read-check-insert-write sequence for both route tables."""
    if not routes_path.is_file():
        return False

    content = routes_path.read_text(encoding="utf-8")
    if has_key(content, route_id):
        return False

    entry = render_entry(next_nav_order(content))
    updated = insert_before(content, ROUTES_ANCHOR, entry)
    if updated is None:
        print_warning(f"  Could not find the routes anchor in {routes_path}; skipping")
        return False

    routes_path.write_text(updated, encoding="utf-8")
    return True


def add_base_route_entry(project_dir: Path, slug: str) -> bool:
    """Add *slug* to ``src/config/routes.ts`` with navigation metadata.

    Returns ``True`` when the table was modified.
    """
    route_id = to_route_id(slug)
    title = to_title(slug)

    def _entry(order: int) -> str:
        return (
            f"\n  // Custom page: {slug}\n"
            f"  {route_id}: {{\n"
            f"    path: '/{slug}',\n"
            f"    nav: {{ show: true, order: {order}, label: '{title}' }},\n"
            f"  }},\n"
        )

    return _splice_route(Path(project_dir) / BASE_ROUTES_FILE, route_id, _entry)


def add_i18n_route_entry(project_dir: Path, slug: str) -> bool:
    """Add *slug* to ``src/i18n/routes.ts`` using the same slug for every locale.

    The navigation label is a translation key (``nav.<route_id>``); the keys
    themselves are added by :func:`add_translation_keys`.
    """
    route_id = to_route_id(slug)
    localized = ", ".join(f"{locale}: '{slug}'" for locale in LOCALES)

    def _entry(order: int) -> str:
        return (
            f"\n  // Custom page: {slug}\n"
            f"  {route_id}: {{\n"
            f"    {localized},\n"
            f"    nav: {{ show: true, order: {order}, label: 'nav.{route_id}' }},\n"
            f"  }},\n"
        )

    return _splice_route(Path(project_dir) / I18N_ROUTES_FILE, route_id, _entry)


def add_translation_keys(project_dir: Path, slug: str) -> list[Path]:
    """Add the navigation label and page strings for *slug* to each translation file.

    Returns the translation files that were modified.
    """
    route_id = to_route_id(slug)
    title = to_title(slug)
    modified: list[Path] = []

    for locale in LOCALES:
        path = Path(project_dir) / TRANSLATIONS_DIR / f"{locale}.ts"
        if not path.is_file():
            continue

        original = path.read_text(encoding="utf-8")
        content = original

        if not has_key(content, route_id):
            updated = insert_into_block(
                content, NAV_BLOCK_PATTERN, f"    {route_id}: '{title}',\n  "
            )
            if updated is not None:
                content = updated

        if not _has_page_group(content, route_id):
            group = (
                f"\n  // {title} page\n"
                f"  {route_id}: {{\n"
                f"    title: '{title}',\n"
                f"    description: 'Add your {title.lower()} page description here.',\n"
                f"  }},\n\n"
            )
            updated = insert_before(content, TRANSLATIONS_ANCHOR, group, last=True)
            if updated is not None:
                content = updated

        if content != original:
            path.write_text(content, encoding="utf-8")
            modified.append(path)

    return modified


def _has_page_group(content: str, route_id: str) -> bool:
    """True when a line opens ``<route_id>: {``."""
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith(f"{route_id}:") and stripped[len(route_id) + 1:].lstrip().startswith("{"):
            return True
    return False
