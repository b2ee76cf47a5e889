"""Starter page generation.

Writes one page file per requested slug and splices the new route into the
project's route table (and, for multi-language projects, into every
translation file).
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from create_velocity.models import PageLayout
from create_velocity.pages.naming import sanitize_page_name, to_route_id, to_title
from create_velocity.pages.routes import add_base_route_entry, add_i18n_route_entry, add_translation_keys
from create_velocity.pages.templates import TemplateRenderer
from create_velocity.utils import print_warning

PAGES_DIR = Path("src/pages")
LANG_DIR = PAGES_DIR / "[lang]"


class PageGenerator:
    """Generates starter pages inside a composed project.

    Attributes:
        renderer: Jinja2 renderer for the page bodies.
    """

    def __init__(self, renderer: TemplateRenderer | None = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    async def generate(
        self,
        project_dir: str | Path,
        pages: list[str],
        layout: PageLayout = PageLayout.PAGE,
        i18n: bool = False,
    ) -> list[str]:
        """Generate every page in *pages* and return the written paths.

        Paths are relative to *project_dir* and use forward slashes. Names
        that do not sanitise to a usable slug are skipped with a warning.
        """
        root = Path(project_dir)
        slugs: list[str] = []
        for name in pages:
            slug = sanitize_page_name(name)
            if slug is None:
                print_warning(f"  Skipping page '{name}': empty or reserved name")
                continue
            if slug not in slugs:
                slugs.append(slug)

        generated: list[str] = []
        for slug in slugs:
            context = {"title": to_title(slug), "route_id": to_route_id(slug), "layout": layout.component_name}

            rel = PAGES_DIR / f"{slug}.astro"
            await self.renderer.render_to_file("page.astro.j2", root / rel, context)
            generated.append(rel.as_posix())

            if not i18n:
                await asyncio.to_thread(add_base_route_entry, root, slug)

        if i18n:
            for slug in slugs:
                route_id = to_route_id(slug)
                context = {"title": to_title(slug), "route_id": route_id, "layout": layout.component_name}

                rel = LANG_DIR / f"[...{route_id}].astro"
                await self.renderer.render_to_file("i18n_page.astro.j2", root / rel, context)
                generated.append(rel.as_posix())

                added = await asyncio.to_thread(add_i18n_route_entry, root, slug)
                if added:
                    await asyncio.to_thread(add_translation_keys, root, slug)

        return generated


async def generate_pages(
    project_dir: str | Path,
    pages: list[str],
    layout: PageLayout = PageLayout.PAGE,
    i18n: bool = False,
) -> list[str]:
    """Convenience wrapper around :meth:`PageGenerator.generate`."""
    return await PageGenerator().generate(project_dir, pages, layout, i18n)
