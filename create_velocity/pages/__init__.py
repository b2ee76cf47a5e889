"""Starter page generation and route-table mutation.

Quick usage::

    from create_velocity.pages import generate_pages

    written = await generate_pages("/tmp/my-site", ["about", "pricing"], i18n=True)
"""

from create_velocity.pages.generator import PageGenerator, generate_pages
from create_velocity.pages.naming import (
    RESERVED_PAGE_NAMES,
    parse_page_names,
    sanitize_page_name,
    to_route_id,
    to_title,
)
from create_velocity.pages.templates import TemplateRenderer

__all__ = [
    "PageGenerator",
    "RESERVED_PAGE_NAMES",
    "TemplateRenderer",
    "generate_pages",
    "parse_page_names",
    "sanitize_page_name",
    "to_route_id",
    "to_title",
]
