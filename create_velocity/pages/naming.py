"""Page slug parsing and the names derived from a slug."""

from __future__ import annotations

import re

# Routes the template already owns.
RESERVED_PAGE_NAMES: frozenset[str] = frozenset({"index", "blog", "404", "rss"})


def sanitize_page_name(name: str) -> str | None:
    """Turn free-form input into a page slug, or ``None`` if nothing usable remains.

    Examples::

        sanitize_page_name("  Contact Us!! ") -> "contact-us"
        sanitize_page_name("index") -> None
    """
    slug = name.strip().lower()
    slug = re.sub(r"[^a-z0-9-]", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    if not slug or slug in RESERVED_PAGE_NAMES:
        return None
    return slug


def parse_page_names(value: str) -> list[str]:
    """Parse comma separated page names into unique, sanitised slugs."""
    pages: list[str] = []
    for raw in value.split(","):
        slug = sanitize_page_name(raw)
        if slug and slug not in pages:
            pages.append(slug)
    return pages


def to_title(slug: str) -> str:
    """``'about-us'`` -> ``'About Us'``."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


def to_route_id(slug: str) -> str:
    """``'about-us'`` -> ``'about_us'`` (safe as an object key)."""
    return slug.replace("-", "_")
