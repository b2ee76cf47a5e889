"""create-velocity: composes ready-to-run Velocity (Astro) projects.

The composition engine downloads the base template, prunes optional
components to a resolved selection, applies the locale and minimal-template
overlays, generates starter pages and rewrites project metadata.
"""

__version__ = "1.4.2"
