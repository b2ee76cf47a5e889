"""Option models consumed by the composition engine."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from create_velocity.registry.models import ComponentSelection


class PageLayout(str, Enum):
    """Layout a generated page is wrapped in."""
    PAGE = "page"
    LANDING = "landing"

    @property
    def component_name(self) -> str:
        return "LandingLayout" if self is PageLayout.LANDING else "PageLayout"


class PackageManager(str, Enum):
    """Package managers the generated project can be installed with."""
    PNPM = "pnpm"
    NPM = "npm"
    YARN = "yarn"
    BUN = "bun"


class ScaffoldOptions(BaseModel):
    """Everything the user chose for the project being composed."""

    project_name: str = Field(..., description="package.json name of the new project")
    target_dir: Path = Field(..., description="Directory the project is composed into")
    demo: bool = Field(default=False, description="Keep the demo landing page and content")
    component_selection: ComponentSelection = Field(default_factory=ComponentSelection.all)
    i18n: bool = Field(default=False, description="Add locale routing and translations")
    pages: list[str] = Field(default_factory=list, description="Sanitised page slugs to generate")
    page_layout: PageLayout = Field(default=PageLayout.PAGE)
    package_manager: PackageManager = Field(default=PackageManager.PNPM)
    git: bool = Field(default=True, description="Initialise a git repository")
    install: bool = Field(default=True, description="Install dependencies")
