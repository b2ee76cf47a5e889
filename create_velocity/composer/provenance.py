"""Composition provenance record (``.velocity.json``).

Captures the template version and the options a project was composed with
so a later upgrade can diff the project against a newer template.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field

from create_velocity import __version__
from create_velocity.models import PageLayout, ScaffoldOptions
from create_velocity.registry.models import ComponentSelection

PROVENANCE_SCHEMA_VERSION = 1


class ChosenOptions(BaseModel):
    """The subset of ``ScaffoldOptions`` that shapes the generated tree."""
    demo: bool = False
    components: ComponentSelection = Field(default_factory=ComponentSelection.all)
    i18n: bool = False
    pages: list[str] = Field(default_factory=list)
    page_layout: PageLayout = PageLayout.PAGE


class ProvenanceRecord(BaseModel):
    """What produced this project."""
    schema_version: int = Field(default=PROVENANCE_SCHEMA_VERSION)
    template_version: str = Field(..., description="Template version the project started from")
    generator_version: str = Field(default=__version__)
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    options: ChosenOptions = Field(default_factory=ChosenOptions)


def create_provenance(options: ScaffoldOptions, template_version: str) -> ProvenanceRecord:
    """Build the record for a composition run."""
    return ProvenanceRecord(
        template_version=template_version,
        options=ChosenOptions(
            demo=options.demo,
            components=options.component_selection,
            i18n=options.i18n,
            pages=list(options.pages),
            page_layout=options.page_layout,
        ),
    )


def write_provenance(project_dir: Path, record: ProvenanceRecord, filename: str = ".velocity.json") -> Path:
    """Write *record* into the project root and return its path."""
    path = Path(project_dir) / filename
    path.write_text(record.model_dump_json(indent=2) + "\n", encoding="utf-8")
    return path


def read_provenance(project_dir: Path, filename: str = ".velocity.json") -> ProvenanceRecord | None:
    """Load a project's record, or ``None`` if it has none."""
    path = Path(project_dir) / filename
    if not path.is_file():
        return None
    return ProvenanceRecord.model_validate_json(path.read_text(encoding="utf-8"))
