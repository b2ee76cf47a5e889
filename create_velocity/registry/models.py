"""Pydantic v2 models for the component registry.

The registry is a JSON document published alongside the Velocity template. It
declares categories, shared utility bundles and optional components; every
component lists the files it contributes and what it depends on.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Registry entries
# ---------------------------------------------------------------------------

class Category(BaseModel):
    """A group of components shown together in selection prompts."""
    name: str = Field(..., description="Display name, e.g. 'UI Components'")
    description: str = Field(default="")


class Utility(BaseModel):
    """A shared helper bundle referenced by one or more components."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Display name")
    description: str = Field(default="")
    files: list[str] = Field(default_factory=list, description="Paths relative to the project root")
    external_packages: list[str] = Field(
        default_factory=list,
        alias="npm",
        description="Third-party package identifiers the bundle needs",
    )


class ComponentDependencies(BaseModel):
    """What a component needs besides its own files."""
    utilities: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)


class Component(BaseModel):
    """An optional unit of functionality that can be kept or pruned."""
    name: str = Field(..., description="Display name, e.g. 'Button'")
    category: str = Field(..., description="Category id this component belongs to")
    files: list[str] = Field(default_factory=list, description="Paths relative to the project root")
    dependencies: ComponentDependencies = Field(default_factory=ComponentDependencies)
    premium: bool = Field(default=False)


class ComponentRegistry(BaseModel):
    """The full registry document. Immutable once loaded."""
    model_config = ConfigDict(frozen=True)

    version: str = Field(default="0.0.0")
    categories: dict[str, Category] = Field(default_factory=dict)
    utilities: dict[str, Utility] = Field(default_factory=dict)
    components: dict[str, Component] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Selection & resolution results
# ---------------------------------------------------------------------------

class SelectionMode(str, Enum):
    """How the user chose which optional components to keep."""
    NONE = "none"
    ALL = "all"
    CATEGORIES = "categories"
    INDIVIDUAL = "individual"


class ComponentSelection(BaseModel):
    """The user's declared intent for which components to include."""
    mode: SelectionMode = Field(default=SelectionMode.ALL)
    categories: list[str] = Field(default_factory=list)
    components: list[str] = Field(default_factory=list)

    @classmethod
    def none(cls) -> "ComponentSelection":
        return cls(mode=SelectionMode.NONE)

    @classmethod
    def all(cls) -> "ComponentSelection":
        return cls(mode=SelectionMode.ALL)

    @classmethod
    def from_categories(cls, categories: list[str]) -> "ComponentSelection":
        return cls(mode=SelectionMode.CATEGORIES, categories=list(categories))

    @classmethod
    def from_components(cls, components: list[str]) -> "ComponentSelection":
        return cls(mode=SelectionMode.INDIVIDUAL, components=list(components))


class ResolvedComponents(BaseModel):
    """Transitive closure of a selection against a registry.

    Lists keep insertion order (dependencies before dependents) but carry no
    duplicates; callers should only rely on membership.
    """
    components: list[str] = Field(default_factory=list)
    utilities: list[str] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)
    external_packages: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.components or self.utilities or self.files or self.external_packages)


class SelectionStats(BaseModel):
    """Counts used for user-facing summaries of a resolved selection."""
    component_count: int = 0
    file_count: int = 0
    categories: list[str] = Field(default_factory=list)
