"""Component registry: models, retrieval and dependency resolution.

Usage::

    from create_velocity.registry import RegistryClient, ComponentSelection, resolve_dependencies

    registry = await RegistryClient(source).load()
    resolved = resolve_dependencies(ComponentSelection.from_categories(["ui"]), registry)
    print(resolved.files)
"""

from create_velocity.registry.fetcher import (
    RegistryClient,
    RegistryError,
    RegistryUnavailableError,
    RegistryValidationError,
)
from create_velocity.registry.models import (
    Category,
    Component,
    ComponentDependencies,
    ComponentRegistry,
    ComponentSelection,
    ResolvedComponents,
    SelectionMode,
    SelectionStats,
    Utility,
)
from create_velocity.registry.resolver import (
    get_components_by_category,
    get_dependency_tree,
    get_selection_stats,
    resolve_dependencies,
    validate_categories,
    validate_components,
)

__all__ = [
    "Category",
    "Component",
    "ComponentDependencies",
    "ComponentRegistry",
    "ComponentSelection",
    "RegistryClient",
    "RegistryError",
    "RegistryUnavailableError",
    "RegistryValidationError",
    "ResolvedComponents",
    "SelectionMode",
    "SelectionStats",
    "Utility",
    "get_components_by_category",
    "get_dependency_tree",
    "get_selection_stats",
    "resolve_dependencies",
    "validate_categories",
    "validate_components",
]
