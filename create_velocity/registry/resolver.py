"""Dependency resolver.

Resolves a ``ComponentSelection`` against a ``ComponentRegistry`` into the
minimal consistent set of components, utility bundles, files and external
packages. Resolution never fails: unknown ids are reported as warnings and
contribute nothing.
"""

from __future__ import annotations

from typing import Any

from create_velocity.registry.models import (
    ComponentRegistry,
    ComponentSelection,
    ResolvedComponents,
    SelectionMode,
    SelectionStats,
)
from create_velocity.utils import print_warning


def resolve_dependencies(
    selection: ComponentSelection, registry: ComponentRegistry
) -> ResolvedComponents:
    """Resolve *selection* into every component, utility, file and package it needs.

    Each component is expanded at most once: its component dependencies are
    resolved first, then its utilities and files are collected, then it is
    marked visited. Diamond dependencies are therefore counted once.
    """
    if selection.mode is SelectionMode.NONE:
        return ResolvedComponents()

    if selection.mode is SelectionMode.ALL:
        requested = list(registry.components)
    elif selection.mode is SelectionMode.CATEGORIES:
        wanted = set(selection.categories)
        requested = [cid for cid, comp in registry.components.items() if comp.category in wanted]
    else:
        requested = list(selection.components)

    # dicts double as insertion-ordered sets
    resolved: dict[str, None] = {}
    utilities: dict[str, None] = {}
    files: dict[str, None] = {}
    packages: dict[str, None] = {}

    def _resolve(component_id: str) -> None:
        if component_id in resolved:
            return

        component = registry.components.get(component_id)
        if component is None:
            print_warning(f"Component not found: {component_id}")
            return

        for dep in component.dependencies.components:
            _resolve(dep)

        for util in component.dependencies.utilities:
            utilities[util] = None
        for path in component.files:
            files[path] = None

        resolved[component_id] = None

    for component_id in requested:
        _resolve(component_id)

    for util_id in utilities:
        utility = registry.utilities.get(util_id)
        if utility is None:
            continue
        for path in utility.files:
            files[path] = None
        for pkg in utility.external_packages:
            packages[pkg] = None

    return ResolvedComponents(
        components=list(resolved),
        utilities=list(utilities),
        files=list(files),
        external_packages=list(packages),
    )


def get_components_by_category(category_id: str, registry: ComponentRegistry) -> list[str]:
    """Return the ids of every component in *category_id*."""
    return [cid for cid, comp in registry.components.items() if comp.category == category_id]


def validate_components(component_ids: list[str], registry: ComponentRegistry) -> list[str]:
    """Return the requested component ids that are absent from the registry."""
    return [cid for cid in component_ids if cid not in registry.components]


def validate_categories(category_ids: list[str], registry: ComponentRegistry) -> list[str]:
    """Return the requested category ids that are absent from the registry."""
    return [cid for cid in category_ids if cid not in registry.categories]


def get_selection_stats(
    resolved: ResolvedComponents, registry: ComponentRegistry
) -> SelectionStats:
    """Summarise a resolution: component/file counts and categories touched."""
    categories: dict[str, None] = {}
    for component_id in resolved.components:
        component = registry.components.get(component_id)
        if component is not None:
            categories[component.category] = None

    return SelectionStats(
        component_count=len(resolved.components),
        file_count=len(resolved.files),
        categories=list(categories),
    )


def get_dependency_tree(
    component_id: str,
    registry: ComponentRegistry,
    visited: set[str] | None = None,
) -> dict[str, Any] | None:
    """Return a nested ``{"id", "name", "deps"}`` view of a component's dependencies.

    A component already shown elsewhere in the tree is omitted, as are
    unknown ids.
    """
    if visited is None:
        visited = set()
    if component_id in visited:
        return None
    visited.add(component_id)

    component = registry.components.get(component_id)
    if component is None:
        return None

    deps = []
    for dep in component.dependencies.components:
        subtree = get_dependency_tree(dep, registry, visited)
        if subtree is not None:
            deps.append(subtree)

    return {"id": component_id, "name": component.name, "deps": deps}


def find_dependency_cycles(registry: ComponentRegistry) -> list[list[str]]:
    """Return every component dependency cycle found in *registry*.

    Each cycle is reported as the path of ids from its first member back to
    itself, e.g. ``["a", "b", "a"]``.
    """
    cycles: list[list[str]] = []
    done: set[str] = set()

    def _visit(component_id: str, stack: list[str]) -> None:
        if component_id in stack:
            start = stack.index(component_id)
            cycles.append(stack[start:] + [component_id])
            return
        if component_id in done:
            return
        component = registry.components.get(component_id)
        if component is None:
            return
        stack.append(component_id)
        for dep in component.dependencies.components:
            _visit(dep, stack)
        stack.pop()
        done.add(component_id)

    for component_id in registry.components:
        _visit(component_id, [])

    return cycles


def find_dangling_references(registry: ComponentRegistry) -> list[str]:
    """Describe dependency references that point at ids the registry lacks."""
    problems: list[str] = []
    for cid, component in registry.components.items():
        for dep in component.dependencies.components:
            if dep not in registry.components:
                problems.append(f"{cid} -> component '{dep}'")
        for util in component.dependencies.utilities:
            if util not in registry.utilities:
                problems.append(f"{cid} -> utility '{util}'")
        if component.category not in registry.categories:
            problems.append(f"{cid} -> category '{component.category}'")
    return problems
