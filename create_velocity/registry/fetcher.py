"""Async client for the published component registry.

The registry is fetched at most once per ``RegistryClient`` instance and
cached until :meth:`RegistryClient.clear` is called. A source may be an
``http(s)`` URL or a path to a local JSON file, which keeps offline use and
tests free of network access.

Typical usage::

    client = RegistryClient(config.registry_source, timeout=config.http_timeout)
    registry = await client.load()
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import httpx
from pydantic import ValidationError

from create_velocity.registry.models import ComponentRegistry
from create_velocity.registry.resolver import find_dangling_references, find_dependency_cycles
from create_velocity.utils import print_warning


class RegistryError(Exception):
    """Base class for registry problems."""


class RegistryUnavailableError(RegistryError):
    """Raised when the registry cannot be fetched or parsed."""

    def __init__(self, cause: str) -> None:
        self.cause = cause
        super().__init__(
            "Could not fetch component registry. "
            f"Please check your internet connection.\n{cause}"
        )


class RegistryValidationError(RegistryError):
    """Raised when a loaded registry violates a structural invariant."""


class RegistryClient:
    """Fetches, validates and caches the component registry."""

    def __init__(
        self,
        source: str,
        raw_base_url: str = "",
        timeout: int = 30,
    ) -> None:
        self.source = source
        self.raw_base_url = raw_base_url.rstrip("/")
        self.timeout = timeout
        self._cached: ComponentRegistry | None = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our timeout."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            follow_redirects=True,
        )

    @property
    def _is_remote(self) -> bool:
        return self.source.startswith(("http://", "https://"))

    async def _read_source(self) -> str:
        if not self._is_remote:
            path = Path(self.source)
            try:
                return await asyncio.to_thread(path.read_text, encoding="utf-8")
            except OSError as exc:
                raise RegistryUnavailableError(f"Cannot read {path}: {exc}") from exc

        try:
            async with self._client() as client:
                response = await client.get(self.source)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as exc:
            raise RegistryUnavailableError(
                f"Failed to fetch registry: HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise RegistryUnavailableError(f"{type(exc).__name__}: {exc}") from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self._cached is not None

    async def load(self) -> ComponentRegistry:
        """Return the registry, fetching and validating it on first use.

        Raises:
            RegistryUnavailableError: The source could not be read or parsed.
            RegistryValidationError: The component dependency graph has a cycle.
        """
        if self._cached is not None:
            return self._cached

        raw = await self._read_source()
        try:
            registry = ComponentRegistry.model_validate(json.loads(raw))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise RegistryUnavailableError(f"Malformed registry document: {exc}") from exc

        validate_registry(registry)
        self._cached = registry
        return registry

    def clear(self) -> None:
        """Drop the cached registry so the next :meth:`load` fetches again."""
        self._cached = None

    async def fetch_component_file(self, file_path: str) -> str:
        """Fetch a single file from the template repository's raw base URL."""
        url = f"{self.raw_base_url}/{file_path.lstrip('/')}"
        try:
            async with self._client() as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.HTTPStatusError as exc:
            raise RegistryUnavailableError(
                f"Could not fetch file: {file_path} (HTTP {exc.response.status_code})"
            ) from exc
        except httpx.HTTPError as exc:
            raise RegistryUnavailableError(f"Could not fetch file: {file_path}\n{exc}") from exc


def validate_registry(registry: ComponentRegistry) -> None:
    """Reject cyclic registries; warn about references to unknown ids."""
    cycles = find_dependency_cycles(registry)
    if cycles:
        rendered = "; ".join(" -> ".join(cycle) for cycle in cycles)
        raise RegistryValidationError(f"Component dependency cycle detected: {rendered}")

    for problem in find_dangling_references(registry):
        print_warning(f"Registry references an unknown id: {problem}")
