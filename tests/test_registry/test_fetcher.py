"""Unit tests for RegistryClient (create_velocity.registry.fetcher).

Tests cover:
- Loading from a local file and from a mocked HTTP endpoint
- Caching and clear()
- HTTP / connection / parse failures -> RegistryUnavailableError
- Cyclic registries -> RegistryValidationError
- fetch_component_file
"""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from create_velocity.registry.fetcher import (
    RegistryClient,
    RegistryError,
    RegistryUnavailableError,
    RegistryValidationError,
    validate_registry,
)
from create_velocity.registry.models import ComponentRegistry

REMOTE = "https://raw.example.test/velocity/main/component-registry.json"


def _mock_client(response=None, side_effect=None) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.get = AsyncMock(return_value=response, side_effect=side_effect)
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


def _ok_response(text: str) -> MagicMock:
    mock_response = MagicMock()
    mock_response.text = text
    mock_response.raise_for_status = MagicMock()
    return mock_response


# ---------------------------------------------------------------------------
# Local sources
# ---------------------------------------------------------------------------


class TestLocalSource:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_load_from_file(self, registry_file):
        client = RegistryClient(str(registry_file))
        registry = await client.load()
        assert isinstance(registry, ComponentRegistry)
        assert "dialog" in registry.components
        assert client.is_loaded

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cached_until_cleared(self, registry_file, sample_registry_data):
        client = RegistryClient(str(registry_file))
        first = await client.load()

        sample_registry_data["version"] = "9.0.0"
        registry_file.write_text(json.dumps(sample_registry_data), encoding="utf-8")

        assert await client.load() is first
        client.clear()
        assert not client.is_loaded
        reloaded = await client.load()
        assert reloaded.version == "9.0.0"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_file(self, tmp_path):
        client = RegistryClient(str(tmp_path / "nope.json"))
        with pytest.raises(RegistryUnavailableError) as exc_info:
            await client.load()
        assert "Could not fetch component registry" in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_malformed_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RegistryUnavailableError, match="Malformed registry document"):
            await RegistryClient(str(path)).load()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_schema_violation(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"components": {"x": {"name": "X"}}}), encoding="utf-8")
        with pytest.raises(RegistryUnavailableError, match="Malformed"):
            await RegistryClient(str(path)).load()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cycle_rejected(self, tmp_path):
        data = {
            "categories": {"ui": {"name": "UI"}},
            "components": {
                "a": {"name": "A", "category": "ui", "dependencies": {"components": ["b"]}},
                "b": {"name": "B", "category": "ui", "dependencies": {"components": ["a"]}},
            },
        }
        path = tmp_path / "cyclic.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        client = RegistryClient(str(path))
        with pytest.raises(RegistryValidationError, match="a -> b -> a"):
            await client.load()
        assert not client.is_loaded

    @pytest.mark.unit
    def test_errors_share_a_base(self):
        assert issubclass(RegistryUnavailableError, RegistryError)
        assert issubclass(RegistryValidationError, RegistryError)


# ---------------------------------------------------------------------------
# Remote sources
# ---------------------------------------------------------------------------


class TestRemoteSource:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_load_over_http(self, sample_registry_data):
        mock_client = _mock_client(_ok_response(json.dumps(sample_registry_data)))

        with patch("httpx.AsyncClient", return_value=mock_client):
            client = RegistryClient(REMOTE)
            registry = await client.load()
            await client.load()

        assert registry.version == "1.2.0"
        # second load served from cache
        mock_client.get.assert_awaited_once_with(REMOTE)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_status_error(self):
        mock_resp = MagicMock()
        mock_resp.status_code = 503
        response = MagicMock()
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("unavailable", request=MagicMock(), response=mock_resp)
        )
        mock_client = _mock_client(response)

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(RegistryUnavailableError, match="HTTP 503"):
                await RegistryClient(REMOTE).load()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self):
        mock_client = _mock_client(side_effect=httpx.ConnectError("Connection refused"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            with pytest.raises(RegistryUnavailableError) as exc_info:
                await RegistryClient(REMOTE).load()

        assert "ConnectError" in exc_info.value.cause
        assert "check your internet connection" in str(exc_info.value)


class TestFetchComponentFile:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_builds_raw_url(self):
        mock_client = _mock_client(_ok_response("<button />"))

        with patch("httpx.AsyncClient", return_value=mock_client):
            client = RegistryClient(REMOTE, raw_base_url="https://raw.example.test/velocity/main/")
            text = await client.fetch_component_file("/src/components/ui/Button.astro")

        assert text == "<button />"
        mock_client.get.assert_awaited_once_with(
            "https://raw.example.test/velocity/main/src/components/ui/Button.astro"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_file(self):
        mock_resp = MagicMock()
        mock_resp.status_code = 404
        response = MagicMock()
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("not found", request=MagicMock(), response=mock_resp)
        )

        with patch("httpx.AsyncClient", return_value=_mock_client(response)):
            client = RegistryClient(REMOTE, raw_base_url="https://raw.example.test")
            with pytest.raises(RegistryUnavailableError, match="HTTP 404"):
                await client.fetch_component_file("src/x.astro")


class TestValidateRegistry:
    @pytest.mark.unit
    def test_dangling_reference_only_warns(self):
        registry = ComponentRegistry.model_validate({
            "categories": {"ui": {"name": "UI"}},
            "components": {"a": {"name": "A", "category": "ui", "dependencies": {"components": ["ghost"]}}},
        })
        validate_registry(registry)
