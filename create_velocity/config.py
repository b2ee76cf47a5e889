"""create-velocity configuration.

Centralised, typed configuration for the composition engine. Settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field


DEFAULT_TEMPLATE_LOCATOR = "github:southwellmedia/velocity"
DEFAULT_RAW_BASE_URL = "https://raw.githubusercontent.com/southwellmedia/velocity/main"
DEFAULT_REGISTRY_SOURCE = f"{DEFAULT_RAW_BASE_URL}/component-registry.json"


class Config(BaseModel):
    """Global create-velocity configuration.

    Holds the remote locations and tuneable parameters used while composing a
    project. Instances are created once by the CLI (or a test) and passed
    through the rest of the system.
    """

    template_locator: str = Field(
        default=DEFAULT_TEMPLATE_LOCATOR,
        description="'github:<owner>/<repo>[#ref]' or a local template directory",
    )
    registry_source: str = Field(
        default=DEFAULT_REGISTRY_SOURCE,
        description="URL or local path of component-registry.json",
    )
    raw_base_url: str = Field(default=DEFAULT_RAW_BASE_URL)
    http_timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")
    provenance_file: str = Field(default=".velocity.json")

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file and return its path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            VELOCITY_TEMPLATE, VELOCITY_REGISTRY, VELOCITY_RAW_BASE_URL,
            VELOCITY_HTTP_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("VELOCITY_TEMPLATE"):
            kwargs["template_locator"] = os.environ["VELOCITY_TEMPLATE"]
        if os.environ.get("VELOCITY_REGISTRY"):
            kwargs["registry_source"] = os.environ["VELOCITY_REGISTRY"]
        if os.environ.get("VELOCITY_RAW_BASE_URL"):
            kwargs["raw_base_url"] = os.environ["VELOCITY_RAW_BASE_URL"]
        if os.environ.get("VELOCITY_HTTP_TIMEOUT"):
            kwargs["http_timeout"] = int(os.environ["VELOCITY_HTTP_TIMEOUT"])
        return cls(**kwargs)
