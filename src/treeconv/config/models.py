"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, treeconv.toml only holds overrides.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from treeconv.domain.types import DocumentFormat


class DocumentConfig(BaseModel):
    """[document] section."""

    model_config = {"frozen": True}

    format: DocumentFormat = DocumentFormat.JSON
    indent: int | None = Field(default=2, ge=0)


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".treeconv/plugins"
