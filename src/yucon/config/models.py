"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults live here, yucon.toml only holds overrides.
No file at all is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class UnitsConfig(BaseModel):
    """[units] section."""

    model_config = {"frozen": True}

    path: Path | None = None
    preferred_tag: str = "us"
    default_tag: str = "default"
    copy_default: bool = True


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    format: Literal["short", "desc", "long"] = "desc"
    precision: int = Field(default=15, ge=1, le=17)
