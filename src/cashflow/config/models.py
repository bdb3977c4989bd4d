"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``~/.cashflowrc`` only contains
overrides. A fresh install needs no config file at all.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field

DEFAULT_DATA_DIR = Path("~/.cashflow")


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    data_dir: Path = DEFAULT_DATA_DIR
    filename: str = "data.yaml"


class PlanConfig(BaseModel):
    """[plan] section."""

    model_config = {"frozen": True}

    default_days: int = Field(default=30, ge=0)
    warning_threshold: Decimal = Decimal("10000")


class DisplayConfig(BaseModel):
    """[display] section."""

    model_config = {"frozen": True}

    currency: str = "Kč"
    date_format: str = "%d.%m.%Y"
    thousands_separator: str = " "
