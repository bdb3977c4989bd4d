"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by Click
  2. Env vars: ``CASHFLOW_*`` prefix (``CASHFLOW_PLAN__DEFAULT_DAYS``)
  3. TOML file: ``~/.cashflowrc`` or ``--config`` / ``CASHFLOW_CONFIG``
  4. Code defaults: baked into the section models

The data directory has one extra shortcut: ``--data-dir`` or
``CASHFLOW_DATA_DIR`` override ``[storage] data_dir`` from the file.
"""

from __future__ import annotations

import os
import threading
import tomllib
from pathlib import Path
from typing import Any, ClassVar, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cashflow.config.discovery import DATA_DIR_ENV_VAR, find_config, load_toml
from cashflow.config.models import DisplayConfig, PlanConfig, StorageConfig

DataDirSource = Literal["cli", "env", "config", "default"]


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the discovered TOML config file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        try:
            self._data: dict[str, Any] = load_toml(toml_path)
        except tomllib.TOMLDecodeError as exc:
            import click

            msg = f"Invalid TOML in {toml_path}: {exc}"
            raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CashflowSettings(BaseSettings):
    """Unified settings for the cashflow CLI.

    Attributes:
        config_path: The config file that was read, or None.
        data_dir: Explicit data directory override (CLI or env).
        data_dir_source: Which layer decided :attr:`resolved_data_dir`.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CASHFLOW_",
        "env_nested_delimiter": "__",
    }

    config_path: Path | None = None
    data_dir: Path | None = None
    data_dir_source: DataDirSource = "default"

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    storage: StorageConfig = Field(default_factory=StorageConfig)
    plan: PlanConfig = Field(default_factory=PlanConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    # Retained for type-checker visibility; not used at runtime.
    _toml_path: ClassVar[Path | None] = None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def resolved_data_dir(self) -> Path:
        """Absolute directory holding the ledger file."""
        raw = self.data_dir if self.data_dir is not None else self.storage.data_dir
        return raw.expanduser().absolute()

    @property
    def data_file(self) -> Path:
        return self.resolved_data_dir / self.storage.filename

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        data_dir: str | Path | None = None,
        **cli_flags: Any,
    ) -> CashflowSettings:
        """Construct settings from a CLI invocation.

        Reads the config file (explicit *config_path* or the default
        location) and records where the data directory comes from.
        """
        toml_path = find_config(config_path)

        overrides: dict[str, Any] = {}
        if data_dir is not None:
            overrides["data_dir"] = Path(data_dir)
            source: DataDirSource = "cli"
        elif os.environ.get(DATA_DIR_ENV_VAR):
            source = "env"
        elif _toml_sets_data_dir(toml_path):
            source = "config"
        else:
            source = "default"

        _tls.toml_path = toml_path
        try:
            return cls(
                config_path=toml_path,
                data_dir_source=source,
                **overrides,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None


def _toml_sets_data_dir(toml_path: Path | None) -> bool:
    try:
        data = load_toml(toml_path)
    except tomllib.TOMLDecodeError:
        return False
    storage = data.get("storage")
    return isinstance(storage, dict) and "data_dir" in storage
