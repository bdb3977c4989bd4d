"""Config file discovery, loading, and updating.

The config file is ``~/.cashflowrc`` (TOML). ``CASHFLOW_CONFIG`` points
somewhere else, and the ``--config`` CLI flag wins over both.
"""

from __future__ import annotations

import json
import os
import tomllib
from decimal import Decimal
from pathlib import Path
from typing import Any

CONFIG_FILENAME = ".cashflowrc"
CONFIG_ENV_VAR = "CASHFLOW_CONFIG"
DATA_DIR_ENV_VAR = "CASHFLOW_DATA_DIR"


def default_config_path() -> Path:
    """Where the config file lives (whether or not it exists yet)."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return Path.home() / CONFIG_FILENAME


def find_config(config_path: str | Path | None = None) -> Path | None:
    """Return the config file to read, or None when there is none.

    An explicit *config_path* that does not exist yields None rather than
    falling back to the default location.
    """
    path = Path(config_path).expanduser() if config_path else default_config_path()
    return path if path.is_file() else None


def load_toml(path: Path | None) -> dict[str, Any]:
    """Parse *path* as TOML; missing or None paths give an empty dict.

    Raises:
        tomllib.TOMLDecodeError: if the file is not valid TOML.
    """
    if path is None or not path.is_file():
        return {}
    return tomllib.loads(path.read_text(encoding="utf-8"))


def expand_path(raw: str | Path, *, cwd: Path | None = None) -> Path:
    """Expand ``~`` and make *raw* absolute relative to *cwd* (default: CWD)."""
    path = Path(raw).expanduser()
    if not path.is_absolute():
        path = (cwd or Path.cwd()) / path
    return path


# ---------------------------------------------------------------------------
# Writing
# ---------------------------------------------------------------------------


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, Decimal):
        return str(value)
    return json.dumps(str(value), ensure_ascii=False)


def render_toml(data: dict[str, Any]) -> str:
    """Render a config dict: top-level scalars, then one table per section."""
    lines: list[str] = []
    for key, value in data.items():
        if not isinstance(value, dict):
            lines.append(f"{key} = {_toml_value(value)}")
    for section, table in data.items():
        if not isinstance(table, dict):
            continue
        if lines:
            lines.append("")
        lines.append(f"[{section}]")
        for key, value in table.items():
            lines.append(f"{key} = {_toml_value(value)}")
    return "\n".join(lines) + "\n"


def write_data_dir(config_path: Path, data_dir: Path) -> None:
    """Persist ``[storage] data_dir`` into *config_path*, keeping other keys."""
    data = load_toml(config_path)
    storage = dict(data.get("storage", {}))
    storage["data_dir"] = str(data_dir)
    data["storage"] = storage
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(render_toml(data), encoding="utf-8")
