"""
Engine settings.

Settings live either in a standalone ``tokensmith.toml`` at the project
root or under ``[tool.tokensmith]`` in ``pyproject.toml``:

    [tool.tokensmith.units]
    base_font_size_px = 16
    min_viewport = "320px"
    max_viewport = "1280px"

Missing files and missing keys fall back to defaults.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tokensmith.core.errors import SettingsError

logger = logging.getLogger(__name__)

SETTINGS_FILE = "tokensmith.toml"
PYPROJECT_FILE = "pyproject.toml"


class UnitSettings(BaseModel):
    """Unit conversion context for math and typography functions."""

    model_config = ConfigDict(frozen=True)

    base_font_size_px: float = Field(
        default=16.0, gt=0, description="Pixels per rem/em when converting units"
    )
    min_viewport: str = Field(
        default="320px", description="Default lower viewport for fluid clamps"
    )
    max_viewport: str = Field(
        default="1280px", description="Default upper viewport for fluid clamps"
    )


class TokensmithSettings(BaseModel):
    """Top-level engine settings."""

    model_config = ConfigDict(frozen=True)

    units: UnitSettings = Field(default_factory=UnitSettings)
    value_key: str = Field(default="$value", description="Key holding a token's value")
    original_key: str = Field(
        default="$original", description="Key recording the pre-resolution value"
    )
    metadata_prefix: str = Field(
        default="$", description="Group keys with this prefix pass through untouched"
    )
    record_original: bool = Field(
        default=True, description="Record the unresolved expression on changed tokens"
    )


DEFAULT_SETTINGS = TokensmithSettings()


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise SettingsError(f"Invalid TOML in {path}: {e}") from e


def settings_from_dict(data: dict[str, Any]) -> TokensmithSettings:
    """Validate a raw settings table.

    Raises:
        SettingsError: If the table does not validate.
    """
    try:
        return TokensmithSettings(**data)
    except ValidationError as e:
        raise SettingsError(f"Invalid tokensmith settings: {e}") from e


def load_settings(project_root: Path) -> TokensmithSettings:
    """Load settings from ``tokensmith.toml`` or ``pyproject.toml``.

    ``tokensmith.toml`` wins when both exist.

    Args:
        project_root: Directory to look in.

    Returns:
        Validated settings (defaults when nothing is configured).

    Raises:
        SettingsError: If a settings file exists but is invalid.
    """
    standalone = project_root / SETTINGS_FILE
    if standalone.exists():
        logger.debug(f"Loading settings from {standalone}")
        return settings_from_dict(_read_toml(standalone))

    pyproject = project_root / PYPROJECT_FILE
    if pyproject.exists():
        table = _read_toml(pyproject).get("tool", {}).get("tokensmith")
        if table is not None:
            logger.debug(f"Loading settings from {pyproject} [tool.tokensmith]")
            return settings_from_dict(table)

    return DEFAULT_SETTINGS
