"""
Synthesis configuration models.

Parses the [synthesis] section from microapi.toml and provides typed
configuration for the runner and rendering targets.
"""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from microapi.core.errors import ConfigError

CONFIG_FILE_NAME = "microapi.toml"

DEFAULT_INTERNAL_NAMESPACES = ["System.Runtime.CompilerServices"]


class SynthesisOutputConfig(BaseModel):
    """Output configuration."""

    directory: str = "generated/"
    clean: bool = False


class SynthesisConfig(BaseModel):
    """Complete synthesis configuration."""

    model_config = ConfigDict(populate_by_name=True)

    target: str = "aspnet"
    max_workers: int = Field(default=1, ge=1, alias="workers")
    strip_async_suffix: bool = False
    internal_namespaces: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INTERNAL_NAMESPACES)
    )
    output: SynthesisOutputConfig = Field(default_factory=SynthesisOutputConfig)

    def get_output_path(self, project_root: Path) -> Path:
        """Get absolute output directory path."""
        output_dir = Path(self.output.directory)
        if output_dir.is_absolute():
            return output_dir
        return project_root / output_dir

    def with_overrides(self, **overrides: Any) -> SynthesisConfig:
        """Copy with the given non-None values replaced."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return self.model_copy(update=values)


def load_synthesis_config(toml_path: Path) -> SynthesisConfig:
    """
    Load synthesis configuration from microapi.toml.

    Args:
        toml_path: Path to microapi.toml file

    Returns:
        SynthesisConfig with parsed values or defaults

    Raises:
        ConfigError: If the file is not valid TOML or holds invalid values
    """
    if not toml_path.exists():
        return SynthesisConfig()

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{toml_path}: {e}") from e

    synthesis_data = data.get("synthesis", {})

    if not synthesis_data:
        return SynthesisConfig()

    try:
        return SynthesisConfig.model_validate(synthesis_data)
    except ValidationError as e:
        raise ConfigError(f"{toml_path}: invalid [synthesis] section: {e}") from e
