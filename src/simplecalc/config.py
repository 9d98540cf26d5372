"""
SimpleCalc configuration.

Parses simplecalc.toml and provides typed settings for the REPL:

    [repl]
    prompt = "> "
    result_marker = "= "
    error_marker = "error: "
    show_intro = true

    [[symbols]]
    name = "g"
    value = 9.81
    constant = true

When any [[symbols]] entries are given they replace the default pi, e, k.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from simplecalc.core.errors import ConfigError, DuplicateDeclaration
from simplecalc.core.symbols import DEFAULT_SYMBOLS, SymbolTable, Variable
from simplecalc.core.tokenizer import KEYWORDS

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "simplecalc.toml"


class ReplConfig(BaseModel):
    """Prompt and output markers."""

    prompt: str = "> "
    result_marker: str = "= "
    error_marker: str = "error: "
    show_intro: bool = True


class SymbolConfig(BaseModel):
    """A predefined variable or constant."""

    name: str
    value: float
    constant: bool = False

    @field_validator("name")
    @classmethod
    def _check_name(cls, v: str) -> str:
        if not v or not v[0].isalpha() or not all(c.isalnum() or c == "_" for c in v):
            raise ValueError(f"invalid variable name: {v!r}")
        if v in KEYWORDS:
            raise ValueError(f"{v!r} is a reserved word")
        return v


class CalcConfig(BaseModel):
    """Complete calculator configuration."""

    repl: ReplConfig = Field(default_factory=ReplConfig)
    symbols: list[SymbolConfig] = Field(default_factory=list)

    def predefined(self) -> list[Variable]:
        """Variables to load before any input is read."""
        if not self.symbols:
            return list(DEFAULT_SYMBOLS)
        return [Variable(s.name, s.value, s.constant) for s in self.symbols]

    def build_symbol_table(self) -> SymbolTable:
        try:
            return SymbolTable.with_defaults(self.predefined())
        except DuplicateDeclaration as e:
            raise ConfigError(f"Invalid [[symbols]] in configuration: {e}") from e


def load_config(toml_path: Path | None = None) -> CalcConfig:
    """
    Load configuration from simplecalc.toml.

    Args:
        toml_path: Path to the TOML file (default: ./simplecalc.toml)

    Returns:
        CalcConfig with parsed values or defaults if the file is absent

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    path = toml_path or Path.cwd() / CONFIG_FILENAME
    if not path.exists():
        if toml_path is not None:
            raise ConfigError(f"Config file not found: {path}")
        return CalcConfig()

    try:
        with open(path, "rb") as f:
            data: dict[str, Any] = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        config = CalcConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.debug("Loaded configuration from %s", path)
    return config
