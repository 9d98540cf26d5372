"""Version lookup for SimpleCalc."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

_PYPROJECT = Path(__file__).resolve().parents[2] / "pyproject.toml"


def get_version() -> str:
    """Installed distribution version, else the version in a source checkout's pyproject.toml."""
    try:
        return _metadata_version("simplecalc")
    except PackageNotFoundError:
        pass
    if _PYPROJECT.is_file():
        with open(_PYPROJECT, "rb") as f:
            return tomllib.load(f).get("project", {}).get("version", "0.0.0")
    return "0.0.0"
