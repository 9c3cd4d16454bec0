"""Version lookup: the source checkout's pyproject.toml, else installed metadata."""

import tomllib
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _metadata_version
from pathlib import Path

DISTRIBUTION = "tokensmith"
UNKNOWN_VERSION = "0.0.0"


def _checkout_version(pyproject: Path) -> str | None:
    """``[project].version`` when ``pyproject`` belongs to this distribution."""
    try:
        project = tomllib.loads(pyproject.read_text(encoding="utf-8")).get("project", {})
    except (OSError, tomllib.TOMLDecodeError):
        return None
    if project.get("name") != DISTRIBUTION:
        return None
    return project.get("version")


def get_version() -> str:
    """Version of the running tokensmith.

    A source checkout (src/tokensmith -> repo root) wins so editable installs
    report the version being worked on.
    """
    pyproject = Path(__file__).resolve().parents[2] / "pyproject.toml"
    if pyproject.is_file() and (found := _checkout_version(pyproject)):
        return found
    try:
        return _metadata_version(DISTRIBUTION)
    except PackageNotFoundError:
        return UNKNOWN_VERSION
