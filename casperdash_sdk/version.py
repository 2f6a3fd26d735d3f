"""
Package version, taken from the installed distribution or, in a source
checkout, from pyproject.toml.
"""
import importlib.metadata
import logging
import pathlib

import tomli

logger = logging.getLogger(__name__)

DISTRIBUTION_NAME = "casperdash-sdk"
DEFAULT_VERSION = "0.1.0"
PYPROJECT_PATH = pathlib.Path(__file__).resolve().parent.parent / "pyproject.toml"


def _pyproject_version(path: pathlib.Path) -> str:
    with path.open("rb") as f:
        return tomli.load(f)["project"]["version"]


def resolve_version() -> str:
    """Installed version, else the checkout's pyproject.toml version, else DEFAULT_VERSION"""
    try:
        return importlib.metadata.version(DISTRIBUTION_NAME)
    except importlib.metadata.PackageNotFoundError:
        logger.debug(f"{DISTRIBUTION_NAME} is not installed, reading {PYPROJECT_PATH}")

    try:
        return _pyproject_version(PYPROJECT_PATH)
    except (FileNotFoundError, KeyError, tomli.TOMLDecodeError) as e:
        logger.debug(f"No version in {PYPROJECT_PATH} ({e!r}), using {DEFAULT_VERSION}")
        return DEFAULT_VERSION


__version__ = resolve_version()
