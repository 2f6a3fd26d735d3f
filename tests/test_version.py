"""
Tests for the version module of the CasperDash SDK.
"""
import importlib
import re
from importlib import metadata as importlib_metadata
from unittest.mock import mock_open, patch

import tomli

from casperdash_sdk import __version__


def _package_not_found(name):
    raise importlib_metadata.PackageNotFoundError(name)


def test_version_format():
    """The version string follows semantic versioning"""
    assert re.match(r'^\d+\.\d+\.\d+$', __version__), "Version should follow semantic versioning"


@patch('importlib.metadata.version')
def test_version_from_metadata(mock_metadata_version):
    """When metadata lookup succeeds, version comes from metadata"""
    mock_metadata_version.return_value = "2.3.4"
    import casperdash_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "2.3.4"
    mock_metadata_version.assert_called_with("casperdash-sdk")


@patch('importlib.metadata.version')
@patch('pathlib.Path.open', new_callable=mock_open, read_data=b'[project]\nversion = "1.2.3"\n')
def test_version_from_pyproject(mock_open_file, mock_metadata_version):
    """When the package is not installed, pyproject.toml is read"""
    mock_metadata_version.side_effect = importlib_metadata.PackageNotFoundError
    import casperdash_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "1.2.3"


def test_version_file_not_found(monkeypatch):
    """If pyproject.toml is missing, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', _package_not_found)

    def missing(*args, **kwargs):
        raise FileNotFoundError()

    monkeypatch.setattr('pathlib.Path.open', missing)
    import casperdash_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_key_missing(monkeypatch):
    """If the TOML has no version key, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', _package_not_found)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[project]\nname = "casperdash-sdk"\n'))
    import casperdash_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_version_toml_decode_error(monkeypatch):
    """If the TOML cannot be parsed, fall back to the default"""
    monkeypatch.setattr(importlib_metadata, 'version', _package_not_found)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'invalid toml content'))

    def broken(f):
        raise tomli.TOMLDecodeError("fail", "", 0)

    monkeypatch.setattr(tomli, 'load', broken)
    import casperdash_sdk.version as vmod
    importlib.reload(vmod)
    assert vmod.__version__ == "0.1.0"


def test_fallback_is_logged(monkeypatch, caplog):
    """Falling back to the default version is reported at debug level"""
    monkeypatch.setattr(importlib_metadata, 'version', _package_not_found)
    monkeypatch.setattr('pathlib.Path.open', mock_open(read_data=b'[tool.other]\n'))
    import casperdash_sdk.version as vmod
    with caplog.at_level("DEBUG", logger="casperdash_sdk.version"):
        assert vmod.resolve_version() == vmod.DEFAULT_VERSION
    assert "not installed" in caplog.text
    assert f"using {vmod.DEFAULT_VERSION}" in caplog.text
