"""
Tests for the environment-driven configuration.
"""

import pytest
from pydantic import ValidationError

from utilities.config import LibraryConfig


def test_defaults():
    config = LibraryConfig(_env_file=None)

    assert config.database_path == "library.db"
    assert config.get_log_file_path() is None


def test_log_settings_are_normalized():
    config = LibraryConfig(log_level="debug", log_format="CONSOLE")

    assert config.log_level == "DEBUG"
    assert config.log_format == "console"


def test_invalid_log_level_rejected():
    with pytest.raises(ValidationError):
        LibraryConfig(log_level="chatty")


def test_empty_database_path_rejected():
    with pytest.raises(ValidationError):
        LibraryConfig(database_path="  ")


def test_database_path_from_environment(monkeypatch, tmp_path):
    monkeypatch.setenv("DATABASE_PATH", str(tmp_path / "books.db"))

    config = LibraryConfig()

    assert config.get_database_path() == tmp_path / "books.db"
