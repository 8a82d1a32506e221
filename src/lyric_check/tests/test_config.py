# Test .env loading and logging setup

import importlib
import logging
import os

import pytest

from lyric_check import config
from lyric_check.config import (
    LOG_LEVEL_VARIABLE,
    REPORT_NON_ASCII_VARIABLE,
    configure_logging,
    get_log_level,
    load_env,
    report_non_ascii,
)


@pytest.fixture
def clean_env(monkeypatch):
    # setenv first so monkeypatch removes whatever load_env sets
    for name in (LOG_LEVEL_VARIABLE, REPORT_NON_ASCII_VARIABLE):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_load_env_prefers_dot_env(tmp_path, clean_env):
    (tmp_path / ".env").write_text(f"{LOG_LEVEL_VARIABLE}=DEBUG\n")
    (tmp_path / ".env.default").write_text(f"{LOG_LEVEL_VARIABLE}=ERROR\n")
    assert load_env(str(tmp_path)) == os.path.join(str(tmp_path), ".env")
    assert get_log_level() == logging.DEBUG


def test_load_env_falls_back_to_default(tmp_path, clean_env):
    (tmp_path / ".env.default").write_text(f"{REPORT_NON_ASCII_VARIABLE}=no\n")
    assert load_env(str(tmp_path)) == os.path.join(str(tmp_path), ".env.default")
    assert report_non_ascii() is False


def test_load_env_without_files(tmp_path, clean_env):
    assert load_env(str(tmp_path)) is None
    assert get_log_level() == logging.WARNING
    assert report_non_ascii() is True


def test_environment_wins_over_env_file(tmp_path, clean_env):
    clean_env.setenv(LOG_LEVEL_VARIABLE, "info")
    (tmp_path / ".env").write_text(f"{LOG_LEVEL_VARIABLE}=DEBUG\n")
    load_env(str(tmp_path))
    assert get_log_level() == logging.INFO


def test_unknown_log_level(clean_env):
    clean_env.setenv(LOG_LEVEL_VARIABLE, "LOUD")
    with pytest.raises(ValueError, match="is not a logging level"):
        get_log_level()


def test_configure_logging(tmp_path, clean_env):
    (tmp_path / ".env").write_text(f"{LOG_LEVEL_VARIABLE}=ERROR\n")
    assert configure_logging(directory=str(tmp_path)) == logging.ERROR
    assert configure_logging(logging.DEBUG, directory=str(tmp_path)) == logging.DEBUG


def test_env_file_is_loaded_on_import(tmp_path, clean_env):
    (tmp_path / ".env").write_text(f"{REPORT_NON_ASCII_VARIABLE}=off\n")
    clean_env.chdir(tmp_path)
    importlib.reload(config)
    assert config.report_non_ascii() is False
