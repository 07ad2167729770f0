import sys
import os
import logging

import pytest

# Add parent to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from structdiff.config import Settings, load_settings, apply_log_level, ConfigurationError
from structdiff.core import DEFAULT_MAX_DEPTH, PartitionError


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any STRUCTDIFF_ variables inherited from the shell."""
    for name in list(os.environ):
        if name.startswith("STRUCTDIFF_"):
            monkeypatch.delenv(name)
    return monkeypatch


def test_defaults(clean_env):
    settings = load_settings()

    assert isinstance(settings, Settings)
    assert settings.MAX_DEPTH == DEFAULT_MAX_DEPTH
    assert settings.DETECT_CYCLES is True
    assert settings.COPY_VALUES is True
    assert settings.LOG_LEVEL == "NOTSET"


def test_environment_overrides(clean_env):
    clean_env.setenv("STRUCTDIFF_MAX_DEPTH", "12")
    clean_env.setenv("STRUCTDIFF_DETECT_CYCLES", "false")
    clean_env.setenv("STRUCTDIFF_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.MAX_DEPTH == 12
    assert settings.DETECT_CYCLES is False
    assert settings.LOG_LEVEL == "DEBUG"


def test_keyword_overrides_are_case_insensitive(clean_env):
    clean_env.setenv("STRUCTDIFF_MAX_DEPTH", "12")
    assert load_settings(max_depth=3).MAX_DEPTH == 3
    assert load_settings(COPY_VALUES=False).COPY_VALUES is False


@pytest.mark.parametrize("overrides", [
    {"max_depth": 0},
    {"max_depth": "deep"},
    {"log_level": "LOUD"},
    {"colour": "blue"},
])
def test_invalid_settings(clean_env, overrides):
    with pytest.raises(ConfigurationError, match="Invalid structdiff settings"):
        load_settings(**overrides)


def test_invalid_environment(clean_env):
    clean_env.setenv("STRUCTDIFF_MAX_DEPTH", "-1")
    with pytest.raises(ConfigurationError):
        load_settings()


def test_configuration_error_is_a_partition_error():
    assert issubclass(ConfigurationError, PartitionError)


def test_apply_log_level(clean_env):
    package_logger = logging.getLogger("structdiff")
    previous = package_logger.level
    try:
        apply_log_level(load_settings(log_level="warning"))
        assert package_logger.level == logging.WARNING
    finally:
        package_logger.setLevel(previous)
