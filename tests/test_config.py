"""Tests for configuration management."""

import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from lifegroup_hierarchy.config import EngineSettings
from lifegroup_hierarchy.orchestration.hierarchical import OrchestrationConfig


def test_settings_defaults():
    """Test configuration with defaults."""
    with patch.dict(os.environ, {}, clear=True):
        config = EngineSettings(_env_file=None)
        assert config.log_level == "INFO"
        assert config.report_deadline_hour == 12
        assert config.timezone is None
        assert config.birthday_window_days == 7
        assert config.include_inactive_in_checkins is True
        assert config.get_tzinfo() is None


def test_settings_from_environment():
    with patch.dict(os.environ, {
        "LIFEGROUP_LOG_LEVEL": "debug",
        "LIFEGROUP_REPORT_DEADLINE_HOUR": "18",
        "LIFEGROUP_TIMEZONE": "America/Sao_Paulo",
        "LIFEGROUP_INCLUDE_INACTIVE_IN_CHECKINS": "false",
    }):
        config = EngineSettings(_env_file=None)
        assert config.log_level == "DEBUG"
        assert config.report_deadline_hour == 18
        assert config.include_inactive_in_checkins is False
        assert config.get_tzinfo().key == "America/Sao_Paulo"


def test_invalid_deadline_hour():
    with patch.dict(os.environ, {"LIFEGROUP_REPORT_DEADLINE_HOUR": "25"}):
        with pytest.raises(ValueError):
            EngineSettings(_env_file=None)


def test_invalid_log_level():
    with patch.dict(os.environ, {"LIFEGROUP_LOG_LEVEL": "chatty"}):
        with pytest.raises(ValueError, match="unknown log level"):
            EngineSettings(_env_file=None)


def test_invalid_timezone():
    with patch.dict(os.environ, {"LIFEGROUP_TIMEZONE": "Mars/Olympus"}):
        with pytest.raises(ValueError, match="unknown timezone"):
            EngineSettings(_env_file=None)


def test_orchestration_config_from_settings():
    with patch.dict(os.environ, {"LIFEGROUP_BIRTHDAY_WINDOW_DAYS": "14"}):
        config = OrchestrationConfig.from_settings(EngineSettings(_env_file=None))
        assert config.birthday_window_days == 14
        assert config.report_deadline_hour == 12
