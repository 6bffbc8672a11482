"""
Tests for utility functions and configuration loading.

Tests cover:
- Temp id generation
- Default title helpers (including the configurable prefix)
- format_hierarchy_text
- ConfigManager fallbacks
- Logging setup
"""

import json
import logging
import re
from logging.handlers import RotatingFileHandler

import pytest

from decomposer.constants import (
    DEFAULT_FALLBACK_CHILD_TYPE,
    ConfigManager,
    get_config_manager,
    get_fallback_child_type,
    get_log_level,
    get_type_configurations,
)
from decomposer.logging import setup_logging
from decomposer.utils import default_title, format_hierarchy_text, generate_temp_id, is_default_title


class TestGenerateTempId:
    """Test generate_temp_id."""

    def test_format(self):
        """Ids look like temp-<ms>-<9 chars>."""
        assert re.fullmatch(r"temp-\d+-[a-z0-9]{9}", generate_temp_id())

    def test_unique(self):
        """Consecutive ids differ."""
        assert len({generate_temp_id() for _ in range(1000)}) == 1000


class TestDefaultTitles:
    """Test default_title and is_default_title."""

    def test_default_title(self):
        """Default title is New <Type>."""
        assert default_title("User Story") == "New User Story"

    def test_none_is_not_default(self):
        """A missing title is never the default."""
        assert is_default_title(None, "Task") is False

    def test_prefix_from_config(self, isolated_config):
        """The prefix can be configured."""
        isolated_config.config_path.parent.mkdir(parents=True, exist_ok=True)
        isolated_config.config_path.write_text(json.dumps({"default_title_prefix": "Draft"}))
        isolated_config.reload()
        assert default_title("Task") == "Draft Task"
        assert is_default_title("draft task", "Task") is True


class TestFormatHierarchyText:
    """Test format_hierarchy_text."""

    def test_format(self, builder):
        """Nested nodes get one dash per level."""
        text = format_hierarchy_text(builder.feature_tree())
        assert text.splitlines() == [
            "Feature: Feature f1",
            "- User Story: User Story s1",
            "-- Task: Task t1",
            "- User Story: User Story s2",
            "- User Story: User Story s3",
            "Feature: Feature f2",
        ]

    def test_empty(self):
        """Empty forest gives empty text."""
        assert format_hierarchy_text([]) == ""


class TestConfigManager:
    """Test ConfigManager."""

    def test_missing_file_uses_defaults(self, isolated_config):
        """No config file means defaults."""
        assert get_fallback_child_type() == DEFAULT_FALLBACK_CHILD_TYPE
        assert get_log_level() == "WARNING"
        assert get_type_configurations() == {}

    def test_reads_values(self, temp_dir):
        """Values come from config.json."""
        path = temp_dir / "config.json"
        path.write_text(json.dumps({
            "fallback_child_type": "Chore",
            "work_item_types": {"Epic": ["Feature"]},
        }))
        config = ConfigManager(config_path=path)
        assert config.get_str("fallback_child_type", "Task") == "Chore"
        assert config.get_dict("work_item_types", {}) == {"Epic": ["Feature"]}
        assert config.get_str("missing", "x") == "x"

    def test_corrupt_file(self, temp_dir):
        """Corrupt JSON falls back to defaults."""
        path = temp_dir / "config.json"
        path.write_text("{oops")
        assert ConfigManager(config_path=path).get("anything", 1) == 1

    def test_wrong_shape_falls_back(self, temp_dir):
        """A non-mapping value falls back for get_dict."""
        path = temp_dir / "config.json"
        path.write_text(json.dumps({"work_item_types": ["Epic"]}))
        assert ConfigManager(config_path=path).get_dict("work_item_types", {}) == {}

    def test_singleton(self, isolated_config):
        """The fixture installs the singleton."""
        assert get_config_manager() is isolated_config


class TestSetupLogging:
    """Test setup_logging."""

    @pytest.fixture(autouse=True)
    def clean_logger(self):
        """Remove handlers added during the test."""
        logger = logging.getLogger("decomposer")
        before = list(logger.handlers)
        level = logger.level
        yield
        for handler in logger.handlers[:]:
            if handler not in before:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(level)

    def test_idempotent(self):
        """Repeated setup adds one stderr handler."""
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        stderr = [h for h in logger.handlers if getattr(h, "_decomposer_stderr", False)]
        assert len(stderr) == 1
        assert logger.level == logging.DEBUG

    def test_unknown_level(self):
        """Unknown level names fall back to WARNING."""
        assert setup_logging("LOUD").level == logging.WARNING

    def test_log_file(self, temp_dir):
        """A rotating file handler is attached once per path."""
        setup_logging("INFO", temp_dir / "a.log")
        logger = setup_logging("INFO", temp_dir / "a.log")
        files = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(files) == 1

        logger = setup_logging("INFO", temp_dir / "b.log")
        files = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert [h.baseFilename.endswith("b.log") for h in files] == [True]
