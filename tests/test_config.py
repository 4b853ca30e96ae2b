"""
Unit tests for configuration loading and validation.

Tests strict validation and error handling for report configs.
"""

import os
import tempfile

import pytest
import yaml

from cache_stats.config.loader import (
    load_report_config,
    ReportConfig,
    TimeUnit
)


class TestConfigLoading:
    """Test configuration loading and validation."""

    def setup_method(self):
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()

    def teardown_method(self):
        """Clean up test environment."""
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write_config(self, config_data: dict, filename: str = "config.yaml") -> str:
        """Write configuration data to temporary file."""
        config_path = os.path.join(self.temp_dir, filename)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_data, f)
        return config_path

    def test_valid_config_loads_correctly(self):
        """Test that a valid configuration loads correctly."""
        config_path = self._write_config({
            "report": {
                "time_unit": "s",
                "sources": ["app", "session"],
                "min_hit_ratio": 80
            }
        })

        config = load_report_config(config_path)

        assert config.time_unit == TimeUnit.SECONDS
        assert config.sources == ("app", "session")
        assert config.min_hit_ratio == 80.0

    def test_defaults_applied(self):
        """Test that omitted settings fall back to defaults."""
        config_path = self._write_config({"report": {}})
        assert load_report_config(config_path) == ReportConfig()

    def test_time_unit_case_insensitive(self):
        """Test that time_unit values are case insensitive."""
        config_path = self._write_config({"report": {"time_unit": "MS"}})
        assert load_report_config(config_path).time_unit == TimeUnit.MILLISECONDS

    def test_missing_file_raises_error(self):
        """Test that missing config file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Report config file not found"):
            load_report_config(os.path.join(self.temp_dir, "missing.yaml"))

    def test_invalid_yaml_raises_error(self):
        """Test that invalid YAML raises YAMLError."""
        config_path = os.path.join(self.temp_dir, "invalid.yaml")
        with open(config_path, 'w', encoding='utf-8') as f:
            f.write("report: {time_unit: [")
        with pytest.raises(yaml.YAMLError, match="Invalid YAML in config file"):
            load_report_config(config_path)

    def test_empty_file_raises_error(self):
        """Test that empty config file raises ValueError."""
        config_path = os.path.join(self.temp_dir, "empty.yaml")
        open(config_path, 'w').close()
        with pytest.raises(ValueError, match="Configuration file is empty"):
            load_report_config(config_path)

    def test_unknown_top_level_keys_raise_error(self):
        """Test that unknown top-level keys are rejected."""
        config_path = self._write_config({"report": {}, "budget": {}})
        with pytest.raises(ValueError, match="Unknown configuration keys"):
            load_report_config(config_path)

    def test_missing_report_section_raises_error(self):
        """Test that the report section is required."""
        config_path = self._write_config({"other": 1})
        with pytest.raises(ValueError):
            load_report_config(config_path)

    def test_report_must_be_dictionary(self):
        """Test that report must be a mapping."""
        config_path = self._write_config({"report": ["ms"]})
        with pytest.raises(ValueError, match="'report' must be a dictionary"):
            load_report_config(config_path)

    def test_unknown_report_keys_raise_error(self):
        """Test that unknown report keys are rejected."""
        config_path = self._write_config({"report": {"precision": 3}})
        with pytest.raises(ValueError, match="Unknown keys in report"):
            load_report_config(config_path)

    def test_invalid_time_unit_raises_error(self):
        """Test that unsupported time units are rejected."""
        config_path = self._write_config({"report": {"time_unit": "hours"}})
        with pytest.raises(ValueError, match="'time_unit' in report must be one of"):
            load_report_config(config_path)

    def test_sources_must_be_string_list(self):
        """Test that sources must be a list of strings."""
        config_path = self._write_config({"report": {"sources": "app"}})
        with pytest.raises(ValueError, match="'sources' in report must be a list of strings"):
            load_report_config(config_path)

    def test_empty_sources_raise_error(self):
        """Test that an empty sources list is rejected."""
        config_path = self._write_config({"report": {"sources": []}})
        with pytest.raises(ValueError, match="cannot be empty"):
            load_report_config(config_path)

    @pytest.mark.parametrize("ratio", [-1, 100.5, "high", True])
    def test_invalid_min_hit_ratio_raises_error(self, ratio):
        """Test that min_hit_ratio must be a number in 0..100."""
        config_path = self._write_config({"report": {"min_hit_ratio": ratio}})
        with pytest.raises(ValueError, match="'min_hit_ratio' in report"):
            load_report_config(config_path)


class TestReportConfig:
    """Test report config validation and helpers."""

    def test_direct_validation(self):
        """Test dataclass validation when built in code."""
        with pytest.raises(ValueError, match="min_hit_ratio must be between 0 and 100"):
            ReportConfig(min_hit_ratio=150)
        with pytest.raises(ValueError, match="sources cannot be empty"):
            ReportConfig(sources=())

    def test_time_unit_conversion(self):
        """Test durations convert from seconds."""
        assert TimeUnit.SECONDS.convert(1.5) == 1.5
        assert TimeUnit.MILLISECONDS.convert(1.5) == 1500
