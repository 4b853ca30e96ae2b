"""
Configuration management and loading.

Handles report settings for the CLI.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Optional, Tuple

import yaml


class TimeUnit(Enum):
    """Units for displaying cumulative operation time."""
    SECONDS = "s"
    MILLISECONDS = "ms"

    def convert(self, seconds: float) -> float:
        """Convert a duration in seconds to this unit."""
        if self is TimeUnit.MILLISECONDS:
            return seconds * 1000
        return seconds


@dataclass(frozen=True)
class ReportConfig:
    """Settings for rendering cache statistics reports."""
    time_unit: TimeUnit = TimeUnit.MILLISECONDS
    sources: Optional[Tuple[str, ...]] = None  # None reports every source
    min_hit_ratio: Optional[float] = None

    def __post_init__(self):
        """Validate report settings."""
        if self.min_hit_ratio is not None and not 0 <= self.min_hit_ratio <= 100:
            raise ValueError("min_hit_ratio must be between 0 and 100")
        if self.sources is not None and not self.sources:
            raise ValueError("sources cannot be empty when specified")


def load_report_config(path: str) -> ReportConfig:
    """Load and validate report configuration from YAML file.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated ReportConfig object

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If configuration is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Report config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in config file {path}: {e}")

    if not raw_config:
        raise ValueError("Configuration file is empty")
    if not isinstance(raw_config, dict):
        raise ValueError("Configuration must be a dictionary")

    unknown_keys = set(raw_config.keys()) - {'report'}
    if unknown_keys:
        raise ValueError(f"Unknown configuration keys: {unknown_keys}")

    if 'report' not in raw_config:
        raise ValueError("Missing required 'report' section")

    report_data = raw_config['report']
    if not isinstance(report_data, dict):
        raise ValueError("'report' must be a dictionary")

    return _parse_report_config(report_data, "report")


def _parse_report_config(data: Dict, path: str) -> ReportConfig:
    """Parse and validate the report section.

    Args:
        data: Report configuration data
        path: Path for error messages

    Returns:
        Validated ReportConfig

    Raises:
        ValueError: If configuration is invalid
    """
    allowed_keys = {'time_unit', 'sources', 'min_hit_ratio'}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    # Validate time_unit
    unit_str = data.get('time_unit', TimeUnit.MILLISECONDS.value)
    if not isinstance(unit_str, str):
        raise ValueError(f"'time_unit' in {path} must be a string")
    try:
        time_unit = TimeUnit(unit_str.lower())
    except ValueError:
        valid_units = [unit.value for unit in TimeUnit]
        raise ValueError(f"'time_unit' in {path} must be one of: {valid_units}")

    # Validate sources
    sources = data.get('sources')
    if sources is not None:
        if not isinstance(sources, list) or not all(isinstance(s, str) for s in sources):
            raise ValueError(f"'sources' in {path} must be a list of strings")
        if not sources:
            raise ValueError(f"'sources' in {path} cannot be empty")
        sources = tuple(sources)

    # Validate min_hit_ratio
    min_hit_ratio = data.get('min_hit_ratio')
    if min_hit_ratio is not None:
        if isinstance(min_hit_ratio, bool) or not isinstance(min_hit_ratio, (int, float)):
            raise ValueError(f"'min_hit_ratio' in {path} must be a number")
        if not 0 <= min_hit_ratio <= 100:
            raise ValueError(f"'min_hit_ratio' in {path} must be between 0 and 100")
        min_hit_ratio = float(min_hit_ratio)

    return ReportConfig(
        time_unit=time_unit,
        sources=sources,
        min_hit_ratio=min_hit_ratio
    )
