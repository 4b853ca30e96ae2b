"""
Event log files.

Reads and writes recorded cache operation events as YAML, keyed by source
name. Only structure is validated here; odd values such as negative counts
are left for the statistics to reflect.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

import yaml

from .models import CacheOperationEvent, OperationKind

ALLOWED_EVENT_KEYS = {'operation', 'start', 'end', 'hit_count', 'miss_count', 'found'}


def load_event_log(path: str) -> Dict[str, List[CacheOperationEvent]]:
    """Load recorded events from a YAML event log.

    Args:
        path: Path to YAML event log file

    Returns:
        Events per source name, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        yaml.YAMLError: If YAML is invalid
        ValueError: If the event log structure is invalid
    """
    log_path = Path(path)
    if not log_path.exists():
        raise FileNotFoundError(f"Event log file not found: {path}")

    with open(log_path, 'r', encoding='utf-8') as f:
        try:
            raw_log = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in event log {path}: {e}")

    if not raw_log:
        raise ValueError("Event log file is empty")
    if not isinstance(raw_log, dict):
        raise ValueError("Event log must be a dictionary")

    unknown_keys = set(raw_log.keys()) - {'sources'}
    if unknown_keys:
        raise ValueError(f"Unknown event log keys: {unknown_keys}")
    if 'sources' not in raw_log:
        raise ValueError("Missing required 'sources' section")

    sources_data = raw_log['sources']
    if sources_data is None:
        sources_data = {}
    if not isinstance(sources_data, dict):
        raise ValueError("'sources' must be a dictionary")

    events_by_source = {}
    for source_name, events_data in sources_data.items():
        if not isinstance(source_name, str):
            raise ValueError(f"Source name {source_name!r} must be a string")
        if events_data is None:
            events_data = []
        if not isinstance(events_data, list):
            raise ValueError(f"Source '{source_name}' must be a list of events")
        events_by_source[source_name] = [
            _parse_event(event_data, f"sources.{source_name}[{index}]")
            for index, event_data in enumerate(events_data)
        ]

    return events_by_source


def save_event_log(
    events_by_source: Mapping[str, Iterable[CacheOperationEvent]],
    path: str
) -> None:
    """Write events to a YAML event log readable by load_event_log().

    Captured arguments and results are not written.
    """
    sources = {
        name: [_dump_event(event) for event in events]
        for name, events in events_by_source.items()
    }
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump({'sources': sources}, f, sort_keys=False)


def _parse_event(data: Any, path: str) -> CacheOperationEvent:
    """Parse and validate a single event entry.

    Args:
        data: Event data
        path: Path for error messages

    Returns:
        Parsed CacheOperationEvent

    Raises:
        ValueError: If the event is invalid
    """
    if not isinstance(data, dict):
        raise ValueError(f"Event {path} must be a dictionary")

    unknown_keys = set(data.keys()) - ALLOWED_EVENT_KEYS
    if unknown_keys:
        raise ValueError(f"Unknown keys in {path}: {unknown_keys}")

    if 'operation' not in data:
        raise ValueError(f"Missing required 'operation' in {path}")
    operation = data['operation']
    if not isinstance(operation, str) or not operation:
        raise ValueError(f"'operation' in {path} must be a non-empty string")

    for key in ('start', 'end'):
        if key not in data:
            raise ValueError(f"Missing required '{key}' in {path}")
        if not _is_number(data[key]):
            raise ValueError(f"'{key}' in {path} must be a number")

    for key in ('hit_count', 'miss_count'):
        value = data.get(key, 0)
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValueError(f"'{key}' in {path} must be an integer")

    found = data.get('found')
    if found is not None and not isinstance(found, bool):
        raise ValueError(f"'found' in {path} must be a boolean")

    kind = OperationKind.from_name(operation)
    return CacheOperationEvent(
        kind=kind,
        start_time=data['start'],
        end_time=data['end'],
        hit_count=data.get('hit_count', 0),
        miss_count=data.get('miss_count', 0),
        found=found,
        name=operation if kind is OperationKind.OTHER else None
    )


def _dump_event(event: CacheOperationEvent) -> Dict[str, Any]:
    data = {
        'operation': event.operation,
        'start': event.start_time,
        'end': event.end_time,
    }
    if event.hit_count or event.miss_count:
        data['hit_count'] = event.hit_count
        data['miss_count'] = event.miss_count
    if event.found is not None:
        data['found'] = event.found
    return data


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
