"""
Output format utilities for distribvc CLI commands.

Records are plain dicts (from the domain objects' to_dict()) rendered
as JSON Lines, a JSON array, or a YAML document.
"""

import json
import os
from typing import Any, Dict, Iterable, Iterator

import yaml

FORMATS = ('jsonl', 'json', 'yaml')


def format_output(data: Iterable[Dict[str, Any]], format: str) -> Iterator[str]:
    """
    Format records according to the specified format.

    Args:
        data: Records to format
        format: One of jsonl, json, yaml

    Yields:
        Strings ready to print
    """
    if format == "jsonl":
        for item in data:
            yield json.dumps(item, ensure_ascii=False)
    elif format == "json":
        yield json.dumps(list(data), ensure_ascii=False, indent=2)
    elif format == "yaml":
        yield yaml.safe_dump(list(data), default_flow_style=False, allow_unicode=True, sort_keys=False).rstrip('\n')
    else:
        raise ValueError(f"Unknown format: {format}")


def get_format_from_env(default: str = 'jsonl') -> str:
    """Output format from DISTRIBVC_FORMAT, falling back to default."""
    format = os.environ.get('DISTRIBVC_FORMAT', default).lower()
    if format not in FORMATS:
        return default
    return format
