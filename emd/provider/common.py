"""
Helpers shared by the per-service response parsers.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple


def tag_list(tags: Optional[List[Dict[str, Any]]]) -> List[Tuple[str, str]]:
    """
    Convert an AWS Tags array into (key, value) pairs, first key wins.

    Args:
        tags: List of {"Key": ..., "Value": ...} dicts (may be None)

    Returns:
        List of (key, value) tuples in their original order
    """
    result = []
    seen = set()
    for tag in tags or []:
        key = tag.get("Key", "")
        if not key or key in seen:
            continue
        seen.add(key)
        result.append((key, tag.get("Value", "")))
    return result


def name_tag(tags: Optional[List[Dict[str, Any]]], default: str = "") -> str:
    """Return the value of the Name tag, or default."""
    for tag in tags or []:
        if tag.get("Key") == "Name":
            return tag.get("Value", default)
    return default


def format_date(value: Any) -> str:
    """
    Format a timestamp as YYYY-MM-DD.

    boto3 returns datetimes; epoch seconds and ISO strings are accepted too.
    Missing values become "-".
    """
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc).strftime("%Y-%m-%d")
    return str(value)[:10]


def format_datetime(value: Any) -> str:
    """Format a timestamp as YYYY-MM-DD HH:MM:SS, or "-"."""
    if value is None or value == "":
        return "-"
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    return str(value).replace("T", " ").split(".")[0].split("+")[0]
