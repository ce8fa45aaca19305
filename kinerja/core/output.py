"""
Output formatters for CLI display.

Supports human-readable, JSON, and markdown output modes for the
pipeline result objects (anything with ``to_dict()``, dataclasses, dicts).
"""

import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, List, Optional


class OutputFormat(str, Enum):
    HUMAN = "human"
    JSON = "json"
    MARKDOWN = "markdown"


def format_result(
    result: Any,
    fmt: OutputFormat = OutputFormat.HUMAN,
    title: Optional[str] = None,
) -> str:
    """Format a result object for display."""
    if fmt == OutputFormat.JSON:
        return _format_json(result)
    elif fmt == OutputFormat.MARKDOWN:
        return _format_markdown(result, title)
    else:
        return _format_human(result, title)


def _to_dict(result: Any) -> Dict:
    if hasattr(result, "to_dict"):
        return result.to_dict()
    if is_dataclass(result):
        return asdict(result)
    if isinstance(result, dict):
        return result
    if isinstance(result, list):
        return {"items": [_to_plain(item) for item in result]}
    return {"value": str(result)}


def _to_plain(value: Any) -> Any:
    if hasattr(value, "to_dict") or is_dataclass(value):
        return _to_dict(value)
    if isinstance(value, Enum):
        return value.value
    return value


def _format_json(result: Any) -> str:
    return json.dumps(_to_dict(result), indent=2, default=str, ensure_ascii=False)


def _format_scalar(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def _describe_item(item: Any) -> str:
    """One-line rendering of a list element (issues, recaps, options)."""
    item = _to_plain(item)
    if isinstance(item, dict):
        if "message" in item:
            prefix = f"[{item['type']}] " if item.get("type") else ""
            return f"{prefix}{item['message']}"
        return ", ".join(f"{k}={_format_scalar(v)}" for k, v in item.items()
                         if not isinstance(v, (list, dict)))
    return _format_scalar(item)


def _format_human(result: Any, title: Optional[str] = None) -> str:
    lines: List[str] = []
    if title:
        lines.extend([title, "=" * len(title), ""])

    data = _to_dict(result)
    max_key_len = max(len(str(k)) for k in data.keys()) if data else 0

    for key, value in data.items():
        label = key.replace("_", " ").title()
        if isinstance(value, list):
            formatted = "\n".join(f"  - {_describe_item(v)}" for v in value) if value else "(none)"
            if value:
                formatted = "\n" + formatted
        elif isinstance(value, dict):
            formatted = "\n" + "\n".join(
                f"  {k}: {_describe_item(v) if isinstance(v, dict) else _format_scalar(v)}"
                for k, v in value.items()
            ) if value else "(none)"
        else:
            formatted = _format_scalar(value)
        lines.append(f"{label:<{max_key_len + 2}}: {formatted}")

    return "\n".join(lines)


def _format_markdown(result: Any, title: Optional[str] = None) -> str:
    lines: List[str] = []
    if title:
        lines.extend([f"# {title}", ""])

    data = _to_dict(result)
    lines.extend(["| Field | Value |", "|-------|-------|"])

    for key, value in data.items():
        label = key.replace("_", " ").title()
        if isinstance(value, list):
            formatted = "<br>".join(_describe_item(v) for v in value) if value else "-"
        elif isinstance(value, dict):
            formatted = "<br>".join(f"{k}: {_format_scalar(v)}" for k, v in value.items()) or "-"
        else:
            formatted = _format_scalar(value)
        lines.append(f"| {label} | {formatted.replace('|', '/')} |")

    return "\n".join(lines)
