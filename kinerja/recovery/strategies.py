"""
Recovery strategies for damaged performance uploads, plus the cleaning
helpers that bring recovered records into the employee record shape.

Strategies run in order of fidelity:

    1. syntax fix        repair common hand-edit mistakes, then decode
    2. partial extract   decode every intact employee object
    3. fallback parse    regex-scan name/score pairs
"""

import json
import math
import re
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from kinerja.core.config import get_config_value
from kinerja.core.logging import get_logger
from kinerja.validation.specs import STAFF_OTHER

logger = get_logger("kinerja.recovery")

UNKNOWN_EMPLOYEE = "Unknown Employee"
UNKNOWN_COMPETENCY = "Unknown Competency"
RECOVERED_SCORE = "recovered_score"

_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([a-zA-Z_][a-zA-Z0-9_]*)\s*:")
_BLOCK_COMMENT_RE = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT_RE = re.compile(r"//.*$", re.MULTILINE)
_BARE_VALUE_RE = re.compile(r":\s*([a-zA-Z][a-zA-Z0-9\s]*[a-zA-Z0-9])\s*([,}])")
_NAME_RE = re.compile(r'"name"\s*:\s*"([^"]+)"')
_SCORE_RE = re.compile(r'"score"\s*:\s*(\d+(?:\.\d+)?)')
_JSON_LITERALS = {"true", "false", "null"}


@dataclass
class RecoveryOptions:
    auto_fix: bool = True
    use_default_values: bool = True
    skip_corrupted_records: bool = False
    prompt_for_missing_data: bool = False
    max_recovery_attempts: int = 3

    @classmethod
    def from_config(cls, **overrides) -> "RecoveryOptions":
        configured = get_config_value("recovery", default={}) or {}
        values = {k: v for k, v in configured.items() if k in cls.__dataclass_fields__}
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


@dataclass
class RecoveryAttempt:
    success: bool
    data: Optional[List[Any]] = None
    strategy: Optional[str] = None
    attempts: int = 0
    records_recovered: int = 0
    error: Optional[str] = None
    notes: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

def fix_json_syntax(text: str) -> str:
    """Repair comments, trailing commas, unquoted keys, single quotes and bare words."""
    fixed = _BLOCK_COMMENT_RE.sub("", text)
    fixed = _LINE_COMMENT_RE.sub("", fixed)
    fixed = _TRAILING_COMMA_RE.sub(r"\1", fixed)
    fixed = _UNQUOTED_KEY_RE.sub(r'\1"\2":', fixed)
    fixed = fixed.replace("'", '"')

    def _quote(match: re.Match) -> str:
        word = match.group(1)
        if word in _JSON_LITERALS:
            return match.group(0)
        return f': "{word}"{match.group(2)}'

    return _BARE_VALUE_RE.sub(_quote, fixed)


def parse_with_syntax_fix(text: str) -> List[Any]:
    data = json.loads(fix_json_syntax(text))
    return data if isinstance(data, list) else [data]


def extract_partial_records(text: str) -> List[Dict[str, Any]]:
    """Decode every intact JSON object that carries a ``name``; skip the rest."""
    decoder = json.JSONDecoder()
    records: List[Dict[str, Any]] = []
    pos = text.find("{")
    while pos != -1:
        try:
            obj, end = decoder.raw_decode(text, pos)
        except json.JSONDecodeError:
            pos = text.find("{", pos + 1)
            continue
        if isinstance(obj, dict) and "name" in obj:
            records.append(obj)
            pos = text.find("{", end)
        else:
            pos = text.find("{", pos + 1)
    return records


def fallback_parse(text: str) -> List[Dict[str, Any]]:
    """Pair every quoted name with the score at the same position, if any."""
    names = _NAME_RE.findall(text)
    scores = [float(s) for s in _SCORE_RE.findall(text)]
    employees = []
    for index, name in enumerate(names):
        score = scores[index] if index < len(scores) else None
        employees.append({
            "name": name,
            "nip": "",
            "gol": "",
            "pangkat": "",
            "position": "",
            "sub_position": "",
            "organizational_level": STAFF_OTHER,
            "performance": [{"name": RECOVERED_SCORE, "score": score}] if score else [],
        })
    return employees


STRATEGIES: List[tuple] = [
    ("syntax_fix", parse_with_syntax_fix),
    ("partial_extraction", extract_partial_records),
    ("fallback_parsing", fallback_parse),
]


def recover_data(text: str, max_attempts: int = 3) -> RecoveryAttempt:
    """Try each strategy in turn, up to ``max_attempts`` of them."""
    attempts = 0
    notes: List[str] = []
    for name, strategy in STRATEGIES[:max(0, max_attempts)]:
        attempts += 1
        try:
            data = strategy(text)
        except (ValueError, TypeError) as exc:
            notes.append(f"{name}: {exc}")
            logger.debug("Recovery strategy %s failed: %s", name, exc)
            continue
        if data:
            logger.info("Recovered %d records with %s", len(data), name)
            return RecoveryAttempt(
                success=True,
                data=data,
                strategy=name,
                attempts=attempts,
                records_recovered=len(data),
                notes=notes,
            )
        notes.append(f"{name}: no records found")

    return RecoveryAttempt(
        success=False,
        attempts=attempts,
        error=f"Failed to recover data after {attempts} attempts",
        notes=notes,
    )


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------

def clean_string(value: Any) -> str:
    if not isinstance(value, str):
        return "" if value is None or value is False else str(value)
    text = re.sub(r"\s+", " ", value.strip())
    return "".join(
        ch for ch in text if ch != "\ufffd" and unicodedata.category(ch) != "Cc"
    )


def normalize_score(score: Any) -> float:
    """Parse and clamp to 0..100; unparseable values become 0."""
    if isinstance(score, bool):
        return 0.0
    try:
        value = float(score)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(value):
        return 0.0
    return max(0.0, min(100.0, value))


def clean_performance_data(performance: Any) -> List[Dict[str, Any]]:
    if not isinstance(performance, list):
        return []
    cleaned = []
    for perf in performance:
        if not isinstance(perf, dict):
            continue
        name = clean_string(perf.get("name")) or UNKNOWN_COMPETENCY
        if name == UNKNOWN_COMPETENCY:
            continue
        cleaned.append({"name": name, "score": normalize_score(perf.get("score"))})
    return cleaned


def clean_and_normalize_data(
    data: List[Any], options: Optional[RecoveryOptions] = None
) -> List[Dict[str, Any]]:
    """Coerce arbitrary records into employee records.

    Nameless records become "Unknown Employee" and are dropped unless
    ``use_default_values`` is set.
    """
    options = options or RecoveryOptions.from_config()
    employees = []
    for item in data:
        if not isinstance(item, dict):
            if options.skip_corrupted_records:
                continue
            item = {}
        employee = {
            "name": clean_string(item.get("name")) or UNKNOWN_EMPLOYEE,
            "nip": clean_string(item.get("nip")),
            "gol": clean_string(item.get("gol")),
            "pangkat": clean_string(item.get("pangkat")),
            "position": clean_string(item.get("position")),
            "sub_position": clean_string(item.get("sub_position") or item.get("subPosition")),
            "organizational_level": clean_string(
                item.get("organizational_level") or item.get("organizationalLevel")
            ) or STAFF_OTHER,
            "performance": clean_performance_data(item.get("performance")),
        }
        if employee["name"] == UNKNOWN_EMPLOYEE and not options.use_default_values:
            continue
        employees.append(employee)
    return employees
