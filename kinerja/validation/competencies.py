"""
Competency name handling: normalization, sanitizing and fuzzy matching
against the required competency list.
"""

import re
from typing import Iterable, List, Optional

from kinerja.validation.specs import REQUIRED_COMPETENCIES, CompetencyRequirement

_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_NAME_RE = re.compile(r"[^a-zA-Z0-9\s\-_]")


def normalize_competency_name(name: str) -> str:
    """Lowercase, strip punctuation and collapse whitespace."""
    text = _PUNCTUATION_RE.sub("", str(name).lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def sanitize_competency_name(name: str) -> str:
    """Drop unsafe characters and return a sentence-cased name.

    >>> sanitize_competency_name("  KEPEMIMPINAN!! ")
    'Kepemimpinan'
    """
    text = _UNSAFE_NAME_RE.sub("", str(name).strip())
    text = _WHITESPACE_RE.sub(" ", text).lower().strip()
    return text[:1].upper() + text[1:]


def find_matching_competency(
    name: str,
    requirements: Iterable[CompetencyRequirement] = REQUIRED_COMPETENCIES,
) -> Optional[CompetencyRequirement]:
    """Find the required competency a free-form name refers to.

    Tried in order: exact normalized name, alias substring in either
    direction, then any keyword of the requirement longer than 3 chars.
    """
    normalized = normalize_competency_name(name)
    if not normalized:
        return None
    requirements = list(requirements)

    for req in requirements:
        if normalize_competency_name(req.name) == normalized:
            return req

    for req in requirements:
        for alias in req.aliases:
            alias_norm = normalize_competency_name(alias)
            if alias_norm in normalized or normalized in alias_norm:
                return req

    for req in requirements:
        keywords = [w for w in req.name.split(" ") if len(w) > 3]
        if any(keyword in normalized for keyword in keywords):
            return req

    return None


def matches_requirement(name: str, requirement: CompetencyRequirement) -> bool:
    """Substring match in either direction against the name and its aliases."""
    lowered = str(name).lower()
    candidates = [requirement.name.lower()] + [a.lower() for a in requirement.aliases]
    return any(c in lowered or lowered in c for c in candidates)


def missing_requirements(
    competency_names: Iterable[str],
    requirements: Iterable[CompetencyRequirement] = REQUIRED_COMPETENCIES,
) -> List[CompetencyRequirement]:
    """Requirements that none of ``competency_names`` matches."""
    names = [n for n in competency_names if n]
    return [
        req for req in requirements
        if not any(find_matching_competency(n, [req]) for n in names)
    ]
