"""
Import data models.

Column definitions used to map spreadsheet headers onto record fields.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List


@dataclass
class ColumnDef:
    """Definition for a single importable column/field."""

    name: str                          # Internal field name (e.g. "sub_position")
    label: str                         # Human-readable label
    type: str = "text"                 # text | int | float
    required: bool = False
    aliases: List[str] = field(default_factory=list)  # Alternative header names

    def all_names(self) -> List[str]:
        """Return all possible names for header matching (lowercase)."""
        names = [self.name.lower(), self.label.lower()]
        names.extend(a.lower() for a in self.aliases)
        return list(dict.fromkeys(names))  # dedupe, preserve order


@dataclass
class ImportSpec:
    """Describes how one kind of spreadsheet maps to records."""

    name: str              # e.g. "roster"
    label: str             # e.g. "Employee Roster"
    columns: List[ColumnDef] = field(default_factory=list)

    @property
    def required_columns(self) -> List[ColumnDef]:
        return [c for c in self.columns if c.required]

    @property
    def column_map(self) -> Dict[str, ColumnDef]:
        return {c.name: c for c in self.columns}
