"""
Recovery of damaged uploads and integrity-aware parsing.

Usage:
    from kinerja.recovery import parse_performance_data_with_integrity
    result = parse_performance_data_with_integrity(raw_text)
"""

from kinerja.recovery.service import (
    DataOperationResult,
    EnhancedDataService,
    get_employee_data_with_integrity,
    parse_performance_data_with_integrity,
)
from kinerja.recovery.strategies import RecoveryOptions, recover_data

__all__ = [
    "DataOperationResult",
    "EnhancedDataService",
    "get_employee_data_with_integrity",
    "parse_performance_data_with_integrity",
    "RecoveryOptions",
    "recover_data",
]
