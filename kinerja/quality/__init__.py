"""
Data quality reporting and dataset quality analysis.
"""

from kinerja.quality.analyzer import QualityAnalysis, analyze_data_quality
from kinerja.quality.report import (
    DataQualityReport,
    EmployeeDataQuality,
    QualityLevel,
    analyze_employee_quality,
    can_calculate_reliable_recap,
    generate_data_quality_report,
    get_calculation_warning,
    get_data_quality_badge,
)

__all__ = [
    "QualityAnalysis",
    "analyze_data_quality",
    "DataQualityReport",
    "EmployeeDataQuality",
    "QualityLevel",
    "analyze_employee_quality",
    "can_calculate_reliable_recap",
    "generate_data_quality_report",
    "get_calculation_warning",
    "get_data_quality_badge",
]
