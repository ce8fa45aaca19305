"""
Kinerja - Employee performance data validation and reporting

Validation, integrity checking and quality scoring for employee
performance review uploads.

Modules:
    core        - Shared services (db, config, logging, output)
    validation  - Multi-pass performance data validation
    validators  - Composable employee / score / competency validators
    quality     - Data quality reports and dataset quality analysis
    integrity   - JSON and record integrity checks
    recovery    - Damaged data recovery, auto-fixes, integrity-aware parsing
    scoring     - Organizational levels, ratings, performance recaps
    imports     - Spreadsheet / roster ingestion and CSV export
    sessions    - Upload sessions stored in SQLite
"""

__version__ = "0.1.0"
