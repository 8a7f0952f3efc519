"""Data export modules for generating output files."""

from exporters.csv_exporter import (
    DEFAULT_EXPORT_FIELDS,
    EXPORT_FIELDS,
    CSVExporter,
    validate_export_fields,
)
from exporters.summary_generator import SummaryGenerator

__all__ = [
    "CSVExporter",
    "SummaryGenerator",
    "EXPORT_FIELDS",
    "DEFAULT_EXPORT_FIELDS",
    "validate_export_fields",
]
