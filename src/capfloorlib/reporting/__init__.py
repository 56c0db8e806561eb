"""
Reporting module - tabular cap/floor reports.

Provides:
- Caplet-level valuation and greeks
- Parameter sensitivity tables
- CSV export
"""

from .risk_report import CAPLET_COLUMNS, caplet_report, export_to_csv, sensitivity_report

__all__ = [
    "CAPLET_COLUMNS",
    "caplet_report",
    "export_to_csv",
    "sensitivity_report",
]
