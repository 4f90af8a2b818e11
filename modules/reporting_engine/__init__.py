"""
Reporting Module.

Responsible for persisting tuning reports: flat results table,
generation/window statistics and the best configuration.
"""

from .report_exporter import ReportExporter

__all__ = ['ReportExporter']
