"""
CSV and plaintext exports
"""

from .csv_exporter import export_growth, export_videos, read_export
from .report_writer import write_report

__all__ = ["export_growth", "export_videos", "read_export", "write_report"]
