"""Reporting: trajectory export and charts."""

from .charts import create_market_chart, create_production_chart, create_trajectory_charts
from .export import export_csv, export_html_report, export_json, trajectory_frame

__all__ = [
    "create_market_chart",
    "create_production_chart",
    "create_trajectory_charts",
    "export_csv",
    "export_html_report",
    "export_json",
    "trajectory_frame",
]
