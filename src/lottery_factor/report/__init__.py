"""Lottery factor report: analysis and HTML rendering."""

from .analysis import (
    LotteryReport,
    RiskLevel,
    build_report,
    calculate_risk_level,
    percentage,
)
from .render import default_output_path, render_report, write_report

__all__ = [
    "LotteryReport",
    "RiskLevel",
    "build_report",
    "calculate_risk_level",
    "default_output_path",
    "percentage",
    "render_report",
    "write_report",
]
