"""HTML rendering of a LotteryReport with jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from jinja2 import Environment, PackageLoader, StrictUndefined

from lottery_factor.logging import get_logger

from .analysis import round_half_up

if TYPE_CHECKING:
    from .analysis import LotteryReport

logger = get_logger(__name__)

TEMPLATE_NAME = "lottery_report.html.j2"

# Bar segment colours for the first five contributors, cycled
SEGMENT_COLORS = ["#FF5733", "#FFC300", "#DAF7A6", "#33FF57", "#3357FF"]
OTHERS_COLOR = "#808080"


def _environment() -> Environment:
    env = Environment(
        loader=PackageLoader("lottery_factor.report", "templates"),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["round_half_up"] = round_half_up
    env.globals["segment_colors"] = SEGMENT_COLORS
    env.globals["others_color"] = OTHERS_COLOR
    return env


def render_report(report: LotteryReport) -> str:
    """Render the report to an HTML document."""
    template = _environment().get_template(TEMPLATE_NAME)
    return template.render(report=report)


def default_output_path(owner: str, name: str) -> Path:
    """``<owner>-<name>-lottery.html`` in the working directory."""
    return Path(f"{owner}-{name}-lottery.html")


def write_report(report: LotteryReport, output: Path | None = None) -> Path:
    """Render ``report`` and write it to ``output``.

    Args:
        report: Report to render
        output: Destination (defaults to ``default_output_path``)

    Returns:
        Path of the written file
    """
    path = output or default_output_path(report.owner, report.name)
    path.write_text(render_report(report), encoding="utf-8")
    logger.info("HTML file generated: {}", path)
    return path
