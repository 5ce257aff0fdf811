"""Lottery factor analysis over cached contribution counts.

The lottery factor is the share of all merged pull requests made by the
top contributors (two by default). A high share means the project leans
on very few people.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from lottery_factor.config import ReportConfig

if TYPE_CHECKING:
    from lottery_factor.schemas.report import ContributorCount, YoloCoder


class RiskLevel(str, Enum):
    """Lottery factor risk bucket."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"

    @property
    def color(self) -> str:
        """Tailwind colour class used for the badge."""
        return {
            RiskLevel.HIGH: "red-500",
            RiskLevel.MEDIUM: "yellow-500",
            RiskLevel.LOW: "green-500",
        }[self]


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percentage(part: int, total: int) -> float:
    """``part`` as a percentage of ``total``; 0 when total is 0."""
    if total == 0:
        return 0.0
    return part / total * 100


def calculate_risk_level(
    percent: float,
    *,
    high_threshold: int = 50,
    medium_threshold: int = 30,
) -> RiskLevel:
    """Bucket a concentration percentage.

    Strictly above ``high_threshold`` is High, strictly above
    ``medium_threshold`` is Medium, anything else Low.
    """
    if percent > high_threshold:
        return RiskLevel.HIGH
    if percent > medium_threshold:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


@dataclass
class LotteryReport:
    """Everything the HTML report shows for one repository."""

    owner: str
    name: str
    days: int
    contributors: list[ContributorCount]
    top_contributors: list[ContributorCount]
    top_percentage: int
    risk_level: RiskLevel
    displayed_contributors: list[ContributorCount]
    other_contributors: list[ContributorCount]
    yolo_coders: list[YoloCoder] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    @property
    def total_prs(self) -> int:
        return sum(c.pr_count for c in self.contributors)

    @property
    def other_pr_count(self) -> int:
        return sum(c.pr_count for c in self.other_contributors)

    @property
    def total_yolo_commits(self) -> int:
        return sum(coder.commit_count for coder in self.yolo_coders)

    @property
    def yolo_coder_count(self) -> int:
        return len(self.yolo_coders)

    def share(self, pr_count: int) -> float:
        """Percentage of all PRs represented by ``pr_count``."""
        return percentage(pr_count, self.total_prs)


def build_report(
    owner: str,
    name: str,
    days: int,
    contributors: list[ContributorCount],
    yolo_coders: list[YoloCoder],
    config: ReportConfig | None = None,
) -> LotteryReport:
    """Compute the lottery factor from contributor counts.

    Args:
        owner: Repository owner
        name: Repository name
        days: Lookback window shown in the report
        contributors: (author, pr_count) ordered by count descending
        yolo_coders: Direct pushers ordered by commit count descending
        config: Display counts and risk thresholds (defaults if None)

    Returns:
        LotteryReport ready for rendering
    """
    config = config or ReportConfig()

    total = sum(c.pr_count for c in contributors)
    top = contributors[: config.top_contributor_count]
    top_percentage = round_half_up(percentage(sum(c.pr_count for c in top), total))

    return LotteryReport(
        owner=owner,
        name=name,
        days=days,
        contributors=contributors,
        top_contributors=top,
        top_percentage=top_percentage,
        risk_level=calculate_risk_level(
            top_percentage,
            high_threshold=config.high_risk_threshold_pct,
            medium_threshold=config.medium_risk_threshold_pct,
        ),
        displayed_contributors=contributors[: config.top_display_count],
        other_contributors=contributors[config.top_display_count :],
        yolo_coders=yolo_coders,
    )
