"""
Repository Backlog Scoring Module.

Scores the open issue backlog of a single repository:
- Staleness and labeling tallies over the open issues
- Stale and unlabeled percentages
- A 0-100 health score and its status tier

Scoring never fetches data and never reads configuration on its own; thresholds
are passed in by the caller.
"""

from datetime import datetime
from typing import Sequence

import pandas as pd

from logger import get_logger
from analyzers.models import HealthStatus, RepositoryScore
from analyzers.staleness import is_stale
from miners.models import RepositoryIssueData

logger = get_logger(__name__)

BASE_SCORE = 50
VOLUME_BONUS = 20
FRESHNESS_BONUS = 15
LABELING_BONUS = 15
STALE_PERCENT_LIMIT = 30.0
UNLABELED_PERCENT_LIMIT = 20.0

HEALTHY_THRESHOLD = 70
WARNING_THRESHOLD = 40


def compute_health_score(
    total_open: int,
    stale_percent: float,
    unlabeled_percent: float,
    min_issues: int,
) -> int:
    """
    Compute the backlog health score.

    Starts from 50 and adds 20 when the repository has at least ``min_issues``
    open issues, 15 when fewer than 30% are stale and 15 when fewer than 20% are
    unlabeled. An empty backlog scores 100. The result is clamped to [0, 100].

    Args:
        total_open (int): Number of open issues
        stale_percent (float): Share of stale issues, 0-100
        unlabeled_percent (float): Share of unlabeled issues, 0-100
        min_issues (int): Open issue count that earns the volume bonus

    Returns:
        int: Health score between 0 and 100
    """
    if total_open == 0:
        return 100

    score = BASE_SCORE
    if total_open >= min_issues:
        score += VOLUME_BONUS
    if stale_percent < STALE_PERCENT_LIMIT:
        score += FRESHNESS_BONUS
    if unlabeled_percent < UNLABELED_PERCENT_LIMIT:
        score += LABELING_BONUS

    return max(0, min(100, score))


def classify_status(health_score: int) -> HealthStatus:
    """Map a health score to its status tier."""
    if health_score >= HEALTHY_THRESHOLD:
        return HealthStatus.HEALTHY
    if health_score >= WARNING_THRESHOLD:
        return HealthStatus.WARNING
    return HealthStatus.CRITICAL


def score_repository(
    name: str,
    issues: Sequence[RepositoryIssueData],
    min_issues: int,
    stale_days: int,
    now: datetime = None,
) -> RepositoryScore:
    """
    Score the open issue backlog of one repository.

    Args:
        name (str): Repository name
        issues (Sequence[RepositoryIssueData]): All open issues of the repository
        min_issues (int): Open issue count that earns the volume bonus
        stale_days (int): Staleness threshold in days
        now (datetime): Reference moment for staleness. When omitted every issue
            is checked against the current time.

    Returns:
        RepositoryScore: Counts, percentages, health score and status
    """
    total_open = len(issues)
    if total_open == 0:
        return RepositoryScore(
            name=name, total_open=0, health_score=100, status=HealthStatus.HEALTHY
        )

    issues_df = pd.DataFrame([issue.model_dump() for issue in issues])
    issues_df["stale"] = issues_df["updated_at"].map(
        lambda updated_at: is_stale(updated_at, stale_days, now)
    )
    issues_df["unlabeled"] = issues_df["labels"].map(len) == 0

    stale_count = int(issues_df["stale"].sum())
    unlabeled_count = int(issues_df["unlabeled"].sum())
    stale_percent = stale_count / total_open * 100
    unlabeled_percent = unlabeled_count / total_open * 100

    health_score = compute_health_score(
        total_open, stale_percent, unlabeled_percent, min_issues
    )

    return RepositoryScore(
        name=name,
        total_open=total_open,
        stale_count=stale_count,
        stale_percent=stale_percent,
        unlabeled_count=unlabeled_count,
        unlabeled_percent=unlabeled_percent,
        health_score=health_score,
        status=classify_status(health_score),
    )


class RepositoryScorer:
    """
    Scores repositories against a fixed pair of thresholds.

    Attributes:
        min_issues (int): Open issue count that earns the volume bonus.
        stale_days (int): Staleness threshold in days.
    """

    def __init__(self, min_issues: int, stale_days: int):
        self.min_issues = min_issues
        self.stale_days = stale_days

    def score_repository(
        self,
        name: str,
        issues: Sequence[RepositoryIssueData],
        now: datetime = None,
    ) -> RepositoryScore:
        """Score one repository with this scorer's thresholds."""
        score = score_repository(name, issues, self.min_issues, self.stale_days, now)
        logger.debug(
            {
                "message": "Repository scored",
                "repository": name,
                "total_open": score.total_open,
                "stale_count": score.stale_count,
                "unlabeled_count": score.unlabeled_count,
                "health_score": score.health_score,
            }
        )
        return score
