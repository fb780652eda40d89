"""
Multi-Repository Analysis Module.

This module scores the backlogs of every repository of an organization and
assembles the organization report. It coordinates:

- Repository listing and per-repository issue fetching through a miner
- Bounded concurrent fetch-and-score of repositories
- Conversion of per-repository fetch failures into error entries
- Deterministic ordering and the status tier summary
"""

import asyncio
from datetime import datetime, timezone
from typing import Iterable, List, Sequence

from logger import get_logger
from analyzers.models import (
    BacklogReport,
    HealthStatus,
    OrganizationSummary,
    RepositoryScore,
    ScoringConfig,
)
from analyzers.repository import RepositoryScorer
from miners.base import RepositoryMiner

logger = get_logger(__name__)


def error_message(error: Exception) -> str:
    """Message recorded for a failed repository, never empty."""
    return str(error) or type(error).__name__


def sort_repository_scores(scores: Iterable[RepositoryScore]) -> List[RepositoryScore]:
    """
    Order scores worst first, errored repositories last.

    The sort is stable: ties between equal health scores and the relative order
    of errored repositories follow the input order.
    """
    return sorted(
        scores,
        key=lambda score: (score.failed, 0 if score.failed else score.health_score),
    )


def summarize(scores: Iterable[RepositoryScore]) -> OrganizationSummary:
    """Count successfully scored repositories per status tier."""
    summary = OrganizationSummary()
    for score in scores:
        if score.failed:
            continue
        if score.status == HealthStatus.HEALTHY:
            summary.healthy += 1
        elif score.status == HealthStatus.WARNING:
            summary.warning += 1
        elif score.status == HealthStatus.CRITICAL:
            summary.critical += 1
        summary.total += 1
    return summary


class MultiRepositoryAnalyzer:
    """
    Coordinates the backlog analysis of an organization's repositories.

    Attributes:
        miner (RepositoryMiner): Source of repository names and open issues.
        scorer (RepositoryScorer): Scores one repository's issues.
        max_concurrency (int): Repositories fetched and scored at the same time.
    """

    def __init__(
        self,
        miner: RepositoryMiner,
        scorer: RepositoryScorer,
        max_concurrency: int = 1,
    ):
        """Initialize the multi-repository analyzer.

        Args:
            miner (RepositoryMiner): Source of repository names and open issues.
            scorer (RepositoryScorer): Scores one repository's issues.
            max_concurrency (int): Upper bound on concurrent repositories.
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.miner = miner
        self.scorer = scorer
        self.max_concurrency = max_concurrency

    @property
    def config(self) -> ScoringConfig:
        return ScoringConfig(
            min_issues=self.scorer.min_issues, stale_days=self.scorer.stale_days
        )

    async def _analyze_repository(
        self, org: str, repo_name: str, semaphore: asyncio.Semaphore
    ) -> RepositoryScore:
        """Fetch and score one repository, turning failures into data."""
        async with semaphore:
            logger.info({"message": "Analyzing repository", "repository": repo_name})
            try:
                issues = await self.miner.list_open_issues(org, repo_name)
                score = self.scorer.score_repository(repo_name, issues)
            except Exception as e:
                message = error_message(e)
                logger.warning(
                    {
                        "message": "Repository analysis error",
                        "repository": repo_name,
                        "error": message,
                    }
                )
                return RepositoryScore(name=repo_name, error=message)

        logger.info(
            {
                "message": "Repository analysis complete",
                "repository": repo_name,
                "health_score": score.health_score,
                "status": score.status.value,
                "total_open": score.total_open,
                "stale_count": score.stale_count,
            }
        )
        return score

    async def analyze_repositories(
        self, org: str, repo_names: Sequence[str]
    ) -> BacklogReport:
        """
        Score the given repositories of an organization.

        Args:
            org (str): Organization or owner login.
            repo_names (Sequence[str]): Repositories to analyze, in listing order.

        Returns:
            BacklogReport: Ordered scores and status tier summary.

        Note:
            A failure to fetch one repository's issues is recorded on that
            repository's entry and never affects the others.
        """
        generated_at = datetime.now(timezone.utc).replace(microsecond=0)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        # gather keeps input order regardless of completion order
        scores = await asyncio.gather(
            *(
                self._analyze_repository(org, repo_name, semaphore)
                for repo_name in repo_names
            )
        )

        repos = sort_repository_scores(scores)
        summary = summarize(repos)

        logger.info(
            {
                "message": "Completed",
                "total": summary.total,
                "healthy": summary.healthy,
                "warning": summary.warning,
                "critical": summary.critical,
            }
        )

        return BacklogReport(
            generated_at=generated_at,
            org=org,
            config=self.config,
            repos=repos,
            summary=summary,
        )

    async def analyze_organization(self, org: str) -> BacklogReport:
        """
        List the organization's repositories and score all of them.

        Raises:
            MinerError: If the repositories cannot be listed. No partial report
                is produced in that case.
        """
        logger.info({"message": "Scanning repositories", "org": org})
        repo_names = await self.miner.list_repositories(org)
        logger.info(
            {"message": "Repository scan complete", "org": org, "count": len(repo_names)}
        )
        return await self.analyze_repositories(org, repo_names)
