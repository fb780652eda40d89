"""
GitHub API Repository Miner.

Retrieves repositories and open issues through the GitHub REST API using PyGithub.
PyGithub is blocking, so every call is pushed to a worker thread to keep the
event loop free for concurrent repositories.
"""

import asyncio
from datetime import datetime, timezone
from typing import List

import requests
from github import Auth, Github, GithubException, UnknownObjectException
from github.Issue import Issue

from logger import get_logger
from miners.base import MinerError, RepositoryMiner
from miners.models import RepositoryIssueData

logger = get_logger(__name__)


class GitHubMiner(RepositoryMiner):
    """
    GitHubMiner lists repositories and open issues via the GitHub REST API,
    transforming them into Pydantic models.
    """

    def __init__(
        self,
        github_token: str,
        repo_limit: int = 100,
        issue_limit: int = 100,
        github: Github = None,
    ):
        """Initialize GitHub miner with authentication and configuration.

        Args:
            github_token (str): GitHub API token for authentication.
            repo_limit (int): Maximum repositories listed per organization.
            issue_limit (int): Maximum open issues fetched per repository.
            github (Github): Preconfigured client, used instead of the token.
        """
        self.github = github or Github(auth=Auth.Token(github_token))
        self.repo_limit = repo_limit
        self.issue_limit = issue_limit

    def _check_rate_limit(self, check_name: str = None) -> None:
        """
        Check and log the GitHub API rate limit status.

        Args:
            check_name (Optional[str]): Identifier for the rate limit check point.

        Raises:
            MinerError: Raised when the rate limit is exhausted, indicating time until reset.
        """
        overview = self.github.get_rate_limit()
        # Newer PyGithub nests the buckets under "resources".
        rate_limit = getattr(overview, "resources", overview).core
        remaining = rate_limit.remaining
        reset_time = rate_limit.reset.replace(tzinfo=timezone.utc)
        now = datetime.now(timezone.utc)

        logger.debug(
            {
                "message": f"{check_name} API rate limit status",
                "remaining_points": remaining,
                "total_points": rate_limit.limit,
                "reset_time": reset_time.isoformat(),
            }
        )

        # If less than 10% of rate limit remains, log a warning
        if 0 < remaining < (rate_limit.limit * 0.1):
            logger.warning(
                {
                    "message": "GitHub API rate limit running low",
                    "remaining_points": remaining,
                    "reset_time": reset_time.isoformat(),
                }
            )

        if remaining == 0:
            wait_time = (reset_time - now).total_seconds()
            raise MinerError(
                f"GitHub API rate limit exhausted. Resets in {wait_time/60:.1f} minutes"
            )

    def _get_issue_data(self, issue: Issue) -> RepositoryIssueData:
        """Convert a GitHub Issue object to a Pydantic model.

        Args:
            issue (Issue): The GitHub Issue object.

        Returns:
            RepositoryIssueData: A Pydantic model representing the issue data.
        """
        return RepositoryIssueData(
            issue_number=issue.number,
            title=issue.title,
            created_at=issue.created_at,
            updated_at=issue.updated_at,
            labels=[label.name for label in issue.labels],
        )

    def _list_repositories(self, org: str) -> List[str]:
        self._check_rate_limit("Repository listing")
        try:
            owner = self.github.get_organization(org)
        except UnknownObjectException:
            # Not an organization; fall back to a user account.
            owner = self.github.get_user(org)

        names = []
        for repo in owner.get_repos():
            if len(names) >= self.repo_limit:
                break
            if not repo.archived:
                names.append(repo.name)
        return names

    def _list_open_issues(self, org: str, repo_name: str) -> List[RepositoryIssueData]:
        self._check_rate_limit("Issue listing")
        repo = self.github.get_repo(f"{org}/{repo_name}")
        issues = []
        for issue in repo.get_issues(state="open"):
            if len(issues) >= self.issue_limit:
                break
            # The issues endpoint also returns pull requests.
            if issue.pull_request is not None:
                continue
            issues.append(self._get_issue_data(issue))
        return issues

    async def list_repositories(self, org: str) -> List[str]:
        if not org.strip():
            raise MinerError("org required")
        try:
            return await asyncio.to_thread(self._list_repositories, org)
        except (GithubException, requests.RequestException) as e:
            raise MinerError(f"list repositories for {org}: {e}") from e

    async def list_open_issues(
        self, org: str, repo_name: str
    ) -> List[RepositoryIssueData]:
        try:
            return await asyncio.to_thread(self._list_open_issues, org, repo_name)
        except (GithubException, requests.RequestException) as e:
            raise MinerError(f"list issues for {org}/{repo_name}: {e}") from e
