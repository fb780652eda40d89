"""
Abstract Base Class for Repository Miners.

Defines the interface for repository data mining implementations.
All repository miners (gh CLI, GitHub API, in-memory fakes) implement this interface.
"""

from abc import ABC, abstractmethod
from typing import List

from miners.models import RepositoryIssueData


class MinerError(Exception):
    """Raised when repository or issue data cannot be retrieved."""


class RepositoryMiner(ABC):
    """
    Abstract base class for repository miners.

    Defines the contract for listing an organization's repositories and the open
    issues of one repository. Implementations should handle:
    - Authentication with the repository service
    - Data extraction
    - Data transformation to common models

    Any transport, authentication or parse failure must surface as a single
    ``MinerError`` carrying a human-readable message. Miners do not retry.
    """

    @abstractmethod
    async def list_repositories(self, org: str) -> List[str]:
        """
        List the names of the organization's non-archived repositories.

        Args:
            org (str): Organization or owner login

        Returns:
            List[str]: Repository names in the order the service returns them

        Raises:
            MinerError: If the repositories cannot be listed
        """
        pass

    @abstractmethod
    async def list_open_issues(
        self, org: str, repo_name: str
    ) -> List[RepositoryIssueData]:
        """
        Fetch the open issues of one repository, up to the miner's page limit.

        Args:
            org (str): Organization or owner login
            repo_name (str): Repository name without the owner prefix

        Returns:
            List[RepositoryIssueData]: Open issues

        Raises:
            MinerError: If the issues cannot be fetched
        """
        pass
