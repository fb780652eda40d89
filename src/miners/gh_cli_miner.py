"""
GitHub CLI Repository Miner.

Retrieves repositories and open issues by invoking the ``gh`` command-line tool
as a subprocess. Authentication is whatever ``gh`` is logged in with; the
process inherits the current environment.
"""

import asyncio
import json
import os
from typing import List, Optional

from logger import get_logger
from miners.base import MinerError, RepositoryMiner
from miners.models import RepositoryInfo, RepositoryIssueData

logger = get_logger(__name__)

ISSUE_FIELDS = "number,title,createdAt,updatedAt,labels"


class GhCliMiner(RepositoryMiner):
    """
    Repository miner backed by the ``gh`` CLI.

    Attributes:
        gh_binary (str): Executable to run.
        repo_limit (int): ``--limit`` passed to ``gh repo list``.
        issue_limit (int): ``--limit`` passed to ``gh issue list``.
        timeout (Optional[float]): Seconds before a command is killed.
    """

    def __init__(
        self,
        gh_binary: str = "gh",
        repo_limit: int = 100,
        issue_limit: int = 100,
        timeout: Optional[float] = None,
    ):
        self.gh_binary = gh_binary
        self.repo_limit = repo_limit
        self.issue_limit = issue_limit
        self.timeout = timeout

    async def _run(self, *args: str) -> bytes:
        """Run ``gh`` with the given arguments and return its stdout.

        Raises:
            MinerError: If the command cannot start, times out or exits non-zero.
                The message names the command and carries its stderr, falling
                back to stdout and then to the exit reason.
        """
        command = f"{self.gh_binary} {' '.join(args)}"
        logger.debug({"message": "Running command", "command": command})
        try:
            proc = await asyncio.create_subprocess_exec(
                self.gh_binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=dict(os.environ),
            )
        except OSError as e:
            raise MinerError(f"{command}: {e}") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                proc.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            proc.kill()
            await proc.wait()
            raise MinerError(f"{command}: timed out after {self.timeout}s") from e

        if proc.returncode != 0:
            msg = stderr.decode(errors="replace").strip()
            if not msg:
                msg = stdout.decode(errors="replace").strip()
            if not msg:
                msg = f"exit status {proc.returncode}"
            raise MinerError(f"{command}: {msg}")
        return stdout

    async def list_repositories(self, org: str) -> List[str]:
        if not org.strip():
            raise MinerError("org required")
        stdout = await self._run(
            "repo", "list", org,
            "--limit", str(self.repo_limit),
            "--json", "name,isArchived",
        )  # fmt: skip
        try:
            repos = [RepositoryInfo.from_gh(raw) for raw in json.loads(stdout)]
        except (ValueError, KeyError, TypeError) as e:
            raise MinerError(f"parse gh repo list json: {e}") from e
        return [repo.name for repo in repos if not repo.is_archived]

    async def list_open_issues(
        self, org: str, repo_name: str
    ) -> List[RepositoryIssueData]:
        stdout = await self._run(
            "issue", "list",
            "--repo", f"{org}/{repo_name}",
            "--state", "open",
            "--json", ISSUE_FIELDS,
            "--limit", str(self.issue_limit),
        )  # fmt: skip
        try:
            return [RepositoryIssueData.from_gh(raw) for raw in json.loads(stdout)]
        except (ValueError, KeyError, TypeError) as e:
            raise MinerError(f"parse gh issue list json: {e}") from e
