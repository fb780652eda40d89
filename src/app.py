"""
Main Application Entry Point.

This module serves as the command-line entry point for the backlog health scanner.
It orchestrates the workflow:
- Settings resolution from flags, environment and .env
- Logging setup (stderr only)
- Miner selection (gh CLI or GitHub API)
- Organization analysis
- JSON report emission on stdout

Exit codes: 0 on success, 1 when the repositories cannot be listed, 2 when the
configuration is invalid. Every run writes exactly one JSON document to stdout.
"""

import asyncio
import sys

import click
from pydantic import ValidationError

from config import Settings
from logger import LogManager
from analyzers.models import BacklogReport
from analyzers.multi_repository import MultiRepositoryAnalyzer
from analyzers.repository import RepositoryScorer
from miners.base import MinerError, RepositoryMiner
from miners.gh_cli_miner import GhCliMiner
from miners.github_miner import GitHubMiner
from report.json_report import emit_json, render_error, render_report

__version__ = "0.1.0"


def build_miner(settings: Settings) -> RepositoryMiner:
    """Create the miner for the configured data source."""
    if settings.source == "api":
        return GitHubMiner(
            settings.github_token.get_secret_value(),
            repo_limit=settings.repo_limit,
            issue_limit=settings.issue_limit,
        )
    return GhCliMiner(
        gh_binary=settings.gh_binary,
        repo_limit=settings.repo_limit,
        issue_limit=settings.issue_limit,
        timeout=settings.command_timeout,
    )


async def run(settings: Settings) -> BacklogReport:
    """
    Execute the analysis for the configured organization.

    Raises:
        MinerError: If the organization's repositories cannot be listed.
    """
    scoring = settings.scoring
    analyzer = MultiRepositoryAnalyzer(
        build_miner(settings),
        RepositoryScorer(scoring.min_issues, scoring.stale_days),
        max_concurrency=settings.max_concurrency,
    )
    return await analyzer.analyze_organization(settings.org)


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(problems)


@click.command()
@click.option("--org", default=None, help="GitHub org/owner to scan.")
@click.option(
    "--min-issues",
    type=int,
    default=None,
    help="Minimum issues threshold for health score.",
)
@click.option("--stale-days", type=int, default=None, help="Stale threshold in days.")
@click.option(
    "--quiet", is_flag=True, help="Suppress info/warn logs (only errors shown)."
)
@click.option(
    "--json-logs", is_flag=True, help="Emit logs as JSON (default: text)."
)
@click.option(
    "--source",
    type=click.Choice(["gh", "api"]),
    default=None,
    help="Issue data source: gh CLI or GitHub API.",
)
@click.option(
    "--concurrency",
    type=int,
    default=None,
    help="Repositories analyzed concurrently.",
)
@click.version_option(version=__version__, prog_name="fab-backlog")
def main(org, min_issues, stale_days, quiet, json_logs, source, concurrency):
    """Score the issue backlog health of every repository in an organization."""
    overrides = {
        "org": org,
        "min_issues": min_issues,
        "stale_days": stale_days,
        "source": source,
        "max_concurrency": concurrency,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if quiet:
        overrides["quiet"] = True
    if json_logs:
        overrides["json_logs"] = True

    try:
        settings = Settings(**overrides)
    except ValidationError as e:
        message = f"invalid configuration: {_describe_validation_error(e)}"
        click.echo(message, err=True)
        emit_json(render_error(message))
        sys.exit(2)

    logger = LogManager(
        app_name=settings.app_name,
        level=settings.effective_log_level,
        json_logs=settings.json_logs,
        log_dir=settings.log_dir,
        development=settings.dev and not settings.quiet,
    ).logger

    logger.info(
        {
            "message": "fab-backlog starting",
            "org": settings.org,
            "min_issues": settings.min_issues,
            "stale_days": settings.stale_days,
            "source": settings.source,
        }
    )

    try:
        report = asyncio.run(run(settings))
    except MinerError as e:
        logger.error(
            {"message": "Failed to list repos", "org": settings.org, "error": str(e)}
        )
        emit_json(render_error(f"failed to list repos: {e}"))
        sys.exit(1)
    except Exception as e:
        logger.exception({"message": "Analysis failed", "org": settings.org})
        emit_json(render_error(f"analysis failed: {str(e) or type(e).__name__}"))
        sys.exit(1)

    emit_json(render_report(report))


if __name__ == "__main__":
    main()
