"""
Application Configuration Module.

Manages application settings and environment variables using Pydantic for validation.
Settings are built once by the entry point and passed down to the components that
need them; nothing in the scoring core reads configuration on its own.

Features:
- Environment variable and .env file loading
- Validation of the organization name and scoring thresholds
- Secure credential management for the GitHub API source
"""

from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from analyzers.models import ScoringConfig


class Settings(BaseSettings):
    """
    Application configuration settings with validation.

    Attributes:
        app_name (str): Name of the application, used for the logger name
        org (str): GitHub organization or owner to scan
        min_issues (int): Open issue count that earns the volume bonus
        stale_days (int): Days without update after which an issue is stale
        quiet (bool): Only emit error logs
        json_logs (bool): Emit logs as JSON lines instead of text
        log_level (int): Logging level when not quiet
        log_dir (Optional[str]): Directory for an additional log file
        source (str): Issue data source, "gh" CLI or "api" (PyGithub)
        github_token (Optional[SecretStr]): Token for the "api" source
        max_concurrency (int): Repositories fetched at the same time
    """

    # Application settings
    app_name: str = Field(default="fab-backlog", description="Application name")
    dev: bool = Field(default=False, description="Debug mode")

    # Scan target and scoring policy
    org: str = Field(default="misty-step", description="GitHub org/owner to scan")
    min_issues: int = Field(
        default=5, ge=0, description="Minimum issues threshold for health score"
    )
    stale_days: int = Field(default=90, ge=0, description="Stale threshold in days")

    # Logging
    quiet: bool = Field(default=False, description="Suppress info/warn logs")
    json_logs: bool = Field(default=False, description="Emit logs as JSON")
    log_level: int = Field(default=20, description="Logging level, default info")
    log_dir: Optional[str] = Field(default=None, description="Optional log directory")

    # Data source
    source: Literal["gh", "api"] = Field(default="gh", description="Issue data source")
    gh_binary: str = Field(default="gh", description="Path to the gh executable")
    github_token: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices(
            "fab_backlog_github_token", "github_token", "gh_token"
        ),
        description="GitHub token for the api source",
    )
    repo_limit: int = Field(default=100, ge=1, description="Repositories per org")
    issue_limit: int = Field(default=100, ge=1, description="Open issues per repo")
    command_timeout: Optional[float] = Field(
        default=None, gt=0, description="Per gh command timeout in seconds"
    )

    max_concurrency: int = Field(
        default=4, ge=1, description="Repositories analyzed concurrently"
    )

    @field_validator("org")
    def ensure_org(cls, v: str) -> str:
        """
        Reject an empty organization name.

        Args:
            v (str): Organization name to validate

        Returns:
            str: Organization name without surrounding whitespace
        """
        v = v.strip()
        if not v:
            raise ValueError("org required")
        return v

    @model_validator(mode="after")
    def ensure_token_for_api(self) -> "Settings":
        if self.source == "api" and self.github_token is None:
            raise ValueError("github_token is required when source is 'api'")
        return self

    @property
    def scoring(self) -> ScoringConfig:
        """Scoring thresholds as passed to the analyzers."""
        return ScoringConfig(min_issues=self.min_issues, stale_days=self.stale_days)

    @property
    def effective_log_level(self) -> int:
        """Logging level after applying the quiet flag."""
        return 40 if self.quiet else self.log_level

    # Configure env file loading
    model_config = SettingsConfigDict(
        env_prefix="fab_backlog_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra fields in .env file
        populate_by_name=True,
    )
