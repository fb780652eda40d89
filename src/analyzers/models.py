"""
Backlog Analysis Data Models.

Defines the scoring results and the organization report. Field names serialize
to camelCase so the JSON report keeps its established shape.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


class HealthStatus(Enum):
    """
    Status tier derived from a health score.

    Attributes:
        HEALTHY: Score of 70 or more
        WARNING: Score from 40 to 69
        CRITICAL: Score below 40
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScoringConfig(_CamelModel):
    """Scoring thresholds used for a run."""

    min_issues: int = Field(ge=0)
    stale_days: int = Field(ge=0)


class RepositoryScore(_CamelModel):
    """
    Backlog health of a single repository.

    When ``error`` is set the issue list could not be fetched: the counters keep
    their zero defaults, ``status`` stays unset, and none of them are meaningful.
    """

    name: str
    total_open: int = 0
    stale_count: int = 0
    stale_percent: float = 0.0
    unlabeled_count: int = 0
    unlabeled_percent: float = Field(default=0.0, exclude=True)
    health_score: int = 0
    status: Optional[HealthStatus] = None
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class OrganizationSummary(_CamelModel):
    """Repository counts per status tier, successfully scored repositories only."""

    total: int = 0
    healthy: int = 0
    warning: int = 0
    critical: int = 0


class BacklogReport(_CamelModel):
    """Backlog health report for an organization."""

    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc).replace(microsecond=0)
    )
    org: str
    config: ScoringConfig
    repos: List[RepositoryScore] = Field(default_factory=list)
    summary: OrganizationSummary = Field(default_factory=OrganizationSummary)

    @field_serializer("generated_at")
    def serialize_generated_at(self, value: datetime) -> str:
        # RFC 3339, second precision, UTC designator.
        return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
