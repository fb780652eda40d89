"""
Repository Mining Data Models.

Defines the common data models used across different repository mining implementations.
Uses Pydantic for validation and serialization.
"""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, field_validator


class RepositoryIssueData(BaseModel):
    """Raw open issue data from repository."""

    model_config = ConfigDict(frozen=True)

    issue_number: int
    title: str
    created_at: datetime
    updated_at: datetime
    labels: List[str]

    @field_validator("labels")
    def unique_labels(cls, v: List[str]) -> List[str]:
        # Label names form a set; keep first occurrence order for readability.
        return list(dict.fromkeys(v))

    @classmethod
    def from_gh(cls, raw: Dict[str, Any]) -> "RepositoryIssueData":
        """Build an issue from one entry of ``gh issue list --json`` output.

        Args:
            raw (Dict[str, Any]): Object with number, title, createdAt,
                updatedAt and labels ([{"name": ...}]) keys.

        Returns:
            RepositoryIssueData: Parsed issue.
        """
        return cls(
            issue_number=raw["number"],
            title=raw["title"],
            created_at=raw["createdAt"],
            updated_at=raw["updatedAt"],
            labels=[label["name"] for label in raw.get("labels") or []],
        )


class RepositoryInfo(BaseModel):
    """Repository entry as listed for an organization."""

    name: str
    is_archived: bool = False

    @classmethod
    def from_gh(cls, raw: Dict[str, Any]) -> "RepositoryInfo":
        return cls(name=raw["name"], is_archived=raw.get("isArchived", False))
