import pytest
from pydantic import ValidationError

from config import Settings

TOKEN_VARS = ("GITHUB_TOKEN", "GH_TOKEN", "FAB_BACKLOG_GITHUB_TOKEN")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in TOKEN_VARS:
        monkeypatch.delenv(var, raising=False)
    for var in ("FAB_BACKLOG_ORG", "FAB_BACKLOG_MIN_ISSUES", "FAB_BACKLOG_STALE_DAYS"):
        monkeypatch.delenv(var, raising=False)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.org == "misty-step"
    assert settings.min_issues == 5
    assert settings.stale_days == 90
    assert settings.source == "gh"
    assert settings.max_concurrency == 4
    assert settings.scoring.min_issues == 5
    assert settings.scoring.stale_days == 90


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("FAB_BACKLOG_ORG", "acme")
    monkeypatch.setenv("FAB_BACKLOG_MIN_ISSUES", "7")
    monkeypatch.setenv("FAB_BACKLOG_STALE_DAYS", "30")

    settings = Settings(_env_file=None)

    assert settings.org == "acme"
    assert settings.min_issues == 7
    assert settings.stale_days == 30


def test_arguments_take_precedence_over_environment(monkeypatch):
    monkeypatch.setenv("FAB_BACKLOG_ORG", "acme")

    settings = Settings(_env_file=None, org="other")

    assert settings.org == "other"


@pytest.mark.parametrize("org", ["", "   "])
def test_empty_org_rejected(org):
    with pytest.raises(ValidationError, match="org required"):
        Settings(_env_file=None, org=org)


def test_org_is_stripped():
    assert Settings(_env_file=None, org=" acme ").org == "acme"


@pytest.mark.parametrize(
    "field, value",
    [("min_issues", -1), ("stale_days", -1), ("max_concurrency", 0)],
)
def test_negative_values_rejected(field, value):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: value})


def test_api_source_requires_token():
    with pytest.raises(ValidationError, match="github_token"):
        Settings(_env_file=None, source="api")


def test_api_source_reads_github_token(monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "ghp_secret")

    settings = Settings(_env_file=None, source="api")

    assert settings.github_token.get_secret_value() == "ghp_secret"
    assert "ghp_secret" not in repr(settings)


def test_quiet_raises_log_level():
    assert Settings(_env_file=None).effective_log_level == 20
    assert Settings(_env_file=None, quiet=True).effective_log_level == 40
