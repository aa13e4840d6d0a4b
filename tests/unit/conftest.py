"""Shared fixtures for the repository resource tests.

Provides factory helpers for dbt Cloud repository records and a mocked
:class:`DbtCloudClient`.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from dbtcloud.client import DbtCloudClient
from dbtcloud.models.repository import DeployKey, Repository, State
from dbtcloud.resources.schemas import RepositoryConfig, RepositoryData

# ---------------------------------------------------------------------------
# Stable IDs used across tests
# ---------------------------------------------------------------------------

PROJECT_ID = 10
REPOSITORY_ID = 55
CREDENTIALS_ID = 99
RESOURCE_ID = "10:55"
REMOTE_URL = "git@example.com:org/repo.git"
PUBLIC_KEY = "ssh-rsa AAAAB3NzaC1yc2E example"


# ---------------------------------------------------------------------------
# Factory helpers
# ---------------------------------------------------------------------------


def make_repository(
    *,
    repository_id: int = REPOSITORY_ID,
    project_id: int = PROJECT_ID,
    remote_url: str = REMOTE_URL,
    git_clone_strategy: str = "deploy_key",
    state: State = State.ACTIVE,
    repository_credentials_id: int | None = CREDENTIALS_ID,
    github_installation_id: int | None = None,
    public_key: str | None = None,
    **extra: object,
) -> Repository:
    """Return a repository record as the API client would."""
    return Repository(
        id=repository_id,
        account_id=1,
        project_id=project_id,
        remote_url=remote_url,
        git_clone_strategy=git_clone_strategy,
        state=state,
        repository_credentials_id=repository_credentials_id,
        github_installation_id=github_installation_id,
        deploy_key=DeployKey(public_key=public_key) if public_key is not None else None,
        **extra,
    )


def make_config(**overrides: object) -> RepositoryConfig:
    values: dict[str, object] = {"project_id": PROJECT_ID, "remote_url": REMOTE_URL}
    values.update(overrides)
    return RepositoryConfig(**values)


def make_data(**overrides: object) -> RepositoryData:
    values: dict[str, object] = {
        "id": RESOURCE_ID,
        "project_id": PROJECT_ID,
        "remote_url": REMOTE_URL,
        "repository_id": REPOSITORY_ID,
        "repository_credentials_id": CREDENTIALS_ID,
    }
    values.update(overrides)
    return RepositoryData(**values)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def client() -> AsyncMock:
    """A mocked dbt Cloud client returning an active repository by default."""
    mock = AsyncMock(spec=DbtCloudClient)
    mock.create_repository = AsyncMock(return_value=make_repository())
    mock.get_repository = AsyncMock(return_value=make_repository())
    mock.update_repository = AsyncMock(side_effect=lambda rid, pid, repo: repo)
    mock.delete_repository = AsyncMock(return_value=None)
    return mock
