"""Wire models for the dbt Cloud v3 repositories endpoints."""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class State(IntEnum):
    """Lifecycle state dbt Cloud attaches to every object."""

    ACTIVE = 1
    DELETED = 2


class DeployKey(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | None = None
    public_key: str = ""

    @field_validator("public_key", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class Repository(BaseModel):
    """A repository as returned by dbt Cloud.

    Keys the API sends that are not modelled here are kept, so a fetched
    record can be posted back unchanged.
    """

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    account_id: int | None = None
    project_id: int
    remote_url: str = ""
    git_clone_strategy: str = "deploy_key"
    repository_credentials_id: int | None = None
    gitlab_project_id: int | None = None
    github_installation_id: int | None = None
    state: State = State.ACTIVE
    deploy_key: DeployKey | None = None

    @field_validator("remote_url", mode="before")
    @classmethod
    def _null_url_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("state", mode="before")
    @classmethod
    def _coerce_state_name(cls, value: Any) -> Any:
        if isinstance(value, str):
            if value.isdigit():
                return int(value)
            try:
                return State[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown repository state {value!r}") from None
        return value

    @property
    def public_key(self) -> str:
        return self.deploy_key.public_key if self.deploy_key is not None else ""
