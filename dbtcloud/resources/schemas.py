from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

GitCloneStrategy = Literal[
    "deploy_key",
    "github_app",
    "deploy_token",
    "azure_active_directory_app",
]

_FORCE_NEW = {"force_new": True}
_COMPUTED = {"computed": True}


class RepositoryConfig(BaseModel):
    """User-settable fields of a ``dbtcloud_repository`` resource."""

    model_config = ConfigDict(validate_assignment=True)

    project_id: int = Field(
        ...,
        description="Project ID to create the repository in",
        json_schema_extra=_FORCE_NEW,
    )
    remote_url: str = Field(
        ...,
        description="Git URL for the repository or <Group>/<Project> for Gitlab",
        json_schema_extra=_FORCE_NEW,
    )
    is_active: bool = Field(True, description="Whether the repository is active")
    git_clone_strategy: GitCloneStrategy = Field(
        "deploy_key",
        description=(
            "Git clone strategy for the repository. Can be `deploy_key` (default) for "
            "cloning via SSH Deploy Key, `github_app` for GitHub native integration, "
            "`deploy_token` for the GitLab native integration and "
            "`azure_active_directory_app` for ADO native integration"
        ),
        json_schema_extra=_FORCE_NEW,
    )
    gitlab_project_id: int | None = Field(
        None,
        description="Identifier for the Gitlab project (for GitLab native integration only)",
        json_schema_extra=_FORCE_NEW,
    )
    github_installation_id: int | None = Field(
        None,
        description="Identifier for the GitHub App (for GitHub native integration only)",
        json_schema_extra=_FORCE_NEW,
    )
    azure_active_directory_project_id: str = Field(
        "",
        description="The Azure Dev Ops project ID (for ADO native integration only)",
        json_schema_extra=_FORCE_NEW,
    )
    azure_active_directory_repository_id: str = Field(
        "",
        description="The Azure Dev Ops repository ID (for ADO native integration only)",
        json_schema_extra=_FORCE_NEW,
    )
    azure_bypass_webhook_registration_failure: bool = Field(
        False,
        description=(
            "If False (the default), the connection fails when the service user cannot "
            "set webhooks. If True, the connection succeeds but no automated CI job is "
            "triggered (for ADO native integration only)"
        ),
        json_schema_extra=_FORCE_NEW,
    )
    fetch_deploy_key: bool = Field(
        False,
        description="Whether we should return the public deploy key (for the `deploy_key` strategy)",
    )

    @classmethod
    def force_new_fields(cls) -> list[str]:
        """Return the fields whose change requires replacing the repository."""
        return [
            name
            for name, info in cls.model_fields.items()
            if isinstance(info.json_schema_extra, dict) and info.json_schema_extra.get("force_new")
        ]


class RepositoryData(RepositoryConfig):
    """Stored state of a ``dbtcloud_repository``: config plus identity and computed fields.

    An empty ``id`` marks the record as absent.
    """

    id: str = ""
    repository_id: int | None = Field(
        None, description="Repository Identifier", json_schema_extra=_COMPUTED
    )
    repository_credentials_id: int | None = Field(
        None,
        description="Credentials ID for the repository (From the repository side not the dbt Cloud ID)",
        json_schema_extra=_COMPUTED,
    )
    deploy_key: str = Field(
        "",
        description="Public key generated by dbt when using `deploy_key` clone strategy",
        json_schema_extra=_COMPUTED,
    )

    @property
    def is_absent(self) -> bool:
        return self.id == ""

    def config(self) -> RepositoryConfig:
        """Return only the user-settable fields of this record."""
        return RepositoryConfig.model_validate(
            self.model_dump(include=set(RepositoryConfig.model_fields))
        )
