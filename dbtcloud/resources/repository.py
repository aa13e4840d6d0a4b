"""The ``dbtcloud_repository`` resource.

Maps :class:`RepositoryConfig` records onto dbt Cloud repositories and back.
The resource is identified by ``"<project_id>:<repository_id>"``.
"""

from __future__ import annotations

import logging
from typing import Any

from dbtcloud.client import DbtCloudClient
from dbtcloud.config.telemetry import set_correlation_context
from dbtcloud.errors import PermanentError, is_not_found
from dbtcloud.models.repository import Repository, State
from dbtcloud.resources.schemas import RepositoryConfig, RepositoryData

logger = logging.getLogger(__name__)

RESOURCE_TYPE = "dbtcloud_repository"
ID_DELIMITER = ":"

# dbt Cloud never returns these, so the stored values are kept on read.
LOCAL_ONLY_FIELDS = (
    "gitlab_project_id",
    "azure_active_directory_project_id",
    "azure_active_directory_repository_id",
    "azure_bypass_webhook_registration_failure",
)


# ---------------------------------------------------------------------------
# Identifier helpers
# ---------------------------------------------------------------------------


def make_id(project_id: int, repository_id: int) -> str:
    return f"{project_id}{ID_DELIMITER}{repository_id}"


def split_id(resource_id: str) -> tuple[str, str]:
    """Split a composite id into ``(project_id, repository_id)`` strings.

    Raises:
        PermanentError: If *resource_id* is not two decimal integers joined
            by :data:`ID_DELIMITER`.
    """
    parts = resource_id.split(ID_DELIMITER)
    if len(parts) != 2 or not all(part.isdecimal() for part in parts):
        raise PermanentError(
            f"Invalid {RESOURCE_TYPE} id {resource_id!r}, "
            f"expected <project_id>{ID_DELIMITER}<repository_id>"
        )
    return parts[0], parts[1]


# ---------------------------------------------------------------------------
# Merge policy
# ---------------------------------------------------------------------------


def remote_fields(repository: Repository) -> dict[str, Any]:
    """Return the record fields dbt Cloud reports for *repository*."""
    return {
        "repository_id": repository.id,
        "is_active": repository.state == State.ACTIVE,
        "project_id": repository.project_id,
        "remote_url": repository.remote_url,
        "git_clone_strategy": repository.git_clone_strategy,
        "repository_credentials_id": repository.repository_credentials_id,
        "github_installation_id": repository.github_installation_id,
        "deploy_key": repository.public_key,
    }


def merge_remote(data: RepositoryData, repository: Repository) -> RepositoryData:
    """Apply *repository* to *data* as a partial patch.

    Fields outside :func:`remote_fields` (``id``, ``fetch_deploy_key`` and
    :data:`LOCAL_ONLY_FIELDS`) keep their current values. The merged record
    is validated, so a malformed response raises ``ValidationError``.
    """
    return RepositoryData.model_validate({**data.model_dump(), **remote_fields(repository)})


# ---------------------------------------------------------------------------
# Resource
# ---------------------------------------------------------------------------


class RepositoryResource:
    """CRUD adapter between :class:`RepositoryData` and the dbt Cloud API."""

    type_name = RESOURCE_TYPE

    def __init__(self, client: DbtCloudClient) -> None:
        self._client = client

    async def create(self, config: RepositoryConfig) -> RepositoryData:
        set_correlation_context(resource_type=RESOURCE_TYPE, resource_id="", operation="create")

        repository = await self._client.create_repository(
            config.project_id,
            config.remote_url,
            config.is_active,
            config.git_clone_strategy,
            config.gitlab_project_id,
            config.github_installation_id,
            config.azure_active_directory_project_id,
            config.azure_active_directory_repository_id,
            config.azure_bypass_webhook_registration_failure,
        )
        if repository.id is None:
            raise PermanentError("dbt Cloud returned a repository without an id")

        resource_id = make_id(repository.project_id, repository.id)
        set_correlation_context(resource_id=resource_id)
        logger.info("Created %s %s", RESOURCE_TYPE, resource_id)

        data = RepositoryData(id=resource_id, **config.model_dump())
        return await self.read(data)

    async def read(self, data: RepositoryData) -> RepositoryData:
        """Refresh *data* from dbt Cloud.

        A repository deleted out of band comes back with an empty ``id``
        instead of raising.
        """
        set_correlation_context(resource_type=RESOURCE_TYPE, resource_id=data.id, operation="read")
        project_id, repository_id = split_id(data.id)

        try:
            repository = await self._client.get_repository(
                repository_id, project_id, data.fetch_deploy_key
            )
        except Exception as exc:
            if not is_not_found(exc):
                raise
            logger.warning("%s %s no longer exists, removing from state", RESOURCE_TYPE, data.id)
            return data.model_copy(update={"id": ""})

        return merge_remote(data, repository)

    async def update(self, data: RepositoryData, planned: RepositoryConfig) -> RepositoryData:
        """Move *data* to *planned*.

        ``is_active`` is the only field changed remotely. The current record
        is fetched and posted back whole with the new state.

        Raises:
            PermanentError: If *planned* changes a field that requires
                replacing the repository.
        """
        set_correlation_context(resource_type=RESOURCE_TYPE, resource_id=data.id, operation="update")
        project_id, repository_id = split_id(data.id)

        replaced = self.requires_replacement(data, planned)
        if replaced:
            raise PermanentError(
                f"{RESOURCE_TYPE} {data.id} cannot be updated in place, "
                f"changed fields require replacement: {', '.join(replaced)}"
            )

        if planned.is_active != data.is_active:
            repository = await self._client.get_repository(
                repository_id, project_id, planned.fetch_deploy_key
            )
            state = State.ACTIVE if planned.is_active else State.DELETED
            repository = repository.model_copy(update={"state": state})
            await self._client.update_repository(repository_id, project_id, repository)
            logger.info("Set %s %s state to %s", RESOURCE_TYPE, data.id, state.name)

        merged = RepositoryData.model_validate({**data.model_dump(), **planned.model_dump()})
        return await self.read(merged)

    async def delete(self, data: RepositoryData) -> None:
        set_correlation_context(resource_type=RESOURCE_TYPE, resource_id=data.id, operation="delete")
        project_id, repository_id = split_id(data.id)

        await self._client.delete_repository(repository_id, project_id)
        logger.info("Deleted %s %s", RESOURCE_TYPE, data.id)

    async def import_state(self, resource_id: str) -> RepositoryData:
        """Adopt an existing repository by its composite id, used verbatim."""
        set_correlation_context(resource_type=RESOURCE_TYPE, resource_id=resource_id, operation="import")
        project_id, _ = split_id(resource_id)

        data = RepositoryData(id=resource_id, project_id=int(project_id), remote_url="")
        return await self.read(data)

    @staticmethod
    def requires_replacement(data: RepositoryData, planned: RepositoryConfig) -> list[str]:
        """Return the ForceNew fields whose planned value differs from *data*."""
        return [
            name
            for name in RepositoryConfig.force_new_fields()
            if getattr(data, name) != getattr(planned, name)
        ]
