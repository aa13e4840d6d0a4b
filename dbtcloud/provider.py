from __future__ import annotations

from dbtcloud.client import DbtCloudClient
from dbtcloud.config.settings import Settings, get_settings
from dbtcloud.errors import PermanentError
from dbtcloud.resources.repository import RepositoryResource


class Provider:
    """Owns the dbt Cloud client and the resources that share it."""

    def __init__(self, client: DbtCloudClient) -> None:
        self.client = client
        self._resources: dict[str, RepositoryResource] = {
            RepositoryResource.type_name: RepositoryResource(client),
        }

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Provider:
        settings = settings or get_settings()
        if not settings.DBT_CLOUD_ACCOUNT_ID or not settings.DBT_CLOUD_TOKEN:
            raise PermanentError("DBT_CLOUD_ACCOUNT_ID and DBT_CLOUD_TOKEN must be set")
        return cls(DbtCloudClient.from_settings(settings))

    @property
    def resource_types(self) -> list[str]:
        return sorted(self._resources)

    def resource(self, type_name: str) -> RepositoryResource:
        """Return the resource registered under *type_name*."""
        try:
            return self._resources[type_name]
        except KeyError:
            raise PermanentError(f"Unsupported resource type: {type_name!r}") from None
