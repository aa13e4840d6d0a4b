from __future__ import annotations

import logging
from typing import Any

import httpx
from opentelemetry import trace

from dbtcloud.config.settings import Settings
from dbtcloud.errors import NotFoundError, PermanentError, TransientError
from dbtcloud.models.repository import Repository, State

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

_ADO_STRATEGY = "azure_active_directory_app"


class DbtCloudClient:
    """Async client for the dbt Cloud v3 repositories endpoints.

    Each call opens its own ``httpx.AsyncClient``; calls are never retried.
    """

    def __init__(
        self,
        *,
        account_id: int,
        token: str,
        host_url: str = "https://cloud.getdbt.com/api",
        timeout: float = 30.0,
    ) -> None:
        self.account_id = account_id
        self._token = token
        self._host_url = host_url.rstrip("/")
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> DbtCloudClient:
        return cls(
            account_id=settings.DBT_CLOUD_ACCOUNT_ID,
            token=settings.DBT_CLOUD_TOKEN,
            host_url=settings.api_base_url(),
            timeout=settings.DBT_CLOUD_TIMEOUT,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "Authorization": f"Token {self._token}",
        }

    def _repositories_url(self, project_id: int | str, repository_id: int | str | None = None) -> str:
        url = f"{self._host_url}/v3/accounts/{self.account_id}/projects/{project_id}/repositories/"
        if repository_id is not None:
            url = f"{url}{repository_id}/"
        return url

    async def _request(
        self,
        method: str,
        url: str,
        *,
        operation: str,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """Send one request and return the ``data`` member of the response body."""
        with tracer.start_as_current_span(f"dbtcloud.{operation}") as span:
            span.set_attribute("http.method", method)
            span.set_attribute("http.url", url)
            try:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    resp = await client.request(
                        method,
                        url,
                        headers=self._headers(),
                        json=json,
                        params=params,
                    )
            except (httpx.TimeoutException, httpx.TransportError) as exc:
                raise TransientError(f"dbt Cloud {operation} failed: {exc}") from exc

            span.set_attribute("http.status_code", resp.status_code)

            if resp.status_code == 404:
                raise NotFoundError(f"{operation} {url}: {resp.text}")

            if resp.status_code >= 500:
                raise TransientError(f"dbt Cloud API server error ({resp.status_code}): {resp.text}")

            if resp.status_code >= 400:
                raise PermanentError(f"dbt Cloud API client error ({resp.status_code}): {resp.text}")

            logger.debug("%s %s -> %d", method, url, resp.status_code)

            if not resp.content:
                return {}
            body = resp.json()
            data = body.get("data") if isinstance(body, dict) else None
            return data if isinstance(data, dict) else {}

    # ------------------------------------------------------------------ #
    # create_repository
    # ------------------------------------------------------------------ #
    async def create_repository(
        self,
        project_id: int,
        remote_url: str,
        is_active: bool,
        git_clone_strategy: str,
        gitlab_project_id: int | None,
        github_installation_id: int | None,
        azure_active_directory_project_id: str,
        azure_active_directory_repository_id: str,
        azure_bypass_webhook_registration_failure: bool,
    ) -> Repository:
        payload: dict[str, Any] = {
            "account_id": self.account_id,
            "project_id": project_id,
            "remote_url": remote_url,
            "state": int(State.ACTIVE if is_active else State.DELETED),
            "git_clone_strategy": git_clone_strategy,
        }
        if gitlab_project_id:
            payload["gitlab_project_id"] = gitlab_project_id
        if github_installation_id:
            payload["github_installation_id"] = github_installation_id
        if git_clone_strategy == _ADO_STRATEGY:
            payload["azure_active_directory_project_id"] = azure_active_directory_project_id
            payload["azure_active_directory_repository_id"] = azure_active_directory_repository_id
            payload["azure_bypass_webhook_registration_failure"] = (
                azure_bypass_webhook_registration_failure
            )

        data = await self._request(
            "POST",
            self._repositories_url(project_id),
            operation="create_repository",
            json=payload,
        )
        repository = Repository.model_validate(data)
        logger.info(
            "Created repository %s in project %d (strategy=%s)",
            repository.id,
            project_id,
            git_clone_strategy,
        )
        return repository

    # ------------------------------------------------------------------ #
    # get_repository
    # ------------------------------------------------------------------ #
    async def get_repository(
        self,
        repository_id: str,
        project_id: str,
        fetch_deploy_key: bool,
    ) -> Repository:
        params = {"include_related": '["deploy_key"]'} if fetch_deploy_key else None
        data = await self._request(
            "GET",
            self._repositories_url(project_id, repository_id),
            operation="get_repository",
            params=params,
        )
        return Repository.model_validate(data)

    # ------------------------------------------------------------------ #
    # update_repository
    # ------------------------------------------------------------------ #
    async def update_repository(
        self,
        repository_id: str,
        project_id: str,
        repository: Repository,
    ) -> Repository:
        data = await self._request(
            "POST",
            self._repositories_url(project_id, repository_id),
            operation="update_repository",
            json=repository.model_dump(mode="json", exclude_none=True),
        )
        logger.info(
            "Updated repository %s in project %s (state=%s)",
            repository_id,
            project_id,
            repository.state.name,
        )
        return Repository.model_validate(data) if data else repository

    # ------------------------------------------------------------------ #
    # delete_repository
    # ------------------------------------------------------------------ #
    async def delete_repository(self, repository_id: str, project_id: str) -> None:
        await self._request(
            "DELETE",
            self._repositories_url(project_id, repository_id),
            operation="delete_repository",
        )
        logger.info("Deleted repository %s in project %s", repository_id, project_id)
