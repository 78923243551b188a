"""HTTP client for the Quome Platform API."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, TypeVar
from uuid import UUID

import requests
from pydantic import BaseModel, ValidationError

from .config import AGENT_KIND, API_PREFIX, DEFAULT_TIMEOUT, USER_AGENT, load_settings
from .errors import InvalidResponseError, NotFoundError, TransportError, raise_for_status
from .types import (
    AgentState,
    App,
    AppList,
    CreateAppRequest,
    CreateDatabaseRequest,
    CreatedOrgKey,
    CreateSecretRequest,
    Database,
    DatabaseList,
    Deployment,
    DeploymentList,
    Event,
    EventList,
    LogEntry,
    LogList,
    Organization,
    OrgKey,
    OrgKeyList,
    OrgList,
    OrgMember,
    OrgMemberList,
    PullLatestResponse,
    Secret,
    SecretList,
    SendPromptResponse,
    StartAgentRequest,
    StartAgentResponse,
    StopWorkflowResponse,
    UpdateAppRequest,
    UpdateDatabaseRequest,
    UpdateSecretRequest,
    User,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T", bound=BaseModel)


class QuomeClient:
    """HTTP client for the Quome Platform API.

    Every call is a single attempt: errors are raised to the caller,
    never retried here.
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: int = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the Platform API client.

        Args:
            token: Bearer token. Unauthenticated if omitted.
            base_url: Base URL for the Platform API. Read from settings
                (and QUOME_API_URL) if omitted.
            timeout: Request timeout in seconds.
        """
        if base_url is None:
            base_url = load_settings().get_api_url()
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = requests.Session()
        self._session.headers.update(
            {
                "User-Agent": USER_AGENT,
                "Content-Type": "application/json",
            }
        )
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict | None = None,
        params: dict | None = None,
    ) -> requests.Response:
        """Make request to Platform API.

        Args:
            method: HTTP method.
            endpoint: API endpoint (without the /api/v1 prefix).
            json_data: JSON body data.
            params: URL query parameters.

        Returns:
            Response object with a 2xx status.

        Raises:
            APIError: On non-2xx responses (or one of its subclasses).
            TransportError: On connection issues.
        """
        url = f"{self.base_url}{API_PREFIX}{endpoint}"
        logger.debug("%s %s", method, url)

        try:
            response = self._session.request(
                method,
                url,
                json=json_data,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.SSLError as e:
            raise TransportError("SSL certificate verification failed", e) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError("Cannot connect to Quome API", e) from e
        except requests.exceptions.Timeout as e:
            raise TransportError("Request timed out", e) from e
        except requests.exceptions.RequestException as e:
            raise TransportError("Network request failed", e) from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        if response.status_code >= 400:
            try:
                error_data = response.json() if response.content else {}
            except ValueError:
                error_data = {}
            if not isinstance(error_data, dict):
                error_data = {}
            raise_for_status(response.status_code, error_data)
        return response

    @staticmethod
    def _safe_json(resp: requests.Response) -> Any:
        """Parse JSON from response, raising InvalidResponseError on failure."""
        try:
            return resp.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise InvalidResponseError(
                "Unexpected response from server. Please try again.", e
            ) from e

    @staticmethod
    def _safe_validate(model_cls: type[_T], data: Any) -> _T:
        """Validate data against a Pydantic model, raising InvalidResponseError on failure."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            logger.debug("Response failed %s validation: %s", model_cls.__name__, e)
            raise InvalidResponseError(
                "Unexpected response format from server. "
                "Try updating: pip install -U quome",
                e,
            ) from e

    def _get(self, model_cls: type[_T], endpoint: str, params: dict | None = None) -> _T:
        resp = self._request("GET", endpoint, params=params)
        return self._safe_validate(model_cls, self._safe_json(resp))

    def _post(self, model_cls: type[_T], endpoint: str, json_data: dict) -> _T:
        resp = self._request("POST", endpoint, json_data=json_data)
        return self._safe_validate(model_cls, self._safe_json(resp))

    def _put(self, model_cls: type[_T], endpoint: str, json_data: dict) -> _T:
        resp = self._request("PUT", endpoint, json_data=json_data)
        return self._safe_validate(model_cls, self._safe_json(resp))

    def _delete(self, endpoint: str) -> None:
        """DELETE a resource. Any response body is ignored."""
        self._request("DELETE", endpoint)

    @staticmethod
    def _body(request: BaseModel) -> dict:
        return request.model_dump(mode="json", by_alias=True, exclude_none=True)

    # ==================== USERS ====================

    def get_current_user(self) -> User:
        """Get the user the token belongs to.

        Also serves as token validation.
        """
        return self._get(User, "/users")

    # ==================== ORGS ====================

    def list_orgs(self) -> list[Organization]:
        return self._get(OrgList, "/orgs").organizations

    def create_org(self, name: str) -> Organization:
        return self._post(Organization, "/orgs", {"name": name})

    def get_org(self, org_id: UUID) -> Organization:
        return self._get(Organization, f"/orgs/{org_id}")

    def list_members(self, org_id: UUID) -> list[OrgMember]:
        """List members of an organization.

        The server answers with either a bare list or {"members": [...]}.
        """
        data = self._safe_json(self._request("GET", f"/orgs/{org_id}/members"))
        if isinstance(data, list):
            data = {"members": data}
        return self._safe_validate(OrgMemberList, data).members

    def add_member(self, org_id: UUID, user_id: UUID) -> OrgMember:
        return self._post(OrgMember, f"/orgs/{org_id}/members", {"user_id": str(user_id)})

    def list_keys(self, org_id: UUID) -> list[OrgKey]:
        return self._get(OrgKeyList, f"/orgs/{org_id}/keys").keys

    def create_key(self, org_id: UUID, expiration: datetime | None = None) -> CreatedOrgKey:
        """Create an organization API key.

        Args:
            org_id: Organization ID.
            expiration: When the key stops working. Never, if omitted.
        """
        body = {"expiration": expiration.isoformat()} if expiration else {}
        return self._post(CreatedOrgKey, f"/orgs/{org_id}/keys", body)

    def delete_key(self, org_id: UUID, key_id: UUID) -> None:
        self._delete(f"/orgs/{org_id}/apikeys/{key_id}")

    def list_events(self, org_id: UUID, limit: int | None = None) -> list[Event]:
        params = {"limit": limit} if limit is not None else None
        return self._get(EventList, f"/orgs/{org_id}/events", params=params).events

    # ==================== APPS ====================

    def list_apps(self, org_id: UUID) -> list[App]:
        return self._get(AppList, f"/orgs/{org_id}/apps").apps

    def create_app(self, org_id: UUID, request: CreateAppRequest) -> App:
        return self._post(App, f"/orgs/{org_id}/apps", self._body(request))

    def get_app(self, org_id: UUID, app_id: UUID) -> App:
        return self._get(App, f"/orgs/{org_id}/apps/{app_id}")

    def update_app(self, org_id: UUID, app_id: UUID, request: UpdateAppRequest) -> App:
        return self._put(App, f"/orgs/{org_id}/apps/{app_id}", self._body(request))

    def delete_app(self, org_id: UUID, app_id: UUID) -> None:
        self._delete(f"/orgs/{org_id}/apps/{app_id}")

    def list_deployments(self, org_id: UUID, app_id: UUID) -> list[Deployment]:
        return self._get(
            DeploymentList, f"/orgs/{org_id}/apps/{app_id}/deployments"
        ).deployments

    def get_deployment(self, org_id: UUID, app_id: UUID, deployment_id: UUID) -> Deployment:
        return self._get(
            Deployment, f"/orgs/{org_id}/apps/{app_id}/deployments/{deployment_id}"
        )

    def get_logs(self, org_id: UUID, app_id: UUID, limit: int | None = None) -> list[LogEntry]:
        """Fetch the most recent log lines of an application.

        Args:
            org_id: Organization ID.
            app_id: Application ID.
            limit: Maximum number of entries. Server default if omitted.
        """
        params = {"limit": limit} if limit is not None else None
        return self._get(LogList, f"/orgs/{org_id}/apps/{app_id}/logs", params=params).logs

    # ==================== DATABASES ====================

    def list_databases(self, org_id: UUID) -> list[Database]:
        return self._get(DatabaseList, f"/orgs/{org_id}/dbaas").databases

    def create_database(self, org_id: UUID, request: CreateDatabaseRequest) -> Database:
        return self._post(Database, f"/orgs/{org_id}/dbaas", self._body(request))

    def get_database(self, org_id: UUID, db_id: UUID) -> Database:
        return self._get(Database, f"/orgs/{org_id}/dbaas/{db_id}")

    def update_database(
        self, org_id: UUID, db_id: UUID, request: UpdateDatabaseRequest
    ) -> Database:
        return self._put(Database, f"/orgs/{org_id}/dbaas/{db_id}", self._body(request))

    def delete_database(self, org_id: UUID, db_id: UUID) -> None:
        self._delete(f"/orgs/{org_id}/dbaas/{db_id}")

    # ==================== SECRETS ====================

    def list_secrets(self, org_id: UUID) -> list[Secret]:
        """List secrets of an organization. Values are not included."""
        return self._get(SecretList, f"/orgs/{org_id}/secrets").secrets

    def find_secret(self, org_id: UUID, name: str) -> Secret:
        """Look up a secret by name.

        Raises:
            NotFoundError: If the organization has no secret with that name.
        """
        for secret in self.list_secrets(org_id):
            if secret.name == name:
                return secret
        raise NotFoundError(f"Secret '{name}' not found")

    def create_secret(self, org_id: UUID, request: CreateSecretRequest) -> Secret:
        return self._post(Secret, f"/orgs/{org_id}/secrets", self._body(request))

    def get_secret(self, org_id: UUID, secret_id: UUID) -> Secret:
        """Fetch a secret including its value."""
        return self._get(
            Secret, f"/orgs/{org_id}/secrets/{secret_id}", params={"reveal": "true"}
        )

    def update_secret(
        self, org_id: UUID, secret_id: UUID, request: UpdateSecretRequest
    ) -> Secret:
        return self._put(Secret, f"/orgs/{org_id}/secrets/{secret_id}", self._body(request))

    def delete_secret(self, org_id: UUID, secret_id: UUID) -> None:
        self._delete(f"/orgs/{org_id}/secrets/{secret_id}")

    # ==================== AGENT WORKFLOWS ====================

    @staticmethod
    def _agent_path(thread_id: UUID | None = None, action: str = "") -> str:
        if thread_id is None:
            return f"/agents/{AGENT_KIND}/{action}"
        return f"/agents/{AGENT_KIND}/{thread_id}/{action}"

    def start_workflow(self, request: StartAgentRequest) -> StartAgentResponse:
        """Start an app-building workflow.

        Acceptance only: the workflow may not have begun executing yet.

        Args:
            request: Prompt and build options.

        Returns:
            Thread ID plus the server's initial status and message.
        """
        return self._post(
            StartAgentResponse, self._agent_path(action="start"), request.to_payload()
        )

    def send_prompt(self, thread_id: UUID, prompt: str) -> SendPromptResponse:
        """Send a follow-up instruction to a running or paused workflow.

        Args:
            thread_id: Workflow thread ID.
            prompt: Follow-up instruction.
        """
        return self._post(
            SendPromptResponse,
            self._agent_path(thread_id, "prompt"),
            {"prompt": prompt},
        )

    def get_workflow_state(self, thread_id: UUID) -> AgentState:
        """Fetch a fresh snapshot of a workflow."""
        return self._get(AgentState, self._agent_path(thread_id, "state"))

    def stop_workflow(self, thread_id: UUID) -> StopWorkflowResponse:
        """Request cancellation of a workflow.

        The server may keep reporting is_working for a while afterwards.
        """
        return self._post(StopWorkflowResponse, self._agent_path(thread_id, "stop"), {})

    def pull_latest(self, thread_id: UUID) -> PullLatestResponse:
        """Have the server reconcile the workflow and return the result."""
        return self._get(PullLatestResponse, self._agent_path(thread_id, "pull"))
