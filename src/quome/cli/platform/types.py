"""Data types for Platform API contracts."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

# ==================== LOCAL CONFIG ====================


class UserConfig(BaseModel):
    """Stored login: API token plus the identity it was validated as."""

    token: str
    id: UUID
    email: str


class LinkedContext(BaseModel):
    """Organization (and optionally application) linked to a directory."""

    org_id: UUID
    org_name: str
    app_id: UUID | None = None
    app_name: str | None = None


class LocalConfig(BaseModel):
    """Contents of ~/.quome/config.json."""

    user: UserConfig | None = None
    linked: dict[str, LinkedContext] = Field(default_factory=dict)


# ==================== USERS / ORGS / APPS ====================


class User(BaseModel):
    """Authenticated user."""

    id: UUID
    email: str
    name: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    default_org: UUID | None = None
    avatar: str | None = None
    last_login_at: datetime | None = None
    two_factor: bool | None = None


class Organization(BaseModel):
    """Organization the user belongs to."""

    id: UUID
    name: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrgList(BaseModel):
    """Response from GET /orgs."""

    organizations: list[Organization] = Field(default_factory=list)


class OrgMember(BaseModel):
    """Membership of a user in an organization."""

    id: UUID | None = None
    user_id: UUID
    org_id: UUID
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrgMemberList(BaseModel):
    """Response from GET /orgs/{org_id}/members."""

    members: list[OrgMember] = Field(default_factory=list)


class OrgKey(BaseModel):
    """Organization API key. Only the hash is ever returned after creation."""

    id: UUID
    org_id: UUID
    key_hash: str = ""
    created_at: datetime | None = None


class OrgKeyList(BaseModel):
    """Response from GET /orgs/{org_id}/keys."""

    keys: list[OrgKey] = Field(default_factory=list)


class CreatedOrgKey(BaseModel):
    """Response from creating an API key; the only time the key is shown."""

    id: UUID
    key: str
    created_at: datetime | None = None


class ContainerSpec(BaseModel):
    """One container of an application."""

    name: str
    image: str
    port: int


class AppSpec(BaseModel):
    """Runtime specification of an application."""

    containers: list[ContainerSpec] = Field(default_factory=list)


class App(BaseModel):
    """Application inside an organization."""

    id: UUID
    name: str
    description: str | None = None
    organization_id: UUID | None = None
    spec: AppSpec | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class AppList(BaseModel):
    """Response from GET /orgs/{org_id}/apps."""

    apps: list[App] = Field(default_factory=list)


class CreateAppRequest(BaseModel):
    """Body of POST /orgs/{org_id}/apps."""

    name: str
    description: str | None = None
    spec: AppSpec


class UpdateAppRequest(BaseModel):
    """Body of PUT /orgs/{org_id}/apps/{app_id}. Unset fields are left alone."""

    name: str | None = None
    description: str | None = None
    spec: AppSpec | None = None


# ==================== DEPLOYMENTS / LOGS ====================


class DeploymentEvent(BaseModel):
    """Progress entry of a deployment."""

    id: UUID | None = None
    created_at: datetime | None = None
    message: str = ""
    details: str | None = None


class Deployment(BaseModel):
    """One rollout of an application.

    status is one of created, in_progress, deployed, success or failed;
    it is kept as the raw string so new server states still parse.
    """

    id: UUID
    app_id: UUID | None = None
    status: str
    failure_message: str | None = None
    events: list[DeploymentEvent] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DeploymentList(BaseModel):
    """Response from GET /orgs/{org_id}/apps/{app_id}/deployments."""

    deployments: list[Deployment] = Field(default_factory=list)


class LogEntry(BaseModel):
    """One application log line. level is debug, info, warn or error."""

    timestamp: datetime | None = None
    level: str = "info"
    message: str = ""
    metadata: dict[str, Any] | None = None


class LogList(BaseModel):
    """Response from GET /orgs/{org_id}/apps/{app_id}/logs."""

    logs: list[LogEntry] = Field(default_factory=list)
    next_before: str | None = None


# ==================== SECRETS / EVENTS ====================


class Secret(BaseModel):
    """Organization secret. value is only present when fetched singly."""

    id: UUID
    name: str
    value: str | None = None
    description: str | None = None
    organization_id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SecretList(BaseModel):
    """Response from GET /orgs/{org_id}/secrets."""

    secrets: list[Secret] = Field(default_factory=list)


class CreateSecretRequest(BaseModel):
    name: str
    value: str
    description: str | None = None


class UpdateSecretRequest(BaseModel):
    name: str | None = None
    value: str | None = None
    description: str | None = None


class EventActor(BaseModel):
    id: UUID | None = None
    email: str = ""


class EventResource(BaseModel):
    resource_type: str = Field("", alias="type")
    id: UUID
    name: str | None = None

    model_config = {"populate_by_name": True}


class Event(BaseModel):
    """Audit event in an organization."""

    id: UUID
    event_type: str = Field(alias="type")
    actor: EventActor
    resource: EventResource
    metadata: dict[str, Any] | None = None
    organization_id: UUID | None = None
    created_at: datetime | None = None

    model_config = {"populate_by_name": True}


class EventList(BaseModel):
    """Response from GET /orgs/{org_id}/events."""

    events: list[Event] = Field(default_factory=list)
    next_before: str | None = None


# ==================== DATABASES ====================


class ComputeRequested(BaseModel):
    vcpu: str
    memory: str


class DatabaseCompute(BaseModel):
    requested: ComputeRequested


class StorageRequested(BaseModel):
    disk_space: str


class DatabaseStorage(BaseModel):
    requested: StorageRequested


class DatabaseReplicas(BaseModel):
    requested: int


class DatabasePostgres(BaseModel):
    major_version: int


class DatabaseStatus(BaseModel):
    """state is one of Initializing, Ready, Paused, Stopping or Error."""

    state: str


class Database(BaseModel):
    """Managed PostgreSQL database."""

    id: UUID
    name: str
    organization_id: UUID | None = None
    compute: DatabaseCompute
    storage: DatabaseStorage
    replicas: DatabaseReplicas
    postgres: DatabasePostgres
    status: DatabaseStatus | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DatabaseList(BaseModel):
    """Response from GET /orgs/{org_id}/dbaas."""

    databases: list[Database] = Field(default_factory=list)


class CreateDatabaseRequest(BaseModel):
    name: str
    compute: DatabaseCompute
    storage: DatabaseStorage
    replicas: DatabaseReplicas
    postgres: DatabasePostgres


class UpdateDatabaseRequest(BaseModel):
    """Body of PUT /orgs/{org_id}/dbaas/{db_id}. Unset fields are left alone."""

    name: str | None = None
    compute: DatabaseCompute | None = None
    storage: DatabaseStorage | None = None
    replicas: DatabaseReplicas | None = None


# ==================== AGENT WORKFLOWS ====================


class Phase(str, Enum):
    """Coarse workflow stage reported by the server.

    The server's set is open: anything not listed parses to UNKNOWN,
    and the raw string stays on the snapshot for display.
    """

    PLANNING = "planning"
    BUILDING = "building"
    TESTING = "testing"
    DEPLOYING = "deploying"
    DEPLOYED = "deployed"
    COMPLETE = "complete"
    FAILED = "failed"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str | None) -> Phase | None:
        """Classify a raw phase string (case-sensitive)."""
        if raw is None:
            return None
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


TERMINAL_PHASES = frozenset({Phase.DEPLOYED, Phase.COMPLETE, Phase.FAILED})


class MessageKind(str, Enum):
    """Author of a workflow conversation message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    TOOL = "tool"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, raw: str) -> MessageKind:
        """Classify a raw message type (case-sensitive)."""
        try:
            return cls(raw)
        except ValueError:
            return cls.UNKNOWN


class StackConfig(BaseModel):
    """Framework and language for one tier of the generated app."""

    stack: str | None = None
    language: str | None = None


class TechStack(BaseModel):
    """Requested technology stack."""

    backend: StackConfig | None = None
    frontend: StackConfig | None = None
    database: str | None = None


class ColorPreferences(BaseModel):
    """Requested brand colours."""

    color_type: str = Field("custom", alias="type")
    primary_color: str | None = None
    secondary_color: str | None = None

    model_config = {"populate_by_name": True}


class StartAgentRequest(BaseModel):
    """Body of POST /agents/{kind}/start."""

    prompt: str
    project_name: str | None = None
    include_github: bool | None = None
    parallel_mode: bool | None = None
    accessibility_target: str | None = None
    tech_stack: TechStack | None = None
    color_preferences: ColorPreferences | None = None

    def to_payload(self) -> dict:
        """JSON body with unset optionals omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StartAgentResponse(BaseModel):
    """Response from starting a workflow."""

    thread_id: UUID
    status: str = ""
    message: str = ""


class SendPromptResponse(BaseModel):
    """Response from sending a follow-up prompt."""

    success: bool
    message: str = ""


class StopWorkflowResponse(BaseModel):
    """Response from stopping a workflow."""

    success: bool
    message: str = ""


class AppContext(BaseModel):
    """What the agent understood the app to be."""

    name: str | None = None
    goal: str | None = None
    description: str | None = None


class AgentMessage(BaseModel):
    """One turn of the workflow conversation."""

    type: str
    content: str | None = None
    timestamp: datetime | None = None

    @property
    def kind(self) -> MessageKind:
        return MessageKind.parse(self.type)


class ContainerInfo(BaseModel):
    """Preview sandbox the workflow is building in."""

    container_id: str | None = None
    sandbox_id: str | None = None
    app_relative_dir: str | None = None
    frontend_port: int | None = None
    backend_port: int | None = None
    testing_port: int | None = None
    frontend_url: str | None = None
    backend_url: str | None = None
    testing_url: str | None = None
    is_healthy: bool | None = None


class AgentDeploymentInfo(BaseModel):
    """Live deployment produced by the workflow."""

    url: str | None = None
    status: str | None = None
    files_path: str | None = None
    port: int | None = None


class ProgressInfo(BaseModel):
    """Build progress."""

    percentage: float | None = None
    current_stage: int | None = None
    total_stages: int | None = None


class AgentPlanWorkLane(BaseModel):
    """A unit of work inside a plan stage."""

    description: str | None = None
    parts: list[str] = Field(default_factory=list)
    target_files: list[str] = Field(default_factory=list)
    is_complete: bool | None = None


class AgentPlanStage(BaseModel):
    """One stage of the agent's build plan."""

    description: str | None = None
    lanes: list[AgentPlanWorkLane] = Field(default_factory=list)


class AgentPlan(BaseModel):
    """The agent's build plan."""

    context: str | None = None
    stages: list[AgentPlanStage] = Field(default_factory=list)
    current_stage: int | None = None


class BrandKit(BaseModel):
    """Brand assets the agent derived or was given."""

    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None
    background_color: str | None = None
    text_color: str | None = None
    font_family: str | None = None
    company_name: str | None = None
    logo_public_urls: list[str] = Field(default_factory=list)
    hero_public_urls: list[str] = Field(default_factory=list)
    primary_logo_index: int | None = None
    primary_logo_url: str | None = None


class AgentState(BaseModel):
    """Snapshot of a workflow, as returned by GET /agents/{kind}/{id}/state.

    Every poll yields a new instance; nothing mutates one after parsing.
    """

    thread_id: UUID
    is_working: bool = False
    status: str | None = None
    phase: str | None = None
    app_uuid: UUID | None = None
    app_domain_name: str | None = None
    app_context: AppContext | None = None
    messages: list[AgentMessage] = Field(default_factory=list)
    files: dict[str, str] = Field(default_factory=dict)
    container_info: ContainerInfo | None = None
    deployment: AgentDeploymentInfo | None = None
    progress: ProgressInfo | None = None
    plan: AgentPlan | None = None
    brand_kit: BrandKit | None = None
    github_repo_url: str | None = None
    github_repo_name: str | None = None
    github_repo_created: bool | None = None
    tests_passed: int | None = None
    tests_failed: int | None = None
    tests_ran: int | None = None

    model_config = {"frozen": True}

    @property
    def phase_kind(self) -> Phase | None:
        return Phase.parse(self.phase)

    @property
    def is_deployed(self) -> bool:
        """True once the deployment reports itself live."""
        return self.deployment is not None and self.deployment.status == "deployed"

    @property
    def app_name(self) -> str | None:
        return self.app_context.name if self.app_context else None


class PullLatestResponse(BaseModel):
    """Response from pulling the latest workflow changes."""

    success: bool
    message: str = ""
    state: AgentState | None = None
