"""Quome Platform API binding used by the CLI."""

from .client import QuomeClient
from .config import CONFIG_FILE, DEFAULT_API_URL, Settings, load_settings
from .errors import (
    APIError,
    ConfigError,
    InvalidResponseError,
    NoLinkedAppError,
    NoLinkedOrgError,
    NotFoundError,
    NotLoggedInError,
    QuomeError,
    RateLimitedError,
    TransportError,
    UnauthorizedError,
)
from .store import ConfigStore
from .types import (
    AgentMessage,
    AgentState,
    LinkedContext,
    MessageKind,
    Phase,
    StartAgentRequest,
    StartAgentResponse,
)
from .watch import (
    WatchCancelled,
    WatchOutcome,
    WatchRenderer,
    WatchResult,
    terminal_outcome,
    watch_workflow,
)

__all__ = [
    # Client
    "QuomeClient",
    # Config
    "CONFIG_FILE",
    "DEFAULT_API_URL",
    "Settings",
    "load_settings",
    "ConfigStore",
    # Errors
    "QuomeError",
    "APIError",
    "UnauthorizedError",
    "NotFoundError",
    "RateLimitedError",
    "TransportError",
    "InvalidResponseError",
    "NotLoggedInError",
    "NoLinkedOrgError",
    "NoLinkedAppError",
    "ConfigError",
    # Types
    "AgentState",
    "AgentMessage",
    "LinkedContext",
    "MessageKind",
    "Phase",
    "StartAgentRequest",
    "StartAgentResponse",
    # Watch
    "watch_workflow",
    "terminal_outcome",
    "WatchRenderer",
    "WatchResult",
    "WatchOutcome",
    "WatchCancelled",
]
