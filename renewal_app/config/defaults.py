"""Default configuration parameters for the renewal controller."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RenewalParams:
    """Policy used when a caller does not pass its own."""
    max_retries: int = 3                 # Failures tolerated before Failed
    cooldown_units: int = 10             # Sequence units between retries


@dataclass(frozen=True)
class AuthorizationParams:
    """Caller authorization for mutating calls."""
    mode: str = "open"                   # open, owner, agent, owner_or_agent
    admin: str = ""                      # Registry admin, required for agent modes


@dataclass(frozen=True)
class ControllerParams:
    """Controller behavior switches."""
    allow_overwrite: bool = False        # Re-init replaces an existing record


@dataclass(frozen=True)
class StoreParams:
    """Record storage binding."""
    backend: str = "memory"              # memory, sqlite
    db_path: str = "subscriptions.db"


@dataclass(frozen=True)
class EventParams:
    """Notification sink."""
    sink: str = "memory"                 # memory, stdout, file
    format: str = "json"                 # json, pretty (stdout only)
    output_path: str = "events/renewal_events.jsonl"


@dataclass(frozen=True)
class LoggingParams:
    """Structured logging output."""
    level: str = "INFO"
    format_json: bool = False
    include_timestamp: bool = True
    include_caller: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    renewal: RenewalParams
    authorization: AuthorizationParams
    controller: ControllerParams
    store: StoreParams
    events: EventParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        renewal=RenewalParams(),
        authorization=AuthorizationParams(),
        controller=ControllerParams(),
        store=StoreParams(),
        events=EventParams(),
        logging=LoggingParams(),
    )
