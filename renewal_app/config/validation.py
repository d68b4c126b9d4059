"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

AUTH_MODES = ("open", "owner", "agent", "owner_or_agent")
STORE_BACKENDS = ("memory", "sqlite")
EVENT_SINKS = ("memory", "stdout", "file")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_uint(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_renewal_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate renewal policy defaults."""
        errors = []

        for name in ("max_retries", "cooldown_units"):
            if name in params and not _is_uint(params[name]):
                errors.append(ValidationError(
                    field=name,
                    message="Must be a non-negative integer",
                    value=params[name]
                ))

        return errors

    @staticmethod
    def validate_authorization_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate authorization settings."""
        errors = []

        mode = params.get("mode", "open")
        if mode not in AUTH_MODES:
            errors.append(ValidationError(
                field="mode",
                message=f"Must be one of {', '.join(AUTH_MODES)}",
                value=mode
            ))
        elif mode in ("agent", "owner_or_agent") and not params.get("admin"):
            errors.append(ValidationError(
                field="admin",
                message="Agent authorization requires a registry admin",
                value=params.get("admin")
            ))

        return errors

    @staticmethod
    def validate_controller_params(params: dict[str, Any]) -> list[ValidationError]:
        errors = []

        if "allow_overwrite" in params and not isinstance(params["allow_overwrite"], bool):
            errors.append(ValidationError(
                field="allow_overwrite",
                message="Must be a boolean",
                value=params["allow_overwrite"]
            ))

        return errors

    @staticmethod
    def validate_store_params(params: dict[str, Any]) -> list[ValidationError]:
        errors = []

        backend = params.get("backend", "memory")
        if backend not in STORE_BACKENDS:
            errors.append(ValidationError(
                field="backend",
                message=f"Must be one of {', '.join(STORE_BACKENDS)}",
                value=backend
            ))
        if backend == "sqlite" and not params.get("db_path"):
            errors.append(ValidationError(
                field="db_path",
                message="SQLite backend requires a database path",
                value=params.get("db_path")
            ))

        return errors

    @staticmethod
    def validate_event_params(params: dict[str, Any]) -> list[ValidationError]:
        errors = []

        sink = params.get("sink", "memory")
        if sink not in EVENT_SINKS:
            errors.append(ValidationError(
                field="sink",
                message=f"Must be one of {', '.join(EVENT_SINKS)}",
                value=sink
            ))
        if params.get("format", "json") not in ("json", "pretty"):
            errors.append(ValidationError(
                field="format",
                message="Must be 'json' or 'pretty'",
                value=params.get("format")
            ))
        if sink == "file" and not params.get("output_path"):
            errors.append(ValidationError(
                field="output_path",
                message="File sink requires an output path",
                value=params.get("output_path")
            ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        errors = []

        level = params.get("level", "INFO")
        if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
            errors.append(ValidationError(
                field="level",
                message=f"Must be one of {', '.join(LOG_LEVELS)}",
                value=level
            ))
        for name in ("format_json", "include_timestamp", "include_caller"):
            if name in params and not isinstance(params[name], bool):
                errors.append(ValidationError(field=name, message="Must be a boolean", value=params[name]))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a merged configuration, prefixing fields with their section."""
        sections = {
            "renewal": cls.validate_renewal_params,
            "authorization": cls.validate_authorization_params,
            "controller": cls.validate_controller_params,
            "store": cls.validate_store_params,
            "events": cls.validate_event_params,
            "logging": cls.validate_logging_params,
        }

        errors = []
        for section, validator in sections.items():
            for error in validator(config.get(section, {})):
                errors.append(ValidationError(
                    field=f"{section}.{error.field}",
                    message=error.message,
                    value=error.value
                ))

        return errors
