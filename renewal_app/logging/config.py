"""
Logging setup for the renewal controller.

structlog renders every record. Records written inside a host invocation
carry the invocation's host sequence and caller through structlog's context
variables, so a gate failure or state transition can be matched to the call
that produced it. Gate decisions and state transitions go through the helpers
below so audit records share one shape.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

CALLSITE_PARAMETERS = [
    structlog.processors.CallsiteParameter.MODULE,
    structlog.processors.CallsiteParameter.FUNC_NAME,
    structlog.processors.CallsiteParameter.LINENO,
]


def build_processors(
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False
) -> list:
    """Processor chain: invocation context first, renderer last."""
    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(parameters=CALLSITE_PARAMETERS))

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    return processors


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False
) -> None:
    """
    Route structlog through the stdlib root logger at the given level.

    Args:
        level: Logging level name, case-insensitive
        format_json: One JSON object per line instead of console output
        include_timestamp: Add a UTC ISO timestamp
        include_caller: Add module, function and line number
    """
    logging.basicConfig(level=getattr(logging, level.upper()), stream=sys.stdout, format="%(message)s")

    structlog.configure(
        processors=build_processors(format_json, include_timestamp, include_caller),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    return structlog.get_logger(name)


def get_gating_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for precondition gate decisions."""
    return get_logger(name).bind(
        subsystem="gating",
        audit_trail=True
    )


def get_state_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound for renewal state transitions."""
    return get_logger(name).bind(
        subsystem="state_machine",
        audit_trail=True
    )


def log_gate_decision(
    logger: FilteringBoundLogger,
    gate_name: str,
    passed: bool,
    subscription_id: int,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a precondition gate decision with standardized format.

    Args:
        logger: Structlog logger instance
        gate_name: Name of the gate being evaluated
        passed: Whether the gate passed or failed
        subscription_id: Subscription being evaluated
        reason: Detailed reason for the decision
        context: Additional context data
    """
    bound_logger = logger.bind(
        gate_name=gate_name,
        gate_result="PASS" if passed else "FAIL",
        subscription_id=subscription_id,
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if passed:
        bound_logger.debug("Gate passed")
    else:
        bound_logger.warning("Gate failed")


def log_state_transition(
    logger: FilteringBoundLogger,
    subscription_id: int,
    from_state: str,
    to_state: str,
    trigger: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a state transition with standardized format.

    Args:
        logger: Structlog logger instance
        subscription_id: Subscription transitioning
        from_state: Current state
        to_state: Target state
        trigger: What triggered the transition
        context: Additional context data
    """
    bound_logger = logger.bind(
        subscription_id=subscription_id,
        from_state=from_state,
        to_state=to_state,
        trigger=trigger,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("State transition")
