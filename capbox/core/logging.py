"""Structured logging for registry and assembly events.

Provides AssemblerLogger class that uses structlog for structured event
emission (registry.registered, assembly.start, assembly.complete, ...).
Configures structlog with console rendering by default but allows custom
configuration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from capbox.core.models import AssemblyReport


def configure_structlog(level: int = logging.INFO, use_json: bool = False) -> None:
    """Configure structlog with sensible defaults for capbox logging.

    Args:
        level: Minimum log level (default: logging.INFO)
        use_json: If True, use JSON renderer; otherwise use console renderer
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if use_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AssemblerLogger:
    """Wrapper for structured logging of registry and assembly events.

    Accepts either structlog or standard logging.Logger instances and normalizes
    emission so callers do not need to care which backend is in use.
    """

    def __init__(self, logger: Any = None) -> None:
        """Initialize AssemblerLogger with optional custom logger.

        Args:
            logger: Optional structlog BoundLogger, logging.Logger, or string name.
                    If None, a default structlog logger named 'capbox' is created.
                    If string, creates a structlog logger with that name.
        """
        if logger is None:
            self._logger = structlog.get_logger("capbox")
        elif isinstance(logger, str):
            self._logger = structlog.get_logger(logger)
        else:
            self._logger = logger

    @property
    def logger(self) -> Any:
        """Expose the underlying logger instance (structlog or logging.Logger)."""
        return self._logger

    def _emit(self, level: int, message: str, **fields: Any) -> None:
        """Emit a log record regardless of logger backend."""
        extra = dict(fields)
        extra.setdefault("log_message", message)
        extra.setdefault("event", message.split(".", 1)[-1] if "." in message else message)
        extra.setdefault("event_type", extra.get("event"))

        if isinstance(self._logger, logging.Logger):
            # Standard logging expects structured data in the 'extra' mapping
            self._logger.log(level, message, extra=extra)
            return

        method_name = logging.getLevelName(level).lower()
        log_method = getattr(self._logger, method_name, None)
        if not callable(log_method):
            log_method = self._logger.info

        log_kwargs = dict(extra)
        event_value = log_kwargs.pop("event", None)
        event_arg = event_value if event_value is not None else message
        log_method(event_arg, **log_kwargs)

    def log_capability_registered(self, name: str, installer: str, replaced: bool = False) -> None:
        """Log a successful registration.

        Emits registry.replaced when an existing installer was swapped out,
        registry.registered otherwise.

        Args:
            name: Capability name
            installer: Qualified name of the installer callable
            replaced: Whether an earlier installer for the name was replaced
        """
        event = "registry.replaced" if replaced else "registry.registered"
        self._emit(
            logging.INFO,
            f"capbox.{event}",
            event=event,
            capability=name,
            installer=installer,
        )

    def log_capability_unregistered(self, name: str) -> None:
        self._emit(
            logging.INFO,
            "capbox.registry.unregistered",
            event="registry.unregistered",
            capability=name,
        )

    def log_registration_rejected(self, name: Any, reason: str) -> None:
        """Log a rejected registration at WARNING level.

        Args:
            name: The offending name (may not be a string)
            reason: Short machine-friendly reason (e.g., "invalid_name")
        """
        self._emit(
            logging.WARNING,
            "capbox.registry.rejected",
            event="registry.rejected",
            capability=repr(name),
            reason=reason,
        )

    def log_assembly_start(self, sequence: int, capabilities: list[str]) -> None:
        """Log the start of an assembly once the selector has been resolved.

        Args:
            sequence: 1-based assembly counter
            capabilities: Resolved, validated capability names
        """
        self._emit(
            logging.INFO,
            "capbox.assembly.start",
            event="assembly.start",
            sequence=sequence,
            capabilities=list(capabilities),
            capability_count=len(capabilities),
        )

    def log_member_collision(
        self, sequence: int, member: str, capability: str, previous_capability: str, policy: str
    ) -> None:
        """Log a member rebound by a second capability at WARNING level.

        Args:
            sequence: 1-based assembly counter
            member: Member name that was rebound
            capability: Capability whose installer rebound it
            previous_capability: Capability that attached it first
            policy: Active collision policy value
        """
        self._emit(
            logging.WARNING,
            "capbox.assembly.collision",
            event="assembly.collision",
            sequence=sequence,
            member=member,
            capability=capability,
            previous_capability=previous_capability,
            policy=policy,
        )

    def log_assembly_complete(self, report: AssemblyReport) -> None:
        """Log a finished assembly with its report.

        Emitted after every installer ran and before the continuation is
        called.

        Args:
            report: AssemblyReport describing what was installed
        """
        self._emit(
            logging.INFO,
            "capbox.assembly.complete",
            event="assembly.complete",
            sequence=report.sequence,
            capabilities=list(report.capabilities),
            member_count=report.member_count,
            overwritten=list(report.overwritten),
            removed=list(report.removed),
            duration_ms=report.duration_ms,
        )

    def log_assembly_failed(
        self, sequence: int | None, error: Exception, capability: str | None = None
    ) -> None:
        """Log an assembly that was aborted before delivery.

        Args:
            sequence: 1-based assembly counter, None if resolution failed first
            error: The exception being raised to the caller
            capability: Capability being installed when the failure happened
        """
        fields: dict[str, Any] = {
            "event": "assembly.failed",
            "error_type": type(error).__name__,
            "error": str(error),
        }
        if sequence is not None:
            fields["sequence"] = sequence
        if capability is not None:
            fields["capability"] = capability

        self._emit(logging.ERROR, "capbox.assembly.failed", **fields)
