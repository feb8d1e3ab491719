"""Shared pytest fixtures for all tests."""

from __future__ import annotations

from typing import Any

import pytest
import structlog

from capbox import Assembler, AssemblerLogger, CapabilityRegistry


class StructlogCapture:
    """Helper to capture structlog events."""

    def __init__(self) -> None:
        self.events: list[dict[str, Any]] = []

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        """Capture event dict (structlog processor signature)."""
        self.events.append(event_dict.copy())
        return event_dict

    def named(self, event: str) -> list[dict[str, Any]]:
        return [e for e in self.events if e.get("event") == event]


@pytest.fixture
def log_capture() -> StructlogCapture:
    """Fixture providing structlog event capture."""
    return StructlogCapture()


@pytest.fixture
def custom_logger(log_capture: StructlogCapture) -> Any:
    """Fixture providing a structlog logger with capture processor."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            log_capture,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=False,
    )

    return structlog.get_logger("test_capbox")


@pytest.fixture
def assembler_logger(custom_logger: Any) -> AssemblerLogger:
    return AssemblerLogger(logger=custom_logger)


@pytest.fixture
def registry(assembler_logger: AssemblerLogger) -> CapabilityRegistry:
    """Isolated registry with the dom/event/ajax capabilities from the docs."""
    registry = CapabilityRegistry(logger=assembler_logger)

    def dom(box: Any) -> None:
        """DOM helpers."""
        box.get_element = lambda selector: f"element:{selector}"
        box.get_style = lambda element, prop: f"{element}.{prop}"

    def event(box: Any) -> None:
        box.attach_event = lambda element, name: f"{name}@{element}"

    def ajax(box: Any) -> None:
        box.make_request = lambda url: {"url": url}

    registry.register("dom", dom)
    registry.register("event", event)
    registry.register("ajax", ajax)
    return registry


@pytest.fixture
def assembler(registry: CapabilityRegistry) -> Assembler:
    return Assembler(registry)


class Recorder:
    """Continuation that records every sandbox it receives."""

    def __init__(self) -> None:
        self.calls: list[Any] = []

    def __call__(self, box: Any) -> None:
        self.calls.append(box)

    @property
    def box(self) -> Any:
        assert len(self.calls) == 1
        return self.calls[0]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()
