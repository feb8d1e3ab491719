"""Core capbox abstractions and models.

This module provides the foundational types for capability assembly,
including Pydantic models for type-safe policy and reporting, the
Sandbox instance type, structured logging, and error types.
"""

from __future__ import annotations

from .base import Sandbox, members
from .errors import (
    CapabilityInstallError,
    CapboxError,
    ContinuationRequiredError,
    InvalidRegistrationError,
    MemberCollisionError,
    PolicyValidationError,
    UnknownCapabilityError,
)
from .logging import AssemblerLogger, configure_structlog
from .models import AssemblyPolicy, AssemblyReport, CapabilityInfo, CollisionPolicy

__all__ = [
    "AssemblerLogger",
    "AssemblyPolicy",
    "AssemblyReport",
    "CapabilityInfo",
    "CapabilityInstallError",
    "CapboxError",
    "CollisionPolicy",
    "ContinuationRequiredError",
    "InvalidRegistrationError",
    "MemberCollisionError",
    "PolicyValidationError",
    "Sandbox",
    "UnknownCapabilityError",
    "configure_structlog",
    "members",
]
