"""Pydantic models for assembly configuration and reporting.

Provides the validated policy that governs registration and member
collisions, plus the report and description models emitted for
observability and introspection.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from capbox.core.errors import PolicyValidationError

DEFAULT_NAME_PATTERN = r"^[A-Za-z_][A-Za-z0-9_.\-]*$"


class CollisionPolicy(str, Enum):
    """What happens when an installer rebinds a member another capability attached.

    OVERWRITE: last write wins; the collision is logged
    REJECT: assembly fails with MemberCollisionError
    """
    OVERWRITE = "overwrite"
    REJECT = "reject"


class AssemblyPolicy(BaseModel):
    """Type-safe configuration for registration and assembly behaviour.

    Attributes:
        collision_policy: How member collisions between capabilities are handled
        allow_replace: Whether register() may replace an existing installer
        name_pattern: Regular expression every capability name must match
    """

    collision_policy: CollisionPolicy = Field(
        default=CollisionPolicy.OVERWRITE,
        description="How member collisions between capabilities are handled"
    )

    allow_replace: bool = Field(
        default=True,
        description="Whether re-registering a name replaces its installer"
    )

    name_pattern: str = Field(
        default=DEFAULT_NAME_PATTERN,
        min_length=1,
        description="Regular expression capability names must fully match"
    )

    model_config = {"extra": "forbid"}

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise PolicyValidationError(f"Invalid assembly policy: {e}") from e

    @classmethod
    def model_validate(cls, obj: Any, *, strict: bool | None = None, context: dict[str, Any] | None = None) -> "AssemblyPolicy":
        try:
            return super().model_validate(obj, strict=strict, context=context)  # type: ignore[arg-type]
        except ValidationError as e:
            raise PolicyValidationError(f"Invalid assembly policy: {e}") from e

    @field_validator("name_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        """Ensure the name pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"name_pattern is not a valid regular expression: {e}") from e
        return v

    def name_matches(self, name: str) -> bool:
        return re.fullmatch(self.name_pattern, name) is not None


class CapabilityInfo(BaseModel):
    """Description of one registered capability."""

    name: str
    installer: str = Field(description="Qualified name of the installer callable")
    summary: str = Field(default="", description="First line of the installer docstring")


class AssemblyReport(BaseModel):
    """Record of a single completed assembly.

    Attributes:
        sequence: 1-based count of assemblies started by the assembler
        capabilities: Capability names in the order their installers ran
        members: Member names attached, keyed by the capability that attached them
        overwritten: Members rebound by a later capability (OVERWRITE policy only)
        removed: Members deleted by a later capability (OVERWRITE policy only)
        duration_ms: Wall-clock time spent running installers
    """

    sequence: int = Field(ge=1)

    capabilities: list[str] = Field(default_factory=list)

    members: dict[str, list[str]] = Field(
        default_factory=dict,
        description="Member names attached by each capability"
    )

    overwritten: list[str] = Field(
        default_factory=list,
        description="Members rebound by a later capability"
    )

    removed: list[str] = Field(
        default_factory=list,
        description="Members deleted by a later capability"
    )

    duration_ms: float = Field(default=0.0, ge=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "sequence": 1,
                    "capabilities": ["dom", "event"],
                    "members": {"dom": ["get_element"], "event": ["attach_event"]},
                    "overwritten": [],
                    "removed": [],
                    "duration_ms": 0.04,
                }
            ]
        }
    }

    @property
    def member_count(self) -> int:
        return sum(len(names) for names in self.members.values())
