"""capbox: assemble sandbox objects from named, pluggable capabilities.

Register capability installers on a CapabilityRegistry, then ask an
Assembler for a sandbox with some (or all) of them installed:

    assembler = create_assembler()

    @assembler.registry.capability("dom")
    def dom(box):
        box.get_element = lambda selector: ...

    assembler.assemble(["dom"], lambda box: box.get_element("#nav"))
"""

from __future__ import annotations

from capbox.assembler import ALL, Assembler
from capbox.core import (
    AssemblerLogger,
    AssemblyPolicy,
    AssemblyReport,
    CapabilityInfo,
    CapabilityInstallError,
    CapboxError,
    CollisionPolicy,
    ContinuationRequiredError,
    InvalidRegistrationError,
    MemberCollisionError,
    PolicyValidationError,
    Sandbox,
    UnknownCapabilityError,
    configure_structlog,
    members,
)
from capbox.core.factory import create_assembler
from capbox.policies import DEFAULT_POLICY, load_policy
from capbox.registry import CapabilityRegistry

__version__ = "0.1.0"

__all__ = [
    "ALL",
    "Assembler",
    "AssemblerLogger",
    "AssemblyPolicy",
    "AssemblyReport",
    "CapabilityInfo",
    "CapabilityInstallError",
    "CapabilityRegistry",
    "CapboxError",
    "CollisionPolicy",
    "ContinuationRequiredError",
    "DEFAULT_POLICY",
    "InvalidRegistrationError",
    "MemberCollisionError",
    "PolicyValidationError",
    "Sandbox",
    "UnknownCapabilityError",
    "configure_structlog",
    "create_assembler",
    "load_policy",
    "members",
]
