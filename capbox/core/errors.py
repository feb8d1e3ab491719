"""Exception classes for registration, assembly and policy failures.

Provides domain-specific exceptions so callers can tell a bad registration
apart from an unknown capability or a failing installer. Every error is
raised synchronously to the immediate caller; nothing here is retried.
"""

from __future__ import annotations

from collections.abc import Iterable


class CapboxError(Exception):
    """Base class for errors raised by the registry and assembler."""

    pass


class UnknownCapabilityError(CapboxError, LookupError):
    """Raised when a capability name is not present in the registry.

    During assembly the whole resolved selector is checked before any
    installer runs, so ``names`` lists every missing capability at once.
    """

    def __init__(self, names: Iterable[str]) -> None:
        self.names = tuple(names)
        listed = ", ".join(repr(n) for n in self.names)
        super().__init__(f"Unknown capability: {listed}")


class InvalidRegistrationError(CapboxError, ValueError):
    """Raised when register() receives an unusable name or installer.

    Covers empty or malformed names, non-callable installers, and
    re-registration when the policy disallows replacing an installer.
    """

    pass


class ContinuationRequiredError(CapboxError, TypeError):
    """Raised when assemble() is called without a callable continuation."""

    pass


class MemberCollisionError(CapboxError):
    """Raised when two capabilities bind the same member under a REJECT policy."""

    def __init__(self, member: str, capability: str, previous_capability: str) -> None:
        self.member = member
        self.capability = capability
        self.previous_capability = previous_capability
        super().__init__(
            f"Capability {capability!r} rebinds member {member!r} "
            f"already attached by {previous_capability!r}"
        )


class CapabilityInstallError(CapboxError):
    """Raised when an installer fails while populating a sandbox.

    The original exception is chained as ``__cause__``. The partially built
    sandbox is discarded and never reaches the continuation.
    """

    def __init__(self, capability: str, message: str) -> None:
        self.capability = capability
        super().__init__(f"Installer for {capability!r} failed: {message}")


class PolicyValidationError(Exception):
    """Raised when assembly policy configuration is invalid.

    Indicates that a provided AssemblyPolicy or policy TOML file contains
    invalid values (unknown collision policy, a name pattern that does not
    compile, wrong field types).

    This exception wraps Pydantic ValidationError with a clearer
    domain-specific name for capbox consumers.
    """

    pass
