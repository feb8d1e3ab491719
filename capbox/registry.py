"""Capability registry: the mapping from capability name to installer.

A CapabilityRegistry is an explicit object handed to an Assembler, so each
application (and each test) can hold its own isolated set of capabilities.
Registration is expected to happen during setup; assembly only reads.

Example:
    registry = CapabilityRegistry()

    @registry.capability("dom")
    def dom(box):
        box.get_element = lambda selector: ...

    registry.register("event", lambda box: setattr(box, "attach_event", ...))
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from typing import Any

from capbox.core.errors import InvalidRegistrationError, UnknownCapabilityError
from capbox.core.logging import AssemblerLogger
from capbox.core.models import AssemblyPolicy, CapabilityInfo

Installer = Callable[[Any], Any]


def _qualname(installer: Installer) -> str:
    module = getattr(installer, "__module__", None)
    name = getattr(installer, "__qualname__", None) or type(installer).__qualname__
    return f"{module}.{name}" if module else name


class CapabilityRegistry:
    """Named capability installers, kept in registration order.

    Attributes:
        policy: AssemblyPolicy controlling name validation and replacement
        logger: AssemblerLogger for registry events
    """

    def __init__(
        self,
        policy: AssemblyPolicy | None = None,
        logger: AssemblerLogger | None = None,
    ) -> None:
        self.policy = policy if policy is not None else AssemblyPolicy()
        self.logger = logger if logger is not None else AssemblerLogger()
        self._installers: dict[str, Installer] = {}

    def register(self, name: str, installer: Installer) -> None:
        """Add or replace the installer for ``name``.

        The last registration for a name wins; installers are never merged.
        A replaced name keeps its original position in registration order.

        Args:
            name: Capability name matching ``policy.name_pattern``
            installer: Callable taking the in-progress sandbox as its only argument

        Raises:
            InvalidRegistrationError: If the name is empty or malformed, the
                installer is not callable, or the name is taken and the policy
                disallows replacement
        """
        if not isinstance(name, str) or not name:
            self.logger.log_registration_rejected(name, "invalid_name")
            raise InvalidRegistrationError(
                f"Capability name must be a non-empty string, got {name!r}"
            )
        if not self.policy.name_matches(name):
            self.logger.log_registration_rejected(name, "invalid_name")
            raise InvalidRegistrationError(
                f"Capability name {name!r} does not match pattern {self.policy.name_pattern!r}"
            )
        if not callable(installer):
            self.logger.log_registration_rejected(name, "installer_not_callable")
            raise InvalidRegistrationError(
                f"Installer for {name!r} must be callable, got {type(installer).__name__}"
            )

        replaced = name in self._installers
        if replaced and not self.policy.allow_replace:
            self.logger.log_registration_rejected(name, "duplicate_name")
            raise InvalidRegistrationError(f"Capability {name!r} is already registered")

        self._installers[name] = installer
        self.logger.log_capability_registered(name, _qualname(installer), replaced=replaced)

    def capability(self, name: str) -> Callable[[Installer], Installer]:
        """Decorator registering the decorated function as the installer for ``name``."""

        def decorator(installer: Installer) -> Installer:
            self.register(name, installer)
            return installer

        return decorator

    def unregister(self, name: str) -> None:
        """Remove ``name`` from the registry.

        Raises:
            UnknownCapabilityError: If ``name`` is not registered
        """
        try:
            del self._installers[name]
        except KeyError:
            raise UnknownCapabilityError([name]) from None
        self.logger.log_capability_unregistered(name)

    def get(self, name: str) -> Installer:
        """Return the installer registered for ``name``.

        Raises:
            UnknownCapabilityError: If ``name`` is not registered
        """
        try:
            return self._installers[name]
        except KeyError:
            raise UnknownCapabilityError([name]) from None

    def names(self) -> tuple[str, ...]:
        """Registered names in registration order."""
        return tuple(self._installers)

    def snapshot(self) -> Mapping[str, Installer]:
        """Shallow copy of the name -> installer mapping."""
        return dict(self._installers)

    def describe(self) -> list[CapabilityInfo]:
        """Describe every registered capability, in registration order."""
        infos = []
        for name, installer in self._installers.items():
            doc = (getattr(installer, "__doc__", None) or "").strip()
            infos.append(
                CapabilityInfo(
                    name=name,
                    installer=_qualname(installer),
                    summary=doc.splitlines()[0] if doc else "",
                )
            )
        return infos

    def __contains__(self, name: object) -> bool:
        return name in self._installers

    def __len__(self) -> int:
        return len(self._installers)

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        return f"CapabilityRegistry({list(self._installers)!r})"
