"""Capability assembler: builds sandboxes from registered capabilities.

The pipeline is linear: resolve the selector, create an empty Sandbox, run
each selected installer against it, then hand the finished sandbox to the
caller's continuation. The whole selector is validated before any installer
runs, so a sandbox is either fully assembled and delivered or not delivered
at all.
"""

from __future__ import annotations

import itertools
import time
from collections.abc import Callable, Iterable
from typing import Any, Final

from capbox.core.base import Sandbox
from capbox.core.errors import (
    CapabilityInstallError,
    ContinuationRequiredError,
    MemberCollisionError,
    UnknownCapabilityError,
)
from capbox.core.logging import AssemblerLogger
from capbox.core.models import AssemblyPolicy, AssemblyReport, CollisionPolicy
from capbox.registry import CapabilityRegistry

ALL: Final = "*"
"""Wildcard selector: every capability registered at call time."""

Selector = str | Iterable[str] | None
Continuation = Callable[[Sandbox], Any]


class Assembler:
    """Assembles Sandbox instances from a CapabilityRegistry.

    Attributes:
        registry: Source of capability installers (read-only during assembly)
        policy: AssemblyPolicy; defaults to the registry's policy
        logger: AssemblerLogger for assembly events; defaults to the registry's logger
        last_report: AssemblyReport of the most recent successful assembly
    """

    def __init__(
        self,
        registry: CapabilityRegistry,
        policy: AssemblyPolicy | None = None,
        logger: AssemblerLogger | None = None,
    ) -> None:
        self.registry = registry
        self.policy = policy if policy is not None else registry.policy
        self.logger = logger if logger is not None else registry.logger
        self.last_report: AssemblyReport | None = None
        self._sequence = itertools.count(1)
        self._assembled = 0

    @property
    def assembled_count(self) -> int:
        """Number of sandboxes delivered to a continuation so far."""
        return self._assembled

    def resolve(self, selector: Selector = None) -> list[str]:
        """Resolve a selector to a validated, deduplicated list of names.

        Args:
            selector: None or ALL for every registered capability (in
                registration order), a single name, or an iterable of names
                (caller order, first occurrence wins)

        Returns:
            Capability names in the order their installers will run

        Raises:
            UnknownCapabilityError: If any resolved name is not registered;
                lists every missing name
            TypeError: If the selector or one of its entries is not a string
        """
        if selector is None or selector == ALL:
            return list(self.registry.names())

        if isinstance(selector, str):
            requested: Iterable[Any] = [selector]
        elif isinstance(selector, Iterable):
            requested = selector
        else:
            raise TypeError(
                f"Selector must be None, {ALL!r}, a name or an iterable of names, "
                f"got {type(selector).__name__}"
            )

        names: list[str] = []
        for name in requested:
            if not isinstance(name, str):
                raise TypeError(f"Capability names must be strings, got {name!r}")
            if name not in names:
                names.append(name)

        missing = [name for name in names if name not in self.registry]
        if missing:
            raise UnknownCapabilityError(missing)
        return names

    def assemble(self, selector: Selector = None, continuation: Continuation | None = None) -> None:
        """Build a new Sandbox and pass it to ``continuation``.

        Installers run synchronously in resolved order, each receiving the
        sandbox as its only argument. ``continuation`` is called exactly once,
        after every installer has run; it is never called if assembly fails.
        Exceptions raised by the continuation propagate unchanged.

        Args:
            selector: See resolve()
            continuation: Callable receiving the assembled sandbox

        Raises:
            ContinuationRequiredError: If continuation is missing or not callable
            UnknownCapabilityError: If the selector names an unregistered capability
            MemberCollisionError: If two capabilities bind the same member and
                the collision policy is REJECT
            CapabilityInstallError: If an installer raises
        """
        if continuation is None or not callable(continuation):
            raise ContinuationRequiredError(
                "assemble() requires a callable continuation receiving the sandbox"
            )

        try:
            names = self.resolve(selector)
        except (UnknownCapabilityError, TypeError) as e:
            self.logger.log_assembly_failed(None, e)
            raise

        # Bind installers up front so the run is independent of later registry edits
        installers = [(name, self.registry.get(name)) for name in names]

        sequence = next(self._sequence)
        self.logger.log_assembly_start(sequence, names)

        box = Sandbox()
        report = self._install(box, installers, sequence)

        self.last_report = report
        self._assembled += 1
        self.logger.log_assembly_complete(report)

        continuation(box)

    def _install(
        self,
        box: Sandbox,
        installers: list[tuple[str, Callable[[Sandbox], Any]]],
        sequence: int,
    ) -> AssemblyReport:
        """Run installers against ``box`` and record who attached what."""
        owners: dict[str, str] = {}
        attached: dict[str, list[str]] = {}
        overwritten: list[str] = []
        removed: list[str] = []
        start = time.perf_counter()

        for name, installer in installers:
            before = dict(vars(box))
            try:
                installer(box)
            except Exception as e:
                error = CapabilityInstallError(name, f"{type(e).__name__}: {e}")
                self.logger.log_assembly_failed(sequence, error, capability=name)
                raise error from e

            added: list[str] = []
            for member, value in vars(box).items():
                if member not in before:
                    owners[member] = name
                    added.append(member)
                    continue
                if before[member] is value:
                    continue

                previous = owners[member]
                if self.policy.collision_policy is CollisionPolicy.REJECT:
                    error = MemberCollisionError(member, name, previous)
                    self.logger.log_assembly_failed(sequence, error, capability=name)
                    raise error

                self.logger.log_member_collision(
                    sequence, member, name, previous, self.policy.collision_policy.value
                )
                owners[member] = name
                overwritten.append(member)
                added.append(member)

            # Members deleted by this installer
            for member in before.keys() - vars(box).keys():
                previous = owners.pop(member)
                if self.policy.collision_policy is CollisionPolicy.REJECT:
                    error = MemberCollisionError(member, name, previous)
                    self.logger.log_assembly_failed(sequence, error, capability=name)
                    raise error

                self.logger.log_member_collision(
                    sequence, member, name, previous, self.policy.collision_policy.value
                )
                for owned in attached.values():
                    if member in owned:
                        owned.remove(member)
                removed.append(member)

            attached[name] = added

        return AssemblyReport(
            sequence=sequence,
            capabilities=[name for name, _ in installers],
            members=attached,
            overwritten=overwritten,
            removed=sorted(removed),
            duration_ms=(time.perf_counter() - start) * 1000,
        )
