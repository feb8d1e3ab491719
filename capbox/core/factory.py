"""Factory function for wiring a registry and assembler together.

Provides create_assembler() which builds an Assembler that shares one
policy and one logger with its CapabilityRegistry, optionally loading the
policy from a TOML file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from capbox.core.logging import AssemblerLogger
from capbox.core.models import AssemblyPolicy

if TYPE_CHECKING:
    from capbox.assembler import Assembler
    from capbox.registry import CapabilityRegistry


def create_assembler(
    registry: CapabilityRegistry | None = None,
    policy: AssemblyPolicy | None = None,
    logger: AssemblerLogger | None = None,
    policy_path: str | Path | None = None,
) -> Assembler:
    """Create an Assembler, building a fresh registry when none is given.

    Args:
        registry: Optional existing CapabilityRegistry. If None, an empty one
                  is created with the resolved policy and logger.
        policy: Optional AssemblyPolicy. Takes precedence over policy_path.
                If both are None, the registry's policy (or defaults) is used.
                When given with an existing registry, it replaces the registry's
                policy so registration and assembly agree.
        logger: Optional AssemblerLogger. If None, the registry's logger is
                reused, or a default 'capbox' logger is created.
        policy_path: Optional path to a policy TOML file, see load_policy().

    Returns:
        Assembler bound to the registry

    Raises:
        ValueError: If registry, policy or logger has the wrong type
        PolicyValidationError: If the policy file contains invalid values

    Examples:
        >>> assembler = create_assembler()
        >>> assembler.registry.register("dom", lambda box: setattr(box, "get_element", len))
        >>> assembler.assemble(["dom"], lambda box: print(box.get_element("abc")))
        3

        >>> # Reject member collisions between capabilities
        >>> from capbox import CollisionPolicy
        >>> strict = create_assembler(policy=AssemblyPolicy(collision_policy=CollisionPolicy.REJECT))
    """
    from capbox.assembler import Assembler
    from capbox.policies import load_policy
    from capbox.registry import CapabilityRegistry

    if registry is not None and not isinstance(registry, CapabilityRegistry):
        raise ValueError(
            f"Invalid registry: {registry!r}. Must be a CapabilityRegistry instance."
        )
    if policy is not None and not isinstance(policy, AssemblyPolicy):
        raise ValueError(f"Invalid policy: {policy!r}. Must be an AssemblyPolicy instance.")
    if logger is not None and not isinstance(logger, AssemblerLogger):
        raise ValueError(f"Invalid logger: {logger!r}. Must be an AssemblerLogger instance.")

    if policy is None and policy_path is not None:
        policy = load_policy(str(policy_path))

    if registry is None:
        registry = CapabilityRegistry(policy=policy, logger=logger)
    elif policy is not None:
        # Registration must follow the same policy as assembly
        registry.policy = policy

    return Assembler(registry, policy=policy, logger=logger)
