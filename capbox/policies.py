"""Policy management for capability registration and assembly.

Provides the default assembly policy and TOML-based configuration loading
for controlling capability name validation, installer replacement, and
member collision handling.
"""

from __future__ import annotations

import os
import tomllib

from pydantic import ValidationError

from capbox.core.errors import PolicyValidationError
from capbox.core.models import DEFAULT_NAME_PATTERN, AssemblyPolicy

DEFAULT_POLICY = {
    # Last write wins when two capabilities bind the same member
    "collision_policy": "overwrite",

    # Re-registering a name replaces its installer
    "allow_replace": True,

    # Identifier-like names; the "*" wildcard can never be registered
    "name_pattern": DEFAULT_NAME_PATTERN,
}


def load_policy(path: str = "config/capbox.toml") -> AssemblyPolicy:
    """Load and merge user policy configuration with defaults.

    Performs a shallow merge of user-provided TOML settings with
    DEFAULT_POLICY. Settings may sit at the top level or under an
    ``[assembly]`` table.

    Args:
        path: Path to the policy TOML file. If file doesn't exist, returns
              AssemblyPolicy with defaults.

    Returns:
        AssemblyPolicy: Validated policy model with merged configuration.

    Raises:
        PolicyValidationError: If policy contains invalid values
        tomllib.TOMLDecodeError: If TOML file is malformed
        OSError: If file exists but cannot be read
    """
    if not os.path.exists(path):
        return AssemblyPolicy(**DEFAULT_POLICY)  # type: ignore[arg-type]

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("assembly", data)
    if not isinstance(section, dict):
        raise PolicyValidationError(f"Policy section 'assembly' must be a table in {path}")

    policy = DEFAULT_POLICY | section

    try:
        return AssemblyPolicy(**policy)  # type: ignore[arg-type]
    except PolicyValidationError:
        raise
    except ValidationError as e:
        raise PolicyValidationError(f"Policy validation failed: {e}") from e
