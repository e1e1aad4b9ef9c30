"""Task definition revision builder.

Turns the service's current task definition into a RegisterTaskDefinition
request. Only the first container's image and environment (and, when
overridden, the CPU/memory limits) change; every other registrable field is
carried over as-is.
"""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from ecs_deploy.config.defaults import READ_ONLY_TASK_DEFINITION_FIELDS
from ecs_deploy.lib.errors import MutationError
from ecs_deploy.models.deployment import ResourceLimits


def to_key_value_pairs(env: Mapping[str, str]) -> list[dict[str, str]]:
    """Convert an environment mapping to the ECS name/value pair list."""
    return [{"name": name, "value": value} for name, value in sorted(env.items())]


def build_register_request(
    current_def: Mapping[str, Any],
    image: str,
    env: Mapping[str, str],
    limits: ResourceLimits | None = None,
) -> dict[str, Any]:
    """Build a RegisterTaskDefinition request from the current definition.

    Args:
        current_def: Task definition from DescribeTaskDefinition
        image: Image reference for the first container
        env: Environment for the first container
        limits: CPU/memory override, or None to inherit the current limits

    Returns:
        Keyword arguments for ``register_task_definition``

    Raises:
        MutationError: If the definition has no container definitions
    """
    containers = current_def.get("containerDefinitions") or []
    if not containers:
        family = current_def.get("family", "<unknown>")
        raise MutationError(
            f"Task definition '{family}' has no container definitions to update"
        )

    request = {
        key: copy.deepcopy(value)
        for key, value in current_def.items()
        if key not in READ_ONLY_TASK_DEFINITION_FIELDS
    }

    container = request["containerDefinitions"][0]
    container["image"] = image
    container["environment"] = to_key_value_pairs(env)

    if limits is not None:
        request["cpu"] = str(limits.cpu)
        request["memory"] = str(limits.memory)
        container["cpu"] = limits.cpu
        container["memory"] = limits.memory

    return request
