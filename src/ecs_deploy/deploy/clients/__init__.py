"""Orchestration API clients."""

from __future__ import annotations

from ecs_deploy.deploy.clients.base import BaseOrchestrationClient


def create_ecs_client(region: str | None = None) -> BaseOrchestrationClient:
    """Create the ECS client for a deployment run.

    Args:
        region: AWS region override; the boto3 default chain is used when unset

    Raises:
        ConfigError: If no AWS region can be resolved
    """
    from ecs_deploy.deploy.clients.ecs import EcsClient

    return EcsClient(region=region)


__all__ = ["BaseOrchestrationClient", "create_ecs_client"]
