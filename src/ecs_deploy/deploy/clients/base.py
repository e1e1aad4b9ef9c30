"""Base interface for orchestration API clients."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from ecs_deploy.models.deployment import ServiceState


class BaseOrchestrationClient(ABC):
    """Abstract base class for the container orchestration control plane."""

    @abstractmethod
    def describe_service(self, cluster: str, service: str) -> ServiceState:
        """Read the current state of a service.

        Args:
            cluster: Cluster name or ARN.
            service: Service name or ARN.

        Returns:
            ServiceState with desired count and deployments.

        Raises:
            ServiceLookupError: If the call fails or the service does not exist.
        """

    @abstractmethod
    def describe_task_definition(self, task_definition: str) -> dict[str, Any]:
        """Fetch a task definition by ARN or family:revision.

        Args:
            task_definition: Task definition reference.

        Returns:
            The task definition as returned by the API.

        Raises:
            TaskDefLookupError: If the call fails.
        """

    @abstractmethod
    def register_task_definition(self, request: dict[str, Any]) -> dict[str, Any]:
        """Register a new task definition revision.

        Args:
            request: RegisterTaskDefinition parameters.

        Returns:
            The registered task definition, including its new ARN.

        Raises:
            RegistrationError: If registration fails.
        """

    @abstractmethod
    def update_service(
        self,
        *,
        cluster: str,
        service: str,
        task_definition: str,
        desired_count: int,
    ) -> ServiceState:
        """Point a service at a task definition.

        Args:
            cluster: Cluster name or ARN.
            service: Service name or ARN.
            task_definition: Task definition ARN to deploy.
            desired_count: Desired task count to keep.

        Returns:
            ServiceState after the update call.

        Raises:
            ServiceUpdateError: If the update fails.
        """
