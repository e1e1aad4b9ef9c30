"""Amazon ECS orchestration client backed by boto3."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ecs_deploy.deploy.clients.base import BaseOrchestrationClient
from ecs_deploy.lib.errors import (
    ConfigError,
    RegistrationError,
    ServiceLookupError,
    ServiceUpdateError,
    TaskDefLookupError,
)
from ecs_deploy.lib.logging_config import get_logger
from ecs_deploy.models.deployment import ServiceState

logger = get_logger(__name__)


def _describe_error(exc: Exception) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message", str(exc))
        return f"{code}: {message}"
    return str(exc)


class EcsClient(BaseOrchestrationClient):
    """Talk to the ECS API for a single deployment run."""

    def __init__(self, client: Any | None = None, region: str | None = None) -> None:
        """Initialize the ECS client.

        Args:
            client: Preconfigured boto3 ECS client (tests inject a mock)
            region: Region override; the boto3 default chain is used when unset

        Raises:
            ConfigError: If no AWS region can be resolved
        """
        if client is None:
            session = boto3.session.Session(region_name=region or None)
            if not session.region_name:
                raise ConfigError(
                    field="aws_region",
                    message=(
                        "No AWS region configured. Pass --aws-region or set "
                        "PLUGIN_AWS_REGION / AWS_REGION."
                    ),
                )
            client = session.client("ecs")
            logger.debug(f"Created ECS client for region {session.region_name}")
        self._client = client

    def describe_service(self, cluster: str, service: str) -> ServiceState:
        """Describe a single service in a cluster."""
        try:
            response = self._client.describe_services(
                cluster=cluster, services=[service]
            )
        except (ClientError, BotoCoreError) as exc:
            raise ServiceLookupError(
                f"Failed to describe service '{service}' in cluster "
                f"'{cluster}': {_describe_error(exc)}"
            ) from exc

        services = response.get("services") or []
        if not services:
            reasons = ", ".join(
                failure.get("reason", "UNKNOWN")
                for failure in response.get("failures") or []
            )
            raise ServiceLookupError(
                f"Service '{service}' not found in cluster '{cluster}'"
                + (f" ({reasons})" if reasons else "")
            )

        state = ServiceState.from_api(services[0])
        if state.status == "INACTIVE":
            raise ServiceLookupError(
                f"Service '{service}' in cluster '{cluster}' is INACTIVE"
            )
        return state

    def describe_task_definition(self, task_definition: str) -> dict[str, Any]:
        """Describe a task definition."""
        try:
            response = self._client.describe_task_definition(
                taskDefinition=task_definition
            )
        except (ClientError, BotoCoreError) as exc:
            raise TaskDefLookupError(
                f"Failed to describe task definition '{task_definition}': "
                f"{_describe_error(exc)}"
            ) from exc

        definition = response.get("taskDefinition")
        if not definition:
            raise TaskDefLookupError(
                f"No task definition returned for '{task_definition}'"
            )
        return dict(definition)

    def register_task_definition(self, request: dict[str, Any]) -> dict[str, Any]:
        """Register a task definition revision."""
        try:
            response = self._client.register_task_definition(**request)
        except (ClientError, BotoCoreError) as exc:
            raise RegistrationError(
                f"Failed to register task definition for family "
                f"'{request.get('family')}': {_describe_error(exc)}"
            ) from exc

        definition = response.get("taskDefinition") or {}
        if not definition.get("taskDefinitionArn"):
            raise RegistrationError(
                "RegisterTaskDefinition response did not include a task definition ARN"
            )
        return dict(definition)

    def update_service(
        self,
        *,
        cluster: str,
        service: str,
        task_definition: str,
        desired_count: int,
    ) -> ServiceState:
        """Update the service to the given task definition."""
        try:
            response = self._client.update_service(
                cluster=cluster,
                service=service,
                taskDefinition=task_definition,
                desiredCount=desired_count,
            )
        except (ClientError, BotoCoreError) as exc:
            raise ServiceUpdateError(
                f"Failed to update service '{service}' in cluster '{cluster}': "
                f"{_describe_error(exc)}"
            ) from exc

        data = response.get("service")
        if not data:
            raise ServiceUpdateError(
                f"UpdateService response for '{service}' did not include the service"
            )
        return ServiceState.from_api(data)
