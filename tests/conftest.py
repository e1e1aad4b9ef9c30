"""Pytest configuration and shared fixtures for ecs-deploy tests."""

from __future__ import annotations

import copy
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from ecs_deploy.deploy.clients.base import BaseOrchestrationClient
from ecs_deploy.models.deployment import ServiceDeployment, ServiceState

TASK_DEF_PREFIX = "arn:aws:ecs:eu-west-1:123456789012:task-definition"
CURRENT_TASK_DEF_ARN = f"{TASK_DEF_PREFIX}/web:3"
NEW_TASK_DEF_ARN = f"{TASK_DEF_PREFIX}/web:4"


def make_service_state(*task_definitions: str, desired_count: int = 2) -> ServiceState:
    """Build a ServiceState whose deployments run the given task definitions."""
    return ServiceState(
        service_name="web",
        service_arn="arn:aws:ecs:eu-west-1:123456789012:service/prod/web",
        status="ACTIVE",
        desired_count=desired_count,
        running_count=desired_count,
        task_definition=task_definitions[0] if task_definitions else None,
        deployments=[
            ServiceDeployment(
                id=f"ecs-svc/{index}",
                status="PRIMARY" if index == 0 else "ACTIVE",
                task_definition=arn,
                desired_count=desired_count,
            )
            for index, arn in enumerate(task_definitions)
        ],
    )


class FakeOrchestrationClient(BaseOrchestrationClient):
    """In-memory orchestration client that records every call.

    ``service_states`` are returned by successive describe_service calls; the
    last one repeats. ``errors`` maps a method name to the exception it raises.
    """

    def __init__(
        self,
        service_states: Iterable[ServiceState],
        task_definition: dict[str, Any],
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self._states = list(service_states)
        self._task_definition = task_definition
        self._errors = errors or {}
        self.calls: list[tuple[str, Any]] = []
        self.registered: list[dict[str, Any]] = []

    def _maybe_raise(self, name: str) -> None:
        if name in self._errors:
            raise self._errors[name]

    def describe_service(self, cluster: str, service: str) -> ServiceState:
        self.calls.append(("describe_service", (cluster, service)))
        self._maybe_raise("describe_service")
        if len(self._states) > 1:
            return self._states.pop(0)
        return self._states[0]

    def describe_task_definition(self, task_definition: str) -> dict[str, Any]:
        self.calls.append(("describe_task_definition", task_definition))
        self._maybe_raise("describe_task_definition")
        return copy.deepcopy(self._task_definition)

    def register_task_definition(self, request: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("register_task_definition", request))
        self._maybe_raise("register_task_definition")
        self.registered.append(copy.deepcopy(request))
        registered = copy.deepcopy(request)
        registered["taskDefinitionArn"] = NEW_TASK_DEF_ARN
        registered["revision"] = 4
        return registered

    def update_service(
        self,
        *,
        cluster: str,
        service: str,
        task_definition: str,
        desired_count: int,
    ) -> ServiceState:
        self.calls.append(
            (
                "update_service",
                {
                    "cluster": cluster,
                    "service": service,
                    "task_definition": task_definition,
                    "desired_count": desired_count,
                },
            )
        )
        self._maybe_raise("update_service")
        return make_service_state(task_definition, CURRENT_TASK_DEF_ARN)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def task_definition() -> dict[str, Any]:
    """Task definition revision 3 as returned by DescribeTaskDefinition."""
    return {
        "taskDefinitionArn": CURRENT_TASK_DEF_ARN,
        "family": "web",
        "revision": 3,
        "status": "ACTIVE",
        "taskRoleArn": "arn:aws:iam::123456789012:role/web-task",
        "executionRoleArn": "arn:aws:iam::123456789012:role/web-execution",
        "networkMode": "awsvpc",
        "cpu": "256",
        "memory": "512",
        "requiresCompatibilities": ["FARGATE"],
        "compatibilities": ["EC2", "FARGATE"],
        "requiresAttributes": [{"name": "com.amazonaws.ecs.capability.task-iam-role"}],
        "placementConstraints": [],
        "volumes": [{"name": "scratch", "host": {}}],
        "registeredAt": datetime(2026, 1, 1, tzinfo=timezone.utc),
        "registeredBy": "arn:aws:iam::123456789012:user/ci",
        "containerDefinitions": [
            {
                "name": "web",
                "image": "app:1.0",
                "cpu": 256,
                "memory": 512,
                "essential": True,
                "portMappings": [{"containerPort": 8080, "protocol": "tcp"}],
                "environment": [{"name": "OLD", "value": "1"}],
                "logConfiguration": {
                    "logDriver": "awslogs",
                    "options": {"awslogs-group": "/ecs/web"},
                },
            },
            {
                "name": "sidecar",
                "image": "envoy:1.29",
                "essential": False,
                "environment": [{"name": "MODE", "value": "proxy"}],
            },
        ],
    }


@pytest.fixture
def env_file(tmp_path: Path) -> Path:
    """Deploy environment file containing PORT=8080."""
    path = tmp_path / ".deploy.env"
    path.write_text("PORT=8080\n", encoding="utf-8")
    return path


@pytest.fixture
def fake_client(task_definition: dict[str, Any]) -> FakeOrchestrationClient:
    """Fake client for service 'web' currently running revision 3."""
    return FakeOrchestrationClient(
        service_states=[make_service_state(CURRENT_TASK_DEF_ARN)],
        task_definition=task_definition,
    )
