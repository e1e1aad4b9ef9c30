"""Pydantic models for ECS deployments.

This module defines the deployment configuration supplied at the command-line
boundary, the service state read back from ECS, and the deployment summary
reported on success.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from ecs_deploy.config.defaults import (
    DEFAULT_CPU_LIMIT,
    DEFAULT_DEPLOY_ENV_PATH,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_POLLING_TIMEOUT,
)


class ResourceLimits(BaseModel):
    """CPU and memory limits applied to the task and its first container.

    Attributes:
        cpu: CPU units reserved for the task and container
        memory: Hard memory limit in MiB
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    cpu: int = Field(..., gt=0, description="CPU units")
    memory: int = Field(..., gt=0, description="Memory limit in MiB")


class DeploymentConfig(BaseModel):
    """Configuration for a single deployment run.

    Built once at the command-line boundary and passed to the deployer.

    Attributes:
        cluster: ECS cluster name or ARN
        service: ECS service name or ARN
        aws_region: AWS region override (default chain when unset)
        image: Container image reference to deploy
        deploy_env_path: Path to the key=value environment file
        custom_envs: Environment variables added or overwritten on top of the file
        polling_check_enable: Wait until the new task definition is the only deployment
        polling_interval: Seconds between convergence checks
        polling_timeout: Seconds to wait for convergence
        custom_resource_limit_enable: Override CPU and memory limits
        cpu_limit: CPU units used when limits are overridden
        memory_limit: Memory (MiB) used when limits are overridden
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    cluster: str = Field(..., min_length=1, description="ECS cluster")
    service: str = Field(..., min_length=1, description="ECS service")
    aws_region: str | None = Field(
        default=None, description="AWS region of the ECS cluster"
    )
    image: str = Field(..., min_length=1, description="Container image to deploy")
    deploy_env_path: str = Field(
        default=DEFAULT_DEPLOY_ENV_PATH, description="Path to the dotenv file"
    )
    custom_envs: dict[str, str] = Field(
        default_factory=dict,
        description="Custom environment variables to add or overwrite",
    )
    polling_check_enable: bool = Field(
        default=False, description="Wait for the old task definition to drain"
    )
    polling_interval: int = Field(
        default=DEFAULT_POLLING_INTERVAL, description="Polling interval in seconds"
    )
    polling_timeout: int = Field(
        default=DEFAULT_POLLING_TIMEOUT, description="Polling timeout in seconds"
    )
    custom_resource_limit_enable: bool = Field(
        default=False, description="Customize CPU and memory limits"
    )
    cpu_limit: int = Field(default=DEFAULT_CPU_LIMIT, gt=0, description="CPU units")
    memory_limit: int = Field(
        default=DEFAULT_MEMORY_LIMIT, gt=0, description="Memory limit in MiB"
    )

    @model_validator(mode="after")
    def validate_polling_window(self) -> "DeploymentConfig":
        """Validate that 0 < polling_interval < polling_timeout when polling."""
        if not self.polling_check_enable:
            return self
        if self.polling_interval <= 0:
            raise ValueError(
                f"polling_interval must be > 0, got {self.polling_interval}"
            )
        if self.polling_interval >= self.polling_timeout:
            raise ValueError(
                f"polling_interval ({self.polling_interval}) must be < "
                f"polling_timeout ({self.polling_timeout})"
            )
        return self

    def limits_policy(self) -> ResourceLimits | None:
        """Return the limits to apply, or None to inherit the current ones."""
        if not self.custom_resource_limit_enable:
            return None
        return ResourceLimits(cpu=self.cpu_limit, memory=self.memory_limit)


class ServiceDeployment(BaseModel):
    """One entry of a service's deployment list."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = Field(default=None, description="Deployment identifier")
    status: str | None = Field(default=None, description="PRIMARY, ACTIVE or INACTIVE")
    task_definition: str = Field(..., description="Task definition ARN")
    desired_count: int = Field(default=0, description="Desired task count")
    running_count: int = Field(default=0, description="Running task count")
    rollout_state: str | None = Field(default=None, description="Rollout state")

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ServiceDeployment":
        """Build from a DescribeServices deployment entry."""
        return cls(
            id=data.get("id"),
            status=data.get("status"),
            task_definition=data.get("taskDefinition", ""),
            desired_count=data.get("desiredCount", 0),
            running_count=data.get("runningCount", 0),
            rollout_state=data.get("rolloutState"),
        )


class ServiceState(BaseModel):
    """Snapshot of an ECS service as returned by DescribeServices."""

    model_config = ConfigDict(extra="ignore")

    service_name: str = Field(..., description="Service name")
    service_arn: str | None = Field(default=None, description="Service ARN")
    status: str | None = Field(default=None, description="ACTIVE, DRAINING or INACTIVE")
    desired_count: int = Field(default=0, description="Desired task count")
    running_count: int = Field(default=0, description="Running task count")
    task_definition: str | None = Field(
        default=None, description="Task definition the service points at"
    )
    deployments: list[ServiceDeployment] = Field(
        default_factory=list, description="Deployments, in API order"
    )

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "ServiceState":
        """Build from a DescribeServices service entry."""
        return cls(
            service_name=data.get("serviceName", ""),
            service_arn=data.get("serviceArn"),
            status=data.get("status"),
            desired_count=data.get("desiredCount", 0),
            running_count=data.get("runningCount", 0),
            task_definition=data.get("taskDefinition"),
            deployments=[
                ServiceDeployment.from_api(item) for item in data.get("deployments", [])
            ],
        )

    def is_converged_on(self, task_definition_arn: str) -> bool:
        """Return True when the only deployment runs ``task_definition_arn``."""
        return (
            len(self.deployments) == 1
            and self.deployments[0].task_definition == task_definition_arn
        )


class DeploySummary(BaseModel):
    """Result of a deployment run.

    Attributes:
        cluster: ECS cluster
        service: ECS service
        old_task_definition_arn: Task definition the service ran before
        new_task_definition_arn: Registered task definition (None on dry run)
        cpu: Task-level CPU of the new (or would-be) definition
        memory: Task-level memory of the new (or would-be) definition
        limits_overridden: Whether custom resource limits were applied
        converged: True if polling confirmed convergence, None if not polled
        dry_run: Whether registration and update were skipped
    """

    model_config = ConfigDict(extra="forbid")

    cluster: str = Field(..., description="ECS cluster")
    service: str = Field(..., description="ECS service")
    old_task_definition_arn: str = Field(..., description="Previous task definition")
    new_task_definition_arn: str | None = Field(
        default=None, description="Newly registered task definition"
    )
    cpu: str | None = Field(default=None, description="Task CPU")
    memory: str | None = Field(default=None, description="Task memory (MiB)")
    limits_overridden: bool = Field(
        default=False, description="Whether custom resource limits were applied"
    )
    converged: bool | None = Field(
        default=None, description="Convergence confirmed by polling"
    )
    dry_run: bool = Field(default=False, description="No changes were made")
