"""Deployment driver for ECS services.

Runs the deployment sequence against an orchestration client:

1. Describe the service and its current task definition
2. Resolve the container environment
3. Build and register a new task definition revision
4. Point the service at the new revision, keeping its desired count
5. Optionally wait for the service to converge

Any failing step aborts the run with its own error. Nothing is retried or
rolled back; a revision registered before a failed update stays registered.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from ecs_deploy.config.env_loader import EnvLoader, load_env_file, resolve_environment
from ecs_deploy.deploy.clients.base import BaseOrchestrationClient
from ecs_deploy.deploy.mutator import build_register_request
from ecs_deploy.deploy.poller import ConvergencePoller
from ecs_deploy.lib.errors import StateError
from ecs_deploy.lib.logging_config import get_logger
from ecs_deploy.models.deployment import DeploymentConfig, DeploySummary

logger = get_logger(__name__)


class EcsDeployer:
    """Deploy a new image to an existing ECS service."""

    def __init__(
        self,
        client: BaseOrchestrationClient,
        *,
        env_loader: EnvLoader = load_env_file,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the deployer.

        Args:
            client: Orchestration client used for every API call of the run
            env_loader: Reads the deploy environment file
            sleep: Sleep function used between convergence checks
            clock: Monotonic clock used for the convergence timeout
        """
        self._client = client
        self._env_loader = env_loader
        self._sleep = sleep
        self._clock = clock

    def deploy(self, config: DeploymentConfig, dry_run: bool = False) -> DeploySummary:
        """Run the deployment described by ``config``.

        Args:
            config: Deployment configuration
            dry_run: Build the new task definition without registering it

        Returns:
            DeploySummary with the old and new task definition ARNs

        Raises:
            ServiceLookupError: If the service cannot be described
            StateError: If the service has no deployments
            TaskDefLookupError: If the current task definition cannot be read
            EnvError: If the environment cannot be resolved
            MutationError: If the task definition has no containers
            RegistrationError: If registration fails
            ServiceUpdateError: If the service update fails
            DeploymentTimeoutError: If polling times out
        """
        logger.info(f"Deploy target: cluster={config.cluster} service={config.service}")

        service_state = self._client.describe_service(config.cluster, config.service)
        if not service_state.deployments:
            raise StateError(
                f"Service '{config.service}' has no deployments; "
                "there is no task definition to base the new revision on"
            )
        desired_count = service_state.desired_count

        current_arn = service_state.deployments[0].task_definition
        current_def = self._client.describe_task_definition(current_arn)
        logger.info(
            f"Current task definition: {current_def.get('taskDefinitionArn', current_arn)} "
            f"(cpu={current_def.get('cpu')}, memory={current_def.get('memory')} MiB)"
        )

        env = resolve_environment(
            config.deploy_env_path, config.custom_envs, loader=self._env_loader
        )
        limits = config.limits_policy()
        request = build_register_request(current_def, config.image, env, limits)

        if dry_run:
            logger.info("Dry run: skipping registration and service update")
            return DeploySummary(
                cluster=config.cluster,
                service=config.service,
                old_task_definition_arn=current_arn,
                cpu=request.get("cpu"),
                memory=request.get("memory"),
                limits_overridden=limits is not None,
                dry_run=True,
            )

        registered = self._client.register_task_definition(request)
        new_arn = registered["taskDefinitionArn"]
        logger.info(f"Registered task definition {new_arn}")

        logger.info(f"Updating {config.service} to {new_arn} (desired={desired_count})")
        updated = self._client.update_service(
            cluster=config.cluster,
            service=config.service,
            task_definition=new_arn,
            desired_count=desired_count,
        )
        logger.info(f"Deployed version: {updated.task_definition or new_arn}")

        converged: bool | None = None
        if config.polling_check_enable:
            poller = ConvergencePoller(self._client, sleep=self._sleep, clock=self._clock)
            poller.wait(
                cluster=config.cluster,
                service=config.service,
                target_task_definition=new_arn,
                interval=config.polling_interval,
                timeout=config.polling_timeout,
            )
            converged = True

        return DeploySummary(
            cluster=config.cluster,
            service=config.service,
            old_task_definition_arn=current_arn,
            new_task_definition_arn=new_arn,
            cpu=registered.get("cpu"),
            memory=registered.get("memory"),
            limits_overridden=limits is not None,
            converged=converged,
        )
