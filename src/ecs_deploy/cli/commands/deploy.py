"""CLI commands for deploying to Amazon ECS.

Implements 'ecs-deploy run' (register a new task definition revision and
update the service) and 'ecs-deploy status' (report a service's deployments).
Every value option can also be supplied through a PLUGIN_* environment
variable so the tool runs unchanged as a CI pipeline plugin.
"""

from __future__ import annotations

import sys
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import click
from pydantic import ValidationError as PydanticValidationError

from ecs_deploy.config.defaults import (
    DEFAULT_CPU_LIMIT,
    DEFAULT_DEPLOY_ENV_PATH,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_POLLING_TIMEOUT,
)
from ecs_deploy.config.env_loader import load_process_env_file, parse_custom_envs
from ecs_deploy.deploy.clients import create_ecs_client
from ecs_deploy.deploy.driver import EcsDeployer
from ecs_deploy.lib.errors import (
    ConfigError,
    DeploymentError,
    DeploymentTimeoutError,
    EnvError,
)
from ecs_deploy.lib.logging_config import get_logger, setup_logging
from ecs_deploy.models.deployment import DeploymentConfig, DeploySummary

logger = get_logger(__name__)

ERROR_PREFIX = "ecs-deploy Error:"


@contextmanager
def handle_deployment_errors() -> Generator[None, None, None]:
    """Context manager for consistent error handling in deployment commands.

    Exit codes:
        2: Configuration or environment error
        3: Deployment error
        4: Deployment timeout (service update already succeeded)
    """
    try:
        yield
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        click.secho(f"{ERROR_PREFIX} configuration error", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(2)
    except EnvError as e:
        logger.error(f"Environment error: {e}")
        click.secho(f"{ERROR_PREFIX} environment error", fg="red", err=True)
        click.echo(f"  {e.path}: {e.message}", err=True)
        sys.exit(2)
    except DeploymentTimeoutError as e:
        logger.error(f"Deployment timeout: {e}")
        click.secho(f"{ERROR_PREFIX} deployment timeout", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        click.echo(
            "  The service was updated; the rollout may still complete.", err=True
        )
        sys.exit(4)
    except DeploymentError as e:
        logger.error(f"Deployment error: {e}")
        click.secho(f"{ERROR_PREFIX} {e.operation} failed", fg="red", err=True)
        click.echo(f"  {e.message}", err=True)
        sys.exit(3)
    except Exception as e:
        logger.exception(f"Unexpected error: {e}")
        click.secho(f"{ERROR_PREFIX} {e}", fg="red", err=True)
        sys.exit(3)


@click.command()
@click.option("--cluster", envvar="PLUGIN_CLUSTER", required=True, help="ECS cluster")
@click.option("--service", envvar="PLUGIN_SERVICE", required=True, help="ECS service")
@click.option(
    "--aws-region",
    envvar="PLUGIN_AWS_REGION",
    default=None,
    help="AWS region of ECS cluster",
)
@click.option(
    "--image-name",
    envvar="PLUGIN_IMAGE_NAME",
    required=True,
    help="Docker image to be deployed",
)
@click.option(
    "--deploy-env-path",
    envvar="PLUGIN_DEPLOY_ENV_PATH",
    default=DEFAULT_DEPLOY_ENV_PATH,
    show_default=True,
    help="Path to the dotenv file with the container environment",
)
@click.option(
    "--custom-envs",
    envvar=["PLUGIN_CUSTOM_ENVS", "PLUGIN_CUSTOM_ENV"],
    default=None,
    help="JSON object of environment variables to add or overwrite",
)
@click.option(
    "--polling-check-enable",
    envvar="PLUGIN_POLLING_CHECK_ENABLE",
    is_flag=True,
    help="Wait until the old task definition is replaced",
)
@click.option(
    "--polling-interval",
    envvar="PLUGIN_POLLING_INTERVAL",
    type=int,
    default=DEFAULT_POLLING_INTERVAL,
    show_default=True,
    help="Seconds between convergence checks",
)
@click.option(
    "--polling-timeout",
    envvar="PLUGIN_POLLING_TIMEOUT",
    type=int,
    default=DEFAULT_POLLING_TIMEOUT,
    show_default=True,
    help="Seconds to wait for the old task definition to be replaced",
)
@click.option(
    "--custom-resource-limit-enable",
    envvar="PLUGIN_CUSTOM_RESOURCE_LIMIT_ENABLE",
    is_flag=True,
    help="Customize CPU and memory limits",
)
@click.option(
    "--cpu-limit",
    envvar="PLUGIN_CPU_LIMIT",
    type=int,
    default=DEFAULT_CPU_LIMIT,
    show_default=True,
    help="CPU units reserved for the task and container",
)
@click.option(
    "--memory-limit",
    envvar="PLUGIN_MEMORY_LIMIT",
    type=int,
    default=DEFAULT_MEMORY_LIMIT,
    show_default=True,
    help="Hard memory limit (MiB) for the task and container",
)
@click.option(
    "--env-file",
    type=click.Path(),
    default=None,
    help="Dotenv file loaded into the process environment (e.g. AWS credentials)",
)
@click.option(
    "--dry-run",
    is_flag=True,
    help="Show what would be done without registering or updating",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug logging",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Suppress progress output",
)
def run(
    cluster: str,
    service: str,
    aws_region: str | None,
    image_name: str,
    deploy_env_path: str,
    custom_envs: str | None,
    polling_check_enable: bool,
    polling_interval: int,
    polling_timeout: int,
    custom_resource_limit_enable: bool,
    cpu_limit: int,
    memory_limit: int,
    env_file: str | None,
    dry_run: bool,
    verbose: bool,
    quiet: bool,
) -> None:
    """Deploy a new image to an ECS service.

    Registers a new revision of the service's task definition with the given
    image and the environment from the dotenv file, then updates the service.

    Example:

        ecs-deploy run --cluster prod --service web --image-name app:2.0

        ecs-deploy run --cluster prod --service web --image-name app:2.0 \\
            --polling-check-enable --polling-timeout 300
    """
    if not quiet:
        setup_logging(verbose=verbose, quiet=quiet)

    with handle_deployment_errors():
        if env_file:
            load_process_env_file(env_file)

        config = _build_config(
            cluster=cluster,
            service=service,
            aws_region=aws_region or None,
            image=image_name,
            deploy_env_path=deploy_env_path,
            custom_envs=parse_custom_envs(custom_envs),
            polling_check_enable=polling_check_enable,
            polling_interval=polling_interval,
            polling_timeout=polling_timeout,
            custom_resource_limit_enable=custom_resource_limit_enable,
            cpu_limit=cpu_limit,
            memory_limit=memory_limit,
        )

        if not quiet:
            click.echo()
            click.secho("Deploy target:", bold=True)
            click.echo(f"  Cluster:   {config.cluster}")
            click.echo(f"  Service:   {config.service}")
            click.echo(f"  Image:     {config.image}")
            click.echo()

        client = create_ecs_client(config.aws_region)
        summary = EcsDeployer(client).deploy(config, dry_run=dry_run)

        _display_summary(summary, quiet)


@click.command()
@click.option("--cluster", envvar="PLUGIN_CLUSTER", required=True, help="ECS cluster")
@click.option("--service", envvar="PLUGIN_SERVICE", required=True, help="ECS service")
@click.option(
    "--aws-region",
    envvar="PLUGIN_AWS_REGION",
    default=None,
    help="AWS region of ECS cluster",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose debug logging",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Only print whether the service has converged",
)
def status(
    cluster: str,
    service: str,
    aws_region: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Show the deployments of an ECS service."""
    if not quiet:
        setup_logging(verbose=verbose, quiet=quiet)

    with handle_deployment_errors():
        client = create_ecs_client(aws_region or None)
        state = client.describe_service(cluster, service)
        converged = state.task_definition is not None and state.is_converged_on(
            state.task_definition
        )

        if quiet:
            click.echo("converged" if converged else "in-progress")
            sys.exit(0)

        click.echo()
        click.secho("Service Status", bold=True)
        click.echo(f"  Service:   {state.service_name}")
        click.echo(f"  Status:    {state.status or 'UNKNOWN'}")
        click.echo(f"  Tasks:     {state.running_count}/{state.desired_count} running")
        click.echo(f"  Task def:  {state.task_definition or '(unknown)'}")
        click.echo("  Deployments:")
        for deployment in state.deployments:
            click.echo(
                f"    - {deployment.status or '?'} {deployment.task_definition} "
                f"({deployment.running_count}/{deployment.desired_count} running)"
            )
        if converged:
            click.secho("  Converged", fg="green")
        else:
            click.secho("  Rollout in progress", fg="yellow")
        click.echo()


def _build_config(**values: Any) -> DeploymentConfig:
    try:
        return DeploymentConfig(**values)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "config"
        raise ConfigError(field=field, message=first.get("msg", str(exc))) from exc


def _display_summary(summary: DeploySummary, quiet: bool) -> None:
    """Display the deployment summary.

    Args:
        summary: Result of the deployment
        quiet: If True, only print the new task definition ARN
    """
    if quiet:
        click.echo(summary.new_task_definition_arn or summary.old_task_definition_arn)
        return

    if summary.dry_run:
        click.secho("[DRY RUN] Would register a new revision of:", fg="yellow")
        click.echo(f"  Task def:  {summary.old_task_definition_arn}")
        click.echo(f"  CPU:       {summary.cpu}")
        click.echo(f"  Memory:    {summary.memory} MiB")
        click.secho("[DRY RUN] No task definition was registered", fg="yellow")
        return

    click.echo()
    click.secho("=" * 60, fg="green")
    click.secho("  Deploy is finished", fg="green", bold=True)
    click.secho("=" * 60, fg="green")
    click.echo()
    click.echo(f"  Cluster:   {summary.cluster}")
    click.echo(f"  Service:   {summary.service}")
    click.echo(f"  Previous:  {summary.old_task_definition_arn}")
    click.echo(f"  Deployed:  {summary.new_task_definition_arn}")
    click.echo(f"  CPU:       {summary.cpu}")
    click.echo(f"  Memory:    {summary.memory} MiB")
    if summary.limits_overridden:
        click.echo("  Limits:    custom")
    if summary.converged:
        click.echo("  Rollout:   converged")
    click.echo()
