"""Convergence polling for ECS service updates.

After UpdateService, ECS runs the old and new task definitions side by side
until the old deployment drains. The service has converged once its only
deployment runs the newly registered task definition.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from ecs_deploy.deploy.clients.base import BaseOrchestrationClient
from ecs_deploy.lib.errors import DeploymentTimeoutError
from ecs_deploy.lib.logging_config import get_logger

logger = get_logger(__name__)


class PollState(str, Enum):
    """States of the convergence poller."""

    POLLING = "polling"
    DONE = "done"


@dataclass
class PollResult:
    """Outcome of a successful convergence wait."""

    polls: int
    elapsed: float


class ConvergencePoller:
    """Wait for a service to run a single deployment of a target revision."""

    def __init__(
        self,
        client: BaseOrchestrationClient,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client = client
        self._sleep = sleep
        self._clock = clock
        self.state: PollState | None = None

    def wait(
        self,
        *,
        cluster: str,
        service: str,
        target_task_definition: str,
        interval: float,
        timeout: float,
    ) -> PollResult:
        """Poll the service until it converges or the timeout elapses.

        Args:
            cluster: Cluster name or ARN
            service: Service name or ARN
            target_task_definition: ARN the service must converge on
            interval: Seconds to sleep between checks
            timeout: Total seconds to wait

        Returns:
            PollResult with the number of checks and the elapsed time

        Raises:
            DeploymentTimeoutError: If convergence is not seen within ``timeout``
            ServiceLookupError: If a describe call fails (not retried)
        """
        logger.info(f"Waiting for {service} to converge on {target_task_definition}")
        self.state = PollState.POLLING
        started = self._clock()
        polls = 0

        try:
            while self.state is PollState.POLLING:
                elapsed = self._clock() - started
                if elapsed > timeout:
                    logger.warning(f"Timed out after {elapsed:.1f}s, aborting wait")
                    raise DeploymentTimeoutError(
                        target=target_task_definition, elapsed=elapsed, timeout=timeout
                    )

                state = self._client.describe_service(cluster, service)
                polls += 1
                logger.debug(
                    f"Poll {polls}: {len(state.deployments)} deployment(s): "
                    f"{[d.task_definition for d in state.deployments]}"
                )
                if state.is_converged_on(target_task_definition):
                    self.state = PollState.DONE
                    break

                self._sleep(interval)
                logger.info(f"Time elapsed: {self._clock() - started:.1f}s")
        finally:
            self.state = PollState.DONE

        elapsed = self._clock() - started
        logger.info(f"Service {service} converged after {polls} check(s)")
        return PollResult(polls=polls, elapsed=elapsed)
