"""ecs-deploy deployment engine.

This package provides the deployment functionality: building a revised task
definition, registering it, updating the service, and waiting for the
service to converge.
"""

from ecs_deploy.deploy.driver import EcsDeployer
from ecs_deploy.deploy.mutator import build_register_request
from ecs_deploy.deploy.poller import ConvergencePoller, PollResult, PollState

__all__ = [
    "ConvergencePoller",
    "EcsDeployer",
    "PollResult",
    "PollState",
    "build_register_request",
]
