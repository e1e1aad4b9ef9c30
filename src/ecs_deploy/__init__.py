"""ecs-deploy - Deploy a new image to an existing Amazon ECS service.

Reads the service's current task definition, registers a revision with the
new image and environment (and optionally new CPU/memory limits), points the
service at it, and can wait until the rolling update has finished.
"""

from ecs_deploy.lib.errors import ConfigError, DeploymentError, EcsDeployError, EnvError

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ConfigError",
    "DeploymentError",
    "EcsDeployError",
    "EnvError",
]
