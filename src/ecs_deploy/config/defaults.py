"""Default values for ecs-deploy options."""

DEFAULT_DEPLOY_ENV_PATH = ".deploy.env"

# Polling configuration defaults
DEFAULT_POLLING_INTERVAL = 10  # seconds
DEFAULT_POLLING_TIMEOUT = 600  # seconds

# Only applied when custom resource limits are enabled
DEFAULT_CPU_LIMIT = 512  # CPU units
DEFAULT_MEMORY_LIMIT = 512  # MiB

# Fields present in DescribeTaskDefinition output that RegisterTaskDefinition rejects
READ_ONLY_TASK_DEFINITION_FIELDS: tuple[str, ...] = (
    "taskDefinitionArn",
    "revision",
    "status",
    "requiresAttributes",
    "compatibilities",
    "registeredAt",
    "registeredBy",
    "deregisteredAt",
)
