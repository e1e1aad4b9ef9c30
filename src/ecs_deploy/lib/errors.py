"""Custom exception hierarchy for ecs-deploy configuration and operations."""


class EcsDeployError(Exception):
    """Base exception for all ecs-deploy errors.

    All ecs-deploy exceptions inherit from this class, enabling a single
    catch point at the command-line boundary.
    """

    pass


class ConfigError(EcsDeployError):
    """Exception raised for configuration errors.

    Raised when deployment options are missing or fail validation, or when
    no AWS region can be resolved for the orchestration client.

    Attributes:
        field: The configuration field that caused the error
        message: Human-readable error message describing the issue
    """

    def __init__(self, field: str, message: str) -> None:
        """Initialize ConfigError with field and message.

        Args:
            field: Configuration field name where error occurred
            message: Descriptive error message
        """
        self.field = field
        self.message = message
        super().__init__(f"Configuration error in '{field}': {message}")


class EnvError(EcsDeployError):
    """Exception raised when the container environment cannot be resolved.

    Covers a missing or unparsable environment file and a malformed
    custom environment override.

    Attributes:
        path: Path of the environment file, or the override source name
        message: Human-readable error message
    """

    def __init__(self, path: str, message: str) -> None:
        """Initialize EnvError with the offending source and message."""
        self.path = path
        self.message = message
        super().__init__(f"Environment error in '{path}': {message}")


class DeploymentError(EcsDeployError):
    """Exception raised when a deployment step fails.

    Attributes:
        operation: The deployment step that failed
        message: Human-readable error message
    """

    def __init__(self, operation: str, message: str) -> None:
        """Create a deployment error for a specific operation."""
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}")


class ServiceLookupError(DeploymentError):
    """DescribeServices failed, or the cluster/service does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(operation="describe_service", message=message)


class TaskDefLookupError(DeploymentError):
    """DescribeTaskDefinition failed or returned no task definition."""

    def __init__(self, message: str) -> None:
        super().__init__(operation="describe_task_definition", message=message)


class RegistrationError(DeploymentError):
    """RegisterTaskDefinition failed or returned no task definition ARN."""

    def __init__(self, message: str) -> None:
        super().__init__(operation="register_task_definition", message=message)


class ServiceUpdateError(DeploymentError):
    """UpdateService failed.

    The task definition registered before the failure is left in place.
    """

    def __init__(self, message: str) -> None:
        super().__init__(operation="update_service", message=message)


class StateError(DeploymentError):
    """The service has no deployment to base the new task definition on."""

    def __init__(self, message: str) -> None:
        super().__init__(operation="read_service_state", message=message)


class MutationError(DeploymentError):
    """The current task definition cannot be revised (no container definitions)."""

    def __init__(self, message: str) -> None:
        super().__init__(operation="build_task_definition", message=message)


class DeploymentTimeoutError(DeploymentError):
    """Convergence was not observed before the polling timeout elapsed.

    The new task definition is registered and the service already points at
    it; only the confirmation is missing.

    Attributes:
        target: Task definition ARN that was expected to become active
        elapsed: Seconds spent polling
        timeout: Configured polling timeout in seconds
    """

    def __init__(self, target: str, elapsed: float, timeout: float) -> None:
        """Initialize DeploymentTimeoutError with polling details.

        Args:
            target: Task definition ARN the service was expected to converge on
            elapsed: Seconds elapsed since polling began
            timeout: Polling timeout in seconds
        """
        self.target = target
        self.elapsed = elapsed
        self.timeout = timeout
        super().__init__(
            operation="wait_for_convergence",
            message=(
                f"Service did not converge on {target} within {timeout:g}s "
                f"(waited {elapsed:.1f}s). Please check the application log."
            ),
        )
