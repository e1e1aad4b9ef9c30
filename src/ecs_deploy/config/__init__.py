"""Configuration helpers for ecs-deploy.

Main components:
- Default option values
- Environment file loading and custom environment overrides
"""

from ecs_deploy.config.env_loader import (
    load_env_file,
    load_process_env_file,
    load_working_dir_dotenv,
    parse_custom_envs,
    resolve_environment,
)

__all__ = [
    "load_env_file",
    "load_process_env_file",
    "load_working_dir_dotenv",
    "parse_custom_envs",
    "resolve_environment",
]
