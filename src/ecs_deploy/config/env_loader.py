"""Container environment resolution.

Loads the key=value deploy environment file and merges the custom
environment overrides on top of it. The result becomes the ``environment``
of the first container definition.
"""

from __future__ import annotations

import io
import json
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values, find_dotenv, load_dotenv
from dotenv.parser import parse_stream

from ecs_deploy.lib.errors import EnvError
from ecs_deploy.lib.logging_config import get_logger

logger = get_logger(__name__)

EnvLoader = Callable[[str | Path], dict[str, str]]


def load_env_file(path: str | Path) -> dict[str, str]:
    """Read key=value pairs from a dotenv file.

    Args:
        path: Path to the environment file

    Returns:
        Mapping of variable names to values, in file order

    Raises:
        EnvError: If the file is missing, unreadable, or has unparsable lines
    """
    env_path = Path(path)
    if not env_path.is_file():
        raise EnvError(str(env_path), "Environment file not found")

    try:
        content = env_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise EnvError(str(env_path), f"Failed to read environment file: {exc}") from exc

    bad_lines = [
        binding.original.line
        for binding in parse_stream(io.StringIO(content))
        if binding.error
    ]
    if bad_lines:
        line_list = ", ".join(str(line) for line in bad_lines)
        raise EnvError(str(env_path), f"Could not parse line(s): {line_list}")

    values = dotenv_values(stream=io.StringIO(content))
    # A bare key without '=' has no value
    env = {key: value if value is not None else "" for key, value in values.items()}
    logger.debug(f"Loaded {len(env)} variable(s) from {env_path}")
    return env


def parse_custom_envs(raw: str | None) -> dict[str, str]:
    """Decode the JSON-encoded custom environment override.

    Args:
        raw: JSON object string, e.g. '{"api_url": "https://example.com"}'

    Returns:
        Override mapping with string values; empty when ``raw`` is blank

    Raises:
        EnvError: If ``raw`` is not valid JSON or not a JSON object
    """
    if raw is None or not raw.strip():
        return {}

    try:
        payload: Any = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise EnvError("custom-envs", f"Invalid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise EnvError(
            "custom-envs",
            f"Expected a JSON object, got {type(payload).__name__}",
        )

    return {
        str(key): value if isinstance(value, str) else json.dumps(value)
        for key, value in payload.items()
    }


def resolve_environment(
    base_path: str | Path,
    overrides: Mapping[str, str] | None = None,
    loader: EnvLoader = load_env_file,
) -> dict[str, str]:
    """Merge the environment file with custom overrides.

    Override keys are upper-cased before the merge and win on collision.

    Args:
        base_path: Path to the environment file
        overrides: Custom environment variables to add or overwrite
        loader: Callable reading the base file

    Returns:
        Final environment for the container

    Raises:
        EnvError: Propagated from the loader
    """
    env = dict(loader(base_path))
    for key, value in (overrides or {}).items():
        env[key.upper()] = value

    if overrides:
        logger.debug(f"Applied {len(overrides)} custom environment override(s)")
    return env


def load_process_env_file(path: str | Path) -> None:
    """Load a dotenv file into the process environment.

    Existing variables are not overwritten. Used for AWS credentials and
    other settings consumed by the SDK itself.

    Raises:
        EnvError: If the file does not exist
    """
    env_path = Path(path)
    if not env_path.is_file():
        raise EnvError(str(env_path), "Environment file not found")
    load_dotenv(env_path, override=False)
    logger.debug(f"Loaded process environment from {env_path}")


def load_working_dir_dotenv() -> str | None:
    """Load ``.env`` from the working directory into the process environment.

    The file is searched for in the current directory and its parents.
    Variables already set in the environment are not overwritten.

    Returns:
        Path of the loaded file, or None when there is no ``.env``
    """
    path = find_dotenv(usecwd=True)
    if not path:
        return None
    load_dotenv(path, override=False)
    logger.debug(f"Loaded process environment from {path}")
    return path
