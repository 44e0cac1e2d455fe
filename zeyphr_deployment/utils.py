import json
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from zeyphr_deployment.constants import DOTENV_FILEPATH

ENV_VARIABLE_PATTERN = re.compile(r"^\$\{([A-Za-z_][A-Za-z0-9_]*)\}$")


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def load_environment(dotenv_filepath: Optional[Path] = None) -> bool:
    """
    Loads a .env file into the process environment.
    Variables already set in the environment take precedence.
    """
    dotenv_filepath = dotenv_filepath or DOTENV_FILEPATH
    return load_dotenv(dotenv_path=dotenv_filepath, override=False)


def resolve_env_value(value: Any) -> Any:
    """
    Resolves a '${VAR}' configuration value against the environment.
    Unset variables resolve to None; any other value is returned as-is.
    """
    if not isinstance(value, str):
        return value
    match = ENV_VARIABLE_PATTERN.match(value.strip())
    if not match:
        return value
    resolved = os.environ.get(match.group(1))
    if not resolved:
        return None
    return resolved
