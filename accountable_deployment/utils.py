import json
from pathlib import Path
from typing import Dict, Optional

import yaml

from accountable_deployment.constants import ACCOUNTABLE_FACTORY, DEFAULT_FRONT_END_DIR
from accountable_deployment.errors import DeploymentConfigError

STANDARD_ARTIFACT_JSON_FORMAT = {"indent": 4, "separators": (",", ": "), "sort_keys": True}


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r", encoding="utf-8") as file:
        return json.load(file)


def _write_json(data, filepath: Path) -> Path:
    """
    Rewrites a JSON file in full. The data is written to a temporary sibling
    which then replaces the target, so readers never observe a partial file.
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)
    temp_filepath = filepath.with_suffix(".temp.json")
    try:
        with open(temp_filepath, "w", encoding="utf-8") as file:
            json.dump(data, file, **STANDARD_ARTIFACT_JSON_FORMAT)
        temp_filepath.replace(filepath)
    finally:
        if temp_filepath.exists():
            temp_filepath.unlink()
    return filepath


def validate_config(config: Dict) -> None:
    """Checks the structure of a deployment params file."""
    print("Validating parameters YAML...")

    if not isinstance(config, dict):
        raise DeploymentConfigError("Malformed parameters YAML.")

    deployment = config.get("deployment")
    if not deployment or not deployment.get("name"):
        raise DeploymentConfigError("deployment name is not set in params file.")

    contracts = config.get("contracts")
    if not contracts:
        raise DeploymentConfigError("Constructor parameters file missing 'contracts' field.")

    constants = config.get("constants")
    if constants is not None and not isinstance(constants, dict):
        raise DeploymentConfigError("'constants' must be a mapping.")


def get_front_end_dir(config: Dict, override: Optional[Path] = None) -> Path:
    """Returns the directory holding the front end's JSON artifacts."""
    if override:
        return Path(override)
    artifact_config = config.get("artifacts") or dict()
    return Path(artifact_config.get("dir", DEFAULT_FRONT_END_DIR))


def get_primary_unit(config: Dict) -> Optional[str]:
    """Returns the unit whose ABI is published as the front end's primary ABI."""
    artifact_config = config.get("artifacts") or dict()
    return artifact_config.get("primary", ACCOUNTABLE_FACTORY)
