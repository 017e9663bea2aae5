from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from koperasi.rules.models import ClientRules


def _read_mapping(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"{path}: not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a mapping of sections, got {type(data).__name__}")
    return data


def load_rules(path: Path) -> ClientRules:
    """
    Load client rules from a YAML file. Missing sections take their defaults.

    Raises:
        FileNotFoundError: path does not exist.
        ValueError: the file is not a YAML mapping or fails validation.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        return ClientRules.model_validate(_read_mapping(path))
    except ValidationError as e:
        raise ValueError(f"{path}: invalid client rules:\n{e}") from e
