import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.rules.models import Rules

# Rules may be embedded in a markdown document as the first ```yaml block
_YAML_FENCE = re.compile(r"^\s*```ya?ml\s*$\n(.*?)^\s*```", re.MULTILINE | re.DOTALL)


def extract_yaml(text: str) -> str:
    match = _YAML_FENCE.search(text)
    return match.group(1) if match else text


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if YAML or schema invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(extract_yaml(path.read_text())) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("Rules file must contain a mapping at the top level")

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e
