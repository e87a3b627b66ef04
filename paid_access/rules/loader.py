import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from paid_access.rules.models import Rules

RULES_ENV_VAR = "PAID_ACCESS_RULES"

# Rules kept in a markdown doc: only the first ```yaml block is read
_FENCED_YAML = re.compile(r"^\s*```ya?ml[^\n]*\n(.*?)(?:^\s*```|\Z)", re.DOTALL | re.MULTILINE)


def default_rules_path() -> Path:
    """Rules path from $PAID_ACCESS_RULES, else ./rules.yaml."""
    return Path(os.environ.get(RULES_ENV_VAR, "rules.yaml"))


def load_rules(path: Path) -> Rules:
    """
    Load and validate the rules file.

    Raises:
        FileNotFoundError: No file at `path`
        ValueError: YAML syntax or schema invalid
    """
    if not path.is_file():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    text = path.read_text()
    fenced = _FENCED_YAML.search(text)

    try:
        data = yaml.safe_load(fenced.group(1) if fenced else text)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        return Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e
