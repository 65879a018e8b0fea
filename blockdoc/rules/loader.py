import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from blockdoc.core.services.richtext import RichTextConfig
from blockdoc.rules.models import RichTextRules, Rules

# A rules file may be a markdown snippet with the YAML inside a ```yaml fence.
_YAML_FENCE = re.compile(r"^\s*```yaml[^\n]*\n(.*?)(?:^\s*```|\Z)", re.MULTILINE | re.DOTALL)


def extract_yaml(content: str) -> str:
    fenced = _YAML_FENCE.search(content)
    return fenced.group(1) if fenced else content


def load_rules(path: Path) -> Rules:
    """
    Read and validate the rules file.

    Raises:
        FileNotFoundError: the file does not exist
        ValueError: the YAML does not parse or does not match the Rules schema
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    try:
        data = yaml.safe_load(extract_yaml(path.read_text(encoding="utf-8")))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file {path}: {e}") from e

    try:
        return Rules.model_validate(data or {})
    except ValidationError as e:
        raise ValueError(f"Rules validation failed for {path}:\n{e}") from e


def richtext_config(rules: RichTextRules) -> RichTextConfig:
    """Sanitizer configuration for the `richtext` section."""
    return RichTextConfig(
        allow_tags=frozenset(tag.lower() for tag in rules.allow_tags),
        allow_attrs={
            tag.lower(): frozenset(a.lower() for a in attrs)
            for tag, attrs in rules.allow_attrs.items()
        },
        forbid_protocols=frozenset(rules.forbid_protocols),
        add_noopener=rules.add_noopener,
        add_noreferrer=rules.add_noreferrer,
    )
