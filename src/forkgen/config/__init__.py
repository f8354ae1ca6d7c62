"""Generation matrix and rewrite constants.

The values live in ``default.yaml`` next to this module. They are part of the
tool, not a runtime setting: the CLI always loads the builtin file.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel

builtin_config_dir = Path(__file__).parent
DEFAULT_CONFIG_FILE = builtin_config_dir / "default.yaml"


class GenericRewriteRule(BaseModel):
    fork: str
    """The only fork whose derived modules get the generic fix."""
    trigger: str
    """Substring of a type name whose generic argument list is extended."""
    argument: str
    """Argument appended to every triggering argument list."""
    rename_from: str
    rename_to: str
    """Identifier renamed inside generic parameter and argument lists."""


class SentinelImport(BaseModel):
    path: str
    alias: str

    def __str__(self) -> str:
        return f"use {self.path} as {self.alias};"


class GenSpecConfig(BaseModel):
    base_fork: str = "phase0"
    """Directory holding the base modules."""
    source_modules: list[str]
    forks: list[str]
    extension: str = ".rs"
    expiration_prefix: str
    """Base functions starting with this prefix are always dropped."""
    generic_rule: GenericRewriteRule | None = None
    """Without a rule every pair runs the three-pass pipeline."""
    sentinel: SentinelImport
    override_import_template: str
    fork_import_template: str
    banner: str


def get_config(path: Path = DEFAULT_CONFIG_FILE) -> GenSpecConfig:
    """Load a generation config from a YAML file."""
    return GenSpecConfig.model_validate(yaml.safe_load(Path(path).read_text()))
