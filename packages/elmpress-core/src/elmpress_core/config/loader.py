"""Locate, expand and validate elmpress.yaml."""

import os
import re
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import ElmPressConfig

PROJECT_CONFIG = Path("elmpress.yaml")
USER_CONFIG = Path(".elmpress") / "config.yaml"

# ${VAR} or ${VAR:-fallback}
_ENV_REF = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_candidates(cli_path: str | None = None) -> list[Path]:
    """Config files in lookup order: --config, project-local, user-global."""
    candidates = [PROJECT_CONFIG, Path.home() / USER_CONFIG]
    if cli_path:
        candidates.insert(0, Path(cli_path))
    return candidates


def load_config(cli_path: str | None = None) -> ElmPressConfig:
    """Validate the first non-empty config file found, or return the defaults.

    An explicit *cli_path* must exist. Empty files are skipped so a blank
    project file falls through to the user-global one.
    """
    if cli_path and not Path(cli_path).is_file():
        raise ValueError(f"Config file not found: {cli_path}")

    for path in config_candidates(cli_path):
        if not path.is_file():
            continue
        raw = _read_yaml(path)
        if raw is None:
            continue
        try:
            return ElmPressConfig.model_validate(_expand_env_vars(raw))
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return ElmPressConfig()


def _read_yaml(path: Path) -> object:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e


def _expand_env_vars(obj: object) -> object:
    """Recursively substitute ${VAR} references inside strings."""
    if isinstance(obj, str):
        return _ENV_REF.sub(_env_value, obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


def _env_value(match: re.Match) -> str:
    name, fallback = match.groups()
    # Unset and empty both take the fallback, as in the shell.
    return os.environ.get(name) or (fallback or "")


# Default YAML template for `elmpress config init`
DEFAULT_CONFIG_TEMPLATE = """\
# elmpress.yaml

# External compiler
compiler:
  command: ["npx", "elm", "make"]
  input_ext: ".elm"
  output_ext: ".js"
  output_flag: "--output"
  # mode: "optimize"           # debug | optimize (default: derived from environment)
  # timeout: 120               # seconds (default: wait forever)

# Site build
build:
  source_dir: "."              # compiler working directory, where elm.json lives
  destination: "_site"
  environment_var: "ELMPRESS_ENV"
  development_value: "development"
  safe_mode: false             # true skips plugins that run external programs
  fail_fast: true              # false records compiler failures and keeps going
  exclude: [".git", "node_modules", "elm-stuff", "__pycache__", ".venv"]

# Transform plugins, by entry point name
plugins:
  transforms: ["elm"]

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
