"""Configuration loading and validation.

The configuration file is a YAML mapping::

    composer:
      path: /usr/local/bin/composer
    github:
      organisation: acme
      username: octocat        # either or both
      language: PHP            # optional
      protocol: ssh            # ssh | https
      skip: [legacy-site]
    output:
      path: _output
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("repositories.yml")
DEFAULT_OUTPUT_PATH = Path("_output")
DEFAULT_LANGUAGE = "PHP"
COMPOSER_AUTH_PATH = Path.home() / ".composer" / "auth.json"
PROTOCOLS = ("ssh", "https")


@dataclass(frozen=True)
class RunConfiguration:
    """Settings for a single audit run. Built once, never mutated."""

    composer_path: str
    organization: str | None = None
    username: str | None = None
    token: str | None = None
    skip: frozenset[str] = field(default_factory=frozenset)
    language: str = DEFAULT_LANGUAGE
    protocol: str = "ssh"
    output_dir: Path = DEFAULT_OUTPUT_PATH
    minor_only: bool = False
    fail_fast: bool = False
    dry_run: bool = False


def load_config(config_path: Path) -> dict:
    """Load the raw configuration mapping from a YAML file."""
    if not config_path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Config file {config_path} is not valid YAML: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return raw


def _section(raw: dict, name: str) -> dict:
    value = raw.get(name) or {}
    return value if isinstance(value, dict) else {}


def validate_config(raw: dict) -> list[str]:
    """Return every problem found in a raw configuration mapping."""
    problems = []

    for name in ("composer", "github", "output"):
        if name in raw and raw[name] is not None and not isinstance(raw[name], dict):
            problems.append(f"'{name}' must be a mapping")

    composer = _section(raw, "composer")
    if not composer.get("path"):
        problems.append("Missing required key composer.path")

    github = _section(raw, "github")
    if not github.get("organisation") and not github.get("username"):
        problems.append("Missing either github.organisation or github.username key")

    protocol = github.get("protocol", "ssh")
    if protocol not in PROTOCOLS:
        problems.append(
            f"github.protocol must be one of {', '.join(PROTOCOLS)}, got {protocol!r}"
        )

    skip = github.get("skip", [])
    if skip is not None and not isinstance(skip, list):
        problems.append("github.skip must be a list of repository names")

    return problems


def read_composer_auth(auth_path: Path = COMPOSER_AUTH_PATH) -> str | None:
    """Read the GitHub OAuth token Composer keeps in its auth.json, if any."""
    try:
        auth = json.loads(auth_path.read_text())
    except FileNotFoundError:
        logger.debug("No Composer auth file at %s", auth_path)
        return None
    except (OSError, json.JSONDecodeError) as e:
        logger.debug("Ignoring unreadable Composer auth file %s: %s", auth_path, e)
        return None

    try:
        return auth["github-oauth"]["github.com"] or None
    except (KeyError, TypeError):
        return None


def parse_skip_list(value: str | None) -> set[str]:
    """Split a comma-separated list of repository names."""
    if not value:
        return set()
    return {name.strip() for name in value.split(",") if name.strip()}


def build_run_configuration(
    raw: dict,
    skip: set[str] | None = None,
    minor_only: bool = False,
    fail_fast: bool = False,
    dry_run: bool = False,
    auth_path: Path = COMPOSER_AUTH_PATH,
) -> RunConfiguration:
    """Validate *raw* and combine it with command-line flags."""
    problems = validate_config(raw)
    if problems:
        raise ConfigurationError("Invalid configuration: " + "; ".join(problems))

    github = _section(raw, "github")
    output = _section(raw, "output")

    token = github.get("token") or read_composer_auth(auth_path)
    skip_names = set(github.get("skip") or []) | set(skip or ())

    return RunConfiguration(
        composer_path=str(_section(raw, "composer")["path"]),
        organization=github.get("organisation") or None,
        username=github.get("username") or None,
        token=token,
        skip=frozenset(str(name) for name in skip_names),
        language=github.get("language", DEFAULT_LANGUAGE),
        protocol=github.get("protocol", "ssh"),
        output_dir=Path(output.get("path", DEFAULT_OUTPUT_PATH)),
        minor_only=minor_only,
        fail_fast=fail_fast,
        dry_run=dry_run,
    )
