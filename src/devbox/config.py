from __future__ import annotations

"""Configuration models.

CONTRACT
- Inputs: YAML file path (config.yaml) or dictionary data
- Outputs (required):
  - Validated ProvisionConfig
- Invariants:
  - Every key is optional; defaults reproduce the stock workstation layout
  - Category names are single path components
  - repo_categories always include REQUIRED_REPO_CATEGORIES
- Failure:
  - Raises ConfigError on invalid schema or names
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path("~/.config/devbox/config.yaml")

_CATEGORY_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.-]{0,63}$")

# The alias block (projects, learning, mkproject, archive-project) cds into these.
REQUIRED_REPO_CATEGORIES = ("projects", "learning", "archived")


@dataclass(frozen=True)
class ProvisionConfig:
    base_dir: Path | None = None
    profile: str = ".bashrc"
    upgrade_system: bool = True
    essential_packages: list[str] = field(
        default_factory=lambda: [
            "build-essential",
            "git",
            "curl",
            "wget",
            "python3",
            "python3-pip",
            "python3-dev",
        ]
    )
    database_packages: list[str] = field(
        default_factory=lambda: ["mysql-client", "postgresql-client", "redis-tools"]
    )
    node_setup_url: str = "https://deb.nodesource.com/setup_20.x"
    repo_categories: list[str] = field(
        default_factory=lambda: ["projects", "learning", "archived", "forks"]
    )
    pattern_categories: list[str] = field(
        default_factory=lambda: ["payments", "auth", "email", "database", "api", "files"]
    )
    default_branch: str = "main"
    ssh_key_type: str = "ed25519"
    ssh_host: str = "github.com"
    refresh_docs: bool = False

    def resolve_base(self, home: Path) -> Path:
        if self.base_dir is None:
            return home
        base = self.base_dir.expanduser()
        return base if base.is_absolute() else home / base

    def profile_path(self, home: Path) -> Path:
        p = Path(self.profile).expanduser()
        return p if p.is_absolute() else home / p


_STR_LIST = {"type": "array", "items": {"type": "string", "minLength": 1}}

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "base_dir": {"type": ["string", "null"]},
        "profile": {"type": "string", "minLength": 1},
        "upgrade_system": {"type": "boolean"},
        "essential_packages": _STR_LIST,
        "database_packages": _STR_LIST,
        "node_setup_url": {"type": "string", "pattern": "^https://"},
        "repo_categories": _STR_LIST,
        "pattern_categories": _STR_LIST,
        "default_branch": {"type": "string", "minLength": 1},
        "ssh_key_type": {"type": "string", "enum": ["ed25519", "rsa", "ecdsa"]},
        "ssh_host": {"type": "string", "minLength": 1},
        "refresh_docs": {"type": "boolean"},
    },
    "additionalProperties": False,
}


def _validate_categories(kind: str, names: list[str]) -> list[str]:
    for n in names:
        if not _CATEGORY_RE.match(n):
            raise ConfigError(f"Invalid {kind} name: {n!r}")
    return names


def config_from_dict(data: dict[str, Any]) -> ProvisionConfig:
    import jsonschema  # lazy import

    try:
        jsonschema.validate(instance=data, schema=CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        raise ConfigError(f"Invalid config schema: {e.message}") from e

    defaults = ProvisionConfig()
    base_dir = data.get("base_dir")
    cfg = ProvisionConfig(
        base_dir=Path(base_dir) if base_dir else None,
        profile=str(data.get("profile", defaults.profile)),
        upgrade_system=bool(data.get("upgrade_system", defaults.upgrade_system)),
        essential_packages=list(data.get("essential_packages", defaults.essential_packages)),
        database_packages=list(data.get("database_packages", defaults.database_packages)),
        node_setup_url=str(data.get("node_setup_url", defaults.node_setup_url)),
        repo_categories=_validate_categories(
            "repo category", list(data.get("repo_categories", defaults.repo_categories))
        ),
        pattern_categories=_validate_categories(
            "pattern category", list(data.get("pattern_categories", defaults.pattern_categories))
        ),
        default_branch=str(data.get("default_branch", defaults.default_branch)),
        ssh_key_type=str(data.get("ssh_key_type", defaults.ssh_key_type)),
        ssh_host=str(data.get("ssh_host", defaults.ssh_host)),
        refresh_docs=bool(data.get("refresh_docs", defaults.refresh_docs)),
    )
    absent = [c for c in REQUIRED_REPO_CATEGORIES if c not in cfg.repo_categories]
    if absent:
        raise ConfigError(f"repo_categories must include {absent} (used by the shell aliases)")
    return cfg


def load_config_file(path: Path) -> ProvisionConfig:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must be a mapping, got {type(data).__name__}")
    return config_from_dict(data)


def resolve_config(path: Path | None, home: Path) -> ProvisionConfig:
    """Explicit path wins; otherwise the per-user config if present; otherwise defaults."""
    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        return load_config_file(path)
    user_cfg = home / ".config" / "devbox" / "config.yaml"
    if user_cfg.exists():
        return load_config_file(user_cfg)
    return ProvisionConfig()


if __name__ == "__main__":
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Config Loader CLI")
    parser.add_argument("--config", required=True, help="Path to config.yaml")
    args = parser.parse_args()

    try:
        cfg = load_config_file(Path(args.config))
        print(cfg)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
