from __future__ import annotations

"""Execution context threaded through a Run.

CONTRACT
- Inputs: Environment, ProvisionConfig, initial values (e.g. git_name/git_email)
- Outputs:
  - Mutable key-value carrier shared by all steps of one Run
- Invariants:
  - Lives for one Run only; nothing is persisted between invocations
  - Host facts are collected at most once per Run
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .config import ProvisionConfig
from .env import Environment
from .facts import HostFacts, collect_facts
from .report import Reporter

GIT_NAME = "git_name"
GIT_EMAIL = "git_email"
PUBLIC_KEY = "public_key"
FACTS = "facts"
APT_INDEX = "apt_index_fresh"


@dataclass
class Context:
    env: Environment
    config: ProvisionConfig = field(default_factory=ProvisionConfig)
    values: dict[str, Any] = field(default_factory=dict)
    reporter: Reporter | None = None

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def has(self, key: str) -> bool:
        value = self.values.get(key)
        if isinstance(value, str):
            return bool(value.strip())
        return value is not None

    @property
    def home(self) -> Path:
        return self.env.home

    @property
    def base_dir(self) -> Path:
        return self.config.resolve_base(self.env.home)

    def facts(self) -> HostFacts:
        facts = self.values.get(FACTS)
        if facts is None:
            facts = collect_facts(self.env)
            self.values[FACTS] = facts
        return facts

    def info(self, message: str) -> None:
        if self.reporter is not None:
            self.reporter.info(message)
