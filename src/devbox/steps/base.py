from __future__ import annotations

"""Step protocol definition.

CONTRACT
- Inputs: Context (environment, config, key-value carrier)
- Outputs:
  - check(): True when the target state already holds (read-only)
  - apply(): performs the state change, returns a short description of it
- Invariants:
  - All steps must implement `check` and `apply` and carry a unique `name`
  - `requires` names context keys that must be non-empty before apply() runs
  - A step result is terminal once it leaves PENDING
- Failure:
  - `apply` raises StepError (or any exception) when it cannot converge
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..context import Context


class StepStatus(str, Enum):
    PENDING = "PENDING"
    SKIPPED = "SKIPPED"    # check passed, nothing to do
    APPLIED = "APPLIED"    # check failed, apply succeeded
    DEFERRED = "DEFERRED"  # required input not supplied, nothing done
    FAILED = "FAILED"      # check or apply raised


@dataclass
class StepResult:
    name: str
    status: StepStatus = StepStatus.PENDING
    detail: str = ""

    @property
    def terminal(self) -> bool:
        return self.status is not StepStatus.PENDING


class Step(Protocol):
    name: str
    requires: tuple[str, ...]

    def check(self, ctx: Context) -> bool: ...
    def apply(self, ctx: Context) -> str: ...
