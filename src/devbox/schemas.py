from __future__ import annotations

"""Run report schema.

CONTRACT
- Inputs: RunResult (and optionally the HostFacts used by the Run)
- Outputs:
  - RunReport, a JSON-serializable record of one Run
- Invariants:
  - Output only; a Run never reads a previous report back
  - All schemas have schema_version int field
- Failure:
  - Raises ValidationError on schema mismatch
"""

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

from .facts import HostFacts

if TYPE_CHECKING:
    from .provisioner import RunResult


class StepRecord(BaseModel):
    schema_version: int = 1
    name: str
    status: Literal["PENDING", "SKIPPED", "APPLIED", "DEFERRED", "FAILED"]
    detail: str = ""


class RunReport(BaseModel):
    schema_version: int = 1
    state: Literal["RUNNING", "SUCCEEDED", "ABORTED"]
    exit_code: int
    failed_step: str | None = None
    steps: list[StepRecord] = Field(default_factory=list)
    facts: HostFacts | None = None

    @classmethod
    def from_result(cls, result: RunResult, facts: HostFacts | None = None) -> RunReport:
        failed = result.failed
        return cls(
            state=result.state.value,
            exit_code=result.exit_code,
            failed_step=failed.name if failed else None,
            steps=[
                StepRecord(name=r.name, status=r.status.value, detail=r.detail)
                for r in result.results
            ],
            facts=facts,
        )

    def write(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2) + "\n", encoding="utf-8")
        return path
