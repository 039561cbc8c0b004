from __future__ import annotations

"""Provisioner: runs an ordered list of idempotent steps.

CONTRACT
- Inputs: ordered Steps, Context (environment, config, key-value carrier)
- Outputs (required):
  - RunResult (state SUCCEEDED/ABORTED, one StepResult per executed step)
  - A status line per step through the context's Reporter
- Invariants:
  - Steps run strictly in declaration order; order is the dependency contract
  - check() true -> SKIPPED, apply() never called
  - Required input missing -> DEFERRED, Run continues
  - First FAILED step aborts the Run; later steps are never checked or applied
  - Platform pre-flight runs before any step; on failure nothing is touched
  - No state is kept between Runs beyond what steps leave in the environment
- Failure:
  - Step exceptions are contained and reported as FAILED (no rollback)
  - provision() raises PreflightError for an unsupported host
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from loguru import logger

from .config import ProvisionConfig
from .context import Context
from .doctor import check_platform
from .steps.base import Step, StepResult, StepStatus
from .steps.filesystem import DirectoryTreeStep, document_steps
from .steps.git import GitIdentityStep, SshKeyStep
from .steps.packages import AptPackagesStep, CommandToolStep, SystemUpgradeStep
from .steps.profile import ProfileBlockStep
from .util.events import EventLog


class RunState(str, Enum):
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    ABORTED = "ABORTED"


@dataclass
class RunResult:
    state: RunState = RunState.RUNNING
    results: list[StepResult] = field(default_factory=list)

    @property
    def failed(self) -> StepResult | None:
        for r in self.results:
            if r.status is StepStatus.FAILED:
                return r
        return None

    @property
    def ok(self) -> bool:
        return self.state is RunState.SUCCEEDED

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def status_of(self, name: str) -> StepStatus | None:
        for r in self.results:
            if r.name == name:
                return r.status
        return None


def build_steps(config: ProvisionConfig) -> list[Step]:
    steps: list[Step] = []
    if config.upgrade_system:
        steps.append(SystemUpgradeStep())
    steps += [
        AptPackagesStep("essential-tools", list(config.essential_packages)),
        CommandToolStep("nodejs", "node", ["nodejs"], setup_url=config.node_setup_url),
        AptPackagesStep("database-clients", list(config.database_packages)),
        CommandToolStep("github-cli", "gh", ["gh"]),
        DirectoryTreeStep(),
        *document_steps(),
        ProfileBlockStep(),
        GitIdentityStep(),
        SshKeyStep(),
    ]
    return steps


def _error_detail(exc: BaseException) -> str:
    text = str(exc).strip()
    return f"{type(exc).__name__}: {text}" if text else type(exc).__name__


def _run_one(step: Step, ctx: Context) -> StepResult:
    result = StepResult(name=step.name)
    try:
        if step.check(ctx):
            result.status = StepStatus.SKIPPED
            result.detail = "already in place"
            return result

        missing = [k for k in getattr(step, "requires", ()) if not ctx.has(k)]
        if missing:
            result.status = StepStatus.DEFERRED
            result.detail = f"skipped, no {', '.join(missing)} supplied (can be done later)"
            return result

        result.detail = step.apply(ctx) or "done"
        result.status = StepStatus.APPLIED
    except Exception as exc:
        result.status = StepStatus.FAILED
        result.detail = _error_detail(exc)
    return result


def run_steps(
    steps: Sequence[Step],
    ctx: Context,
    *,
    events: EventLog | None = None,
) -> RunResult:
    names = [s.name for s in steps]
    dupes = sorted({n for n in names if names.count(n) > 1})
    if dupes:
        raise ValueError(f"Duplicate step names: {dupes}")

    run = RunResult()
    for step in steps:
        logger.info(f"Running step {step.name}")
        result = _run_one(step, ctx)
        run.results.append(result)

        if result.status is StepStatus.FAILED:
            logger.error(f"Step {step.name} failed: {result.detail}")
        else:
            logger.info(f"Step {step.name} {result.status.value.lower()}: {result.detail}")
        if ctx.reporter is not None:
            ctx.reporter.step(result)
        if events is not None:
            events.emit(stage="step", step=result.name, status=result.status.value, detail=result.detail)

        if result.status is StepStatus.FAILED:
            run.state = RunState.ABORTED
            break
    else:
        run.state = RunState.SUCCEEDED

    if events is not None:
        events.emit(stage="run", state=run.state.value)
    return run


def provision(
    ctx: Context,
    steps: Sequence[Step] | None = None,
    *,
    events: EventLog | None = None,
) -> RunResult:
    check_platform(ctx.env)
    if steps is None:
        steps = build_steps(ctx.config)
    return run_steps(steps, ctx, events=events)
