from __future__ import annotations

"""Host environment.

CONTRACT
- Inputs: home directory, platform string, command runner, path lookup
- Outputs:
  - run(): CmdResult of a command, optionally under sudo
  - has_command(): whether an executable resolves on the search path
- Invariants:
  - Never snapshotted; every call queries live state
  - run(check=True) turns a non-zero exit into CommandFailed
  - Commands see HOME=<home>, so per-user tools (git --global) write to the provisioned home
- Failure:
  - Raises CommandFailed (check=True) on non-zero exit
"""

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from .errors import CommandFailed
from .util.shell import CmdResult, run_cmd, which

Runner = Callable[..., CmdResult]


def _needs_sudo() -> bool:
    geteuid = getattr(os, "geteuid", None)
    return geteuid is not None and geteuid() != 0


@dataclass
class Environment:
    home: Path = field(default_factory=Path.home)
    platform: str = sys.platform
    runner: Runner = run_cmd
    which: Callable[[str], str | None] = which
    use_sudo: bool = field(default_factory=_needs_sudo)

    def run(
        self,
        cmd: str | list[str],
        *,
        sudo: bool = False,
        check: bool = True,
        cwd: Path | None = None,
        timeout_s: float | None = None,
    ) -> CmdResult:
        if sudo and self.use_sudo and isinstance(cmd, list):
            cmd = ["sudo", *cmd]
        res = self.runner(cmd, cwd=cwd or self.home, env={"HOME": str(self.home)}, timeout_s=timeout_s)
        if check and res.returncode != 0:
            raise CommandFailed(res.cmd, res.returncode, res.stderr)
        return res

    def has_command(self, name: str) -> bool:
        return self.which(name) is not None

    def is_linux(self) -> bool:
        return self.platform.startswith("linux")
