from __future__ import annotations

"""Shell command execution.

CONTRACT
- Inputs: Command (str or argv list), cwd, optional env overrides and timeout
- Outputs (required):
  - CmdResult(returncode, stdout, stderr, elapsed_s)
- Invariants:
  - str commands run with shell=True, lists with shell=False
- Failure:
  - Returns CmdResult with exit code (does NOT raise on non-zero exit)
  - Missing executable -> 127, timeout -> 124
"""

import os
import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from loguru import logger


def which(cmd: str) -> str | None:
    for p in os.environ.get("PATH", "").split(os.pathsep):
        if not p:
            continue
        candidate = Path(p) / cmd
        if candidate.is_file() and os.access(candidate, os.X_OK):
            return str(candidate)
    return None


@dataclass(frozen=True)
class CmdResult:
    cmd: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_cmd(cmd: str | list[str]) -> str:
    if isinstance(cmd, str):
        return cmd
    return " ".join(cmd)


def run_cmd(
    cmd: str | list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    timeout_s: float | None = None,
) -> CmdResult:
    """Run a command and capture its output.

    CONTRACT:
    - Accepts cmd as str (run with shell=True) or list[str] (run with shell=False).
    - Never raises for non-zero exit; caller inspects return code.
    - Records duration.
    - `env` entries are layered over the current process environment.
    """
    use_shell = isinstance(cmd, str)
    shown = format_cmd(cmd)
    logger.debug(f"CMD {shown}")

    start_t = time.time()
    try:
        p = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd else None,
            shell=use_shell,
            env=(os.environ | env) if env else None,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            timeout=timeout_s,
            text=True,
        )
        rc, out, err = p.returncode, p.stdout or "", p.stderr or ""
    except subprocess.TimeoutExpired:
        rc, out, err = 124, "", "Timeout expired.\n"
    except FileNotFoundError as e:
        rc, out, err = 127, "", f"Command not found: {e}\n"
    except Exception as e:
        rc, out, err = 1, "", f"Exception: {e}\n"
    elapsed = time.time() - start_t

    if rc != 0:
        logger.debug(f"CMD exit={rc}: {err.strip()[-500:]}")

    return CmdResult(cmd=shown, returncode=rc, stdout=out, stderr=err, elapsed_s=elapsed)


if __name__ == "__main__":
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Run shell commands")
    parser.add_argument("--cmd", required=True, help="Command to run")
    parser.add_argument("--cwd", default=".", help="Working directory")
    parser.add_argument("--timeout", type=int, default=10, help="Timeout in seconds")
    args = parser.parse_args()

    res = run_cmd(cmd=args.cmd, cwd=Path(args.cwd), timeout_s=args.timeout)
    print(f"Exit code: {res.returncode}")
    print(f"Stdout: {res.stdout}")
    print(f"Stderr: {res.stderr}")
    sys.exit(res.returncode)
