"""Exceptions raised while provisioning."""

from __future__ import annotations


class DevboxError(Exception):
    """Base error for provisioning failures."""


class ConfigError(DevboxError, ValueError):
    """Raised when a config file is invalid."""


class PreflightError(DevboxError):
    """Raised when the host does not meet a precondition (nothing has run yet)."""


class StepError(DevboxError):
    """Raised by a step's apply() when it could not reach its target state."""


class CommandFailed(StepError):
    """Raised when a command exits non-zero."""

    def __init__(self, cmd: str, returncode: int, stderr: str = "") -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        tail = stderr.strip().splitlines()[-3:]
        msg = f"Command failed ({returncode}): {cmd}"
        if tail:
            msg += "\n" + "\n".join(tail)
        super().__init__(msg)
