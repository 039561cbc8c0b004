from __future__ import annotations

"""Host health checks.

CONTRACT
- Inputs: Environment
- Outputs (required):
  - DoctorReport (ok=bool, items=[(name, status, details)])
  - check_platform(): returns None on a supported host
- Invariants:
  - Checks: platform, apt-get, sudo, git, curl, ssh-keygen, node, gh
  - Does not modify system state (read-only checks)
- Failure:
  - DoctorReport.ok is False if a critical check fails (platform, apt-get)
  - check_platform raises PreflightError on a non-Linux host
"""

from dataclasses import dataclass

from .env import Environment
from .errors import PreflightError


@dataclass(frozen=True)
class DoctorItem:
    name: str
    status: str
    details: str


@dataclass(frozen=True)
class DoctorReport:
    ok: bool
    items: list[DoctorItem]


def check_platform(env: Environment) -> None:
    if not env.is_linux():
        raise PreflightError(
            f"Unsupported platform {env.platform!r}: devbox provisions Linux (Debian/Ubuntu) hosts only."
        )


# binary -> (status when missing, details when missing)
_TOOLS = [
    ("sudo", "WARN", "sudo not found; package steps need root"),
    ("git", "INFO", "git not found; installed by essential-tools"),
    ("curl", "INFO", "curl not found; installed by essential-tools"),
    ("ssh-keygen", "WARN", "ssh-keygen not found; ssh-key step will fail"),
    ("node", "INFO", "node not found; installed by nodejs step"),
    ("gh", "INFO", "gh not found; installed by github-cli step"),
]


def doctor_report(env: Environment) -> DoctorReport:
    items: list[DoctorItem] = []
    ok = True

    # 1. Critical: platform
    try:
        check_platform(env)
        items.append(DoctorItem("platform", "OK", env.platform))
    except PreflightError as e:
        ok = False
        items.append(DoctorItem("platform", "FAIL", str(e)))

    # 2. Critical: package manager
    apt = env.which("apt-get")
    if apt:
        items.append(DoctorItem("apt-get", "OK", apt))
    else:
        ok = False
        items.append(DoctorItem("apt-get", "FAIL", "apt-get not found (Debian/Ubuntu required)"))

    # 3. Binaries
    for name, missing_status, missing_details in _TOOLS:
        if name == "sudo" and not env.use_sudo:
            items.append(DoctorItem(name, "OK", "running as root"))
            continue
        path = env.which(name)
        if path:
            items.append(DoctorItem(name, "OK", path))
        else:
            items.append(DoctorItem(name, missing_status, missing_details))

    return DoctorReport(ok=ok, items=items)
