from __future__ import annotations

"""Live host facts.

CONTRACT
- Inputs: Environment (for tool version probes), psutil, /proc/cpuinfo and /etc/os-release
- Outputs (required):
  - HostFacts (hostname, OS, kernel, CPU, memory, disk, network, tool versions)
- Invariants:
  - Every probe degrades to a placeholder string; collection never raises
  - Read-only: nothing on the host is modified
"""

import platform
import socket
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

import psutil
from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .env import Environment

NOT_AVAILABLE = "Not available"
NOT_INSTALLED = "Not installed"
NOT_CONFIGURED = "Not configured"

PROBE_TIMEOUT_S = 10


class HostFacts(BaseModel):
    schema_version: int = 1
    hostname: str
    os_name: str = "Linux"
    kernel: str
    arch: str = ""
    cpu_model: str = NOT_AVAILABLE
    cpu_cores: int = 0
    memory: str = NOT_AVAILABLE
    disk: str = NOT_AVAILABLE
    interface: str = NOT_CONFIGURED
    ip_address: str = NOT_CONFIGURED
    tools: dict[str, str] = Field(default_factory=dict)
    updated: str = ""

    def template_values(self) -> dict[str, str]:
        values = {
            "hostname": self.hostname,
            "os_name": self.os_name,
            "kernel": self.kernel,
            "arch": self.arch,
            "cpu_model": self.cpu_model,
            "cpu_cores": str(self.cpu_cores),
            "memory": self.memory,
            "disk": self.disk,
            "interface": self.interface,
            "ip_address": self.ip_address,
            "updated": self.updated,
        }
        for tool in TOOL_PROBES:
            values[f"{tool}_version"] = self.tools.get(tool, NOT_INSTALLED)
        return values


# tool -> argv printing its version
TOOL_PROBES: dict[str, list[str]] = {
    "python": ["python3", "--version"],
    "node": ["node", "--version"],
    "npm": ["npm", "--version"],
    "git": ["git", "--version"],
}


def _gb(n_bytes: float) -> str:
    return f"{n_bytes / (1024**3):.1f}G"


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8", errors="ignore")
    except OSError:
        return ""


def read_os_name(etc_root: Path = Path("/etc")) -> str:
    for line in _read(etc_root / "os-release").splitlines():
        key, _, value = line.partition("=")
        if key == "PRETTY_NAME" and value:
            return value.strip().strip('"')
    return platform.system() or "Linux"


def read_cpu_model(proc_root: Path = Path("/proc")) -> str:
    # psutil exposes counts and frequencies, not the model string.
    for line in _read(proc_root / "cpuinfo").splitlines():
        key, _, value = line.partition(":")
        if key.strip() == "model name" and value.strip():
            return value.strip()
    return NOT_AVAILABLE


def read_memory() -> str:
    try:
        memory = psutil.virtual_memory()
    except (OSError, psutil.Error):
        return NOT_AVAILABLE
    used = memory.total - memory.available
    return f"Total: {_gb(memory.total)}, Used: {_gb(used)}, Free: {_gb(memory.available)}"


def read_disk(path: Path) -> str:
    try:
        usage = psutil.disk_usage(str(path))
    except (OSError, psutil.Error):
        return NOT_AVAILABLE
    return (
        f"Total: {_gb(usage.total)}, Used: {_gb(usage.used)}, "
        f"Available: {_gb(usage.free)}, Usage: {usage.percent:.0f}%"
    )


def read_network() -> tuple[str, str]:
    """First interface that is up, not loopback, and has an IPv4 address."""
    try:
        stats = psutil.net_if_stats()
        addrs = psutil.net_if_addrs()
    except (OSError, psutil.Error):
        return NOT_CONFIGURED, NOT_CONFIGURED
    for name, entries in addrs.items():
        st = stats.get(name)
        if st is None or not st.isup:
            continue
        for a in entries:
            if a.family == socket.AF_INET and not a.address.startswith("127."):
                return name, a.address
    return NOT_CONFIGURED, NOT_CONFIGURED


def _probe(env: Environment, argv: list[str]) -> str:
    if not env.has_command(argv[0]):
        return ""
    res = env.run(argv, check=False, timeout_s=PROBE_TIMEOUT_S)
    if res.returncode != 0:
        return ""
    # Older tools (python2, some node builds) print the version on stderr.
    text = (res.stdout or res.stderr).strip()
    return text.splitlines()[0] if text else ""


def collect_facts(
    env: Environment,
    *,
    proc_root: Path = Path("/proc"),
    etc_root: Path = Path("/etc"),
) -> HostFacts:
    tools = {}
    for tool, argv in TOOL_PROBES.items():
        tools[tool] = _probe(env, argv) or NOT_INSTALLED
    interface, ip_address = read_network()
    return HostFacts(
        hostname=socket.gethostname(),
        os_name=read_os_name(etc_root),
        kernel=platform.release(),
        arch=platform.machine(),
        cpu_model=read_cpu_model(proc_root),
        cpu_cores=psutil.cpu_count() or 0,
        memory=read_memory(),
        disk=read_disk(Path("/") if Path("/").exists() else env.home),
        interface=interface,
        ip_address=ip_address,
        tools=tools,
        updated=datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
    )


if __name__ == "__main__":
    from .env import Environment

    print(collect_facts(Environment()).model_dump_json(indent=2))
