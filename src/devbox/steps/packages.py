"""Package installation steps.

CONTRACT
- Inputs: Context (env runner, config package lists)
- Outputs:
  - System packages upgraded / apt packages installed / tools on the path
- Invariants:
  - The apt package index is refreshed at most once per Run, before the first
    upgrade simulation or install
  - check() changes nothing beyond that index refresh (apt simulation, dpkg-query, PATH lookup)
  - apply() installs only what check() found missing
  - Package commands run under sudo when not root
  - Vendor setup scripts run under pipefail; a failed download fails the step
- Failure:
  - CommandFailed from the package manager aborts the Run
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from ..context import APT_INDEX, Context

APT_ENV = ["env", "DEBIAN_FRONTEND=noninteractive"]


def apt_update(ctx: Context) -> None:
    ctx.env.run([*APT_ENV, "apt-get", "update"], sudo=True)


def refresh_index(ctx: Context) -> None:
    # Fresh images ship with empty lists; install/simulate need a current index.
    if ctx.get(APT_INDEX):
        return
    apt_update(ctx)
    ctx.set(APT_INDEX, True)


def apt_install(ctx: Context, packages: list[str]) -> None:
    if not packages:
        return
    refresh_index(ctx)
    ctx.env.run([*APT_ENV, "apt-get", "install", "-y", *packages], sudo=True)


def is_installed(ctx: Context, package: str) -> bool:
    res = ctx.env.run(["dpkg-query", "-W", "-f=${Status}", package], check=False)
    return res.returncode == 0 and "install ok installed" in res.stdout


def pending_upgrades(ctx: Context) -> list[str]:
    refresh_index(ctx)
    res = ctx.env.run(["apt-get", "--simulate", "upgrade"])
    return [line.split()[1] for line in res.stdout.splitlines() if line.startswith("Inst ")]


def setup_script_cmd(url: str) -> list[str]:
    return ["bash", "-o", "pipefail", "-c", f"curl -fsSL {url} | bash -"]


@dataclass
class SystemUpgradeStep:
    name: str = "system-upgrade"
    requires: tuple[str, ...] = ()

    def check(self, ctx: Context) -> bool:
        return not pending_upgrades(ctx)

    def apply(self, ctx: Context) -> str:
        refresh_index(ctx)
        ctx.env.run([*APT_ENV, "apt-get", "upgrade", "-y"], sudo=True)
        return "system packages updated"


@dataclass
class AptPackagesStep:
    name: str
    packages: list[str] = field(default_factory=list)
    requires: tuple[str, ...] = ()

    def missing(self, ctx: Context) -> list[str]:
        return [p for p in self.packages if not is_installed(ctx, p)]

    def check(self, ctx: Context) -> bool:
        return not self.missing(ctx)

    def apply(self, ctx: Context) -> str:
        missing = self.missing(ctx)
        logger.info(f"{self.name}: installing {missing}")
        apt_install(ctx, missing)
        return f"installed {', '.join(missing)}"


@dataclass
class CommandToolStep:
    """Install a tool unless its command already resolves on the search path."""

    name: str
    command: str
    packages: list[str] = field(default_factory=list)
    setup_url: str | None = None
    requires: tuple[str, ...] = ()

    def check(self, ctx: Context) -> bool:
        return ctx.env.has_command(self.command)

    def apply(self, ctx: Context) -> str:
        if self.setup_url:
            # Vendor repository setup script (adds the apt source, runs apt-get update).
            ctx.env.run(setup_script_cmd(self.setup_url), sudo=True)
        apt_install(ctx, self.packages)
        version = ctx.env.run([self.command, "--version"], check=False).stdout.strip()
        first = version.splitlines()[0] if version else ""
        return f"{self.command} installed" + (f" ({first})" if first else "")
