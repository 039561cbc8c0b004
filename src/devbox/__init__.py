"""devbox package.

Simple API for scripts that want a workstation without the CLI:

    import devbox

    # Converge this machine (safe to call repeatedly)
    result = devbox.provision_workstation(name="Ada Lovelace", email="ada@example.com")
    assert result.ok
"""

from dataclasses import replace
from pathlib import Path
from typing import Optional

from .config import ProvisionConfig, load_config_file, resolve_config
from .context import GIT_EMAIL, GIT_NAME, Context
from .env import Environment
from .provisioner import RunResult, RunState, build_steps, provision, run_steps
from .report import Reporter

__version__ = "0.1.0"


def provision_workstation(
    home: Optional[str | Path] = None,
    *,
    name: str = "",
    email: str = "",
    config: Optional[str | Path] = None,
    refresh_docs: bool = False,
    reporter: Optional[Reporter] = None,
) -> RunResult:
    """Run every provisioning step against this host.

    Args:
        home: Home directory to provision (default: the current user's)
        name: Git display name; empty defers the git identity step
        email: Git email; empty defers the git identity and SSH key steps
        config: Optional path to a config.yaml
        refresh_docs: Rewrite documentation files even if they exist

    Returns:
        RunResult (state, per-step results, exit_code)

    Raises:
        PreflightError: the host is not a supported platform (nothing was changed)
    """
    env = Environment(home=Path(home).expanduser() if home else Path.home())
    cfg = resolve_config(Path(config) if config else None, env.home)
    if refresh_docs:
        cfg = replace(cfg, refresh_docs=True)
    ctx = Context(
        env=env,
        config=cfg,
        values={GIT_NAME: name, GIT_EMAIL: email},
        reporter=reporter,
    )
    return provision(ctx)


__all__ = [
    "provision_workstation",
    "provision",
    "run_steps",
    "build_steps",
    "Context",
    "Environment",
    "ProvisionConfig",
    "RunResult",
    "RunState",
    "load_config_file",
]
