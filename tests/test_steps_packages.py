import pytest

from devbox.errors import CommandFailed
from devbox.config import ProvisionConfig
from devbox.provisioner import build_steps, provision
from devbox.steps.base import StepStatus
from devbox.steps.packages import AptPackagesStep, CommandToolStep, SystemUpgradeStep, setup_script_cmd


def test_apt_packages_install_only_missing(make_ctx, shell):
    shell.installed.add("git")
    ctx = make_ctx()
    step = AptPackagesStep("essential-tools", ["git", "curl", "wget"])

    assert step.check(ctx) is False
    detail = step.apply(ctx)

    assert "curl" in detail and "wget" in detail
    installs = [c for c in shell.calls if "apt-get install" in c]
    assert installs == ["sudo env DEBIAN_FRONTEND=noninteractive apt-get install -y curl wget"]
    assert step.check(ctx) is True


def test_apt_packages_idempotent(make_ctx, shell):
    ctx = make_ctx()
    step = AptPackagesStep("database-clients", ["redis-tools"])
    step.apply(ctx)
    n_installs = sum("apt-get install" in c for c in shell.calls)

    # Second pass: check holds, so a Run would never call apply again.
    assert step.check(ctx) is True
    assert sum("apt-get install" in c for c in shell.calls) == n_installs


def test_apt_failure_raises(make_ctx, shell):
    shell.fail_on("apt-get install")
    step = AptPackagesStep("database-clients", ["mysql-client"])
    with pytest.raises(CommandFailed) as exc:
        step.apply(make_ctx())
    assert exc.value.returncode == 100
    assert "simulated failure" in str(exc.value)


def test_system_upgrade(make_ctx, shell):
    ctx = make_ctx()
    step = SystemUpgradeStep()

    assert step.check(ctx) is False
    step.apply(ctx)

    assert shell.ran("sudo env DEBIAN_FRONTEND=noninteractive apt-get update")
    assert shell.ran("apt-get upgrade -y")
    assert shell.calls.index(next(c for c in shell.calls if "apt-get update" in c)) < shell.calls.index(
        next(c for c in shell.calls if "apt-get upgrade -y" in c)
    )
    assert step.check(ctx) is True


def test_system_upgrade_nothing_pending(make_ctx, shell):
    shell.upgradable.clear()
    assert SystemUpgradeStep().check(make_ctx()) is True


def test_command_tool_uses_setup_script(make_ctx, shell):
    ctx = make_ctx()
    step = CommandToolStep("nodejs", "node", ["nodejs"], setup_url="https://deb.nodesource.com/setup_20.x")

    assert step.check(ctx) is False
    detail = step.apply(ctx)

    assert shell.ran("sudo bash -o pipefail -c curl -fsSL https://deb.nodesource.com/setup_20.x | bash -")
    assert shell.ran("apt-get install -y nodejs")
    assert "node 1.0.0" in detail
    assert step.check(ctx) is True


def test_command_tool_as_root_has_no_sudo(make_ctx, shell, env):
    env.use_sudo = False
    CommandToolStep("nodejs", "node", ["nodejs"], setup_url="https://example.test/setup").apply(make_ctx())

    assert shell.ran("bash -o pipefail -c curl -fsSL https://example.test/setup | bash -")
    assert not any(c.startswith("sudo") for c in shell.calls)


def test_command_tool_already_on_path(make_ctx, shell):
    shell.binaries.add("gh")
    assert CommandToolStep("github-cli", "gh", ["gh"]).check(make_ctx()) is True


def test_setup_script_failure_stops_the_step(make_ctx, shell):
    shell.fail_on("curl -fsSL https://deb.nodesource.com/setup_20.x", rc=6)
    step = CommandToolStep("nodejs", "node", ["nodejs"], setup_url="https://deb.nodesource.com/setup_20.x")

    with pytest.raises(CommandFailed) as exc:
        step.apply(make_ctx())
    assert exc.value.returncode == 6
    assert not shell.ran("apt-get install -y nodejs")
    assert "nodejs" not in shell.installed


def test_setup_script_runs_under_pipefail():
    argv = setup_script_cmd("https://example.test/setup")
    assert argv[:3] == ["bash", "-o", "pipefail"]
    assert argv[-1] == "curl -fsSL https://example.test/setup | bash -"


def _updates(shell):
    return sum(c.endswith("apt-get update") for c in shell.calls)


def test_empty_package_lists_are_refreshed_before_install(make_ctx, shell):
    shell.lists_fresh = False
    shell.upgradable.clear()
    ctx = make_ctx()

    result = provision(ctx, build_steps(ctx.config))

    assert result.ok, result.failed
    assert result.status_of("system-upgrade") is StepStatus.SKIPPED
    assert result.status_of("essential-tools") is StepStatus.APPLIED
    assert _updates(shell) == 1
    first_update = next(i for i, c in enumerate(shell.calls) if c.endswith("apt-get update"))
    first_install = next(i for i, c in enumerate(shell.calls) if "apt-get install" in c)
    assert first_update < first_install


def test_index_refreshed_without_system_upgrade(make_ctx, shell):
    shell.lists_fresh = False
    ctx = make_ctx(ProvisionConfig(upgrade_system=False))

    result = provision(ctx, build_steps(ctx.config))

    assert result.ok, result.failed
    assert _updates(shell) == 1
    assert "build-essential" in shell.installed


def test_nothing_to_install_needs_no_refresh(make_ctx, shell):
    shell.installed.update({"git", "curl"})
    assert AptPackagesStep("essential-tools", ["git", "curl"]).check(make_ctx()) is True
    assert _updates(shell) == 0
