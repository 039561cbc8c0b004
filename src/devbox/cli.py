"""CLI entrypoint.

Primary mode:
- devbox run

Utilities:
- devbox doctor
- devbox facts
- devbox init

CONTRACT
- Inputs: Command line arguments (parsed by Typer), optional terminal prompts
- Outputs (required):
  - Exit code 0 on success, 1 on an aborted Run, 2 on failed pre-flight/config
  - Console output (stdout/stderr) with one status line per step
- Invariants:
  - `devbox run` needs no arguments and never blocks on prompts without a terminal
  - Pre-flight runs before any prompt or step
- Failure:
  - Invalid arguments raise Typer exit/error
"""

from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import resolve_config
from .context import FACTS, GIT_EMAIL, GIT_NAME, PUBLIC_KEY, Context
from .doctor import check_platform, doctor_report
from .env import Environment
from .errors import ConfigError, PreflightError
from .facts import collect_facts
from .provisioner import provision
from .report import Reporter
from .schemas import RunReport
from .util.events import EventLog
from .util.logs import configure_logging

app = typer.Typer(add_completion=False, help="Idempotent developer workstation setup.")

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool):
    if value:
        console.print(f"devbox version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version."
    )
):
    pass


_HOME_OPTION = typer.Option(
    None,
    "--home",
    help="Home directory to provision (default: current user's).",
)
_CONFIG_OPTION = typer.Option(
    None,
    "--config",
    help="Config YAML file (default: ~/.config/devbox/config.yaml if present).",
)
_NAME_OPTION = typer.Option(
    None,
    "--name",
    help="Git display name (prompted for when omitted on a terminal).",
)
_EMAIL_OPTION = typer.Option(
    None,
    "--email",
    help="Git email (prompted for when omitted on a terminal).",
)
_NO_INPUT_OPTION = typer.Option(
    False,
    "--no-input",
    help="Never prompt; steps that need input are deferred.",
)
_REFRESH_DOCS_OPTION = typer.Option(
    False,
    "--refresh-docs",
    help="Rewrite documentation files with fresh host facts.",
)
_REPORT_OPTION = typer.Option(
    None,
    "--report",
    help="Write a JSON run report to this path.",
)
_EVENTS_OPTION = typer.Option(
    None,
    "--events",
    help="Append JSONL step events to this path.",
)
_LOG_FILE_OPTION = typer.Option(
    None,
    "--log-file",
    help="Write a log file.",
)
_VERBOSE_OPTION = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logs (commands run) on stderr.",
)


def _make_env(home: Path | None) -> Environment:
    return Environment(home=home.expanduser() if home else Path.home())


def _ask(label: str, given: str | None, interactive: bool) -> str:
    if given is not None:
        return given.strip()
    if not interactive:
        return ""
    return str(typer.prompt(label, default="", show_default=False)).strip()


def _print_next_steps(reporter: Reporter, ctx: Context) -> None:
    reporter.plain("")
    reporter.plain("Next steps:")
    n = 1
    if ctx.get(PUBLIC_KEY):
        reporter.plain(f"{n}. Add your SSH public key to {ctx.config.ssh_host}")
        n += 1
    profile = ctx.config.profile_path(ctx.home)
    reporter.plain(f"{n}. Load the new aliases: source {profile}")
    reporter.plain(f"{n + 1}. Start a project with: mkproject <project-name>")
    reporter.plain("")
    reporter.plain(f"System documentation: {ctx.base_dir / 'SYSTEM_README.md'}")


@app.command()
def run(
    home: Path | None = _HOME_OPTION,
    config: Path | None = _CONFIG_OPTION,
    name: str | None = _NAME_OPTION,
    email: str | None = _EMAIL_OPTION,
    no_input: bool = _NO_INPUT_OPTION,
    refresh_docs: bool = _REFRESH_DOCS_OPTION,
    report: Path | None = _REPORT_OPTION,
    events: Path | None = _EVENTS_OPTION,
    log_file: Path | None = _LOG_FILE_OPTION,
    verbose: bool = _VERBOSE_OPTION,
) -> None:
    """Converge this machine to the workstation layout (safe to re-run)."""
    configure_logging(verbose=verbose, log_file=log_file)
    reporter = Reporter(console, err_console)
    env = _make_env(home)

    reporter.plain("devbox: development workstation setup")
    reporter.plain("=" * 38)

    try:
        check_platform(env)
        cfg = resolve_config(config, env.home)
    except PreflightError as e:
        reporter.error(str(e))
        reporter.info("For other systems, follow the manual setup guide.")
        raise typer.Exit(code=2)
    except ConfigError as e:
        reporter.error(str(e))
        raise typer.Exit(code=2)
    if refresh_docs:
        cfg = replace(cfg, refresh_docs=True)

    interactive = not no_input and sys.stdin.isatty()
    if interactive and (name is None or email is None):
        reporter.plain("Git configuration (leave empty to skip):")
    git_name = _ask("Your name", name, interactive)
    git_email = _ask("Your email", email, interactive)

    ctx = Context(
        env=env,
        config=cfg,
        values={GIT_NAME: git_name, GIT_EMAIL: git_email},
        reporter=reporter,
    )
    result = provision(ctx, events=EventLog(events) if events else None)

    if report is not None:
        RunReport.from_result(result, ctx.get(FACTS)).write(report)

    if not result.ok:
        failed = result.failed
        reporter.error(f"Setup aborted at step '{failed.name if failed else '?'}'; fix the cause and re-run.")
        raise typer.Exit(code=result.exit_code)

    reporter.plain("=" * 38)
    reporter.success("Workstation setup complete!")
    _print_next_steps(reporter, ctx)


@app.command()
def doctor(
    home: Path | None = _HOME_OPTION,
) -> None:
    """Environment and preflight checks."""
    report = doctor_report(_make_env(home))
    table = Table(title="devbox doctor")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Details")
    for item in report.items:
        table.add_row(item.name, item.status, item.details)
    console.print(table)
    if report.ok:
        console.print("[green]OK[/green]")
    else:
        raise typer.Exit(code=2)


@app.command()
def facts(
    home: Path | None = _HOME_OPTION,
) -> None:
    """Print the host facts substituted into the documentation files."""
    console.print_json(collect_facts(_make_env(home)).model_dump_json())


@app.command()
def init(
    path: Path | None = typer.Option(None, "--path", help="Destination (default: ~/.config/devbox/config.yaml)."),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file."),
) -> None:
    """Write the default config file."""
    from .init import write_default_config

    target, written = write_default_config(path, force=force)
    if written:
        console.print(f"[green]Wrote config to[/green] {target}")
    else:
        console.print(f"[yellow]Config already exists:[/yellow] {target} (use --force to overwrite)")


if __name__ == "__main__":
    app()
