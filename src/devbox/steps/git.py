"""Git identity and SSH credential steps.

CONTRACT
- Inputs: Context (git_name, git_email supplied by the operator)
- Outputs:
  - Global git user.name / user.email / init.defaultBranch
  - ~/.ssh/id_<type> keypair, `Host <ssh_host>` block in ~/.ssh/config
  - Public key stored in the context (`public_key`) for the operator to register
- Invariants:
  - Both steps are Deferred when the operator withheld the input they need
  - An existing private key is never regenerated or overwritten
  - The public key is never uploaded anywhere
- Failure:
  - CommandFailed from git / ssh-keygen aborts the Run
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..context import GIT_EMAIL, GIT_NAME, PUBLIC_KEY, Context
from ..util.text import append_text, read_text_if_exists


def git_config_get(ctx: Context, key: str) -> str:
    res = ctx.env.run(["git", "config", "--global", "--get", key], check=False)
    return res.stdout.strip() if res.returncode == 0 else ""


@dataclass
class GitIdentityStep:
    name: str = "git-identity"
    requires: tuple[str, ...] = (GIT_NAME, GIT_EMAIL)

    def wanted(self, ctx: Context) -> dict[str, str]:
        return {
            "user.name": str(ctx.get(GIT_NAME) or "").strip(),
            "user.email": str(ctx.get(GIT_EMAIL) or "").strip(),
            "init.defaultBranch": ctx.config.default_branch,
        }

    def check(self, ctx: Context) -> bool:
        wanted = self.wanted(ctx)
        if not wanted["user.name"] or not wanted["user.email"]:
            return False
        return all(git_config_get(ctx, k) == v for k, v in wanted.items())

    def apply(self, ctx: Context) -> str:
        wanted = self.wanted(ctx)
        for key, value in wanted.items():
            ctx.env.run(["git", "config", "--global", key, value])
        return f"git configured for {wanted['user.name']} <{wanted['user.email']}>"


SSH_CONFIG_BLOCK = """Host {host}
  HostName {host}
  User git
  IdentityFile {key}
  AddKeysToAgent yes
"""


@dataclass
class SshKeyStep:
    name: str = "ssh-key"
    requires: tuple[str, ...] = (GIT_EMAIL,)

    def key_path(self, ctx: Context) -> Path:
        return ctx.home / ".ssh" / f"id_{ctx.config.ssh_key_type}"

    def check(self, ctx: Context) -> bool:
        return self.key_path(ctx).exists()

    def apply(self, ctx: Context) -> str:
        key = self.key_path(ctx)
        ssh_dir = key.parent
        ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        ctx.env.run(
            [
                "ssh-keygen",
                "-t",
                ctx.config.ssh_key_type,
                "-C",
                str(ctx.get(GIT_EMAIL)).strip(),
                "-f",
                str(key),
                "-N",
                "",
            ]
        )

        config = ssh_dir / "config"
        host = ctx.config.ssh_host
        if f"Host {host}" not in read_text_if_exists(config):
            existing = read_text_if_exists(config)
            sep = "\n" if existing and not existing.endswith("\n") else ""
            append_text(config, sep + SSH_CONFIG_BLOCK.format(host=host, key=key))
        os.chmod(config, 0o600)

        pub = key.with_name(key.name + ".pub")
        public_key = read_text_if_exists(pub).strip()
        ctx.set(PUBLIC_KEY, public_key)
        if public_key:
            ctx.info(f"Your SSH public key (add this to {host}):")
            if ctx.reporter is not None:
                ctx.reporter.plain(public_key)
        return f"SSH key generated at {key}"
