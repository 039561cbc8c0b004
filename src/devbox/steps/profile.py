"""Shell profile step.

CONTRACT
- Inputs: Context (profile path, base dir)
- Outputs:
  - Alias/function block appended to the shell profile
- Invariants:
  - The block starts with PROFILE_MARKER; it is appended only if the marker is absent
  - Existing profile content is never rewritten
- Failure:
  - OSError if the profile is not writable
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..context import Context
from ..util.paths import render_template
from ..util.text import append_text, read_text_if_exists

PROFILE_MARKER = "# devbox: development aliases"


def profile_block(ctx: Context) -> str:
    block = render_template(
        "aliases.sh",
        {"marker": PROFILE_MARKER, "repos_dir": str(ctx.base_dir / "repos"), "docs_dir": str(ctx.base_dir)},
        strict=False,
    )
    return block.rstrip("\n") + "\n"


@dataclass
class ProfileBlockStep:
    name: str = "shell-aliases"
    marker: str = PROFILE_MARKER
    requires: tuple[str, ...] = ()

    def target(self, ctx: Context) -> Path:
        return ctx.config.profile_path(ctx.home)

    def check(self, ctx: Context) -> bool:
        return self.marker in read_text_if_exists(self.target(ctx))

    def apply(self, ctx: Context) -> str:
        path = self.target(ctx)
        existing = read_text_if_exists(path)
        sep = "\n" if existing and not existing.endswith("\n") else ""
        append_text(path, sep + "\n" + profile_block(ctx))
        return f"aliases added to {path}"
