from __future__ import annotations

"""Config initializer.

CONTRACT
- Inputs: destination path (default ~/.config/devbox/config.yaml)
- Outputs (required):
  - Writes the commented default config.yaml
- Invariants:
  - Creates parent directories if missing
  - Does not overwrite an existing file (by default)
- Failure:
  - Raises OSError on permission issues
"""

from pathlib import Path

from .config import DEFAULT_CONFIG_PATH
from .util.paths import copy_template


def write_default_config(dest: Path | None = None, force: bool = False) -> tuple[Path, bool]:
    target = (dest or DEFAULT_CONFIG_PATH).expanduser()
    written = copy_template("config.yaml", target, overwrite=force)
    return target, written
