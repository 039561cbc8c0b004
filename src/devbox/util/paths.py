from __future__ import annotations

"""Path and template utilities.

CONTRACT
- Inputs: template names (bundled resources), destination paths, value maps
- Outputs:
  - ensure_dir() creates directory tree
  - load_template() returns the raw text of a bundled resource
  - render_template() substitutes named `$fields` into a bundled resource
  - copy_template() writes a bundled resource verbatim to dest
- Invariants:
  - copy_template never overwrites existing files (unless `overwrite=True`)
  - render_template(strict=True) refuses to leave a placeholder unfilled
- Failure:
  - Raises FileNotFoundError if the resource is missing
  - Raises KeyError on a missing field in strict mode
"""

import importlib.resources
from pathlib import Path
from string import Template
from typing import Any, Mapping

from .. import templates


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def load_template(template_name: str) -> str:
    resource = importlib.resources.files(templates).joinpath(template_name)
    if not resource.is_file():
        raise FileNotFoundError(f"Unknown template: {template_name}")
    return resource.read_text(encoding="utf-8")


def render_template(template_name: str, values: Mapping[str, Any], *, strict: bool = True) -> str:
    tpl = Template(load_template(template_name))
    if strict:
        return tpl.substitute(values)
    # Shell snippets carry their own `$` syntax; only known names are replaced.
    return tpl.safe_substitute(values)


def copy_template(template_name: str, dest: Path, overwrite: bool = False) -> bool:
    # Only write if missing (avoid clobber) unless forced.
    if dest.exists() and not overwrite:
        return False
    ensure_dir(dest.parent)
    dest.write_text(load_template(template_name), encoding="utf-8")
    return True


if __name__ == "__main__":
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Template utilities")
    parser.add_argument("--show", help="Print a bundled template")
    args = parser.parse_args()

    if args.show:
        print(load_template(args.show))
    else:
        parser.print_help()
        sys.exit(1)
