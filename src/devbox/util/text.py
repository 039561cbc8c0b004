from __future__ import annotations

"""Text IO utilities.

CONTRACT
- Inputs: Path
- Outputs:
  - File content as string ("" for a missing file with read_text_if_exists)
- Invariants:
  - Reads and appends as utf-8
- Failure:
  - Raises FileNotFoundError/IOError
"""

from pathlib import Path


def read_text_file(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def read_text_if_exists(path: Path) -> str:
    if not path.exists():
        return ""
    return read_text_file(path)


def append_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(text)
