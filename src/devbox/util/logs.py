from __future__ import annotations

"""Logging setup.

CONTRACT
- Inputs: verbosity flag, optional log file path
- Outputs:
  - loguru sinks: stderr at DEBUG when verbose, file at INFO when requested
- Invariants:
  - Replaces previously configured sinks (safe to call more than once)
"""

import sys
from pathlib import Path

from loguru import logger

_FORMAT = "{time:YYYY-MM-DDTHH:mm:ssZZ} {level} {name}: {message}"


def configure_logging(verbose: bool = False, log_file: Path | None = None) -> None:
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_FORMAT)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(str(log_file), level="INFO", format=_FORMAT)
