"""Execute a `BookPlan` against the filesystem."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .plan import BookPlan

LOGGER = logging.getLogger(__name__)


def write_plan(plan: BookPlan) -> List[Path]:
    """Write every planned file and return the paths actually written, in plan order.

    Files planned with ``overwrite=False`` are left alone when they already
    exist. OS errors propagate unchanged.
    """
    written: List[Path] = []
    for planned in plan.files:
        if not planned.overwrite and planned.path.exists():
            LOGGER.debug("Keeping existing %s", planned.path)
            continue
        planned.path.parent.mkdir(parents=True, exist_ok=True)
        planned.path.write_text(planned.content, encoding="utf-8")
        LOGGER.info("Wrote %s %s", planned.kind, planned.path)
        written.append(planned.path)
    return written


__all__ = ["write_plan"]
