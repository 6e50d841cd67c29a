"""Best-effort filesystem steps used by the rotator.

Every function here performs one filesystem call and reports what happened
as a ``StepResult`` instead of raising.  A missing file is reported as
``SKIPPED`` (another process usually got there first); any other ``OSError``
is reported as ``FAILED``.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


class StepOutcome(str, Enum):
    DONE = "done"
    SKIPPED = "skipped"
    FAILED = "failed"


class StepAction(str, Enum):
    DELETE = "delete"
    COPY = "copy"
    CHMOD = "chmod"
    RENAME = "rename"
    TRUNCATE = "truncate"


@dataclass
class StepResult:
    action: StepAction
    source: str
    target: str | None = None
    outcome: StepOutcome = StepOutcome.DONE
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome == StepOutcome.DONE


def _failure(result: StepResult, exc: OSError) -> StepResult:
    if isinstance(exc, FileNotFoundError):
        result.outcome = StepOutcome.SKIPPED
        logger.debug("%s %s skipped: %s", result.action.value, result.source, exc)
    else:
        result.outcome = StepOutcome.FAILED
        logger.warning("%s %s failed: %s", result.action.value, result.source, exc)
    result.error = str(exc)
    return result


def delete_file(path: str) -> StepResult:
    """Remove ``path``."""
    result = StepResult(StepAction.DELETE, path)
    try:
        os.unlink(path)
    except OSError as exc:
        return _failure(result, exc)
    return result


def copy_file(source: str, target: str) -> StepResult:
    """Copy the contents of ``source`` over ``target``, leaving ``source`` as is."""
    result = StepResult(StepAction.COPY, source, target)
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        return _failure(result, exc)
    return result


def set_mode(path: str, mode: int) -> StepResult:
    result = StepResult(StepAction.CHMOD, path)
    try:
        os.chmod(path, mode)
    except OSError as exc:
        return _failure(result, exc)
    return result


def rename_file(source: str, target: str) -> StepResult:
    """Move ``source`` to ``target``, replacing ``target`` if it exists."""
    result = StepResult(StepAction.RENAME, source, target)
    try:
        os.replace(source, target)
    except OSError as exc:
        return _failure(result, exc)
    return result


def truncate_file(path: str) -> StepResult:
    """Empty ``path`` in place, creating it when absent.

    The file is opened for append so that its inode is kept and handles held
    by other writers stay valid.
    """
    result = StepResult(StepAction.TRUNCATE, path)
    try:
        with open(path, "ab") as f:
            f.truncate(0)
    except OSError as exc:
        return _failure(result, exc)
    return result
