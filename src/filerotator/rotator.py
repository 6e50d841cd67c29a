"""Size-triggered rotation of a log file and its numbered backups.

A rotation chain for base path ``P`` is ``P`` (generation 0, the active
file) followed by ``P.1`` .. ``P.<max_files>``; higher numbers hold older
content.  ``FileRotator.rotate()`` shifts every generation up by one, drops
the oldest and leaves ``P`` empty for the writer.

Rotation never raises on filesystem errors: several writer processes may
rotate the same file at once, so a vanished or locked file only means that
step is skipped until the next rotation.
"""

from __future__ import annotations

import logging
import os

from filerotator.fileops import (
    StepOutcome,
    StepResult,
    copy_file,
    delete_file,
    rename_file,
    set_mode,
    truncate_file,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILE_SIZE = 10240  # kilobytes
DEFAULT_MAX_FILES = 5


class InvalidConfiguration(ValueError):
    """Raised when a rotator setting is out of range."""


def default_rotate_by_copy() -> bool:
    """Whether this platform needs copy+truncate rotation.

    Renaming a file that another process holds open fails on Windows, which
    is recognised by its path separator.
    """
    return os.sep == "\\"


def _check_positive(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfiguration(f"{name} cannot be lower than 1, got {value}")
    return value


def check_file_mode(file_mode: int | None) -> int | None:
    """Accept None or permission bits in 0..0o7777."""
    if file_mode is None:
        return None
    if (
        isinstance(file_mode, bool)
        or not isinstance(file_mode, int)
        or not 0 <= file_mode <= 0o7777
    ):
        raise InvalidConfiguration(
            f"file_mode must be a permission value like 0o640, got {file_mode!r}"
        )
    return file_mode


class FileRotator:
    """Rotates ``path`` -> ``path.1`` -> ... -> ``path.<max_files>``.

    Args:
        max_file_size: Size threshold in kilobytes. The rotator does not check
            it; callers use it to decide when to call ``rotate()``.
        max_files: Number of backups kept next to the active file.
        file_mode: Permission bits applied to backups created by copying.
            ``None`` leaves the process defaults.
        rotate_by_copy: Copy and truncate instead of renaming. ``None`` picks
            the platform default once, at construction.
    """

    def __init__(
        self,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        file_mode: int | None = None,
        rotate_by_copy: bool | None = None,
    ) -> None:
        self._max_file_size = DEFAULT_MAX_FILE_SIZE
        self._max_files = DEFAULT_MAX_FILES
        self.set_max_file_size(max_file_size)
        self.set_max_files(max_files)
        self._file_mode = check_file_mode(file_mode)
        self._rotate_by_copy = (
            default_rotate_by_copy() if rotate_by_copy is None else bool(rotate_by_copy)
        )

    def __repr__(self) -> str:
        return (
            f"FileRotator(max_file_size={self._max_file_size}, "
            f"max_files={self._max_files}, file_mode={self._file_mode!r}, "
            f"rotate_by_copy={self._rotate_by_copy})"
        )

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    @property
    def max_files(self) -> int:
        return self._max_files

    @property
    def file_mode(self) -> int | None:
        return self._file_mode

    @property
    def rotate_by_copy(self) -> bool:
        return self._rotate_by_copy

    def set_max_file_size(self, max_file_size: int) -> None:
        self._max_file_size = _check_positive("max_file_size", max_file_size)

    def set_max_files(self, max_files: int) -> None:
        self._max_files = _check_positive("max_files", max_files)

    def generation_path(self, path: str | os.PathLike, generation: int) -> str:
        """Return the file name of ``generation`` in the chain of ``path``."""
        base = os.fspath(path)
        return base if generation == 0 else f"{base}.{generation}"

    def rotate(self, path: str | os.PathLike) -> None:
        """Shift the rotation chain of ``path`` by one generation."""
        self.rotate_steps(path)

    def rotate_steps(self, path: str | os.PathLike) -> list[StepResult]:
        """Rotate ``path`` and return the result of every filesystem step.

        Generations are walked from the oldest down to the active file so
        that each destination slot is emptied before the next file moves in.
        """
        max_files = self._max_files
        steps: list[StepResult] = []
        for i in range(max_files, -1, -1):
            rotate_file = self.generation_path(path, i)
            if not os.path.isfile(rotate_file):
                continue
            if i == max_files:
                steps.append(delete_file(rotate_file))
                continue
            new_file = self.generation_path(path, i + 1)
            advanced = self._advance(rotate_file, new_file)
            steps.extend(advanced)
            # a failed move leaves unrotated data in the active file, keep it
            if i == 0 and advanced[0].outcome != StepOutcome.FAILED:
                steps.append(truncate_file(rotate_file))

        logger.debug(
            "Rotated %s: %d/%d steps done",
            os.fspath(path),
            sum(1 for s in steps if s.ok),
            len(steps),
        )
        return steps

    def _advance(self, rotate_file: str, new_file: str) -> list[StepResult]:
        if self._rotate_by_copy:
            return self._advance_by_copy(rotate_file, new_file)
        return [rename_file(rotate_file, new_file)]

    def _advance_by_copy(self, rotate_file: str, new_file: str) -> list[StepResult]:
        copied = copy_file(rotate_file, new_file)
        if not copied.ok or self._file_mode is None:
            return [copied]
        return [copied, set_mode(new_file, self._file_mode)]
