from __future__ import annotations

"""Cooldown store: gates notifications on the last successful send.

State is a single decimal Unix timestamp in a text file, shared between
runs of the process.
"""

from contextlib import contextmanager
import fcntl
import logging
import os
from pathlib import Path
import tempfile
from typing import Iterator, Union

from camsentinel.errors import CooldownLockedError

logger = logging.getLogger(__name__)


class CooldownStore:
    """Policy: notify only when more than `cooldown_seconds` have passed."""

    def __init__(self, path: Union[str, Path], cooldown_seconds: int = 600) -> None:
        self._path = Path(path)
        self._cooldown = int(cooldown_seconds)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def cooldown_seconds(self) -> int:
        return self._cooldown

    def last_notified_at(self) -> int:
        try:
            raw = self._path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return 0
        except OSError as exc:
            logger.warning("Cannot read cooldown state %s: %s", self._path, exc)
            return 0
        try:
            return int(raw)
        except ValueError:
            pass
        try:
            # fractional seconds are truncated
            return int(float(raw))
        except (ValueError, OverflowError):
            logger.error("Ignoring malformed cooldown state %r in %s", raw, self._path)
            return 0

    def should_proceed(self, now: int) -> bool:
        elapsed = int(now) - self.last_notified_at()
        if elapsed <= self._cooldown:
            logger.debug("Cooldown active: %ss elapsed of %ss", elapsed, self._cooldown)
            return False
        return True

    def record_success(self, now: int) -> None:
        """Atomically replace the stored timestamp with `now`."""
        directory = self._path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=str(directory))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(str(int(now)))
            os.replace(tmp, self._path)
        except BaseException:
            try:
                os.unlink(tmp)
            except FileNotFoundError:
                pass
            raise
        logger.debug("Cooldown timestamp set to %s", now)

    @contextmanager
    def run_lock(self) -> Iterator[None]:
        """Hold an exclusive lock on `<state>.lock` for the duration of a run."""
        lock_path = self._path.with_name(self._path.name + ".lock")
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        with open(lock_path, "a") as fh:
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                raise CooldownLockedError(f"Another run holds {lock_path}") from None
            try:
                yield
            finally:
                fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
