from __future__ import annotations

"""Audit reporter: appends run results to the log file and echoes them.

Single-responsibility: render detection blocks and error lines, write them
to the append-only log and to the live output stream. Never raises.
"""

from datetime import datetime
import logging
from pathlib import Path
import sys
from typing import Callable, Iterable, Optional, TextIO, Union

from camsentinel.schemas.detection import Detection
from camsentinel.utils.formatting import format_report_line

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class ResultReporter:
    def __init__(
        self,
        log_path: Union[str, Path],
        stream: Optional[TextIO] = None,
        html: bool = False,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Args:
            log_path: append-only audit log file.
            stream: live output channel (default: stdout).
            html: render line breaks as `<br />` for a browser.
            clock: returns the timestamp printed at the top of each block.
        """
        self._log_path = Path(log_path)
        self._stream = stream
        self._html = html
        self._clock = clock

    def render_block(self, detections: Iterable[Detection]) -> str:
        lines = ["", self._clock().strftime(TIMESTAMP_FORMAT)]
        lines.extend(format_report_line(d) for d in detections)
        return "\n".join(lines) + "\n"

    def report(self, detections: Iterable[Detection]) -> None:
        self._emit(self.render_block(detections))

    def report_error(self, err: BaseException) -> None:
        self._emit(f"Error: {err}\n")

    def _emit(self, text: str) -> None:
        try:
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(text)
        except OSError as exc:
            logger.error("Cannot append to audit log %s: %s", self._log_path, exc)

        out = text.replace("\n", "<br />\n") if self._html else text
        stream = self._stream or sys.stdout
        try:
            stream.write(out)
            stream.flush()
        except (OSError, ValueError) as exc:
            logger.error("Cannot write to live output: %s", exc)
