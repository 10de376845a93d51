"""
Build log writer.
"""
import logging
from pathlib import Path
from typing import Optional, TextIO


class BuildLogger:
    """
    Writes build progress to the process log and, when a path is given,
    to a per-build log file that is later published next to the site.
    """

    def __init__(self, log_file: Optional[str] = None):
        self.log_file = log_file
        self.logger = logging.getLogger(__name__)
        self._file: Optional[TextIO] = None

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            self._file = open(log_file, 'w', encoding='utf-8')

    def log(self, *args) -> None:
        self._write(logging.INFO, args)

    def error(self, *args) -> None:
        self._write(logging.ERROR, args)

    def _write(self, level: int, args) -> None:
        message = ' '.join(str(arg) for arg in args)
        self.logger.log(level, message)
        if self._file is not None:
            self._file.write(message + '\n')
            self._file.flush()

    def close(self) -> None:
        """Close the log file; further messages only reach the process log"""
        if self._file is not None:
            self._file.close()
            self._file = None
