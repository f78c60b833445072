"""
File Logger - Console and hourly file output
============================================

Mirrors stdout/stderr and Python logging output into hourly log files:

    <base_log_dir>/YYYY-MM-DD/HH_00_00.log

Enabled with ``python main.py --file-logging`` or REPETITION_FILE_LOGGING=true.
"""

import sys
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class TeeOutput:
    """
    File-like object writing to the original stream and to the current hourly log file.
    """

    def __init__(self, stream: TextIO, base_log_dir: str = "logs"):
        self.stream = stream
        self.base_log_dir = Path(base_log_dir)
        self.current_file: Optional[TextIO] = None
        self.current_hour: Optional[str] = None
        self.lock = threading.Lock()
        self._rotate_if_needed()

    def log_path_for(self, moment: datetime) -> Path:
        return self.base_log_dir / moment.strftime("%Y-%m-%d") / moment.strftime("%H_00_00.log")

    def _rotate_if_needed(self):
        now = datetime.now()
        hour_key = now.strftime("%Y-%m-%d-%H")
        if hour_key == self.current_hour:
            return
        if self.current_file:
            self.current_file.close()
        log_path = self.log_path_for(now)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        self.current_file = open(log_path, 'a', encoding='utf-8', buffering=1)
        self.current_hour = hour_key

    def write(self, message: str):
        with self.lock:
            self.stream.write(message)
            self.stream.flush()
            try:
                self._rotate_if_needed()
                if self.current_file:
                    self.current_file.write(message)
            except OSError as e:
                # Keep console output flowing if the log file becomes unwritable
                self.stream.write(f"\n[FILE LOGGER ERROR: {e}]\n")

    def flush(self):
        self.stream.flush()
        if self.current_file:
            self.current_file.flush()

    def close(self):
        """Close the log file; the original stream stays open."""
        if self.current_file:
            self.current_file.close()
            self.current_file = None

    def fileno(self):
        return self.stream.fileno()

    def isatty(self):
        return self.stream.isatty()


def activate_file_logging(base_log_dir: str = "logs") -> tuple[TeeOutput, TeeOutput]:
    """
    Route stdout, stderr and the root logger through TeeOutput instances.

    Returns:
        Tuple of (stdout_tee, stderr_tee) for cleanup purposes
    """
    stdout_tee = TeeOutput(sys.stdout, base_log_dir)
    stderr_tee = TeeOutput(sys.stderr, base_log_dir)

    sys.stdout = stdout_tee
    sys.stderr = stderr_tee

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    tee_handler = logging.StreamHandler(stderr_tee)
    tee_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(tee_handler)
    root_logger.setLevel(logging.INFO)

    logging.info("File logging activated - writing to %s/YYYY-MM-DD/HH_00_00.log", base_log_dir)
    return stdout_tee, stderr_tee
