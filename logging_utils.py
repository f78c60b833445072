"""
Phase Logging for Repetition Finder
===================================

Coloured, phase-tracked logging for batch analysis requests.
IMPORTANT: No emojis in console output (Windows encoding issues).
"""

import logging
import time
from typing import Optional, Dict
from contextlib import contextmanager
from datetime import datetime
from colorama import Fore, Style, init

# Initialize colorama for Windows
init(autoreset=True)


class Phase:
    """Phase constants for the batch pipeline"""
    EXTRACTION = "TEXT_EXTRACTION"
    ANALYSIS = "REPETITION_ANALYSIS"
    AGGREGATION = "AGGREGATION"


PHASE_COLORS = {
    Phase.EXTRACTION: Fore.CYAN,
    Phase.ANALYSIS: Fore.GREEN,
    Phase.AGGREGATION: Fore.MAGENTA,
}

# Text-based icons, no emojis
PHASE_ICONS = {
    Phase.EXTRACTION: "[EXT]",
    Phase.ANALYSIS: "[ANA]",
    Phase.AGGREGATION: "[AGG]",
}


class TimingTracker:
    """Track timing for phases and operations"""

    def __init__(self):
        self._timings: Dict[str, float] = {}
        self._start_times: Dict[str, float] = {}

    def start(self, key: str):
        self._start_times[key] = time.perf_counter()

    def end(self, key: str) -> float:
        """End timing and return elapsed seconds (0.0 if never started)"""
        started = self._start_times.pop(key, None)
        if started is None:
            return 0.0
        elapsed = time.perf_counter() - started
        self._timings[key] = elapsed
        return elapsed

    def get(self, key: str) -> Optional[float]:
        return self._timings.get(key)

    def get_all(self) -> Dict[str, float]:
        return self._timings.copy()


class PhaseLogger:
    """
    Logger with phase tracking and coloured formatting for one batch request.

    Usage:
        phase_logger = PhaseLogger(batch_id="ab12cd34", verbose=True)

        with phase_logger.phase(Phase.ANALYSIS, sub_label="report.docx"):
            phase_logger.info("3 sentence repetitions")
    """

    def __init__(
        self,
        batch_id: str,
        verbose: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        self.batch_id = batch_id
        self.verbose = verbose
        self.logger = logger or logging.getLogger(__name__)
        self.timing_tracker = TimingTracker()
        self._current_phase: Optional[str] = None
        self._phase_stack = []

    @contextmanager
    def phase(self, phase_name: str, sub_label: Optional[str] = None):
        """Context manager for phase tracking with automatic timing"""
        timing_key = f"{phase_name}:{sub_label or ''}"
        self._phase_stack.append(self._current_phase)
        self._current_phase = phase_name
        self.timing_tracker.start(timing_key)
        self._print_phase_header(phase_name, sub_label)
        try:
            yield self
        finally:
            elapsed = self.timing_tracker.end(timing_key)
            self._print_phase_footer(phase_name, sub_label, elapsed)
            self._current_phase = self._phase_stack.pop() if self._phase_stack else None

    def _print_phase_header(self, phase_name: str, sub_label: Optional[str] = None):
        if not self.verbose:
            return
        color = PHASE_COLORS.get(phase_name, Fore.WHITE)
        icon = PHASE_ICONS.get(phase_name, "[???]")
        timestamp = datetime.now().strftime("%H:%M:%S")
        sub_str = f" - {sub_label}" if sub_label else ""
        self.logger.info(
            f"{color}{icon} {phase_name}{sub_str} [batch {self.batch_id}] [{timestamp}]{Style.RESET_ALL}"
        )

    def _print_phase_footer(self, phase_name: str, sub_label: Optional[str], elapsed: float):
        if not self.verbose:
            return
        color = PHASE_COLORS.get(phase_name, Fore.WHITE)
        icon = PHASE_ICONS.get(phase_name, "[???]")
        sub_str = f" - {sub_label}" if sub_label else ""
        self.logger.info(
            f"{color}{icon} {phase_name}{sub_str} COMPLETED ({elapsed * 1000:.1f} ms){Style.RESET_ALL}"
        )

    def info(self, message: str):
        """Log info message with current phase context"""
        if self._current_phase:
            color = PHASE_COLORS.get(self._current_phase, Fore.WHITE)
            icon = PHASE_ICONS.get(self._current_phase, "[???]")
            self.logger.info(f"{color}{icon}{Style.RESET_ALL} [batch {self.batch_id}] {message}")
        else:
            self.logger.info(f"[batch {self.batch_id}] {message}")

    def debug(self, message: str):
        """Log debug message (only if verbose)"""
        if self.verbose:
            self.logger.debug(f"{Fore.WHITE}{Style.DIM}[batch {self.batch_id}] {message}{Style.RESET_ALL}")

    def warning(self, message: str):
        self.logger.warning(f"{Fore.YELLOW}[WARN] [batch {self.batch_id}] {message}{Style.RESET_ALL}")

    def error(self, message: str, exc_info: bool = False):
        self.logger.error(
            f"{Fore.RED}{Style.BRIGHT}[ERROR] [batch {self.batch_id}] {message}{Style.RESET_ALL}",
            exc_info=exc_info,
        )

    def log_item_result(self, source: str, total_repeated: Optional[int], error: Optional[str] = None):
        """Log the outcome of one batch item"""
        if error is not None:
            self.logger.info(f"{Fore.RED}[-] {source}: {error}{Style.RESET_ALL}")
        else:
            self.logger.info(f"{Fore.GREEN}[+] {source}: {total_repeated} repeated{Style.RESET_ALL}")

    def log_timing_summary(self):
        """Log timing summary for all phases (only if verbose)"""
        if not self.verbose:
            return
        timings = self.timing_tracker.get_all()
        if not timings:
            return
        total_time = 0.0
        for key, elapsed in sorted(timings.items()):
            phase_name = key.split(":", 1)[0]
            color = PHASE_COLORS.get(phase_name, Fore.WHITE)
            self.logger.info(f"{color}{key:40s} {elapsed * 1000:8.1f} ms{Style.RESET_ALL}")
            total_time += elapsed
        self.logger.info(f"{Fore.WHITE}{Style.BRIGHT}TOTAL TIME: {total_time * 1000:.1f} ms{Style.RESET_ALL}")


def create_phase_logger(batch_id: str, verbose: bool = False) -> PhaseLogger:
    """Create a PhaseLogger bound to a batch identifier"""
    return PhaseLogger(batch_id=batch_id, verbose=verbose)
