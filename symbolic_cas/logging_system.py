"""
Logging System for the Algebra Core

Centralized logging with verbosity levels so simplification runs can be
traced step by step without cluttering the terminal by default.
"""

import logging
import sys
import time
from datetime import datetime
from enum import Enum
from typing import Optional


class LogLevel(Enum):
    """Enumeration of logging levels for symbolic_cas"""
    SILENT = 0      # No output except critical errors
    MINIMAL = 1     # Only final results and critical info
    MODERATE = 2    # Fixpoints and run summaries
    DETAILED = 3    # Every rewrite step
    VERBOSE = 4     # All information including concurrency task states


class CasLogger:
    """
    Centralized logger for the rewrite driver and its strategies
    """

    def __init__(self, log_level: LogLevel = LogLevel.MINIMAL,
                 log_to_file: bool = False, log_file_path: Optional[str] = None):
        self.log_level = log_level
        self.log_to_file = log_to_file
        self.start_time = time.time()

        # Create logger
        self.logger = logging.getLogger('symbolic_cas')
        self.logger.setLevel(logging.DEBUG)
        for handler in self.logger.handlers:  # Release any existing handlers
            handler.close()
        self.logger.handlers.clear()

        # Create formatter
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(message)s',
            datefmt='%H:%M:%S'
        )

        # Console handler
        if self.log_level != LogLevel.SILENT:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            self.logger.addHandler(console_handler)

        # File handler (optional)
        if log_to_file:
            if log_file_path is None:
                log_file_path = f"symbolic_cas_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
            file_handler = logging.FileHandler(log_file_path)
            file_handler.setFormatter(formatter)
            self.logger.addHandler(file_handler)

    def _should_log(self, required_level: LogLevel) -> bool:
        """Check if message should be logged based on current log level"""
        return self.log_level.value >= required_level.value

    def critical(self, message: str):
        """Always logged - critical errors and failures"""
        if self.log_level != LogLevel.SILENT:
            self.logger.error(f"CRITICAL: {message}")

    def info(self, message: str, required_level: LogLevel = LogLevel.MINIMAL):
        """General information with configurable level"""
        if self._should_log(required_level):
            self.logger.info(message)

    def rewrite_step(self, step: int, before: str, after: str):
        """One driver iteration that changed the tree"""
        if not self._should_log(LogLevel.DETAILED):
            return
        elapsed = time.time() - self.start_time
        self.logger.info(f"Step {step:3d}: {before} -> {after} ({elapsed:.3f}s)")

    def warning(self, message: str):
        """Warnings - shown from minimal level onwards"""
        if self._should_log(LogLevel.MINIMAL):
            self.logger.warning(message)

    def debug(self, message: str):
        """Debug information - only in verbose mode"""
        if self._should_log(LogLevel.VERBOSE):
            self.logger.debug(f"DEBUG: {message}")


# Global logger instance
_global_logger: Optional[CasLogger] = None


def get_logger() -> CasLogger:
    """Get or create the global logger instance"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CasLogger()
    return _global_logger


def set_log_level(level: LogLevel):
    """Set the global logging level"""
    global _global_logger
    if _global_logger is None:
        _global_logger = CasLogger(log_level=level)
    else:
        _global_logger.log_level = level


def configure_logging(log_level: LogLevel = LogLevel.MINIMAL,
                      log_to_file: bool = False,
                      log_file_path: Optional[str] = None) -> CasLogger:
    """Configure the global logging system"""
    global _global_logger
    _global_logger = CasLogger(
        log_level=log_level,
        log_to_file=log_to_file,
        log_file_path=log_file_path
    )
    return _global_logger


# Convenience functions for common operations
def log_info(message: str, level: LogLevel = LogLevel.MINIMAL):
    """Log info message at specified level"""
    get_logger().info(message, level)


def log_warning(message: str):
    """Log warning message"""
    get_logger().warning(message)


def log_rewrite_step(step: int, before: str, after: str):
    """Log one rewrite step"""
    get_logger().rewrite_step(step, before, after)


def log_debug(message: str):
    """Log debug message"""
    get_logger().debug(message)
