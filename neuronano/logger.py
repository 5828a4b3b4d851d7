"""
Logger module for the NeuroNano editor.

Provides a simple file-based logger for debugging and error tracking, and a safe
wrapper for curses screen output that catches and logs curses errors.
"""
import curses
import datetime
import os

from neuronano import paths

# Overrides the default location under the per-user log directory
LOG_ENV_VAR = "NEURONANO_LOG"


def log_file_path() -> str:
    """Return the path of the log file, honouring NEURONANO_LOG."""
    override = os.getenv(LOG_ENV_VAR)
    if override:
        return override
    return str(paths.log_dir() / "neuronano.log")


def log(message: str) -> None:
    """Append a timestamped message to the log file."""
    try:
        with open(log_file_path(), 'a', encoding='utf-8') as f:
            timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S")
            f.write(f"[{timestamp}] {message}\n")
    except OSError:
        # A log that cannot be written must never take the editor down.
        pass


def safe_addstr(window, y: int, x: int, text: str, attr: int = 0) -> None:
    """
    Safely add a string to the curses window at the given position.
    Logs any curses.error exceptions that occur (e.g., writing off-screen).
    """
    try:
        window.addstr(y, x, text, attr)
    except curses.error:
        log(f"curses.error in addstr at ({y},{x}): '{text}'")
