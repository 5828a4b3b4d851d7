"""
Exception types for the NeuroNano editor.

Per-action errors (config, save, AI request) are caught where they happen and
turned into a status message or in-buffer text. Only terminal failures travel
all the way up to the process exit.
"""


class NeuroNanoError(Exception):
    """Base class for editor errors."""


class ConfigError(NeuroNanoError):
    """The persisted config could not be read, parsed or written."""


class SaveError(NeuroNanoError):
    """The buffer could not be written to its backing file."""


class NoFilename(SaveError):
    """Save was requested for a buffer with no backing file."""

    def __init__(self, message: str = "no filename set"):
        super().__init__(message)


class AiRequestError(NeuroNanoError):
    """The remote model call failed (network, HTTP status or bad payload)."""


class FatalTerminalError(NeuroNanoError):
    """The terminal could not be initialised or restored."""


class InvalidTransition(NeuroNanoError):
    """A mode change that the session state machine does not allow."""

    def __init__(self, current, target):
        super().__init__(f"illegal mode change: {current.value} -> {target.value}")
        self.current = current
        self.target = target
