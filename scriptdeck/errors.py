"""Exception types surfaced through the controller's error page.

Every recoverable failure is raised (or returned as a message) as one of these
so the navigation controller can render it in place of the current page.
"""

from __future__ import annotations


class ScriptdeckError(Exception):
    """Base class for launcher errors."""


class ExtensionError(ScriptdeckError):
    """Extension manifest could not be loaded."""


class LookupFailedError(ScriptdeckError):
    """Unknown extension, command, preference, or action type."""


class TemplateError(ScriptdeckError):
    """Command template references an input that has no value."""


class MissingValueError(ScriptdeckError):
    """Input or preference has neither a value nor a default."""


class ResponseError(ScriptdeckError):
    """Command output could not be decoded into a page."""


class CommandFailedError(ScriptdeckError):
    """Child process exited with a non-zero status."""

    def __init__(self, exit_code: int, stderr: str) -> None:
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"command failed with exit code {exit_code}, error:\n{stderr}")
