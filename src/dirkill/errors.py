"""Exceptions raised by dirkill."""


class DirkillError(Exception):
    """Base class for dirkill errors."""


class StartupError(DirkillError):
    """The scan cannot start (unreadable start directory, no home directory)."""
