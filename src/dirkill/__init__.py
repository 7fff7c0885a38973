"""dirkill - find and delete dependency-cache directories interactively."""

__version__ = "0.1.0"
