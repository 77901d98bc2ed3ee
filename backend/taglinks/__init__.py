"""Tag-user-link relation store."""

__version__ = "0.1.0"
