"""Client for a passwordless one-time-code authentication endpoint."""

__version__ = "0.1.0"
