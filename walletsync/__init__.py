"""Client synchronization and request-normalization layer for the wallet API."""

__version__ = "0.1.0"
