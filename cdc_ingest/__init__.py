"""Read, publish, consume and index change-data-capture events."""

__version__ = "0.1.0"