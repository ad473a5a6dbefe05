"""Job posting → interview-prep questions service."""

__version__ = "0.1.0"
