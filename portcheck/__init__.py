"""Check and kill processes by port."""

__version__ = "0.1.0"
