"""Read-only GitHub organization dashboard backend."""

__version__ = '1.0.0'
