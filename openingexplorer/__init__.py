"""Storage model and query logic for a chess opening explorer, with LMDB-backed tables."""

__version__ = "0.1.0"