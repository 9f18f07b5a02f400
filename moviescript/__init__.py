"""Terminal form for writing short movie scripts."""

__version__ = "0.1.0"
