"""Structured logging pieces: levels, a logfmt-style text formatter, a line writer and terminal detection."""

__version__ = "0.1.0"
__all__ = ["levels", "terminal", "text_formatter", "writer"]