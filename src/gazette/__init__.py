"""Gazette: browse Hacker News top stories from the terminal."""

__version__ = "0.1.0"
