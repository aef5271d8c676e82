# The state machine, widgets and messages are plain Python; only app.py
# imports textual, so the core can be imported and tested without a terminal.

__all__ = [
    "app",
    "effects",
    "machine",
    "messages",
    "widgets",
]
