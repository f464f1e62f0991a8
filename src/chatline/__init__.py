"""Chatline: a small chat backend with cookie sessions and direct messages."""

__version__ = "1.0.0"
