"""Core of a terminal music client: configuration, events, formatting, screen text and requests."""

__version__ = "0.1.0"