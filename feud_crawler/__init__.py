"""Resumable crawler and translator for trivia answer pages."""

__version__ = "0.1.0"
