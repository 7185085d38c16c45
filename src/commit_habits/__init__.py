"""Behavioral analytics over a GitHub user's public commit history."""

__version__ = "0.1.0"
