"""Articlecast - narrate a directory of articles and publish them as a podcast feed."""

__version__ = "0.1.0"
