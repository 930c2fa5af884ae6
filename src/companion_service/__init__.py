"""
Companion service.

HTTP backend for a library of AI tutor companions: search and pagination,
plan-gated authoring, bookmarks, session history and voice assistant
configuration.
"""

__version__ = "0.1.0"
