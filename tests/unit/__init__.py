# tests/unit/__init__.py
"""Unit tests: pure functions and components with their I/O mocked."""
