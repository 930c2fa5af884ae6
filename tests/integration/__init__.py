# tests/integration/__init__.py
"""
Integration tests for the query/access layer.

Each test gets a fresh in-memory SQLite database; rows are created with
the factories in ``tests.factories``.
"""
