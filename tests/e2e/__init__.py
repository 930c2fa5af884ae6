# tests/e2e/__init__.py
"""
End-to-end tests through the HTTP API.

Requests go through the full middleware stack via the ``async_client``
fixture; the identity is switched with ``login``.
"""
