# tests/__init__.py
"""
Test suite for the companion service.

- unit: domain rules, identity parsing and cache behavior, no database
- integration: repositories and CompanionService against in-memory SQLite
- e2e: HTTP requests through the FastAPI app
- factories: Factory Boy factories for companions, bookmarks and history
"""
