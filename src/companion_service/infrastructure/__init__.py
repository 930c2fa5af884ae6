"""Infrastructure adapters: database, cache and observability."""
