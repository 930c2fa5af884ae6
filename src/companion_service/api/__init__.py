"""HTTP API for the companion service."""
