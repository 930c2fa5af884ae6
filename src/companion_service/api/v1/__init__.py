"""API version 1."""
from .router import router

__all__ = ["router"]
