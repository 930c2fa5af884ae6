"""Database connection and models."""
from .connection import DatabaseManager
from .base_model import BaseModel

__all__ = [
    "DatabaseManager",
    "BaseModel",
]
