"""Application services."""
from .companion_service import CompanionService, UserJourney

__all__ = [
    "CompanionService",
    "UserJourney",
]
