"""
Services package for business logic layer.

This package contains service classes that implement business logic
and coordinate between the data layer and application layer.
"""

from .user_service import UserService

__all__ = ["UserService"]
