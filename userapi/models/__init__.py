"""Data models for userapi."""

from userapi.models.user import User, UserCreate

__all__ = ["User", "UserCreate"]
