"""userapi - minimal persistence-backed CRUD service for users."""

__version__ = "0.1.0"
