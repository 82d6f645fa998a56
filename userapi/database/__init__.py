"""Persistence layer for userapi."""
