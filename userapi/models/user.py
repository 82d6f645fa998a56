"""User data model for userapi."""

from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """User record as stored and served."""

    id: int = Field(..., description="Store-assigned user identifier")
    name: str = Field(..., description="User display name")
    email: str = Field(..., description="User email address")


class UserCreate(BaseModel):
    """Request body for creating a user.

    Both fields are optional here so that missing values are rejected by the
    repository with a client error instead of a framework-level 422.
    """

    name: Optional[str] = Field(None, description="User display name")
    email: Optional[str] = Field(None, description="User email address")
