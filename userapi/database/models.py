"""SQLAlchemy database models for userapi."""

from sqlalchemy import Column, Integer, String

from userapi.database.database import Base
from userapi.models.user import User, UserCreate


class UserDB(Base):
    """Database model for User.

    The table itself is created by the Alembic migrations; this mapping must
    stay compatible with the latest revision.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)

    def to_pydantic(self) -> User:
        """Convert to Pydantic User model."""
        return User(id=self.id, name=self.name, email=self.email)

    @classmethod
    def from_pydantic(cls, user: UserCreate) -> "UserDB":
        """Create from Pydantic UserCreate model; the id is left to the store."""
        return cls(name=user.name, email=user.email)
