"""Repository for User database operations."""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from userapi.database.errors import UserValidationError, translate_store_error
from userapi.database.models import UserDB
from userapi.models.user import User, UserCreate

logger = logging.getLogger(__name__)


def _validate_new_user(name: Optional[str], email: Optional[str]) -> Tuple[str, str]:
    """Return trimmed (name, email) or raise UserValidationError."""
    missing = [
        field
        for field, value in (("name", name), ("email", email))
        if not isinstance(value, str) or not value.strip()
    ]
    if missing:
        raise UserValidationError(f"Missing required field(s): {', '.join(missing)}")
    return name.strip(), email.strip()


class UserRepository:
    """Repository for User database operations.

    Each call opens its own session from the factory, so one instance can be
    shared by concurrent requests.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def list_users(self) -> List[User]:
        """Get all users in the order the store returns them."""
        try:
            with self.session_factory() as db:
                users_db = db.query(UserDB).all()
                return [user_db.to_pydantic() for user_db in users_db]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list users: {type(e).__name__}: {str(e)}")
            raise translate_store_error(e, "list users") from e

    def insert_user(self, name: Optional[str], email: Optional[str]) -> User:
        """Create a new user.

        Args:
            name: Display name, required and non-blank
            email: Email address, required and non-blank

        Returns:
            The persisted User, including its store-assigned id

        Raises:
            UserValidationError: name or email missing; nothing is written
            StoreConnectionError: the store is unreachable
            StoreConstraintError: the store rejected the insert
        """
        name, email = _validate_new_user(name, email)
        try:
            with self.session_factory() as db:
                user_db = UserDB.from_pydantic(UserCreate(name=name, email=email))
                db.add(user_db)
                try:
                    db.commit()
                except SQLAlchemyError:
                    db.rollback()
                    raise
                db.refresh(user_db)
                logger.debug(f"Created user {user_db.id}: {email}")
                return user_db.to_pydantic()
        except SQLAlchemyError as e:
            logger.error(f"Failed to create user {email}: {type(e).__name__}: {str(e)}")
            raise translate_store_error(e, "create user") from e

    def ping(self) -> None:
        """Round-trip a trivial query to check the store is reachable."""
        try:
            with self.session_factory() as db:
                db.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.warning(f"Store ping failed: {type(e).__name__}: {str(e)}")
            raise translate_store_error(e, "ping store") from e
