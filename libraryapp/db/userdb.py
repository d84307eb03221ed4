"""
User repository operations for database CRUD functionality.

``UserStore`` is the persistence interface the service depends on. Two
implementations are provided: ``SqlAlchemyUserStore`` for a real database
session and ``InMemoryUserStore`` for tests and lightweight use.
"""

import itertools
import logging
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from libraryapp.error_handling import (
    DatabaseError,
    not_found_if_none,
    validate_and_raise,
)
from libraryapp.models.user_model import UserModel, fits_integer_column

logger = logging.getLogger(__name__)

UserFields = Tuple[str, Optional[int]]


def _validate_name(name: Optional[str], index: Optional[int] = None) -> None:
    details = {"field": "name"}
    if index is not None:
        details["index"] = index
    validate_and_raise(bool(name), "User name is required", details)


def _validate_age(age: Optional[int], index: Optional[int] = None) -> None:
    if age is None:
        return
    details = {"field": "age"}
    if index is not None:
        details["index"] = index
    validate_and_raise(fits_integer_column(age), "User age is out of range", details)


def _validate_batch(users: Sequence[UserFields]) -> None:
    for index, (name, age) in enumerate(users):
        _validate_name(name, index)
        _validate_age(age, index)


class UserStore(ABC):
    """
    Persistence interface for user records.

    Implementations assign ids on insert and never change them afterwards.
    """

    @abstractmethod
    def insert(self, name: str, age: Optional[int] = None) -> UserModel:
        """Create and persist a user; ValidationError on an empty name."""

    @abstractmethod
    def insert_all(self, users: Iterable[UserFields]) -> list[UserModel]:
        """Persist every (name, age) pair, or none of them."""

    @abstractmethod
    def find_all(self) -> list[UserModel]:
        """Return all users in no particular order."""

    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[UserModel]:
        """Return the user with the given id, or None."""

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[UserModel]:
        """Return the first user (lowest id) with the given name, or None."""

    @abstractmethod
    def save(self, user: UserModel) -> UserModel:
        """Persist in-place changes to an existing user."""

    @abstractmethod
    def delete_by_name(self, name: str) -> None:
        """Delete the first user with the given name; NotFoundError if none."""

    @abstractmethod
    def delete_all(self) -> None:
        """Delete every user. Always succeeds."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored users."""


class InMemoryUserStore(UserStore):
    """
    Dict-backed user store.

    Ids come from a counter starting at 1 and are never reused, even after
    delete_all.
    """

    def __init__(self):
        self._users: dict[int, UserModel] = {}
        self._ids = itertools.count(1)

    def insert(self, name: str, age: Optional[int] = None) -> UserModel:
        _validate_name(name)
        _validate_age(age)

        user = UserModel(id=next(self._ids), name=name, age=age)
        self._users[user.id] = user
        logger.debug(f"Inserted user {user.id} in memory")
        return user

    def insert_all(self, users: Iterable[UserFields]) -> list[UserModel]:
        users = list(users)
        _validate_batch(users)
        return [self.insert(name, age) for name, age in users]

    def find_all(self) -> list[UserModel]:
        return list(self._users.values())

    def find_by_id(self, user_id: int) -> Optional[UserModel]:
        if not fits_integer_column(user_id):
            return None
        return self._users.get(user_id)

    def find_by_name(self, name: str) -> Optional[UserModel]:
        # dict order is insertion order, which is id order
        return next((u for u in self._users.values() if u.name == name), None)

    def save(self, user: UserModel) -> UserModel:
        # Stored instances are shared with callers; UserModel.rename validates
        not_found_if_none(self._users.get(user.id), "User", user.id)
        self._users[user.id] = user
        return user

    def delete_by_name(self, name: str) -> None:
        user = not_found_if_none(self.find_by_name(name), "User", name)
        del self._users[user.id]
        logger.debug(f"Deleted user {user.id} from memory")

    def delete_all(self) -> None:
        self._users.clear()

    def count(self) -> int:
        return len(self._users)


class SqlAlchemyUserStore(UserStore):
    """
    Repository class for user database operations.

    Writes are flushed so ids are assigned immediately; committing the
    transaction is left to the owner of the session.
    """

    def __init__(self, db_session: Session):
        """
        Initialize SqlAlchemyUserStore with a database session.

        Args:
            db_session: SQLAlchemy database session
        """
        self.db = db_session

    def insert(self, name: str, age: Optional[int] = None) -> UserModel:
        """
        Create a new user in the database.

        Args:
            name: User name (required, non-empty)
            age: Optional age

        Returns:
            Created UserModel instance with its id assigned

        Raises:
            ValidationError: If the name is empty or the age does not fit the column
            DatabaseError: If the insert fails
        """
        _validate_name(name)
        _validate_age(age)

        user = UserModel(name=name, age=age)
        try:
            self.db.add(user)
            self.db.flush()  # Flush to get the ID without committing
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting user: {str(e)}")
            raise DatabaseError("Failed to insert user", e) from e

        return user

    def insert_all(self, users: Iterable[UserFields]) -> list[UserModel]:
        """
        Insert a batch of users.

        Every entry is validated before anything is added to the session, so
        a ValidationError leaves the session untouched. A database failure
        rolls back the whole session, not just this batch: anything the caller
        flushed earlier in the same transaction is discarded as well.

        Args:
            users: (name, age) pairs

        Returns:
            Created UserModel instances, in input order

        Raises:
            ValidationError: If any name is empty or any age does not fit the
                column; nothing is inserted
            DatabaseError: If the batch insert fails; the session is rolled back
        """
        users = list(users)
        _validate_batch(users)

        models = [UserModel(name=name, age=age) for name, age in users]
        try:
            self.db.add_all(models)
            self.db.flush()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error inserting {len(models)} users: {str(e)}")
            raise DatabaseError("Failed to insert users", e) from e

        logger.debug(f"Inserted {len(models)} users")
        return models

    def find_all(self) -> list[UserModel]:
        return self.db.query(UserModel).all()

    def find_by_id(self, user_id: int) -> Optional[UserModel]:
        # No stored id lies outside the column range; the driver would overflow
        if not fits_integer_column(user_id):
            return None
        return self.db.query(UserModel).filter(UserModel.id == user_id).first()

    def find_by_name(self, name: str) -> Optional[UserModel]:
        return (
            self.db.query(UserModel)
            .filter(UserModel.name == name)
            .order_by(UserModel.id)
            .first()
        )

    def save(self, user: UserModel) -> UserModel:
        """
        Flush pending changes to an existing user.

        Raises:
            ValidationError: If the user's name is empty
            DatabaseError: If the update fails
        """
        _validate_name(user.name)

        try:
            self.db.add(user)
            self.db.flush()
            self.db.refresh(user)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving user {user.id}: {str(e)}")
            raise DatabaseError(f"Failed to save user {user.id}", e) from e

        return user

    def delete_by_name(self, name: str) -> None:
        """
        Delete one user with the given name.

        When several users share the name, the one with the lowest id goes.

        Raises:
            NotFoundError: If no user has that name
        """
        user = not_found_if_none(self.find_by_name(name), "User", name)

        try:
            self.db.delete(user)
            self.db.flush()  # Flush to execute delete without committing
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting user {user.id}: {str(e)}")
            raise DatabaseError(f"Failed to delete user {user.id}", e) from e

    def delete_all(self) -> None:
        try:
            deleted = self.db.query(UserModel).delete()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting all users: {str(e)}")
            raise DatabaseError("Failed to delete users", e) from e

        logger.debug(f"Deleted {deleted} users")

    def count(self) -> int:
        return self.db.query(UserModel).count()

