"""
User Service for managing user operations.

This module provides the UserService class, which turns create, list,
rename and delete requests into calls on a UserStore and maps stored
users to their public view.
"""

import logging

from libraryapp.db.userdb import UserStore
from libraryapp.error_handling import NotFoundError, validate_and_raise
from libraryapp.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest

logger = logging.getLogger(__name__)


class UserService:
    """
    Service class for user management operations.

    Every failure propagates to the caller; nothing is retried or swallowed.
    """

    def __init__(self, user_store: UserStore):
        """
        Initialize User Service with the store it delegates to.

        Args:
            user_store: Store holding the user records
        """
        self.user_store = user_store

    def save_user(self, request: UserCreateRequest) -> None:
        """
        Create a user from a create request.

        Args:
            request: Name and optional age of the new user

        Raises:
            ValidationError: If the name is empty or missing
        """
        validate_and_raise(
            bool(request.name), "User name is required", {"field": "name"}
        )

        user = self.user_store.insert(request.name, request.age)
        logger.info(f"Created user {user.id}")

    def get_users(self) -> list[UserResponse]:
        """
        List all users as public views, in no particular order.

        Returns:
            list[UserResponse]: Name and age of every stored user
        """
        users = self.user_store.find_all()
        logger.debug(f"Listing {len(users)} users")
        return [UserResponse.from_model(user) for user in users]

    def update_user_name(self, request: UserUpdateRequest) -> None:
        """
        Rename the user with the requested id.

        Args:
            request: Id of the user and its new name

        Raises:
            NotFoundError: If no user has that id
            ValidationError: If the new name is empty
        """
        user = self.user_store.find_by_id(request.id)
        if user is None:
            logger.warning(f"User {request.id} not found for rename")
            raise NotFoundError("User", request.id)

        user.rename(request.name)
        self.user_store.save(user)
        logger.info(f"Renamed user {user.id}")

    def delete_user(self, name: str) -> None:
        """
        Delete one user with the given name.

        Args:
            name: Name of the user to delete

        Raises:
            NotFoundError: If no user has that name
        """
        self.user_store.delete_by_name(name)
        logger.info(f"Deleted user named '{name}'")
