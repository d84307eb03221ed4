"""
User Model for the user management service.

A user has a store-assigned id, a required name and an optional age.
"""

from sqlalchemy import Column, Integer, String

from libraryapp.db.database import Base
from libraryapp.error_handling import ValidationError

# Bounds of the Integer column type on PostgreSQL, the narrowest backend
INTEGER_MIN = -(2**31)
INTEGER_MAX = 2**31 - 1


def fits_integer_column(value: int) -> bool:
    """Whether an int can be stored in, or compared against, an Integer column."""
    return INTEGER_MIN <= value <= INTEGER_MAX


class UserModel(Base):
    """
    Database model for a user record.

    The id is assigned by the store on creation and never changes. The name
    is the only field that is mutated after creation.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, index=True)
    age = Column(Integer, nullable=True)

    def __repr__(self) -> str:
        """String representation of the user model."""
        return f"<UserModel(id={self.id}, name='{self.name}', age={self.age})>"

    def rename(self, name: str) -> None:
        """
        Reassign the user's name in place.

        Args:
            name: New, non-empty name

        Raises:
            ValidationError: If the new name is empty
        """
        if not name:
            raise ValidationError("User name is required", {"field": "name"})
        self.name = name

    def to_dict(self) -> dict:
        """
        Convert user model to dictionary representation.

        Returns:
            dict: User data as dictionary
        """
        return {
            "id": self.id,
            "name": self.name,
            "age": self.age,
        }
