"""
Request and response shapes for user operations.

Requests are parsed from decoded JSON bodies by the HTTP layer; responses
are the public view of a stored user and never expose the id.
"""

from dataclasses import asdict, dataclass
from typing import Any, Optional

from libraryapp.error_handling import ValidationError
from libraryapp.models.user_model import fits_integer_column


def _require_object(payload: Any) -> dict:
    if not isinstance(payload, dict):
        raise ValidationError(
            "Request body must be a JSON object",
            {"expected_format": "Valid JSON object"},
        )
    return payload


def _require_name(payload: dict) -> str:
    name = payload.get("name")
    if name is None or name == "":
        raise ValidationError("User name is required", {"field": "name"})
    if not isinstance(name, str):
        raise ValidationError("User name must be a string", {"field": "name"})
    return name


def _is_int(value: Any) -> bool:
    # bool is a subclass of int; true/false are not valid ages or ids
    return isinstance(value, int) and not isinstance(value, bool)


def _require_storable_age(age: int) -> int:
    if not fits_integer_column(age):
        raise ValidationError("User age is out of range", {"field": "age"})
    return age


@dataclass
class UserCreateRequest:
    """Request to create a user."""

    name: str
    age: Optional[int] = None

    @classmethod
    def from_json(cls, payload: Any) -> "UserCreateRequest":
        payload = _require_object(payload)
        name = _require_name(payload)

        age = payload.get("age")
        if age is not None:
            if not _is_int(age):
                raise ValidationError("User age must be an integer", {"field": "age"})
            _require_storable_age(age)

        return cls(name=name, age=age)


@dataclass
class UserUpdateRequest:
    """Request to rename the user with the given id."""

    id: int
    name: str

    @classmethod
    def from_json(cls, payload: Any) -> "UserUpdateRequest":
        payload = _require_object(payload)

        user_id = payload.get("id")
        if not _is_int(user_id):
            raise ValidationError("User id must be an integer", {"field": "id"})

        return cls(id=user_id, name=_require_name(payload))


@dataclass
class UserResponse:
    """Public view of a user: name and age, without the id."""

    name: str
    age: Optional[int]

    @classmethod
    def from_model(cls, user) -> "UserResponse":
        return cls(name=user.name, age=user.age)

    def to_dict(self) -> dict:
        return asdict(self)
