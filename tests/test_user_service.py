"""
Tests for User Service operations.

Every test runs once against the in-memory store and once against the
SQLAlchemy store (see the user_store fixture).
"""

import pytest

from libraryapp.error_handling import NotFoundError, ValidationError
from libraryapp.schemas.user import UserCreateRequest, UserResponse, UserUpdateRequest


def test_save_user(user_service, user_store):
    """Test saving a user without an age."""
    user_service.save_user(UserCreateRequest("김명지", None))

    results = user_store.find_all()
    assert len(results) == 1
    assert results[0].name == "김명지"
    assert results[0].age is None
    assert results[0].id is not None


def test_save_user_with_age(user_service, user_store):
    """Test the age is stored when given."""
    user_service.save_user(UserCreateRequest("A", 20))

    assert user_store.find_by_name("A").age == 20


def test_save_user_requires_name(user_service, user_store):
    """Test an empty name is rejected and nothing is stored."""
    with pytest.raises(ValidationError, match="User name is required"):
        user_service.save_user(UserCreateRequest("", 20))

    assert user_store.find_all() == []


def test_get_users(user_service, user_store):
    """Test listing users returns name and age of each, in any order."""
    user_store.insert_all([("A", 20), ("B", None)])

    results = user_service.get_users()

    assert len(results) == 2
    assert sorted(r.name for r in results) == ["A", "B"]
    assert sorted([r.age for r in results], key=lambda age: age is None) == [
        20,
        None,
    ]
    assert all(isinstance(r, UserResponse) for r in results)


def test_get_users_empty(user_service):
    """Test listing with no users returns an empty list."""
    assert user_service.get_users() == []


def test_get_users_does_not_expose_id(user_service, user_store):
    """Test the public view carries only name and age."""
    user_store.insert("A", 20)

    (result,) = user_service.get_users()

    assert result.to_dict() == {"name": "A", "age": 20}


def test_update_user_name(user_service, user_store):
    """Test renaming a user by id."""
    saved_user = user_store.insert("A")

    user_service.update_user_name(UserUpdateRequest(saved_user.id, "B"))

    results = user_store.find_all()
    assert len(results) == 1
    assert results[0].name == "B"
    assert results[0].id == saved_user.id


def test_update_user_name_can_repeat(user_service, user_store):
    """Test a user can be renamed any number of times."""
    saved_user = user_store.insert("A")

    user_service.update_user_name(UserUpdateRequest(saved_user.id, "B"))
    user_service.update_user_name(UserUpdateRequest(saved_user.id, "C"))

    assert [u.name for u in user_store.find_all()] == ["C"]


def test_update_user_name_not_found(user_service, user_store):
    """Test renaming a missing user raises NotFoundError."""
    user_store.insert("A")

    with pytest.raises(NotFoundError) as exc_info:
        user_service.update_user_name(UserUpdateRequest(99999, "B"))

    assert exc_info.value.resource_id == 99999
    assert exc_info.value.status_code == 404
    assert user_store.find_by_name("A") is not None


def test_update_user_name_rejects_empty_name(user_service, user_store):
    """Test renaming to an empty name fails and keeps the old name."""
    saved_user = user_store.insert("A")

    with pytest.raises(ValidationError):
        user_service.update_user_name(UserUpdateRequest(saved_user.id, ""))

    assert user_store.find_by_id(saved_user.id).name == "A"


def test_delete_user(user_service, user_store):
    """Test deleting a user by name empties the store."""
    user_store.insert("A")

    user_service.delete_user("A")

    assert user_store.find_all() == []


def test_delete_user_not_found(user_service, user_store):
    """Test deleting a missing name raises NotFoundError."""
    user_store.insert("A")

    with pytest.raises(NotFoundError, match="'B' not found"):
        user_service.delete_user("B")

    assert len(user_store.find_all()) == 1


def test_delete_user_with_duplicate_names(user_service, user_store):
    """Test only one of several same-named users is deleted."""
    first, second = user_store.insert_all([("A", 1), ("A", 2)])

    user_service.delete_user("A")

    remaining = user_store.find_all()
    assert len(remaining) == 1
    assert remaining[0].id == second.id
    assert user_store.find_by_id(first.id) is None
