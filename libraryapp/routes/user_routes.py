# Endpoints which handle user-related operations

from flask import Blueprint, jsonify, request

from libraryapp.db import database as db_module
from libraryapp.db.userdb import SqlAlchemyUserStore
from libraryapp.error_handling import validate_and_raise
from libraryapp.schemas.user import UserCreateRequest, UserUpdateRequest
from libraryapp.services.user_service import UserService

user_bp = Blueprint("user", __name__)


def _run_in_session(operation):
    """
    Run operation(service) in a fresh session and commit on success.

    Errors roll the session back and propagate to the registered error
    handlers.
    """
    # Get SessionLocal from the module to ensure we use the current (possibly reinitialized) version
    db = db_module.SessionLocal()
    try:
        result = operation(UserService(SqlAlchemyUserStore(db)))
        db.commit()
        return result
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@user_bp.route("/user", methods=["POST"])
def save_user():
    """Create a user from a JSON body {"name": str, "age": int | null}."""
    user_request = UserCreateRequest.from_json(request.get_json(silent=True))

    _run_in_session(lambda service: service.save_user(user_request))

    return jsonify({"message": "User created successfully"}), 201


@user_bp.route("/user", methods=["GET"])
def get_users():
    """List all users as [{"name", "age"}]."""
    users = _run_in_session(lambda service: service.get_users())

    return jsonify([user.to_dict() for user in users]), 200


@user_bp.route("/user", methods=["PUT"])
def update_user_name():
    """Rename a user from a JSON body {"id": int, "name": str}."""
    user_request = UserUpdateRequest.from_json(request.get_json(silent=True))

    _run_in_session(lambda service: service.update_user_name(user_request))

    return jsonify({"message": "User updated successfully"}), 200


@user_bp.route("/user", methods=["DELETE"])
def delete_user():
    """Delete one user named by the ?name= query parameter."""
    name = request.args.get("name", "")
    validate_and_raise(bool(name), "Query parameter 'name' is required")

    _run_in_session(lambda service: service.delete_user(name))

    return jsonify({"message": "User deleted successfully"}), 200
