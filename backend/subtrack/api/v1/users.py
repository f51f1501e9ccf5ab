"""User management endpoints."""

from __future__ import annotations

from flask import Blueprint, request

from subtrack.api.deps import current_principal, require_admin, require_auth, success, timing
from subtrack.schemas import UserSchema, UserUpdateSchema
from subtrack.services.users.service import UserService

bp = Blueprint("users", __name__)

user_schema = UserSchema()
users_schema = UserSchema(many=True)
user_update_schema = UserUpdateSchema()


@bp.get("")
@require_auth
@require_admin
@timing
def list_users():
    """Return every user. Admins only."""

    return success(users_schema.dump(UserService().list_users()))


@bp.get("/<int:user_id>")
@require_auth
@timing
def get_user(user_id: int):
    user = UserService().get_user(user_id, current_principal())
    return success(user_schema.dump(user))


@bp.put("/<int:user_id>")
@require_auth
@timing
def update_user(user_id: int):
    patch = user_update_schema.load(request.get_json(silent=True) or {})
    user = UserService().update_user(user_id, current_principal(), patch)
    return success(user_schema.dump(user), message="User updated successfully")


@bp.delete("/<int:user_id>")
@require_auth
@timing
def delete_user(user_id: int):
    """Delete a user and every subscription they own."""

    UserService().delete_user(user_id, current_principal())
    return success(message="User deleted successfully")
