"""Endpoints for the authenticated user's own profile."""

from __future__ import annotations

from flask import Blueprint, request

from catetin.api.deps import (
    current_user_id,
    empty_response,
    if_match_version,
    json_response,
    require_auth,
    required_version,
    timing,
    translate_service_errors,
)
from catetin.api.etag import set_response_etag
from catetin.schemas import UserSchema, UserUpdateSchema
from catetin.services import UserService, UserUpdateIn

bp = Blueprint("users", __name__)

user_schema = UserSchema()
user_update_schema = UserUpdateSchema()


@bp.get("/me")
@require_auth
@timing
@translate_service_errors
def get_me():
    user = UserService().get_profile(current_user_id())
    response = json_response({"data": user_schema.dump(user)})
    set_response_etag(response, user)
    return response


@bp.patch("/me")
@require_auth
@timing
@translate_service_errors
def update_me():
    """Update the profile; the write is gated on ``If-Match`` or ``version``."""

    raw = request.get_json(silent=True) or {}
    payload = user_update_schema.load(raw)
    dto = UserUpdateIn(
        version=required_version(payload["version"]),
        full_name=payload["full_name"],
        image=payload["image"],
        clear_image="image" in raw and raw["image"] is None,
    )
    user = UserService().update_profile(current_user_id(), dto)
    response = json_response({"data": user_schema.dump(user)})
    set_response_etag(response, user)
    return response


@bp.delete("/me")
@require_auth
@timing
@translate_service_errors
def delete_me():
    """Close the account. ``If-Match`` is honoured when sent."""

    UserService().delete_account(current_user_id(), version=if_match_version())
    return empty_response()
