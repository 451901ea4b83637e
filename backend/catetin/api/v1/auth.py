"""Authentication endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, current_app, request

from catetin.api.deps import json_response, timing, translate_service_errors
from catetin.api.etag import set_response_etag
from catetin.core.extensions import limiter
from catetin.schemas import AuthResponseSchema, LoginSchema, RegisterSchema
from catetin.services import AuthService, LoginIn, RegisterIn

bp = Blueprint("authentications", __name__)

register_schema = RegisterSchema()
login_schema = LoginSchema()
auth_response_schema = AuthResponseSchema()


def _login_rate_limit() -> str:
    return str(current_app.config.get("AUTH_LOGIN_RATE_LIMIT", "5 per minute"))


@bp.post("/register")
@timing
@translate_service_errors
def register():
    """Create an account and return it with a fresh token pair."""

    payload = register_schema.load(request.get_json(silent=True) or {})
    result = AuthService().register(RegisterIn(**payload))
    response = json_response({"data": auth_response_schema.dump(result)}, status=201)
    set_response_etag(response, result.user)
    return response


@bp.post("/login")
@limiter.limit(_login_rate_limit)
@timing
@translate_service_errors
def login():
    """Authenticate credentials and issue tokens."""

    payload = login_schema.load(request.get_json(silent=True) or {})
    result = AuthService().login(LoginIn(**payload))
    return json_response({"data": auth_response_schema.dump(result)})
