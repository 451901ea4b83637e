"""Expense endpoints scoped to the authenticated user."""

from __future__ import annotations

from uuid import UUID

from flask import Blueprint, request

from catetin.api.deps import (
    current_user_id,
    empty_response,
    if_match_version,
    json_response,
    parse_pagination,
    require_auth,
    required_version,
    timing,
    translate_service_errors,
)
from catetin.api.etag import set_response_etag
from catetin.schemas import (
    DateRangeQuerySchema,
    MoneyFlowCreateSchema,
    MoneyFlowSchema,
    MoneyFlowSummaryQuerySchema,
    MoneyFlowSummarySchema,
    MoneyFlowUpdateSchema,
    build_meta,
)
from catetin.services import MoneyFlowCreateIn, MoneyFlowService, MoneyFlowUpdateIn

bp = Blueprint("money_flows", __name__)

flow_schema = MoneyFlowSchema()
flow_list_schema = MoneyFlowSchema(many=True)
flow_create_schema = MoneyFlowCreateSchema()
flow_update_schema = MoneyFlowUpdateSchema()
date_range_schema = DateRangeQuerySchema()
summary_query_schema = MoneyFlowSummaryQuerySchema()
summary_schema = MoneyFlowSummarySchema()


@bp.post("")
@require_auth
@timing
@translate_service_errors
def create_money_flow():
    payload = flow_create_schema.load(request.get_json(silent=True) or {})
    dto = MoneyFlowCreateIn(
        amount=payload["amount"],
        currency=payload["currency"],
        category=payload["category"],
        description=payload["description"],
        tags=tuple(payload["tags"]),
    )
    flow = MoneyFlowService().record(current_user_id(), dto)
    response = json_response({"data": flow_schema.dump(flow)}, status=201)
    set_response_etag(response, flow)
    return response


@bp.get("")
@require_auth
@timing
@translate_service_errors
def list_money_flows():
    """
    Return the user's expenses, newest first.

    With ``start`` and ``end`` the inclusive window replaces pagination.
    """

    window = date_range_schema.load(request.args)
    service = MoneyFlowService()
    user_id = current_user_id()
    if window["start"] is not None:
        items = service.list_between(user_id, window["start"], window["end"])
        return json_response({"data": flow_list_schema.dump(items)})

    pagination = parse_pagination()
    page = service.list(user_id, pagination.limit, pagination.offset)
    meta = build_meta(total=page.total, limit=page.limit, offset=page.offset)
    return json_response({"data": flow_list_schema.dump(page.items), "meta": meta})


@bp.get("/summary")
@require_auth
@timing
@translate_service_errors
def summarize_money_flows():
    query = summary_query_schema.load(request.args)
    totals = MoneyFlowService().totals(current_user_id(), category=query["category"])
    return json_response({"data": summary_schema.dump(totals)})


@bp.get("/<uuid:flow_id>")
@require_auth
@timing
@translate_service_errors
def get_money_flow(flow_id: UUID):
    flow = MoneyFlowService().get(current_user_id(), flow_id)
    response = json_response({"data": flow_schema.dump(flow)})
    set_response_etag(response, flow)
    return response


@bp.patch("/<uuid:flow_id>")
@require_auth
@timing
@translate_service_errors
def update_money_flow(flow_id: UUID):
    """Partially update an expense gated on ``If-Match`` or ``version``."""

    payload = flow_update_schema.load(request.get_json(silent=True) or {})
    tags = payload.get("tags")
    dto = MoneyFlowUpdateIn(
        version=required_version(payload.get("version")),
        amount=payload.get("amount"),
        currency=payload.get("currency"),
        category=payload.get("category"),
        description=payload.get("description"),
        tags=tuple(tags) if tags is not None else None,
        fields_set=frozenset(payload),
    )
    flow = MoneyFlowService().update(current_user_id(), flow_id, dto)
    response = json_response({"data": flow_schema.dump(flow)})
    set_response_etag(response, flow)
    return response


@bp.delete("/<uuid:flow_id>")
@require_auth
@timing
@translate_service_errors
def delete_money_flow(flow_id: UUID):
    MoneyFlowService().delete(current_user_id(), flow_id, version=if_match_version())
    return empty_response()
