# touristlog/api/routes.py
from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.datastructures import MultiDict

from touristlog.admin.auth import is_admin
from touristlog.admin.forms import UserForm
from touristlog.services import users as user_service
from touristlog.services.statistics import compute_statistics
from touristlog.services.visitor_store import get_store
from touristlog.visitors.forms import VisitorForm, form_errors, normalize_visitor_payload

api_bp = Blueprint("api_bp", __name__, url_prefix="/api")

# registration stays public even when the rest of the API is locked down
PUBLIC_ENDPOINTS = ("api_bp.create_visitor",)


def _error(message: str, status: int):
    return jsonify(message=message), status


def _json_body() -> dict:
    payload = request.get_json(silent=True)
    return payload if isinstance(payload, dict) else {}


@api_bp.before_request
def _api_gate():
    if not current_app.config.get("API_REQUIRE_ADMIN"):
        return None
    if request.endpoint in PUBLIC_ENDPOINTS or is_admin():
        return None
    return _error("Authentication required", 401)


# -------- visitors --------

@api_bp.post("/visitors", endpoint="create_visitor")
def create_visitor():
    form = VisitorForm(formdata=normalize_visitor_payload(_json_body()), meta={"csrf": False})
    if not form.validate():
        current_app.logger.info("visitor rejected: %s", form.errors)
        return _error(form_errors(form), 400)

    try:
        visitor = get_store().create(form.cleaned())
    except SQLAlchemyError:
        current_app.logger.exception("create visitor failed")
        return _error("Failed to create visitor", 500)
    return jsonify(visitor.to_dict()), 201


@api_bp.get("/visitors", endpoint="list_visitors")
def list_visitors():
    search = request.args.get("search") or ""
    date = request.args.get("date") or ""
    try:
        visitors = get_store().list(search=search, day=date)
    except ValueError as e:
        return _error(str(e), 400)
    except SQLAlchemyError:
        current_app.logger.exception("list visitors failed")
        return _error("Failed to fetch visitors", 500)
    return jsonify([v.to_dict() for v in visitors])


@api_bp.get("/visitors/<visitor_id>", endpoint="get_visitor")
def get_visitor(visitor_id: str):
    try:
        visitor = get_store().get(visitor_id)
    except SQLAlchemyError:
        current_app.logger.exception("fetch visitor failed id=%s", visitor_id)
        return _error("Failed to fetch visitor", 500)
    if visitor is None:
        return _error("Visitor not found", 404)
    return jsonify(visitor.to_dict())


@api_bp.put("/visitors/<visitor_id>", endpoint="update_visitor")
def update_visitor(visitor_id: str):
    store = get_store()
    try:
        visitor = store.get(visitor_id)
    except SQLAlchemyError:
        current_app.logger.exception("fetch visitor failed id=%s", visitor_id)
        return _error("Failed to update visitor", 500)
    if visitor is None:
        return _error("Visitor not found", 404)

    changes = normalize_visitor_payload(_json_body())

    # validate the record as it would look after the update
    merged = MultiDict({f: getattr(visitor, f) or "" for f in visitor.EDITABLE})
    for key in changes:
        merged[key] = changes[key]
    form = VisitorForm(formdata=merged, meta={"csrf": False})
    if not form.validate():
        return _error(form_errors(form), 400)

    cleaned = form.cleaned()
    touched = {k: cleaned[k] for k in changes}
    if "purpose" in touched:
        touched["purpose_other"] = cleaned["purpose_other"]

    try:
        visitor = store.update(visitor_id, touched)
    except SQLAlchemyError:
        current_app.logger.exception("update visitor failed id=%s", visitor_id)
        return _error("Failed to update visitor", 500)
    return jsonify(visitor.to_dict())


@api_bp.delete("/visitors/<visitor_id>", endpoint="delete_visitor")
def delete_visitor(visitor_id: str):
    try:
        deleted = get_store().delete(visitor_id)
    except SQLAlchemyError:
        current_app.logger.exception("delete visitor failed id=%s", visitor_id)
        return _error("Failed to delete visitor", 500)
    if not deleted:
        return _error("Visitor not found", 404)
    return jsonify(message="Visitor deleted successfully")


@api_bp.get("/statistics", endpoint="statistics")
def statistics():
    try:
        visitors = get_store().all()
    except SQLAlchemyError:
        current_app.logger.exception("statistics failed")
        return _error("Failed to fetch statistics", 500)
    return jsonify(compute_statistics(visitors))


# -------- admin accounts --------

@api_bp.post("/users", endpoint="create_user")
def create_user():
    payload = _json_body()
    formdata = MultiDict({k: str(payload[k]) for k in ("username", "password") if payload.get(k) is not None})
    form = UserForm(formdata=formdata, meta={"csrf": False})
    if not form.validate():
        return _error(form_errors(form), 400)

    try:
        user = user_service.create_user(form.username.data, form.password.data)
    except user_service.DuplicateUsername as e:
        return _error(str(e), 400)
    except SQLAlchemyError:
        current_app.logger.exception("create user failed")
        return _error("Failed to create user", 500)
    return jsonify(id=user.id, username=user.username), 201


@api_bp.get("/users/<username>", endpoint="get_user")
def get_user(username: str):
    try:
        user = user_service.get_user_by_username(username)
    except SQLAlchemyError:
        current_app.logger.exception("fetch user failed username=%s", username)
        return _error("Failed to fetch user", 500)
    if user is None:
        return _error("User not found", 404)
    return jsonify(user.to_dict())
