# touristlog/admin/routes.py
from datetime import datetime

from flask import (
    Response, abort, current_app, flash, redirect,
    render_template, request, url_for,
)
from sqlalchemy.exc import SQLAlchemyError

from touristlog.admin.auth import is_admin, passkey_matches, sign_in, sign_out
from touristlog.admin.forms import DeleteForm, LoginForm
from touristlog.services import visitor_export
from touristlog.services.statistics import compute_statistics
from touristlog.services.visitor_search import parse_day
from touristlog.services.visitor_store import get_store
from touristlog.utils.table import SORTABLE, normalize_sort, paginate, sort_rows
from . import admin_bp

OPEN_ENDPOINTS = ("admin_bp.login",)


@admin_bp.before_request
def _admin_gate():
    if request.endpoint in OPEN_ENDPOINTS:
        return None
    if not is_admin():
        return redirect(url_for("admin_bp.login", next=request.path))
    return None


@admin_bp.route("/login", methods=["GET", "POST"], endpoint="login")
def login():
    if is_admin():
        return redirect(url_for("admin_bp.dashboard"))

    form = LoginForm()
    if not form.validate_on_submit():
        if form.is_submitted():
            flash("Passkey is required.", "warning")
        return render_template("admin/login.html", form=form)

    if not passkey_matches(form.passkey.data):
        current_app.logger.warning("admin login failed from %s", request.remote_addr)
        flash("Invalid passkey.", "danger")
        return render_template("admin/login.html", form=form), 401

    sign_in()
    current_app.logger.info("admin login from %s", request.remote_addr)
    flash("Welcome to the admin dashboard!", "success")

    nxt = request.args.get("next") or ""
    if nxt.startswith("/admin") and not nxt.startswith("//"):
        return redirect(nxt)
    return redirect(url_for("admin_bp.dashboard"))


@admin_bp.route("/logout", endpoint="logout")
def logout():
    sign_out()
    flash("Signed out.", "info")
    return redirect(url_for("public_bp.register"))


def _filtered_visitors():
    """Rows matching ?search= and ?date=; a bad date is flashed and ignored."""
    search = (request.args.get("search") or "").strip()
    raw_date = (request.args.get("date") or "").strip()
    try:
        day = parse_day(raw_date)
    except ValueError:
        flash(f"Ignoring invalid date '{raw_date}'.", "warning")
        day, raw_date = None, ""
    return get_store().list(search=search, day=day), search, raw_date


@admin_bp.route("/", endpoint="dashboard")
def dashboard():
    store = get_store()
    visitors, search, raw_date = _filtered_visitors()
    sort, direction = normalize_sort(request.args.get("sort"), request.args.get("dir"))
    page = paginate(
        sort_rows(visitors, sort, direction),
        request.args.get("page"),
        current_app.config.get("ADMIN_PAGE_SIZE", 10),
    )

    return render_template(
        "admin/dashboard.html",
        page=page,
        stats=compute_statistics(store.all()),
        search=search,
        date=raw_date,
        sort=sort,
        direction=direction,
        sortable=SORTABLE,
        delete_form=DeleteForm(),
    )


@admin_bp.route("/visitors/<visitor_id>", endpoint="visitor_detail")
def visitor_detail(visitor_id: str):
    visitor = get_store().get(visitor_id)
    if visitor is None:
        abort(404)
    return render_template("admin/visitor_detail.html", visitor=visitor, delete_form=DeleteForm())


@admin_bp.route("/visitors/<visitor_id>/delete", methods=["POST"], endpoint="delete_visitor")
def delete_visitor(visitor_id: str):
    form = DeleteForm()
    if not form.validate_on_submit():
        abort(400)

    try:
        deleted = get_store().delete(visitor_id)
    except SQLAlchemyError:
        current_app.logger.exception("delete failed id=%s", visitor_id)
        flash("Failed to delete visitor record.", "danger")
        return redirect(url_for("admin_bp.dashboard"))

    if deleted:
        flash("Visitor record has been deleted.", "success")
    else:
        flash("Visitor not found.", "warning")
    return redirect(url_for("admin_bp.dashboard", **_keep_args()))


def _keep_args() -> dict:
    keys = ("search", "date", "sort", "dir", "page")
    src = request.form if request.method == "POST" else request.args
    return {k: src.get(k) for k in keys if src.get(k)}


def _pdf_response(visitors, stem: str):
    try:
        pdf = visitor_export.visitors_pdf(visitors)
    except RuntimeError as e:
        current_app.logger.error("PDF export failed: %s", e)
        flash("PDF export is not available on this server.", "danger")
        return redirect(url_for("admin_bp.dashboard"))
    return Response(
        pdf,
        mimetype="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{visitor_export.export_filename(stem, "pdf")}"'},
    )


@admin_bp.route("/export.pdf", endpoint="export_pdf")
def export_pdf():
    visitors, _, _ = _filtered_visitors()
    return _pdf_response(visitors, f"visitor-log-{datetime.now():%Y%m%d}")


@admin_bp.route("/export.xlsx", endpoint="export_xlsx")
def export_xlsx():
    visitors, _, _ = _filtered_visitors()
    name = visitor_export.export_filename(f"visitor-log-{datetime.now():%Y%m%d}", "xlsx")
    return Response(
        visitor_export.visitors_xlsx(visitors),
        mimetype=visitor_export.XLSX_MIMETYPE,
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )


@admin_bp.route("/visitors/<visitor_id>/export.pdf", endpoint="export_visitor_pdf")
def export_visitor_pdf(visitor_id: str):
    visitor = get_store().get(visitor_id)
    if visitor is None:
        abort(404)
    return _pdf_response([visitor], f"visitor-{visitor.control_number}")
