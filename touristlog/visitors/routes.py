# touristlog/visitors/routes.py
from flask import Blueprint, current_app, flash, redirect, render_template, session, url_for
from sqlalchemy.exc import SQLAlchemyError

from touristlog.services.visitor_store import get_store
from touristlog.visitors.forms import VisitorForm

public_bp = Blueprint("public_bp", __name__)


@public_bp.route("/", methods=["GET", "POST"])
def register():
    form = VisitorForm()

    if form.validate_on_submit():
        try:
            visitor = get_store().create(form.cleaned())
        except SQLAlchemyError:
            current_app.logger.exception("registration failed")
            flash("Registration failed. Please try again.", "danger")
            return render_template("public/register.html", form=form), 500

        # shown once on the next page load, then the form is blank again
        session["last_registration"] = {
            "name": visitor.name,
            "control_number": visitor.control_number,
        }
        flash(f"Registration successful! Your control number is {visitor.control_number}", "success")
        return redirect(url_for("public_bp.register"))

    if form.is_submitted():
        flash("Please check your information and try again.", "warning")
        return render_template("public/register.html", form=form), 400

    registration = session.pop("last_registration", None)
    return render_template("public/register.html", form=form, registration=registration)
