# touristlog/visitors/forms.py
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import StringField, SelectField, SubmitField
from wtforms.validators import DataRequired, Email, Length, Optional, ValidationError

from touristlog.models.visitor import GENDERS, PURPOSES, Visitor
from touristlog.services.visitor_search import normalize_phone

GENDER_CHOICES = [("", "Select gender (optional)")] + [
    (g, g.replace("_", " ").capitalize()) for g in GENDERS
]
PURPOSE_CHOICES = [("", "Select purpose of visit")] + list(PURPOSES.items())

# JSON clients use camelCase
_JSON_KEYS = {"purposeOther": "purpose_other"}


def phone_number(form, field):
    if field.data and len(normalize_phone(field.data)) < 7:
        raise ValidationError("Invalid phone number")
    if field.data and not normalize_phone(field.data).isdigit():
        raise ValidationError("Phone number may only contain digits, spaces, +, - and ( )")


class VisitorForm(FlaskForm):
    name = StringField("Full name", validators=[DataRequired(message="Name is required"), Length(max=200)])
    gender = SelectField("Gender", choices=GENDER_CHOICES, validators=[Optional()])
    phone = StringField("Phone number", validators=[Optional(), Length(max=40), phone_number])
    email = StringField("Email", validators=[Optional(), Email(message="Invalid email format"), Length(max=320)])
    purpose = SelectField(
        "Purpose of visit",
        choices=PURPOSE_CHOICES,
        validators=[DataRequired(message="Purpose of visit is required")],
    )
    purpose_other = StringField("Please specify", validators=[Optional(), Length(max=255)])
    submit = SubmitField("Register")

    def validate(self, extra_validators=None):
        ok = super().validate(extra_validators=extra_validators)

        if not (self.phone.data or "").strip() and not (self.email.data or "").strip():
            self.phone.errors = list(self.phone.errors) + ["Phone number or email is required"]
            ok = False

        if self.purpose.data == "other" and not (self.purpose_other.data or "").strip():
            self.purpose_other.errors = list(self.purpose_other.errors) + ["Please describe the purpose of your visit"]
            ok = False
        return ok

    def cleaned(self) -> dict:
        return {
            "name": (self.name.data or "").strip(),
            "gender": self.gender.data or None,
            "phone": (self.phone.data or "").strip() or None,
            "email": (self.email.data or "").strip() or None,
            "purpose": self.purpose.data,
            "purpose_other": (self.purpose_other.data or "").strip() if self.purpose.data == "other" else None,
        }


def normalize_visitor_payload(payload: dict) -> MultiDict:
    """
    JSON body -> form data for VisitorForm. A purpose outside the known
    categories is kept as free text under "other".
    """
    data = {}
    for key, value in (payload or {}).items():
        key = _JSON_KEYS.get(key, key)
        if key not in Visitor.EDITABLE or value is None:
            continue
        data[key] = value if isinstance(value, str) else str(value)

    purpose = (data.get("purpose") or "").strip()
    if purpose in PURPOSES:
        data["purpose"] = purpose
    elif purpose:
        lowered = purpose.lower().replace(" ", "_")
        if lowered in PURPOSES:
            data["purpose"] = lowered
        else:
            data["purpose"] = "other"
            data.setdefault("purpose_other", purpose)
    return MultiDict(data)


def form_errors(form) -> str:
    parts = []
    for name, errors in form.errors.items():
        for err in errors:
            parts.append(f"{name}: {err}")
    return "; ".join(parts) or "Invalid visitor data"
